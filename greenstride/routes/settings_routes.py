# greenstride/routes/settings_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, current_user
from sqlalchemy.exc import IntegrityError

from .. import db
from ..database import db_retry
from ..errors import ValidationError
from ..metrics import to_number
from ..models.settings import DEFAULT_SETTINGS, PRIVACY_LEVELS, THEMES, UNITS, UserSettings

settings_bp = Blueprint("settings", __name__)

CHOICES = {
    "theme": THEMES,
    "activity_privacy": PRIVACY_LEVELS,
    "units": UNITS,
}


def _as_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ValidationError("Boolean settings must be true or false.")


def _settings_from_payload(data: dict) -> dict:
    """Full settings document; omitted fields take their defaults."""
    values = {}

    for key, allowed in CHOICES.items():
        value = data.get(key, DEFAULT_SETTINGS[key])
        if value not in allowed:
            raise ValidationError(f"{key} must be one of: {', '.join(allowed)}")
        values[key] = value

    for key in ("notifications_enabled", "email_notifications"):
        values[key] = _as_bool(data.get(key), DEFAULT_SETTINGS[key])

    for key in ("timezone", "language"):
        value = str(data.get(key) or DEFAULT_SETTINGS[key]).strip()
        max_length = UserSettings.__table__.c[key].type.length
        if len(value) > max_length:
            raise ValidationError(f"{key} must be at most {max_length} characters.")
        values[key] = value

    for key, cast in (("weekly_goal_steps", int), ("weekly_goal_distance", float)):
        values[key] = cast(to_number(data.get(key), DEFAULT_SETTINGS[key], name=key))
    return values


@db_retry
def _get_settings(email: str):
    return UserSettings.query.filter_by(user_email=email).first()


@settings_bp.route("", methods=["GET"])
@jwt_required()
def get_settings():
    settings = _get_settings(current_user.email)
    if not settings:
        return jsonify({"message": "No settings found"}), 404
    return jsonify(settings.to_dict()), 200


@settings_bp.route("", methods=["POST", "PUT"])
@jwt_required()
def save_settings():
    email = current_user.email
    values = _settings_from_payload(request.get_json(silent=True) or {})

    settings = _get_settings(email)
    if settings is None:
        settings = UserSettings(user_email=email, **values)
        db.session.add(settings)
    else:
        for key, value in values.items():
            setattr(settings, key, value)

    try:
        db.session.commit()
    except IntegrityError:
        # created by a concurrent request; overwrite it
        db.session.rollback()
        settings = _get_settings(email)
        for key, value in values.items():
            setattr(settings, key, value)
        db.session.commit()

    current_app.logger.info(f"[settings] saved settings for {email}")
    return jsonify({"message": "Settings saved successfully", "settings": settings.to_dict()}), 200
