# greenstride/routes/auth_routes.py

from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError

from .. import db
from ..models.user import User

auth_bp = Blueprint("auth", __name__)


def _parse_birth_date(raw):
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return False


def _find_user(email):
    return User.query.filter_by(email=email).first()


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/create-account", methods=["POST"])
def create_account():
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""  # do NOT strip passwords

    if not email or not password:
        return jsonify({"message": "Email and password are required."}), 400

    birth_date = _parse_birth_date(data.get("dateOfBirth"))
    if birth_date is False:
        return jsonify({"message": "dateOfBirth must be YYYY-MM-DD."}), 400

    if _find_user(email):
        return jsonify({"message": "An account with this email already exists."}), 409

    user = User(
        email=email,
        first_name=(data.get("firstName") or "").strip() or None,
        last_name=(data.get("lastName") or "").strip() or None,
        date_of_birth=birth_date,
    )
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": "An account with this email already exists."}), 409

    current_app.logger.info(f"[auth/create-account] created account for '{email}'")
    return jsonify({"message": "Account created successfully!"}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"message": "Email and password are required."}), 400

    user = _find_user(email)

    if not user or not user.check_password(password):
        current_app.logger.warning(f"[auth/login] failed login for '{email}'")
        return jsonify({"message": "Invalid email or password."}), 401

    access_token = create_access_token(identity=user.email)
    current_app.logger.info(f"[auth/login] '{email}' logged in")
    return jsonify({"token": access_token}), 200
