# greenstride/routes/profile_routes.py
from datetime import date
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, current_user
from .. import db

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("", methods=["GET"])
@jwt_required()
def get_profile():
    return jsonify(current_user.to_profile_dict()), 200


@profile_bp.route("", methods=["PUT"])
@jwt_required()
def update_profile():
    user = current_user
    data = request.get_json(silent=True) or {}

    if "firstName" in data:
        user.first_name = (data.get("firstName") or "").strip() or None
    if "lastName" in data:
        user.last_name = (data.get("lastName") or "").strip() or None

    birth_date = data.get("dateOfBirth")
    if birth_date:
        try:
            user.date_of_birth = date.fromisoformat(str(birth_date)[:10])
        except ValueError:
            return jsonify({"message": "invalid dateOfBirth"}), 400
    elif "dateOfBirth" in data:
        user.date_of_birth = None

    db.session.commit()

    return jsonify(user.to_profile_dict()), 200
