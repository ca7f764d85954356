# greenstride/routes/badges_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from ..badges import list_badges

badges_bp = Blueprint("badges", __name__)


@badges_bp.route("", methods=["GET"])
@jwt_required()
def user_badges():
    """
    Returns:
    {
      "earned": [
        {
          "id": 1,
          "code": "STEP_5K",
          "name": "5K Steps",
          "description": "...",
          "category": "steps",
          "icon": "shoe",
          "earnedAt": "2024-01-01T10:05:00"
        },
        ...
      ],
      "locked": [ ... same shape, earnedAt null ... ]
    }
    """
    return jsonify(list_badges(current_user.email)), 200
