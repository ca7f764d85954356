# greenstride/routes/social_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from .. import db
from ..database import db_retry
from ..errors import NotFound
from ..friends import (
    accept_request,
    are_friends,
    cancel_request,
    decline_request,
    list_relationships,
    remove_friend,
    search_users,
    send_request,
)
from ..models.settings import UserSettings
from ..models.user import User

social_bp = Blueprint("social", __name__)


def _body_email(key: str) -> str:
    data = request.get_json(silent=True) or {}
    return (data.get(key) or "").strip().lower()


# ---------------------------------------------------------------------------
# Friends
# ---------------------------------------------------------------------------

@social_bp.route("/friends", methods=["GET"])
@jwt_required()
def get_friends():
    return jsonify(list_relationships(current_user.email)), 200


@social_bp.route("/friends/request", methods=["POST"])
@jwt_required()
def send_friend_request():
    """
    Body:
    {
      "friendEmail": "alice@example.com"
    }
    """
    send_request(current_user.email, _body_email("friendEmail"))
    return jsonify({"message": "Friend request sent successfully!"}), 201


@social_bp.route("/friends/accept", methods=["POST"])
@jwt_required()
def accept_friend_request():
    accept_request(_body_email("requesterEmail"), current_user.email)
    return jsonify({"message": "Friend request accepted!"}), 200


@social_bp.route("/friends/decline", methods=["POST"])
@jwt_required()
def decline_friend_request():
    decline_request(_body_email("requesterEmail"), current_user.email)
    return jsonify({"message": "Friend request declined."}), 200


@social_bp.route("/friends/remove", methods=["DELETE"])
@jwt_required()
def remove_friend_route():
    remove_friend(current_user.email, _body_email("friendEmail"))
    return jsonify({"message": "Friend removed successfully."}), 200


@social_bp.route("/friends/cancel", methods=["DELETE"])
@jwt_required()
def cancel_friend_request():
    cancel_request(current_user.email, _body_email("friendEmail"))
    return jsonify({"message": "Friend request cancelled successfully."}), 200


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@social_bp.route("/users", methods=["GET"])
@jwt_required()
def list_users():
    emails = [email for (email,) in db.session.query(User.email).order_by(User.email).all()]
    return jsonify({"emails": emails}), 200


@social_bp.route("/users/search", methods=["GET"])
@jwt_required()
def search():
    query = request.args.get("q", "")
    users = search_users(current_user.email, query)
    return jsonify({"users": users, "query": query}), 200


# ---------------------------------------------------------------------------
# Privacy
# ---------------------------------------------------------------------------

@db_retry
def _can_view(viewer_email: str, target_email: str) -> bool:
    if viewer_email == target_email:
        return True

    if not User.query.filter_by(email=target_email).first():
        raise NotFound("User not found.")

    settings = UserSettings.query.filter_by(user_email=target_email).first()
    privacy = settings.activity_privacy if settings else "public"

    if privacy == "private":
        return False
    if privacy == "friends":
        return are_friends(viewer_email, target_email)
    return True


@social_bp.route("/privacy/can-view/<path:target_email>", methods=["GET"])
@jwt_required()
def can_view(target_email: str):
    target_email = target_email.strip().lower()
    return jsonify({"canView": _can_view(current_user.email, target_email)}), 200
