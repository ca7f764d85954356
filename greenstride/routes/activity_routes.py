# greenstride/routes/activity_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from .. import db
from ..badges import evaluate_activity_badges
from ..metrics import (
    activity_values_from_payload,
    ensure_day_row,
    parse_day,
    to_number,
    upsert_day_row,
)
from ..models.daily import DailyActivity
from ..models.user import DEFAULT_GOALS

activity_bp = Blueprint("activity", __name__)


# ------------------------------
# GET /api/activity?day=YYYY-MM-DD
# ------------------------------
@activity_bp.route("", methods=["GET"])
@jwt_required()
def get_activity():
    day = parse_day(request.args.get("day"))
    row = ensure_day_row(DailyActivity, current_user.email, day)

    return jsonify(
        {
            "steps": int(row.steps or 0),
            "distance": float(row.distance_km or 0),
            "minutes": int(row.minutes or 0),
            "calories": int(row.calories or 0),
            **current_user.goals_dict(),
            "day": day.isoformat(),
        }
    ), 200


# ------------------------------
# POST /api/activity/update
# ------------------------------
@activity_bp.route("/update", methods=["POST"])
@jwt_required()
def update_activity():
    """
    Expected body:
    {
      "steps": 10000,
      "distance": 7.5,
      "minutes": 60,
      "calories": 450,
      "day": "2024-01-01"   # optional, defaults to today
    }
    """
    data = request.get_json(silent=True) or {}
    email = current_user.email
    day = parse_day(data.get("day"))

    values = activity_values_from_payload(data)
    prior, row = upsert_day_row(DailyActivity, email, day, values)

    current_app.logger.info(
        f"[activity/update] {email} {day.isoformat()} steps {prior['steps']} -> {row.steps}"
    )

    unlocked = evaluate_activity_badges(email, values)

    return jsonify({"ok": True, "day": day.isoformat(), "unlocked_badges": unlocked}), 200


# ------------------------------
# POST /api/activity/goals
# ------------------------------
@activity_bp.route("/goals", methods=["POST"])
@jwt_required()
def update_goals():
    data = request.get_json(silent=True) or {}

    def goal(key, default):
        return to_number(data.get(key), default=default, name=key)

    user = current_user
    user.steps_goal = int(goal("stepsTarget", DEFAULT_GOALS["steps_goal"]))
    user.distance_goal_km = float(goal("distanceTarget", DEFAULT_GOALS["distance_goal_km"]))
    user.minutes_goal = int(goal("minutesTarget", DEFAULT_GOALS["minutes_goal"]))
    user.calories_goal = int(goal("caloriesTarget", DEFAULT_GOALS["calories_goal"]))
    db.session.commit()

    return jsonify({"ok": True, **user.goals_dict()}), 200
