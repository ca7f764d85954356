# greenstride/routes/carbon_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from ..badges import evaluate_carbon_badges
from ..database import db_retry
from ..leaderboard import DEFAULT_SORT, leaderboard
from ..metrics import carbon_values_from_payload, parse_day, to_number, upsert_day_row
from ..models.daily import DailyCarbon

carbon_bp = Blueprint("carbon", __name__)


@db_retry
def _carbon_row(email, day):
    return DailyCarbon.query.filter_by(user_email=email, day=day).first()


# ------------------------------
# GET /api/carbon?day=YYYY-MM-DD
# ------------------------------
@carbon_bp.route("/carbon", methods=["GET"])
@jwt_required()
def get_carbon():
    day = parse_day(request.args.get("day"))
    row = _carbon_row(current_user.email, day)

    if row is None:
        return jsonify(
            {"day": day.isoformat(), **{field: 0.0 for field in DailyCarbon.METRIC_FIELDS}}
        ), 200

    return jsonify(row.to_dict()), 200


# ------------------------------
# POST /api/carbon/save
# ------------------------------
@carbon_bp.route("/carbon/save", methods=["POST"])
@jwt_required()
def save_carbon():
    """
    Expected body:
    {
      "walk": 1.5, "run": 0.5, "cycle": 1, "hike": 0, "swim": 0,
      "totKm": 28.0, "totCO2": 4.48,   # ignored, recomputed from hours
      "day": "2024-01-01"              # optional, defaults to today
    }
    """
    data = request.get_json(silent=True) or {}
    email = current_user.email
    day = parse_day(data.get("day"))

    values = carbon_values_from_payload(data)

    client_km = data.get("totKm")
    if client_km is not None and abs(to_number(client_km, max_value=None) - values["total_km"]) > 0.01:
        current_app.logger.debug(
            f"[carbon/save] {email} sent totKm={client_km}, stored {values['total_km']}"
        )

    _prior, row = upsert_day_row(DailyCarbon, email, day, values)
    unlocked = evaluate_carbon_badges(email)

    return jsonify(
        {
            "ok": True,
            "message": "Carbon data saved successfully.",
            "day": day.isoformat(),
            "totKm": float(row.total_km),
            "totCO2": float(row.total_co2),
            "unlocked_badges": unlocked,
        }
    ), 200


# ------------------------------
# GET /api/leaderboard?day=YYYY-MM-DD&sort=total_co2
# ------------------------------
@carbon_bp.route("/leaderboard", methods=["GET"])
@jwt_required()
def get_leaderboard():
    day = parse_day(request.args.get("day"))
    sort = request.args.get("sort") or DEFAULT_SORT

    rows = leaderboard(current_user.email, day, sort)
    return jsonify(rows), 200
