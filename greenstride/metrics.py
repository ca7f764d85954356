# greenstride/metrics.py
import math
import re
from datetime import date
from typing import Any, Dict, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError

from . import db
from .database import db_retry
from .errors import ValidationError

DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# km/h for each human-powered activity
ACTIVITY_SPEEDS_KMH = {
    "walk": 5.0,
    "run": 9.0,
    "cycle": 16.0,
    "hike": 4.0,
    "swim": 3.0,
}

# kg CO2 avoided per km compared with driving
CO2_KG_PER_KM = 0.16

# largest value every metric column accepts (signed 32-bit INT on MySQL)
MAX_STORED_NUMBER = 2_147_483_647


# ------------------------------
# Input helpers
# ------------------------------
def parse_day(value: Any) -> date:
    """Return the calendar day in ``value`` (YYYY-MM-DD) or today's date."""
    if isinstance(value, str) and DAY_PATTERN.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    return date.today()


def to_number(
    value: Any,
    default: float = 0,
    max_value: Optional[float] = MAX_STORED_NUMBER,
    name: str = "value",
) -> float:
    """
    Coerce a JSON value to a non-negative finite number.

    Raises ``ValidationError`` when the number is above ``max_value``.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    if max_value is not None and number > max_value:
        raise ValidationError(f"{name} must be at most {max_value}.")
    return max(0.0, number)


# ------------------------------
# Day rows
# ------------------------------
def _find_day_row(model, email: str, day: date):
    return model.query.filter_by(user_email=email, day=day).first()


def _zero_values(model) -> Dict[str, float]:
    return {field: 0 for field in model.METRIC_FIELDS}


def _row_values(row) -> Dict[str, float]:
    return {field: getattr(row, field) or 0 for field in row.METRIC_FIELDS}


def _get_or_create_day_row(model, email: str, day: date):
    """
    Get or create the (user, day) row of ``model``.

    A unique-key violation means another request inserted the row first;
    in that case the existing row is re-read.
    """
    row = _find_day_row(model, email, day)
    if row is not None:
        return row

    row = model(user_email=email, day=day, **_zero_values(model))
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.info(
            f"[metrics] {model.__tablename__} row for {email} on {day} created concurrently"
        )
        row = _find_day_row(model, email, day)
        if row is None:
            raise
    return row


@db_retry
def ensure_day_row(model, email: str, day: date):
    return _get_or_create_day_row(model, email, day)


@db_retry
def upsert_day_row(model, email: str, day: date, values: Dict[str, float]) -> Tuple[Dict[str, float], Any]:
    """
    Overwrite the metric fields of the (user, day) row.

    Returns ``(prior, row)`` where ``prior`` holds the values before the
    write (zeros for a row created by this call).
    """
    row = _get_or_create_day_row(model, email, day)
    prior = _row_values(row)

    for field in model.METRIC_FIELDS:
        setattr(row, field, values.get(field, 0))
    db.session.commit()

    return prior, row


# ------------------------------
# Carbon
# ------------------------------
def compute_carbon_totals(hours_by_activity: Dict[str, float]) -> Dict[str, float]:
    total_km = 0.0
    for activity, speed in ACTIVITY_SPEEDS_KMH.items():
        total_km += to_number(hours_by_activity.get(activity)) * speed

    return {
        "total_km": total_km,
        "total_co2": total_km * CO2_KG_PER_KM,
    }


def carbon_values_from_payload(data: Dict[str, Any]) -> Dict[str, float]:
    """Build a ``daily_carbon`` row from request hours; totals are derived."""
    hours = {
        activity: to_number(data.get(activity), name=activity) for activity in ACTIVITY_SPEEDS_KMH
    }
    values = {f"{activity}_hours": h for activity, h in hours.items()}
    values.update(compute_carbon_totals(hours))
    return values


def activity_values_from_payload(data: Dict[str, Any]) -> Dict[str, float]:
    return {
        "steps": int(to_number(data.get("steps"), name="steps")),
        "distance_km": to_number(data.get("distance"), name="distance"),
        "minutes": int(to_number(data.get("minutes"), name="minutes")),
        "calories": int(to_number(data.get("calories"), name="calories")),
    }

