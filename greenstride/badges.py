# greenstride/badges.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from . import db
from .database import db_retry
from .models.daily import DailyCarbon
from .models.social import Badge, UserBadge

# code, name, description, category, icon
BADGE_CATALOG = [
    ("STEP_5K", "5K Steps", "Walk 5,000 steps in a single day", "steps", "shoe"),
    ("STEP_10K", "10K Steps", "Walk 10,000 steps in a single day", "steps", "shoe"),
    ("STEP_20K", "20K Steps", "Walk 20,000 steps in a single day", "steps", "shoe"),
    ("MINUTES_150", "150 Minute Day", "Log 150 active minutes in a single day", "activity", "stopwatch"),
    ("CAL_500", "500 Calories", "Burn 500 calories in a single day", "calories", "flame"),
    ("CAL_1000", "1,000 Calories", "Burn 1,000 calories in a single day", "calories", "flame"),
    ("CO2_1KG", "First Kilogram", "Save 1 kg of CO2 in total", "carbon", "leaf"),
    ("CO2_25KG", "Carbon Cutter", "Save 25 kg of CO2 in total", "carbon", "leaf"),
    ("CO2_50KG", "Climate Champion", "Save 50 kg of CO2 in total", "carbon", "tree"),
    ("DIST_MARATHON", "Marathon", "Travel 42.2 km under your own power", "distance", "medal"),
    ("DIST_ANNAPURNA", "Annapurna Circuit", "Travel 160 km under your own power", "distance", "mountain"),
    ("DIST_GRANDCANYON", "Grand Canyon", "Travel 446 km under your own power", "distance", "canyon"),
    ("DIST_CAMINO", "Camino de Santiago", "Travel 800 km under your own power", "distance", "shell"),
    ("DIST_APPALACHIAN", "Appalachian Trail", "Travel 3,500 km under your own power", "distance", "trail"),
    ("DIST_PCT", "Pacific Crest Trail", "Travel 4,265 km under your own power", "distance", "trail"),
    ("DIST_GREATWALL", "Great Wall", "Travel 8,850 km under your own power", "distance", "wall"),
]

# Daily thresholds, checked against a single day's activity row
STEP_THRESHOLDS = [(5000, "STEP_5K"), (10000, "STEP_10K"), (20000, "STEP_20K")]
MINUTE_THRESHOLDS = [(150, "MINUTES_150")]
CALORIE_THRESHOLDS = [(500, "CAL_500"), (1000, "CAL_1000")]

# Lifetime thresholds, checked against the sum of all carbon rows
CO2_THRESHOLDS = [(1, "CO2_1KG"), (25, "CO2_25KG"), (50, "CO2_50KG")]
DISTANCE_THRESHOLDS = [
    (42.2, "DIST_MARATHON"),
    (160, "DIST_ANNAPURNA"),
    (446, "DIST_GRANDCANYON"),
    (800, "DIST_CAMINO"),
    (3500, "DIST_APPALACHIAN"),
    (4265, "DIST_PCT"),
    (8850, "DIST_GREATWALL"),
]


def seed_badges() -> int:
    """Insert catalog entries that are missing. Returns how many were added."""
    existing = {code for (code,) in db.session.query(Badge.code).all()}
    added = 0
    for code, name, description, category, icon in BADGE_CATALOG:
        if code in existing:
            continue
        db.session.add(
            Badge(code=code, name=name, description=description, category=category, icon=icon)
        )
        added += 1

    if added:
        db.session.commit()
    return added


def _has_badge(email: str, badge_id: int) -> bool:
    return UserBadge.query.filter_by(user_email=email, badge_id=badge_id).first() is not None


def award_badge(email: str, code: str) -> Optional[Dict[str, Any]]:
    """
    Award badge ``code`` to the user unless already earned.
    Returns the badge dict if newly awarded, else None.
    """
    badge = Badge.query.filter_by(code=code).first()
    if not badge:
        current_app.logger.warning(f"[badges] badge code not found: {code}")
        return None

    if _has_badge(email, badge.id):
        return None

    user_badge = UserBadge(user_email=email, badge_id=badge.id, earned_at=datetime.utcnow())
    db.session.add(user_badge)
    try:
        db.session.commit()
    except IntegrityError:
        # awarded by a concurrent request
        db.session.rollback()
        return None

    current_app.logger.info(f"[badges] {email} earned {code}")
    return badge.to_dict(earned_at=user_badge.earned_at)


def _award_thresholds(email: str, value: float, thresholds) -> List[Dict[str, Any]]:
    awarded = []
    for threshold, code in thresholds:
        if value >= threshold:
            badge = award_badge(email, code)
            if badge:
                awarded.append(badge)
    return awarded


@db_retry
def evaluate_activity_badges(email: str, day_values: Dict[str, float]) -> List[Dict[str, Any]]:
    """Check one day's steps / minutes / calories against the daily ladders."""
    awarded = []
    awarded += _award_thresholds(email, day_values.get("steps", 0), STEP_THRESHOLDS)
    awarded += _award_thresholds(email, day_values.get("minutes", 0), MINUTE_THRESHOLDS)
    awarded += _award_thresholds(email, day_values.get("calories", 0), CALORIE_THRESHOLDS)
    return awarded


def lifetime_carbon_totals(email: str) -> Dict[str, float]:
    km_total, co2_total = (
        db.session.query(
            func.coalesce(func.sum(DailyCarbon.total_km), 0),
            func.coalesce(func.sum(DailyCarbon.total_co2), 0),
        )
        .filter(DailyCarbon.user_email == email)
        .one()
    )
    return {"total_km": float(km_total or 0), "total_co2": float(co2_total or 0)}


@db_retry
def evaluate_carbon_badges(email: str) -> List[Dict[str, Any]]:
    """Check the user's all-time CO2 and distance against the milestone ladders."""
    totals = lifetime_carbon_totals(email)

    awarded = []
    awarded += _award_thresholds(email, totals["total_co2"], CO2_THRESHOLDS)
    awarded += _award_thresholds(email, totals["total_km"], DISTANCE_THRESHOLDS)
    return awarded


@db_retry
def list_badges(email: str) -> Dict[str, List[Dict[str, Any]]]:
    all_badges = Badge.query.order_by(Badge.category.asc(), Badge.id.asc()).all()

    earned_at_by_badge = {
        badge_id: earned_at
        for badge_id, earned_at in db.session.query(UserBadge.badge_id, UserBadge.earned_at)
        .filter(UserBadge.user_email == email)
        .all()
    }

    earned, locked = [], []
    for badge in all_badges:
        earned_at = earned_at_by_badge.get(badge.id)
        if earned_at:
            earned.append(badge.to_dict(earned_at=earned_at))
        else:
            locked.append(badge.to_dict())

    return {"earned": earned, "locked": locked}
