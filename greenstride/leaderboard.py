# greenstride/leaderboard.py
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import and_, func

from . import db
from .database import db_retry
from .friends import get_friend_emails
from .models.daily import DailyCarbon
from .models.user import User

SORT_KEYS = (
    "total_co2",
    "total_km",
    "walk_hours",
    "run_hours",
    "cycle_hours",
    "hike_hours",
    "swim_hours",
)
DEFAULT_SORT = "total_co2"


@db_retry
def leaderboard(email: str, day: date, sort: str = DEFAULT_SORT) -> List[Dict[str, Any]]:
    """
    Carbon rows for ``day`` covering the user and their accepted friends.
    Users without a row that day are zero-filled.
    """
    if sort not in SORT_KEYS:
        sort = DEFAULT_SORT

    members = [email] + get_friend_emails(email)

    metric_columns = [
        func.coalesce(getattr(DailyCarbon, field), 0).label(field) for field in SORT_KEYS
    ]
    rows = (
        db.session.query(User.email, User.first_name, User.last_name, *metric_columns)
        .outerjoin(
            DailyCarbon,
            and_(DailyCarbon.user_email == User.email, DailyCarbon.day == day),
        )
        .filter(User.email.in_(members))
        .order_by(User.email.asc())
        .all()
    )

    payload = []
    for row in rows:
        entry = {
            "email": row.email,
            "first_name": row.first_name,
            "last_name": row.last_name,
        }
        for field in SORT_KEYS:
            entry[field] = float(getattr(row, field) or 0)
        payload.append(entry)

    # sorted() is stable, so ties keep the email order from the query
    return sorted(payload, key=lambda e: e[sort], reverse=True)
