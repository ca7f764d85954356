# greenstride/friends.py
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy import and_, case, func, or_
from sqlalchemy.exc import IntegrityError

from . import db
from .database import db_retry
from .errors import Conflict, NotFound, ValidationError
from .models.social import Friendship, pair_key_for
from .models.user import User

SEARCH_MIN_LENGTH = 2
SEARCH_LIMIT = 20


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def _edge_between(email_a: str, email_b: str):
    return Friendship.query.filter(
        or_(
            and_(Friendship.user_email == email_a, Friendship.friend_email == email_b),
            and_(Friendship.user_email == email_b, Friendship.friend_email == email_a),
        )
    ).first()


def get_friend_emails(email: str) -> List[str]:
    friendships = Friendship.query.filter(
        Friendship.status == "accepted",
        or_(Friendship.user_email == email, Friendship.friend_email == email),
    ).all()

    friend_emails = []
    for f in friendships:
        other = f.other(email)
        if other not in friend_emails:
            friend_emails.append(other)
    return friend_emails


def are_friends(email_a: str, email_b: str) -> bool:
    edge = _edge_between(email_a, email_b)
    return edge is not None and edge.status == "accepted"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def send_request(user_email: str, friend_email: str) -> Friendship:
    friend_email = (friend_email or "").strip().lower()
    if not friend_email:
        raise ValidationError("Friend email is required.")
    if friend_email == user_email:
        raise ValidationError("Cannot send friend request to yourself.")

    if not User.query.filter_by(email=friend_email).first():
        raise NotFound("User not found.")

    if _edge_between(user_email, friend_email):
        raise Conflict("Friendship request already exists or you are already friends.")

    friendship = Friendship(
        user_email=user_email,
        friend_email=friend_email,
        requested_by=user_email,
        pair_key=pair_key_for(user_email, friend_email),
        status="pending",
    )
    db.session.add(friendship)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Friendship request already exists or you are already friends.")

    current_app.logger.info(f"[friends] {user_email} -> {friend_email} request sent")
    return friendship


def _pending_request(requester_email: str, recipient_email: str):
    return Friendship.query.filter_by(
        user_email=requester_email,
        friend_email=recipient_email,
        status="pending",
    ).first()


def accept_request(requester_email: str, recipient_email: str) -> Friendship:
    if not requester_email:
        raise ValidationError("Requester email is required.")

    friendship = _pending_request(requester_email, recipient_email)
    if not friendship:
        raise NotFound("Friend request not found.")

    friendship.status = "accepted"
    db.session.commit()

    current_app.logger.info(f"[friends] {recipient_email} accepted {requester_email}")
    return friendship


def decline_request(requester_email: str, recipient_email: str) -> None:
    if not requester_email:
        raise ValidationError("Requester email is required.")

    friendship = _pending_request(requester_email, recipient_email)
    if not friendship:
        raise NotFound("Friend request not found.")

    db.session.delete(friendship)
    db.session.commit()
    current_app.logger.info(f"[friends] {recipient_email} declined {requester_email}")


def cancel_request(requester_email: str, recipient_email: str) -> None:
    if not recipient_email:
        raise ValidationError("Friend email is required.")

    friendship = _pending_request(requester_email, recipient_email)
    if not friendship:
        raise NotFound("Pending friend request not found.")

    db.session.delete(friendship)
    db.session.commit()
    current_app.logger.info(f"[friends] {requester_email} cancelled request to {recipient_email}")


def remove_friend(user_email: str, friend_email: str) -> None:
    if not friend_email:
        raise ValidationError("Friend email is required.")

    friendship = _edge_between(user_email, friend_email)
    if not friendship or friendship.status != "accepted":
        raise NotFound("Friendship not found.")

    db.session.delete(friendship)
    db.session.commit()
    current_app.logger.info(f"[friends] {user_email} removed {friend_email}")


# ---------------------------------------------------------------------------
# Listing & search
# ---------------------------------------------------------------------------

@db_retry
def list_relationships(email: str) -> Dict[str, List[Dict[str, Any]]]:
    """
    Returns:
    {
      "friends": [{"friend_email", "first_name", "last_name"}],
      "receivedRequests": [{"requester_email", "first_name", "last_name", "created_at"}],
      "sentRequests": [{"recipient_email", "first_name", "last_name", "created_at"}]
    }
    """
    edges = (
        Friendship.query.filter(
            or_(Friendship.user_email == email, Friendship.friend_email == email)
        )
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
        .all()
    )

    counterpart_emails = {f.other(email) for f in edges}
    users = {}
    if counterpart_emails:
        users = {
            u.email: u for u in User.query.filter(User.email.in_(counterpart_emails)).all()
        }

    def names(other_email):
        u = users.get(other_email)
        return {
            "first_name": u.first_name if u else None,
            "last_name": u.last_name if u else None,
        }

    friends, received, sent = [], [], []
    seen = {"friends": set(), "received": set(), "sent": set()}

    for f in edges:
        other = f.other(email)
        created_at = f.created_at.isoformat() if f.created_at else None

        if f.status == "accepted":
            if other in seen["friends"]:
                continue
            seen["friends"].add(other)
            friends.append({"friend_email": other, **names(other)})
        elif f.friend_email == email:
            if other in seen["received"]:
                continue
            seen["received"].add(other)
            received.append({"requester_email": other, **names(other), "created_at": created_at})
        else:
            if other in seen["sent"]:
                continue
            seen["sent"].add(other)
            sent.append({"recipient_email": other, **names(other), "created_at": created_at})

    return {"friends": friends, "receivedRequests": received, "sentRequests": sent}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _relationship_status(email: str, edge) -> str:
    if edge is None:
        return "none"
    if edge.status == "accepted":
        return "friends"
    if edge.user_email == email:
        return "sent"
    return "received"


@db_retry
def search_users(email: str, query: str) -> List[Dict[str, Any]]:
    term = (query or "").strip().lower()
    if len(term) < SEARCH_MIN_LENGTH:
        raise ValidationError(
            f"Search query must be at least {SEARCH_MIN_LENGTH} characters long."
        )

    escaped = _escape_like(term)
    contains = f"%{escaped}%"
    prefix = f"{escaped}%"
    email_col = func.lower(User.email)
    full_name = func.lower(
        func.coalesce(User.first_name, "") + " " + func.coalesce(User.last_name, "")
    )

    rank = case(
        (email_col == term, 1),
        (email_col.like(prefix, escape="\\"), 2),
        (full_name.like(prefix, escape="\\"), 3),
        else_=4,
    )

    rows = (
        User.query.filter(
            User.email != email,
            or_(
                email_col.like(contains, escape="\\"),
                func.lower(User.first_name).like(contains, escape="\\"),
                func.lower(User.last_name).like(contains, escape="\\"),
                full_name.like(contains, escape="\\"),
            ),
        )
        .order_by(rank, User.first_name, User.last_name, User.email)
        .limit(SEARCH_LIMIT)
        .all()
    )

    edges = {}
    if rows:
        found = [u.email for u in rows]
        for f in Friendship.query.filter(
            or_(
                and_(Friendship.user_email == email, Friendship.friend_email.in_(found)),
                and_(Friendship.friend_email == email, Friendship.user_email.in_(found)),
            )
        ).all():
            edges[f.other(email)] = f

    return [
        {
            "email": u.email,
            "first_name": u.first_name,
            "last_name": u.last_name,
            "relationship_status": _relationship_status(email, edges.get(u.email)),
        }
        for u in rows
    ]
