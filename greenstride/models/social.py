# greenstride/models/social.py
from datetime import datetime
from .. import db


def pair_key_for(email_a: str, email_b: str) -> str:
    """Order-independent key for the pair of users on a friendship edge."""
    low, high = sorted([email_a, email_b])
    return f"{low}|{high}"


# -----------------------------
# Badges
# -----------------------------
class Badge(db.Model):
    __tablename__ = "badges"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    category = db.Column(db.String(50), nullable=False)
    icon = db.Column(db.String(50))

    def to_dict(self, earned_at=None):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "icon": self.icon,
            "earnedAt": earned_at.isoformat() if earned_at else None,
        }


class UserBadge(db.Model):
    __tablename__ = "user_badges"
    __table_args__ = (
        db.UniqueConstraint("user_email", "badge_id", name="uq_user_badges_user_badge"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(255), db.ForeignKey("users.email"), nullable=False)
    badge_id = db.Column(db.Integer, db.ForeignKey("badges.id"), nullable=False)
    earned_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    badge = db.relationship("Badge", backref="user_badges")


# -----------------------------
# Friendships
# -----------------------------
class Friendship(db.Model):
    """
    Directed request edge: ``user_email`` asked ``friend_email``.

    ``pair_key`` is unique, so only one edge can exist per pair of users
    whichever direction the request went.
    """

    __tablename__ = "friendships"

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(255), db.ForeignKey("users.email"), nullable=False)
    friend_email = db.Column(db.String(255), db.ForeignKey("users.email"), nullable=False)
    requested_by = db.Column(db.String(255), nullable=False)
    pair_key = db.Column(db.String(511), unique=True, nullable=False)
    status = db.Column(
        db.Enum("pending", "accepted", name="friendship_status"),
        nullable=False,
        default="pending",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    requester = db.relationship("User", foreign_keys=[user_email])
    recipient = db.relationship("User", foreign_keys=[friend_email])

    def other(self, email: str) -> str:
        return self.friend_email if self.user_email == email else self.user_email
