# greenstride/models/settings.py
from datetime import datetime
from .. import db

THEMES = ("light", "dark", "auto")
PRIVACY_LEVELS = ("public", "friends", "private")
UNITS = ("metric", "imperial")

DEFAULT_SETTINGS = {
    "theme": "light",
    "notifications_enabled": True,
    "email_notifications": True,
    "activity_privacy": "public",
    "units": "metric",
    "timezone": "UTC",
    "language": "en",
    "weekly_goal_steps": 70000,
    "weekly_goal_distance": 50.0,
}


class UserSettings(db.Model):
    __tablename__ = "user_settings"

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(
        db.String(255), db.ForeignKey("users.email"), unique=True, nullable=False
    )
    theme = db.Column(db.Enum(*THEMES, name="settings_theme"), nullable=False, default="light")
    notifications_enabled = db.Column(db.Boolean, nullable=False, default=True)
    email_notifications = db.Column(db.Boolean, nullable=False, default=True)
    activity_privacy = db.Column(
        db.Enum(*PRIVACY_LEVELS, name="settings_privacy"), nullable=False, default="public"
    )
    units = db.Column(db.Enum(*UNITS, name="settings_units"), nullable=False, default="metric")
    timezone = db.Column(db.String(64), nullable=False, default="UTC")
    language = db.Column(db.String(16), nullable=False, default="en")
    weekly_goal_steps = db.Column(db.Integer, nullable=False, default=70000)
    weekly_goal_distance = db.Column(db.Float, nullable=False, default=50.0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", backref=db.backref("settings", uselist=False))

    def to_dict(self):
        return {
            "user_email": self.user_email,
            "theme": self.theme,
            "notifications_enabled": bool(self.notifications_enabled),
            "email_notifications": bool(self.email_notifications),
            "activity_privacy": self.activity_privacy,
            "units": self.units,
            "timezone": self.timezone,
            "language": self.language,
            "weekly_goal_steps": int(self.weekly_goal_steps),
            "weekly_goal_distance": float(self.weekly_goal_distance),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
