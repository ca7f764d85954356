# greenstride/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db

DEFAULT_GOALS = {
    "steps_goal": 10000,
    "distance_goal_km": 8.0,
    "minutes_goal": 60,
    "calories_goal": 650,
}


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    date_of_birth = db.Column(db.Date)

    # daily goals shown next to today's activity
    steps_goal = db.Column(db.Integer, default=DEFAULT_GOALS["steps_goal"], nullable=False)
    distance_goal_km = db.Column(db.Float, default=DEFAULT_GOALS["distance_goal_km"], nullable=False)
    minutes_goal = db.Column(db.Integer, default=DEFAULT_GOALS["minutes_goal"], nullable=False)
    calories_goal = db.Column(db.Integer, default=DEFAULT_GOALS["calories_goal"], nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_profile_dict(self):
        return {
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
        }

    def goals_dict(self):
        return {
            "stepsTarget": int(self.steps_goal if self.steps_goal is not None else DEFAULT_GOALS["steps_goal"]),
            "distanceTarget": float(
                self.distance_goal_km if self.distance_goal_km is not None else DEFAULT_GOALS["distance_goal_km"]
            ),
            "minutesTarget": int(self.minutes_goal if self.minutes_goal is not None else DEFAULT_GOALS["minutes_goal"]),
            "caloriesTarget": int(
                self.calories_goal if self.calories_goal is not None else DEFAULT_GOALS["calories_goal"]
            ),
        }
