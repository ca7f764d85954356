# greenstride/models/daily.py
from .. import db


class DailyActivity(db.Model):
    __tablename__ = "daily_activity"
    __table_args__ = (
        db.UniqueConstraint("user_email", "day", name="uq_daily_activity_user_day"),
    )

    METRIC_FIELDS = ("steps", "distance_km", "minutes", "calories")

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(255), db.ForeignKey("users.email"), nullable=False)
    day = db.Column(db.Date, nullable=False)
    steps = db.Column(db.Integer, default=0, nullable=False)
    distance_km = db.Column(db.Float, default=0, nullable=False)
    minutes = db.Column(db.Integer, default=0, nullable=False)
    calories = db.Column(db.Integer, default=0, nullable=False)

    user = db.relationship("User", backref="daily_activity")


class DailyCarbon(db.Model):
    __tablename__ = "daily_carbon"
    __table_args__ = (
        db.UniqueConstraint("user_email", "day", name="uq_daily_carbon_user_day"),
    )

    METRIC_FIELDS = (
        "walk_hours",
        "run_hours",
        "cycle_hours",
        "hike_hours",
        "swim_hours",
        "total_km",
        "total_co2",
    )

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(255), db.ForeignKey("users.email"), nullable=False)
    day = db.Column(db.Date, nullable=False)
    walk_hours = db.Column(db.Float, default=0, nullable=False)
    run_hours = db.Column(db.Float, default=0, nullable=False)
    cycle_hours = db.Column(db.Float, default=0, nullable=False)
    hike_hours = db.Column(db.Float, default=0, nullable=False)
    swim_hours = db.Column(db.Float, default=0, nullable=False)
    total_km = db.Column(db.Float, default=0, nullable=False)
    total_co2 = db.Column(db.Float, default=0, nullable=False)

    user = db.relationship("User", backref="daily_carbon")

    def to_dict(self):
        return {
            "day": self.day.isoformat() if self.day else None,
            **{field: float(getattr(self, field) or 0) for field in self.METRIC_FIELDS},
        }
