from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z, to_iso_date


class AttendanceRecord(db.Model):
    """
    One clock-in/clock-out pair for a user on a work day.

    LIFECYCLE:
    - open: time_in set, time_out NULL (shift in progress)
    - closed: time_out set, duration_minutes = floor(elapsed minutes)

    At most one open record per user per work_date (checked in
    timekeeping_service.clock_in).
    """
    __tablename__ = "attendance_records"
    __table_args__ = (
        db.Index("ix_attendance_user_date", "user_id", "work_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    work_date = db.Column(db.Date, nullable=False, index=True)
    time_in = db.Column(db.DateTime(timezone=True), nullable=False)
    time_out = db.Column(db.DateTime(timezone=True), nullable=True)

    # Calculated on clock-out
    duration_minutes = db.Column(db.Integer, nullable=True)

    user = db.relationship(
        "User",
        backref=db.backref("attendance_records", lazy=True, cascade="all, delete-orphan"),
    )

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "work_date": to_iso_date(self.work_date),
            "time_in": to_utc_z(self.time_in),
            "time_out": to_utc_z(self.time_out),
            "duration_minutes": self.duration_minutes,
        }
