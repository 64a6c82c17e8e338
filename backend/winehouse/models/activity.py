from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z


class ActivityLog(db.Model):
    """
    Append-only business audit trail.

    One row per successful mutating operation, written in the same DB
    transaction as the change it describes. Actor username and role are
    snapshotted so entries survive account deletion.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        db.Index("ix_activity_logs_occurred", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    username = db.Column(db.String(64), nullable=False)
    user_role = db.Column(db.String(16), nullable=False)

    action = db.Column(db.String(128), nullable=False)
    details = db.Column(db.Text, nullable=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "user_role": self.user_role,
            "action": self.action,
            "details": self.details,
            "occurred_at": to_utc_z(self.occurred_at),
        }
