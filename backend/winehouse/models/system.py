from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z


class SystemSetting(db.Model):
    """
    Key-value system flags.

    The unique key doubles as a one-time claim: inserting a row for a key
    that already exists fails at the database, so a flag can be set at most
    once even under concurrent callers.
    """
    __tablename__ = "system_settings"
    __table_args__ = (
        db.UniqueConstraint("key", name="uq_system_settings_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    key = db.Column(db.String(128), nullable=False)
    value = db.Column(db.Text, nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "updated_at": to_utc_z(self.updated_at),
        }
