# Overview: Service-layer operations for the activity log; append-only audit trail.

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..extensions import db
from ..models import ActivityLog, User
from winehouse.time_utils import utcnow, parse_iso_datetime
"""
Activity Log Invariants

- Append-only audit log for business events; no updates or deletes.
- No domain/business logic in the log itself.
- Entries are written inside the same DB transaction as the change they
  record (flush, never commit, here).
"""


def append_activity(
    *,
    actor: User,
    action: str,
    details: str | None = None,
    occurred_at: Optional[datetime] = None,
) -> ActivityLog:
    """
    Append an activity entry attributed to `actor`.

    Username and role are snapshotted from the actor.
    """
    entry = ActivityLog(
        user_id=actor.id,
        username=actor.username,
        user_role=actor.role,
        action=action,
        details=details,
        occurred_at=occurred_at or utcnow(),
    )
    db.session.add(entry)
    db.session.flush()  # ensures entry.id is assigned without committing
    return entry


def list_activity(
    *,
    user_id: int | None = None,
    since: str | None = None,
    until: str | None = None,
    limit: int = 200,
) -> list[ActivityLog]:
    """Newest first. since/until are inclusive ISO-8601 bounds."""
    q = db.session.query(ActivityLog)
    if user_id:
        q = q.filter(ActivityLog.user_id == user_id)
    since_dt = parse_iso_datetime(since) if since else None
    until_dt = parse_iso_datetime(until) if until else None
    if since_dt:
        q = q.filter(ActivityLog.occurred_at >= since_dt)
    if until_dt:
        q = q.filter(ActivityLog.occurred_at <= until_dt)
    limit = max(1, min(limit, 1000))
    return q.order_by(ActivityLog.occurred_at.desc(), ActivityLog.id.desc()).limit(limit).all()
