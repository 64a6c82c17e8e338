# Overview: Service-layer operations for staff attendance.

"""
Attendance

WHY: Admins need to see who is on shift and how long each shift lasted.

RULES:
- One open record (clocked in, not yet out) per user per work day.
- Clock-out closes the user's open record for today and stores
  duration_minutes = floor(elapsed minutes).
- Both update the user's on-shift flag and last time in/out.
"""

from __future__ import annotations

from flask import current_app

from ..errors import ConflictError
from ..extensions import db
from ..models import AttendanceRecord, User
from ..models.auth import ROLE_STAFF
from winehouse.time_utils import utcnow, today_utc


def _get_open_record(user_id: int, work_date=None) -> AttendanceRecord | None:
    q = db.session.query(AttendanceRecord).filter(
        AttendanceRecord.user_id == user_id,
        AttendanceRecord.time_out.is_(None),
    )
    if work_date is not None:
        q = q.filter(AttendanceRecord.work_date == work_date)
    return q.order_by(AttendanceRecord.time_in.desc(), AttendanceRecord.id.desc()).first()


def clock_in(user: User) -> AttendanceRecord:
    today = today_utc()
    if _get_open_record(user.id, today):
        raise ConflictError("User already clocked in today")

    now = utcnow()
    record = AttendanceRecord(user_id=user.id, work_date=today, time_in=now)
    db.session.add(record)

    user.is_on_shift = True
    user.last_time_in = now

    db.session.commit()
    current_app.logger.info("User %s clocked in", user.username)
    return record


def clock_out(user: User) -> AttendanceRecord:
    record = _get_open_record(user.id, today_utc())
    if not record:
        raise ConflictError("No active clock-in record found for today")

    now = utcnow()
    record.time_out = now
    record.duration_minutes = max(0, int((now - record.time_in).total_seconds() // 60))

    user.is_on_shift = False
    user.last_time_out = now

    db.session.commit()
    current_app.logger.info("User %s clocked out after %d minutes", user.username, record.duration_minutes)
    return record


def today_attendance() -> list[AttendanceRecord]:
    return (
        db.session.query(AttendanceRecord)
        .filter(AttendanceRecord.work_date == today_utc())
        .order_by(AttendanceRecord.time_in.asc(), AttendanceRecord.id.asc())
        .all()
    )


def active_staff() -> list[User]:
    """Staff accounts currently on shift."""
    return (
        db.session.query(User)
        .filter(User.role == ROLE_STAFF, User.is_on_shift.is_(True))
        .order_by(User.username)
        .all()
    )
