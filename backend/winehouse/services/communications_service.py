from __future__ import annotations

from ..errors import NotFoundError, PermissionDeniedError
from ..extensions import db
from ..models import Notification, User
from ..models.auth import ROLE_ADMIN
from winehouse.time_utils import utcnow


def notify_user(user_id: int, title: str, message: str) -> Notification:
    """Queue a notification in the caller's transaction (flush only)."""
    row = Notification(
        user_id=user_id,
        title=title,
        message=message,
        is_read=False,
        created_at=utcnow(),
    )
    db.session.add(row)
    db.session.flush()
    return row


def notify_admins(title: str, message: str) -> list[Notification]:
    """Fan a notification out to every admin account."""
    admin_ids = [
        row[0]
        for row in db.session.query(User.id).filter(User.role == ROLE_ADMIN).order_by(User.id).all()
    ]
    return [notify_user(admin_id, title, message) for admin_id in admin_ids]


def list_for_user(user_id: int, unread_only: bool = False, limit: int = 100) -> list[Notification]:
    q = db.session.query(Notification).filter_by(user_id=user_id)
    if unread_only:
        q = q.filter_by(is_read=False)
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def unread_count(user_id: int) -> int:
    return db.session.query(Notification).filter_by(user_id=user_id, is_read=False).count()


def mark_read(*, notification_id: int, user_id: int) -> Notification:
    row = db.session.query(Notification).filter_by(id=notification_id).first()
    if not row:
        raise NotFoundError("Notification not found")
    if row.user_id != user_id:
        raise PermissionDeniedError("You can only mark your own notifications as read")

    if not row.is_read:
        row.is_read = True
        row.read_at = utcnow()
        db.session.commit()
    return row


def mark_all_read(user_id: int) -> int:
    now = utcnow()
    updated = (
        db.session.query(Notification)
        .filter_by(user_id=user_id, is_read=False)
        .update({"is_read": True, "read_at": now}, synchronize_session=False)
    )
    db.session.commit()
    return updated
