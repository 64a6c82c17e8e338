# Overview: Service-layer operations for one-time system initialisation.

"""
System Initialisation

WHY: The first account registered becomes the admin; every later account is
staff. Instead of counting users at registration time, the decision is a
persisted flag set exactly once.

The flag is a SystemSetting row under a unique key, inserted in the same
transaction as the admin account. Two concurrent first registrations cannot
both commit it: the loser hits the unique constraint and is retried as staff
(see auth_service.register_user).
"""

from __future__ import annotations

from ..extensions import db
from ..models import SystemSetting, User
from ..models.auth import ROLE_ADMIN
from winehouse.time_utils import utcnow, to_utc_z


ADMIN_BOOTSTRAP_KEY = "admin_bootstrapped"


def get_setting(key: str) -> str | None:
    row = db.session.query(SystemSetting).filter_by(key=key).first()
    return row.value if row else None


def is_admin_bootstrapped() -> bool:
    return get_setting(ADMIN_BOOTSTRAP_KEY) is not None


def stage_admin_bootstrap(username: str) -> SystemSetting:
    """Add the bootstrap flag to the current transaction. Does not flush."""
    row = SystemSetting(
        key=ADMIN_BOOTSTRAP_KEY,
        value=f"{username}@{to_utc_z(utcnow())}",
    )
    db.session.add(row)
    return row


def ensure_admin_flag() -> bool:
    """
    Set the flag for databases that already hold an admin account but were
    created before the flag existed. Idempotent.

    Returns True if the flag is set after the call.
    """
    if is_admin_bootstrapped():
        return True
    admin = db.session.query(User).filter_by(role=ROLE_ADMIN).order_by(User.id).first()
    if not admin:
        return False
    stage_admin_bootstrap(admin.username)
    db.session.commit()
    return True


def status() -> dict:
    return {
        "admin_bootstrapped": is_admin_bootstrapped(),
        "admin_bootstrap": get_setting(ADMIN_BOOTSTRAP_KEY),
    }
