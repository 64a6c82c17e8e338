# Overview: Service-layer operations for accounts; registration, login and profiles.

"""
Account Service

WHY: Every action must be attributable to a named user with a role.

ROLE ASSIGNMENT:
- The first account ever registered is the admin; every later one is staff.
- The decision is made once, at registration, from a persisted flag
  (system_service.ADMIN_BOOTSTRAP_KEY), and never revisited.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Session tokens managed separately (see session_service.py)
- Only staff accounts can be deleted, and only by an admin
"""

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import AuthenticationError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from ..extensions import db
from ..models import User, Notification
from ..models.auth import ROLE_ADMIN, ROLE_STAFF
from ..validation import (
    optional_text,
    require_date,
    require_text,
    validate_contact_number,
    validate_email,
    validate_password,
)
from . import system_service
from .activity_service import append_activity
from .permission_service import require_admin
from winehouse.time_utils import utcnow


def _bcrypt_rounds() -> int:
    try:
        return int(current_app.config.get("BCRYPT_ROUNDS", 12))
    except RuntimeError:
        return 12


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated (minimum length) before hashing.
    """
    validate_password(password)
    salt = bcrypt.gensalt(rounds=_bcrypt_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def get_user(user_id: int) -> User:
    user = db.session.query(User).filter_by(id=user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def register_user(username: str, password: str, email: str | None = None) -> User:
    """
    Create a new account.

    The first registered account becomes admin, every later one staff.
    Usernames are unique.

    Raises:
        ValidationError: blank username, short password, bad email
        ConflictError: username or email already taken
    """
    username = require_text(username, "Username", max_length=64)
    password_hash = hash_password(password)
    email = validate_email(email) if email else None

    if db.session.query(User).filter_by(username=username).first():
        raise ConflictError("Username already taken")
    if email and db.session.query(User).filter_by(email=email).first():
        raise ConflictError("Email already registered")

    # Two attempts: a concurrent first registration may win the admin slot
    # between our flag check and our commit; we then retry as staff.
    for _ in range(2):
        claims_admin = not system_service.is_admin_bootstrapped()
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            role=ROLE_ADMIN if claims_admin else ROLE_STAFF,
        )
        db.session.add(user)
        if claims_admin:
            system_service.stage_admin_bootstrap(username)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if claims_admin and system_service.is_admin_bootstrapped():
                continue
            raise ConflictError("Username already taken")

        current_app.logger.info("Registered user %s with role %s", user.username, user.role)
        return user

    raise ConflictError("Username already taken")


def authenticate(username: str, password: str) -> User:
    """
    Authenticate by username (or email) and password.

    Updates last_login_at on success.

    Raises AuthenticationError with a generic message on any failure.
    """
    if not username or not password:
        raise AuthenticationError("Invalid username or password")

    user = db.session.query(User).filter(
        db.or_(User.username == username, User.email == username.lower())
    ).first()

    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid username or password")

    user.last_login_at = utcnow()
    db.session.commit()
    return user


PROFILE_FIELDS = (
    "first_name", "middle_name", "last_name", "birthday",
    "address", "contact_number", "email", "profile_image_url",
)


def update_profile(user: User, data: dict) -> User:
    """
    Update the caller's own profile.

    first_name, last_name, birthday, address, contact_number and email are
    required; contact_number must be 11 digits.
    """
    unknown = [k for k in data if k not in PROFILE_FIELDS]
    if unknown:
        raise ValidationError(f"Field not allowed: {unknown[0]}")

    first_name = require_text(data.get("first_name"), "First name", max_length=100)
    last_name = require_text(data.get("last_name"), "Last name", max_length=100)
    birthday = require_date(data.get("birthday"), "Birthday")
    address = require_text(data.get("address"), "Address")
    contact_number = validate_contact_number(data.get("contact_number"))
    email = validate_email(data.get("email"))

    taken = db.session.query(User).filter(User.email == email, User.id != user.id).first()
    if taken:
        raise ConflictError("Email already registered")

    user.first_name = first_name
    user.middle_name = optional_text(data.get("middle_name"), max_length=100, field="middle_name")
    user.last_name = last_name
    user.birthday = birthday
    user.address = address
    user.contact_number = contact_number
    user.email = email
    if "profile_image_url" in data:
        user.profile_image_url = optional_text(data.get("profile_image_url"))
    user.profile_updated_at = utcnow()

    append_activity(actor=user, action="Updated profile", details=f"Updated profile: {user.username}")
    db.session.commit()
    return user


def list_users(role: str | None = None) -> list[User]:
    q = db.session.query(User)
    if role:
        q = q.filter_by(role=role)
    return q.order_by(User.username).all()


def delete_staff_user(*, actor: User, user_id: int) -> None:
    """
    Hard-delete a staff account. Admin only; admin accounts are refused.

    The user's sessions, attendance and notifications go with it. Activity
    log entries keep their username snapshot.
    """
    require_admin(actor)

    target = get_user(user_id)
    if target.role == ROLE_ADMIN:
        raise PermissionDeniedError("Cannot delete admin users")

    username = target.username
    db.session.query(Notification).filter_by(user_id=target.id).delete(synchronize_session=False)
    db.session.delete(target)

    append_activity(actor=actor, action="Deleted staff account", details=f"Deleted account: {username}")
    db.session.commit()
