# Overview: Service-layer operations for bearer sessions.

"""
Session Token Management

WHY: Maps an opaque bearer token to an application user. Tokens are
cryptographically random, stored only as a SHA-256 hash, time-limited and
revocable.

SECURITY FEATURES:
- 32 bytes of entropy per token (secrets.token_hex)
- Absolute timeout from SESSION_TTL_HOURS (default 24h)
- Revoked on logout
"""

import secrets
import hashlib
from datetime import timedelta

from flask import current_app

from ..errors import AuthenticationError
from ..extensions import db
from ..models import SessionToken, User
from winehouse.time_utils import utcnow


def generate_token() -> str:
    """Returns a 64-character hex string (32 bytes of entropy)."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    Hash token for database storage using SHA-256.

    Tokens are already high-entropy, so a fast hash is sufficient.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _session_ttl() -> timedelta:
    return timedelta(hours=int(current_app.config.get("SESSION_TTL_HOURS", 24)))


def create_session(user: User) -> tuple[SessionToken, str]:
    """
    Create a new session for user.

    Returns (session_record, plaintext_token). Client receives the plaintext
    token, the database stores only the hash.
    """
    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        user_id=user.id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + _session_ttl(),
        is_revoked=False,
    )
    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def validate_session(token: str) -> User:
    """
    Resolve a bearer token to its user.

    Raises AuthenticationError if the token is unknown, expired or revoked,
    or its user no longer exists.
    """
    if not token:
        raise AuthenticationError("Authentication required")

    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()
    if not session:
        raise AuthenticationError("Invalid or expired token")

    now = utcnow()
    if session.expires_at < now:
        session.is_revoked = True
        session.revoked_at = now
        session.revoked_reason = "Expired"
        db.session.commit()
        raise AuthenticationError("Invalid or expired token")

    user = session.user
    if not user:
        raise AuthenticationError("Invalid or expired token")

    session.last_used_at = now
    db.session.commit()
    return user


def revoke_session(token: str, reason: str = "Logout") -> bool:
    """Revoke a session by its plaintext token. Returns False if unknown."""
    session = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()
    if not session or session.is_revoked:
        return False

    session.is_revoked = True
    session.revoked_at = utcnow()
    session.revoked_reason = reason
    db.session.commit()
    return True
