from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z, to_iso_date


ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
VALID_ROLES = {ROLE_ADMIN, ROLE_STAFF}


class User(db.Model):
    """
    Application user profile.

    WHY: Every action must be attributable. The role is assigned once at
    registration (first account admin, later accounts staff) and is not
    revisited afterwards.

    Attendance flags (is_on_shift, last_time_in, last_time_out) are kept on
    the profile so active staff can be listed without scanning attendance.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        db.UniqueConstraint("email", name="uq_users_email"),
        db.CheckConstraint("role IN ('admin', 'staff')", name="ck_users_role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(16), nullable=False, default=ROLE_STAFF)

    # Profile
    first_name = db.Column(db.String(100), nullable=True)
    middle_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    birthday = db.Column(db.Date, nullable=True)
    address = db.Column(db.Text, nullable=True)
    contact_number = db.Column(db.String(11), nullable=True)
    profile_image_url = db.Column(db.Text, nullable=True)
    profile_updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Attendance
    is_on_shift = db.Column(db.Boolean, nullable=False, default=False)
    last_time_in = db.Column(db.DateTime(timezone=True), nullable=True)
    last_time_out = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "birthday": to_iso_date(self.birthday),
            "address": self.address,
            "contact_number": self.contact_number,
            "profile_image_url": self.profile_image_url,
            "profile_updated_at": to_utc_z(self.profile_updated_at),
            "is_on_shift": self.is_on_shift,
            "last_time_in": to_utc_z(self.last_time_in),
            "last_time_out": to_utc_z(self.last_time_out),
            "created_at": to_utc_z(self.created_at),
            "last_login_at": to_utc_z(self.last_login_at),
        }


class SessionToken(db.Model):
    """
    Bearer session tokens.

    WHY: Maps an opaque token presented by the client to a user profile.
    Only the SHA-256 hash of the token is stored.
    """
    __tablename__ = "session_tokens"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(64), nullable=True)

    user = db.relationship(
        "User",
        backref=db.backref("sessions", lazy=True, cascade="all, delete-orphan"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "last_used_at": to_utc_z(self.last_used_at),
            "expires_at": to_utc_z(self.expires_at),
            "is_revoked": self.is_revoked,
        }
