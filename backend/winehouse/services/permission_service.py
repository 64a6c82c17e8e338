# Overview: Service-layer permission checks for the two built-in roles.

"""
Permission Checking

WHY: Enforce role-based access control at the service boundary, so that
every caller (HTTP route, CLI command, test) gets the same answer.

DESIGN PRINCIPLES:
- Fail closed: deny by default, require an explicit grant in ROLE_PERMISSIONS
- Roles are fixed (admin, staff); permissions are static code definitions
"""

from ..errors import AuthenticationError, PermissionDeniedError
from ..models import User
from ..permissions import ROLE_PERMISSIONS


def get_role_permissions(role: str) -> frozenset[str]:
    return ROLE_PERMISSIONS.get(role, frozenset())


def get_user_permissions(user: User) -> set[str]:
    """
    Get all permission codes for a user.

    Returns set of permission codes (e.g., {"POST_TRANSACTION", "CLOCK_IN_OUT"}).
    """
    return set(get_role_permissions(user.role))


def user_has_permission(user: User | None, permission_code: str) -> bool:
    if user is None:
        return False
    return permission_code in get_role_permissions(user.role)


def require_user(user: User | None) -> User:
    if user is None:
        raise AuthenticationError("User not authenticated")
    return user


def require_admin(user: User | None) -> None:
    require_user(user)
    if not user.is_admin:
        raise PermissionDeniedError("Unauthorized: admin role required")
