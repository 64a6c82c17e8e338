# Overview: Permission system package.

from .categories import PermissionCategory
from .definitions import PERMISSION_DEFINITIONS
from .roles import ROLE_PERMISSIONS
from .helpers import (
    get_all_permission_codes,
    get_permission_definition,
    validate_permission_code,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "ROLE_PERMISSIONS",
    "get_all_permission_codes",
    "get_permission_definition",
    "validate_permission_code",
]
