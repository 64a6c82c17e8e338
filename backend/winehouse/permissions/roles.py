# Overview: Role to permission mapping for the two built-in roles.

from ..models.auth import ROLE_ADMIN, ROLE_STAFF
from .definitions import PERMISSION_DEFINITIONS


ROLE_PERMISSIONS = {
    # Admin: everything
    ROLE_ADMIN: frozenset(perm[0] for perm in PERMISSION_DEFINITIONS),

    # Staff: day-to-day shop floor work
    ROLE_STAFF: frozenset({
        "VIEW_CATALOG",
        "VIEW_INVENTORY",
        "VIEW_TRANSACTIONS",
        "POST_TRANSACTION",
        "SUBMIT_PRODUCT_STATUS",
        "VIEW_PRODUCT_STATUS",
        "CLOCK_IN_OUT",
    }),
}
