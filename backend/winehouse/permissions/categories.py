# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for grouping and display."""
    CATALOG = "CATALOG"
    INVENTORY = "INVENTORY"
    SALES = "SALES"
    REPORTS = "REPORTS"
    USERS = "USERS"
    TIMEKEEPING = "TIMEKEEPING"
    SYSTEM = "SYSTEM"
