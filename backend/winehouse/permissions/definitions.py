# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- CATALOG --

CATALOG_PERMISSIONS = [
    (
        "VIEW_CATALOG",
        "View Catalog",
        "View products and suppliers",
        PermissionCategory.CATALOG,
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Create products",
        PermissionCategory.CATALOG,
    ),
    (
        "MANAGE_SUPPLIERS",
        "Manage Suppliers",
        "Create suppliers",
        PermissionCategory.CATALOG,
    ),
]


# -- INVENTORY --

INVENTORY_PERMISSIONS = [
    (
        "VIEW_INVENTORY",
        "View Inventory",
        "View stock lots and quantities",
        PermissionCategory.INVENTORY,
    ),
    (
        "RECEIVE_STOCK",
        "Receive Stock",
        "Add new stock lots",
        PermissionCategory.INVENTORY,
    ),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "VIEW_TRANSACTIONS",
        "View Transactions",
        "View posted sales transactions",
        PermissionCategory.SALES,
    ),
    (
        "POST_TRANSACTION",
        "Post Transaction",
        "Sell stock and record a transaction",
        PermissionCategory.SALES,
    ),
]


# -- EXPIRED / DAMAGED REPORTS --

REPORT_PERMISSIONS = [
    (
        "SUBMIT_PRODUCT_STATUS",
        "Submit Product Status Report",
        "Report expired or damaged stock, and revise own rejected reports",
        PermissionCategory.REPORTS,
    ),
    (
        "VIEW_PRODUCT_STATUS",
        "View Product Status Reports",
        "View all expired/damaged reports",
        PermissionCategory.REPORTS,
    ),
    (
        "REVIEW_PRODUCT_STATUS",
        "Review Product Status Reports",
        "Approve or reject expired/damaged reports",
        PermissionCategory.REPORTS,
    ),
    (
        "EXPORT_PRODUCT_STATUS",
        "Export Product Status Reports",
        "Download the report listing",
        PermissionCategory.REPORTS,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "VIEW_USERS",
        "View Users",
        "View user accounts",
        PermissionCategory.USERS,
    ),
    (
        "DELETE_USER",
        "Delete User",
        "Delete staff accounts",
        PermissionCategory.USERS,
    ),
]


# -- TIMEKEEPING --

TIMEKEEPING_PERMISSIONS = [
    (
        "CLOCK_IN_OUT",
        "Clock In/Out",
        "Record own attendance",
        PermissionCategory.TIMEKEEPING,
    ),
    (
        "VIEW_ATTENDANCE",
        "View Attendance",
        "View everyone's attendance and active staff",
        PermissionCategory.TIMEKEEPING,
    ),
]


# -- SYSTEM --

SYSTEM_PERMISSIONS = [
    (
        "VIEW_ACTIVITY_LOG",
        "View Activity Log",
        "View the business audit trail",
        PermissionCategory.SYSTEM,
    ),
    (
        "VIEW_DASHBOARD",
        "View Dashboard",
        "View dashboard statistics",
        PermissionCategory.SYSTEM,
    ),
]


PERMISSION_DEFINITIONS = (
    CATALOG_PERMISSIONS
    + INVENTORY_PERMISSIONS
    + SALES_PERMISSIONS
    + REPORT_PERMISSIONS
    + USER_PERMISSIONS
    + TIMEKEEPING_PERMISSIONS
    + SYSTEM_PERMISSIONS
)
