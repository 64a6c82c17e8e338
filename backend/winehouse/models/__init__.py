from .auth import User, SessionToken
from .system import SystemSetting
from .inventory import Product, Supplier, Stock
from .sales import Transaction
from .product_status import ProductStatusReport, ProductStatusRevision
from .activity import ActivityLog
from .communications import Notification
from .timekeeping import AttendanceRecord

__all__ = [
    'User', 'SessionToken',
    'SystemSetting',
    'Product', 'Supplier', 'Stock',
    'Transaction',
    'ProductStatusReport', 'ProductStatusRevision',
    'ActivityLog',
    'Notification',
    'AttendanceRecord',
]
