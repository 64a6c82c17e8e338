# Overview: Service-layer read models for the admin dashboard.

from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Product, Stock, Transaction, User
from ..models.auth import ROLE_STAFF
from . import sales_service
from .sales_service import today_bounds
from .timekeeping_service import active_staff


def low_stock_lots(threshold: int | None = None) -> list[Stock]:
    """Lots holding fewer than `threshold` units (LOW_STOCK_THRESHOLD by default)."""
    if threshold is None:
        threshold = int(current_app.config.get("LOW_STOCK_THRESHOLD", 10))
    return (
        db.session.query(Stock)
        .filter(Stock.quantity < threshold)
        .order_by(Stock.quantity.asc(), Stock.id.asc())
        .all()
    )


def today_transactions() -> list[Transaction]:
    """Sales posted since midnight UTC, newest first."""
    return sales_service.today_transactions()


def dashboard_stats() -> dict:
    start, end = today_bounds()

    total_products = db.session.query(func.count(Product.id)).scalar() or 0
    total_stock = db.session.query(func.coalesce(func.sum(Stock.quantity), 0)).scalar() or 0

    sales_count, sales_cents = (
        db.session.query(
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.total_price_cents), 0),
        )
        .filter(Transaction.occurred_at >= start, Transaction.occurred_at < end)
        .one()
    )

    total_staff = db.session.query(func.count(User.id)).filter(User.role == ROLE_STAFF).scalar() or 0

    return {
        "total_products": int(total_products),
        "total_stock": int(total_stock),
        "low_stock_items": len(low_stock_lots()),
        "total_sales_today": int(sales_count),
        "total_sales_amount_cents": int(sales_cents or 0),
        "active_staff": len(active_staff()),
        "total_staff": int(total_staff),
    }
