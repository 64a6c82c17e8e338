# Overview: Service-layer operations for sales transactions.

from __future__ import annotations

from datetime import datetime, time as dt_time, timedelta

from ..extensions import db
from ..models import Transaction, User
from ..validation import coerce_int, require_positive_int, require_price_cents
from .activity_service import append_activity
from .inventory_service import decrement_stock, require_stock_for_product
from .products_service import get_product
from winehouse.time_utils import utcnow, today_utc


def post_transaction(*, actor: User, product_id, quantity, unit_price_cents: int) -> Transaction:
    """
    Record a sale and take the units from the product's stock lot.

    The decrement and the transaction row commit together; on insufficient
    stock nothing is written.
    """
    qty = require_positive_int(quantity, "Quantity")
    price_cents = require_price_cents(unit_price_cents)
    product = get_product(coerce_int(product_id, "product_id"))
    stock = require_stock_for_product(product.id)

    try:
        decrement_stock(stock.id, qty)

        txn = Transaction(
            product_id=product.id,
            stock_id=stock.id,
            product_name=product.name,
            quantity=qty,
            unit_price_cents=price_cents,
            total_price_cents=price_cents * qty,
            occurred_at=utcnow(),
            created_by_user_id=actor.id,
            created_by_username=actor.username,
        )
        db.session.add(txn)
        db.session.flush()

        append_activity(
            actor=actor,
            action="New transaction",
            details=f"{product.name} - {qty} units",
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return txn


def list_transactions(*, user_id: int | None = None, limit: int = 500) -> list[Transaction]:
    q = db.session.query(Transaction)
    if user_id is not None:
        q = q.filter(Transaction.created_by_user_id == user_id)
    return q.order_by(Transaction.occurred_at.desc(), Transaction.id.desc()).limit(limit).all()


def today_bounds() -> tuple[datetime, datetime]:
    start = datetime.combine(today_utc(), dt_time.min)
    return start, start + timedelta(days=1)


def today_transactions() -> list[Transaction]:
    start, end = today_bounds()
    return (
        db.session.query(Transaction)
        .filter(Transaction.occurred_at >= start, Transaction.occurred_at < end)
        .order_by(Transaction.occurred_at.desc(), Transaction.id.desc())
        .all()
    )
