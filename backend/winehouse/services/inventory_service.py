# Overview: Service-layer operations for stock lots; receiving and atomic decrement.

"""
Inventory Invariants

- Stock.quantity never goes negative.
- Decrements are a single conditional UPDATE (compare-and-swap on quantity),
  never read-then-write, so two concurrent sales cannot both take the last
  units.
- decrement_stock() does NOT commit; callers commit it together with the
  transaction or report that caused it.
"""

from __future__ import annotations

from sqlalchemy import update

from ..errors import InsufficientStockError, NotFoundError
from ..extensions import db
from ..models import Stock, User
from ..validation import coerce_int, enforce_rules_stock, require_date, require_price_cents
from .activity_service import append_activity
from .permission_service import require_admin
from .products_service import get_product
from .supplier_service import get_supplier
from winehouse.time_utils import utcnow


def list_stocks(product_id: int | None = None) -> list[Stock]:
    q = db.session.query(Stock)
    if product_id is not None:
        q = q.filter(Stock.product_id == product_id)
    return q.order_by(Stock.id.asc()).all()


def get_stock_for_product(product_id: int) -> Stock | None:
    """
    The lot that sales and reports draw from: the product's earliest
    received lot.
    """
    return (
        db.session.query(Stock)
        .filter(Stock.product_id == product_id)
        .order_by(Stock.id.asc())
        .first()
    )


def require_stock_for_product(product_id: int) -> Stock:
    stock = get_stock_for_product(product_id)
    if stock is None:
        raise NotFoundError("Product has no stock")
    return stock


def add_stock(
    *,
    actor: User,
    product_id,
    supplier_id,
    quantity,
    unit_price_cents: int,
    date_added,
    expiry_date,
) -> Stock:
    """
    Receive a new lot. Admin only.

    quantity > 0, price > 0 and expiry strictly after date_added.
    Product and supplier names are snapshotted onto the lot.
    """
    require_admin(actor)

    qty = coerce_int(quantity, "quantity")
    price_cents = require_price_cents(unit_price_cents)
    added = require_date(date_added, "Date added")
    expiry = require_date(expiry_date, "Expiry date")
    enforce_rules_stock(quantity=qty, date_added=added, expiry_date=expiry)

    product = get_product(coerce_int(product_id, "product_id"))
    supplier = get_supplier(coerce_int(supplier_id, "supplier_id"))

    stock = Stock(
        product_id=product.id,
        supplier_id=supplier.id,
        product_name=product.name,
        product_image_url=product.image_url,
        supplier_name=supplier.name,
        quantity=qty,
        unit_price_cents=price_cents,
        date_added=added,
        expiry_date=expiry,
        created_at=utcnow(),
        created_by_user_id=actor.id,
    )
    db.session.add(stock)
    db.session.flush()

    append_activity(
        actor=actor,
        action="Added new stock",
        details=f"Added {qty} units of {product.name}",
    )
    db.session.commit()
    return stock


def decrement_stock(stock_id: int, quantity: int) -> None:
    """
    Atomically take `quantity` units from a lot.

    Raises InsufficientStockError (and changes nothing) if the lot holds
    fewer than `quantity` units at the moment of the UPDATE.
    """
    result = db.session.execute(
        update(Stock)
        .where(Stock.id == stock_id, Stock.quantity >= quantity)
        .values(quantity=Stock.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InsufficientStockError("Insufficient stock")

    # Keep any loaded Stock instance in step with the row
    stock = db.session.get(Stock, stock_id)
    if stock is not None:
        db.session.refresh(stock, attribute_names=["quantity"])
