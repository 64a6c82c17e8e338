from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z


class Transaction(db.Model):
    """
    A posted sale of one product.

    Written in the same database transaction as the stock decrement it
    causes. total_price_cents = unit_price_cents * quantity.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_transactions_quantity_positive"),
        db.Index("ix_transactions_occurred", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    stock_id = db.Column(db.Integer, db.ForeignKey("stocks.id"), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    total_price_cents = db.Column(db.Integer, nullable=False)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_username = db.Column(db.String(64), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "stock_id": self.stock_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "total_price_cents": self.total_price_cents,
            "occurred_at": to_utc_z(self.occurred_at),
            "created_by_user_id": self.created_by_user_id,
            "created_by_username": self.created_by_username,
        }
