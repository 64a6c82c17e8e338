from __future__ import annotations

from ..extensions import db
from winehouse.time_utils import to_utc_z, to_iso_date


class Product(db.Model):
    """
    Product master data.

    Products are created once and not edited or deleted. Stock lots and
    transactions snapshot the product name at the time they are written.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "image_url": self.image_url,
            "created_at": to_utc_z(self.created_at),
            "created_by_user_id": self.created_by_user_id,
        }


class Supplier(db.Model):
    """Suppliers that stock lots are received from."""
    __tablename__ = "suppliers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Exactly 11 digits (validated in supplier_service)
    contact_number = db.Column(db.String(11), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "contact_number": self.contact_number,
            "created_at": to_utc_z(self.created_at),
            "created_by_user_id": self.created_by_user_id,
        }


class Stock(db.Model):
    """
    A received lot of a product from a supplier.

    QUANTITY: Never negative. Sales and approved expired/damaged reports
    decrement it with a single conditional UPDATE (see
    inventory_service.decrement_stock); the check constraint backs that up.

    Product and supplier names are snapshotted at receive time.
    """
    __tablename__ = "stocks"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_stocks_quantity_non_negative"),
        db.CheckConstraint("expiry_date > date_added", name="ck_stocks_expiry_after_added"),
        db.Index("ix_stocks_product_created", "product_id", "id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), nullable=False, index=True)

    product_name = db.Column(db.String(255), nullable=False)
    product_image_url = db.Column(db.Text, nullable=True)
    supplier_name = db.Column(db.String(255), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)

    # Authoritative storage in cents
    unit_price_cents = db.Column(db.Integer, nullable=False)

    date_added = db.Column(db.Date, nullable=False)
    expiry_date = db.Column(db.Date, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    product = db.relationship("Product", backref=db.backref("stocks", lazy=True))
    supplier = db.relationship("Supplier", backref=db.backref("stocks", lazy=True))

    def __repr__(self) -> str:
        return f"<Stock id={self.id} product_id={self.product_id} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_image_url": self.product_image_url,
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier_name,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "date_added": to_iso_date(self.date_added),
            "expiry_date": to_iso_date(self.expiry_date),
            "created_at": to_utc_z(self.created_at),
            "created_by_user_id": self.created_by_user_id,
        }
