# Overview: Service-layer operations for suppliers.

from __future__ import annotations

from ..errors import NotFoundError
from ..extensions import db
from ..models import Supplier, User
from ..validation import require_text, validate_contact_number
from .activity_service import append_activity
from .permission_service import require_admin
from winehouse.time_utils import utcnow


def list_suppliers() -> list[Supplier]:
    return db.session.query(Supplier).order_by(Supplier.name.asc(), Supplier.id.asc()).all()


def get_supplier(supplier_id: int) -> Supplier:
    supplier = db.session.query(Supplier).filter_by(id=supplier_id).first()
    if not supplier:
        raise NotFoundError("Supplier not found")
    return supplier


def create_supplier(*, actor: User, name, contact_number) -> Supplier:
    """Register a supplier. Admin only; contact number must be 11 digits."""
    require_admin(actor)

    supplier = Supplier(
        name=require_text(name, "Supplier name", max_length=255),
        contact_number=validate_contact_number(contact_number),
        created_at=utcnow(),
        created_by_user_id=actor.id,
    )
    db.session.add(supplier)
    db.session.flush()

    append_activity(actor=actor, action="Added new supplier", details=f"Added supplier: {supplier.name}")
    db.session.commit()
    return supplier
