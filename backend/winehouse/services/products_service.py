# Overview: Service-layer operations for the product catalog.

from __future__ import annotations

from ..errors import NotFoundError
from ..extensions import db
from ..models import Product, User
from ..validation import optional_text, require_text
from .activity_service import append_activity
from .permission_service import require_admin
from winehouse.time_utils import utcnow


def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()


def get_product(product_id: int) -> Product:
    product = db.session.query(Product).filter_by(id=product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def create_product(*, actor: User, name, image_url=None) -> Product:
    """
    Add a product to the catalog. Admin only.

    Products have no price or quantity of their own; those live on stock lots.
    """
    require_admin(actor)

    product = Product(
        name=require_text(name, "Product name", max_length=255),
        image_url=optional_text(image_url, field="image_url"),
        created_at=utcnow(),
        created_by_user_id=actor.id,
    )
    db.session.add(product)
    db.session.flush()

    append_activity(actor=actor, action="Added new product", details=f"Added product: {product.name}")
    db.session.commit()
    return product
