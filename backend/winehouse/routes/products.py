# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product catalog routes.

SECURITY: All routes require authentication.
- Read operations require VIEW_CATALOG permission
- Create requires MANAGE_PRODUCTS permission (admin)
"""
from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import products_service


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission("VIEW_CATALOG")
def list_products():
    products = products_service.list_products()
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)})


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product():
    """
    Request body:
    {
        "name": "Cabernet Sauvignon 2019",
        "image_url": "https://..."  // optional
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        product = products_service.create_product(
            actor=g.current_user,
            name=data.get("name"),
            image_url=data.get("image_url"),
        )
        return jsonify(product.to_dict()), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.get("/<int:product_id>")
@require_auth
@require_permission("VIEW_CATALOG")
def get_product(product_id: int):
    try:
        product = products_service.get_product(product_id)
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify(product.to_dict())
