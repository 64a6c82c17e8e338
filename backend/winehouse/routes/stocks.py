# Overview: Flask API routes for stock lots; parses input and returns JSON responses.

"""
Stock routes.

SECURITY:
- Listing requires VIEW_INVENTORY (admin and staff)
- Receiving a lot requires RECEIVE_STOCK (admin)

Prices are accepted either as integer cents (`unit_price_cents`) or as a
decimal amount (`price`, e.g. "12.50").
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import inventory_service
from ..validation import coerce_int, price_cents_from_payload


stocks_bp = Blueprint("stocks", __name__, url_prefix="/api/stocks")


@stocks_bp.get("")
@require_auth
@require_permission("VIEW_INVENTORY")
def list_stocks():
    product_id = request.args.get("product_id")
    try:
        stocks = inventory_service.list_stocks(
            product_id=coerce_int(product_id, "product_id") if product_id else None
        )
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify({"items": [s.to_dict() for s in stocks], "count": len(stocks)})


@stocks_bp.post("")
@require_auth
@require_permission("RECEIVE_STOCK")
def add_stock():
    """
    Request body:
    {
        "product_id": 1,
        "supplier_id": 1,
        "quantity": 24,
        "price": "12.50",
        "date_added": "2026-01-15",
        "expiry_date": "2028-01-15"
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        stock = inventory_service.add_stock(
            actor=g.current_user,
            product_id=data.get("product_id"),
            supplier_id=data.get("supplier_id"),
            quantity=data.get("quantity"),
            unit_price_cents=price_cents_from_payload(data),
            date_added=data.get("date_added"),
            expiry_date=data.get("expiry_date"),
        )
        return jsonify(stock.to_dict()), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to add stock")
        return jsonify({"error": "Internal server error"}), 500
