# Overview: Flask API routes for sales transactions; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import sales_service
from ..validation import price_cents_from_payload


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.get("")
@require_auth
@require_permission("VIEW_TRANSACTIONS")
def list_transactions():
    limit = request.args.get("limit", 500, type=int)
    txns = sales_service.list_transactions(limit=max(1, min(limit, 1000)))
    return jsonify({"items": [t.to_dict() for t in txns], "count": len(txns)})


@transactions_bp.get("/today")
@require_auth
@require_permission("VIEW_TRANSACTIONS")
def today_transactions():
    txns = sales_service.today_transactions()
    return jsonify({
        "items": [t.to_dict() for t in txns],
        "count": len(txns),
        "total_sales_cents": sum(t.total_price_cents for t in txns),
    })


@transactions_bp.post("")
@require_auth
@require_permission("POST_TRANSACTION")
def post_transaction():
    """
    Record a sale.

    Request body:
    {
        "product_id": 1,
        "quantity": 2,
        "price": "12.50"  // or "unit_price_cents": 1250
    }

    Returns 409 if the product's stock lot holds fewer units than requested.
    """
    data = request.get_json(silent=True) or {}
    try:
        txn = sales_service.post_transaction(
            actor=g.current_user,
            product_id=data.get("product_id"),
            quantity=data.get("quantity"),
            unit_price_cents=price_cents_from_payload(data),
        )
        return jsonify(txn.to_dict()), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to post transaction")
        return jsonify({"error": "Internal server error"}), 500
