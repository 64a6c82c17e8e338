# Overview: Flask API routes for supplier operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import supplier_service


suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.get("")
@require_auth
@require_permission("VIEW_CATALOG")
def list_suppliers():
    suppliers = supplier_service.list_suppliers()
    return jsonify({"items": [s.to_dict() for s in suppliers], "count": len(suppliers)})


@suppliers_bp.post("")
@require_auth
@require_permission("MANAGE_SUPPLIERS")
def create_supplier():
    """Body: {"name": "...", "contact_number": "09171234567"}"""
    data = request.get_json(silent=True) or {}
    try:
        supplier = supplier_service.create_supplier(
            actor=g.current_user,
            name=data.get("name"),
            contact_number=data.get("contact_number"),
        )
        return jsonify(supplier.to_dict()), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create supplier")
        return jsonify({"error": "Internal server error"}), 500


@suppliers_bp.get("/<int:supplier_id>")
@require_auth
@require_permission("VIEW_CATALOG")
def get_supplier(supplier_id: int):
    try:
        supplier = supplier_service.get_supplier(supplier_id)
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify(supplier.to_dict())
