# Overview: Flask API routes for expired/damaged product reports.

"""
Product Status Routes

SECURITY:
- Submit and revise require SUBMIT_PRODUCT_STATUS (revise: reporter only,
  enforced in the service)
- Review requires REVIEW_PRODUCT_STATUS (admin)
- Export requires EXPORT_PRODUCT_STATUS (admin)
"""

from flask import Blueprint, Response, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import product_status_service


product_status_bp = Blueprint("product_status", __name__, url_prefix="/api/product-status")


@product_status_bp.get("")
@require_auth
@require_permission("VIEW_PRODUCT_STATUS")
def list_reports():
    """Query params: type (expired|damaged), status, mine=true."""
    mine = request.args.get("mine", "").lower() in {"1", "true", "yes"}
    try:
        reports = product_status_service.list_reports(
            report_type=request.args.get("type"),
            status=request.args.get("status"),
            reported_by_user_id=g.current_user.id if mine else None,
        )
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify({"items": [r.to_dict() for r in reports], "count": len(reports)})


@product_status_bp.post("")
@require_auth
@require_permission("SUBMIT_PRODUCT_STATUS")
def submit_report():
    """
    Request body:
    {
        "product_id": 1,
        "type": "damaged",
        "quantity": 2,
        "notes": "Two bottles cracked in transit",
        "image_url": "https://..."  // optional
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        report = product_status_service.submit_report(
            actor=g.current_user,
            product_id=data.get("product_id"),
            report_type=data.get("type"),
            quantity=data.get("quantity"),
            notes=data.get("notes"),
            image_url=data.get("image_url"),
        )
        return jsonify(report.to_dict()), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to submit product status report")
        return jsonify({"error": "Internal server error"}), 500


@product_status_bp.get("/export")
@require_auth
@require_permission("EXPORT_PRODUCT_STATUS")
def export_reports():
    report_type = request.args.get("type")
    try:
        body = product_status_service.export_reports_csv(report_type)
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code

    filename = f"{report_type or 'product-status'}-reports.csv"
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@product_status_bp.get("/<int:report_id>")
@require_auth
@require_permission("VIEW_PRODUCT_STATUS")
def get_report(report_id: int):
    try:
        report = product_status_service.get_report(report_id)
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify(report.to_dict())


@product_status_bp.post("/<int:report_id>/review")
@require_auth
@require_permission("REVIEW_PRODUCT_STATUS")
def review_report(report_id: int):
    """Body: {"decision": "approved" | "rejected", "review_notes": "..."}"""
    data = request.get_json(silent=True) or {}
    try:
        report = product_status_service.review_report(
            actor=g.current_user,
            report_id=report_id,
            decision=data.get("decision") or data.get("status"),
            review_notes=data.get("review_notes"),
        )
        return jsonify(report.to_dict())
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to review product status report")
        return jsonify({"error": "Internal server error"}), 500


@product_status_bp.put("/<int:report_id>")
@require_auth
@require_permission("SUBMIT_PRODUCT_STATUS")
def revise_report(report_id: int):
    """Body: {"notes": "...", "image_url": "..."}; only for rejected reports."""
    data = request.get_json(silent=True) or {}
    try:
        report = product_status_service.revise_report(
            actor=g.current_user,
            report_id=report_id,
            notes=data.get("notes"),
            image_url=data.get("image_url"),
        )
        return jsonify(report.to_dict())
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to revise product status report")
        return jsonify({"error": "Internal server error"}), 500
