# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

"""
Admin API routes: staff accounts, the activity log and the dashboard.

SECURITY: Every route requires an admin permission.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import activity_service, auth_service, reporting_service


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/users")
@require_auth
@require_permission("VIEW_USERS")
def list_users_route():
    """Query params: role (admin|staff)."""
    users = auth_service.list_users(role=request.args.get("role"))
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@admin_bp.delete("/users/<int:user_id>")
@require_auth
@require_permission("DELETE_USER")
def delete_user_route(user_id: int):
    try:
        auth_service.delete_staff_user(actor=g.current_user, user_id=user_id)
        return jsonify({"message": "User deleted"}), 200
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete user")
        return jsonify({"error": "Internal server error"}), 500


@admin_bp.get("/activity")
@require_auth
@require_permission("VIEW_ACTIVITY_LOG")
def activity_route():
    """Query params: user_id, since, until (ISO-8601), limit (max 1000)."""
    limit = request.args.get("limit", 200, type=int)
    try:
        entries = activity_service.list_activity(
            user_id=request.args.get("user_id", type=int),
            since=request.args.get("since"),
            until=request.args.get("until"),
            limit=max(1, min(limit, 1000)),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"items": [e.to_dict() for e in entries], "count": len(entries)})


@admin_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard_route():
    stats = reporting_service.dashboard_stats()
    low_stock = reporting_service.low_stock_lots()
    return jsonify({
        "stats": stats,
        "low_stock": [s.to_dict() for s in low_stock],
    })
