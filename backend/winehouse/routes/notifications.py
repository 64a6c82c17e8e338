# Overview: Flask API routes for the caller's notifications.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth
from ..errors import DomainError
from ..services import communications_service


notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.get("")
@require_auth
def list_notifications():
    unread_only = request.args.get("unread", "").lower() in {"1", "true", "yes"}
    rows = communications_service.list_for_user(g.current_user.id, unread_only=unread_only)
    return jsonify({"items": [n.to_dict() for n in rows], "count": len(rows)})


@notifications_bp.get("/unread-count")
@require_auth
def unread_count():
    return jsonify({"unread": communications_service.unread_count(g.current_user.id)})


@notifications_bp.post("/<int:notification_id>/read")
@require_auth
def mark_read(notification_id: int):
    try:
        row = communications_service.mark_read(
            notification_id=notification_id,
            user_id=g.current_user.id,
        )
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify(row.to_dict())


@notifications_bp.post("/read-all")
@require_auth
def mark_all_read():
    updated = communications_service.mark_all_read(g.current_user.id)
    return jsonify({"updated": updated})
