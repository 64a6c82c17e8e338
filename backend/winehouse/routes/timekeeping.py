# Overview: Flask API routes for timekeeping operations; parses input and returns JSON responses.

"""
Timekeeping Routes

SECURITY:
- Clock in/out requires CLOCK_IN_OUT permission.
- Viewing attendance and who is on shift requires VIEW_ATTENDANCE (admin).
"""

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_permission
from ..errors import DomainError
from ..services import timekeeping_service


timekeeping_bp = Blueprint("timekeeping", __name__, url_prefix="/api/timekeeping")


@timekeeping_bp.post("/clock-in")
@require_auth
@require_permission("CLOCK_IN_OUT")
def clock_in_route():
    try:
        record = timekeeping_service.clock_in(g.current_user)
        return jsonify({"record": record.to_dict()}), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code


@timekeeping_bp.post("/clock-out")
@require_auth
@require_permission("CLOCK_IN_OUT")
def clock_out_route():
    try:
        record = timekeeping_service.clock_out(g.current_user)
        return jsonify({"record": record.to_dict()})
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code


@timekeeping_bp.get("/today")
@require_auth
@require_permission("VIEW_ATTENDANCE")
def today_route():
    records = timekeeping_service.today_attendance()
    return jsonify({"items": [r.to_dict() for r in records], "count": len(records)})


@timekeeping_bp.get("/active-staff")
@require_auth
@require_permission("VIEW_ATTENDANCE")
def active_staff_route():
    staff = timekeeping_service.active_staff()
    return jsonify({"items": [u.to_dict() for u in staff], "count": len(staff)})
