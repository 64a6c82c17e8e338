# Overview: Flask API routes for health checks.

"""
System health endpoint for load balancers and deployment checks.
"""

import time

from flask import Blueprint, current_app, jsonify

from ..extensions import db
from ..models import User
from ..services import system_service
from winehouse.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Check database connectivity with a trivial query."""
    start_time = time.time()
    try:
        user_count = db.session.query(User).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "response_time_ms": round(elapsed_ms, 2),
            "details": {"users": user_count},
        }
    except Exception as e:
        current_app.logger.exception("Database health check failed")
        return {"status": "unhealthy", "error": str(e)}


@system_bp.get("/health")
def health():
    database = check_database_health()
    healthy = database["status"] == "healthy"
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database},
    }
    if healthy:
        body["system"] = system_service.status()
    return jsonify(body), 200 if healthy else 503
