# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- Self-registration is open. The first account becomes admin, every later
  account staff (see auth_service.register_user).
- Login returns an opaque bearer token; send it as
  `Authorization: Bearer <token>` on every other call.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import DomainError
from ..services import auth_service
from ..services import permission_service
from ..services import session_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _login_payload(user, token: str, session) -> dict:
    return {
        "user": user.to_dict(),
        "permissions": sorted(permission_service.get_user_permissions(user)),
        "token": token,
        "expires_at": session.to_dict()["expires_at"],
    }


@auth_bp.post("/register")
def register_route():
    """
    Create an account and log it in.

    Request body:
    {
        "username": "jane",
        "password": "secret1",
        "email": "jane@example.com"  // optional
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        user = auth_service.register_user(
            data.get("username"),
            data.get("password"),
            email=data.get("email"),
        )
        session, token = session_service.create_session(user)
        return jsonify(_login_payload(user, token, session)), 201
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """Authenticate by username (or email) and password; returns a session token."""
    data = request.get_json(silent=True) or {}
    username = data.get("username") or data.get("email")
    password = data.get("password")

    if not all([username, password]):
        return jsonify({"error": "username/email and password required"}), 400

    try:
        user = auth_service.authenticate(username, password)
        session, token = session_service.create_session(user)
        return jsonify({**_login_payload(user, token, session), "message": "Login successful"}), 200
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.revoke_session(g.session_token)
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    user = g.current_user
    return jsonify({
        "user": user.to_dict(),
        "permissions": sorted(permission_service.get_user_permissions(user)),
    })


@auth_bp.put("/profile")
@require_auth
def update_profile_route():
    """
    Update the caller's profile.

    Required: first_name, last_name, birthday (YYYY-MM-DD), address,
    contact_number (11 digits), email. Optional: middle_name,
    profile_image_url.
    """
    data = request.get_json(silent=True) or {}
    try:
        user = auth_service.update_profile(g.current_user, data)
        return jsonify({"user": user.to_dict()})
    except DomainError as e:
        return jsonify({"error": str(e)}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update profile")
        return jsonify({"error": "Internal server error"}), 500
