# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .errors import AuthenticationError
from .services import session_service, permission_service


def _is_authenticated() -> bool:
    return getattr(g, "current_user", None) is not None


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_auth(f):
    """
    Require a valid bearer session.

    Sets g.current_user to the authenticated User and g.session_token to the
    plaintext token (used by logout).

    SECURITY: Returns 401 if:
    - No Authorization header
    - Unknown, expired or revoked token
    - The token's user was deleted
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        try:
            user = session_service.validate_session(token)
        except AuthenticationError as e:
            return jsonify({"error": str(e)}), 401

        g.current_user = user
        g.session_token = token
        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """Require the authenticated user's role to grant `permission_code`."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if not permission_service.user_has_permission(g.current_user, permission_code):
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_code,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator

