"""Admin authentication for the HTTP surface."""

from __future__ import annotations

from functools import wraps

from flask import current_app, request

from services import error_codes
from services.permissions import has_admin_permission
from web.responses import fail

ADMIN_TOKEN_HEADER = "X-Admin-Token"


def admin_required(view):
    """Reject the request unless it carries the configured admin token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        configured = current_app.config.get("ADMIN_API_TOKEN")
        if not configured:
            return fail(error_codes.PERMISSION_DENIED, "Admin API is disabled.", 403)
        if not has_admin_permission(request.headers.get(ADMIN_TOKEN_HEADER), configured):
            return fail(error_codes.PERMISSION_DENIED, "Invalid admin token.", 401)
        return view(*args, **kwargs)

    return wrapper
