"""
Permission checking utilities for the admin surface.
"""

import hmac

from config import ADMIN_API_TOKEN


def has_admin_permission(provided_token: str | None, admin_token: str | None = ADMIN_API_TOKEN) -> bool:
    """
    Check whether a request carries the shared admin token.

    If no admin token is configured, nobody is considered admin.

    Args:
        provided_token: Token sent by the caller (X-Admin-Token header)
        admin_token: Configured secret

    Returns:
        True if the tokens match, False otherwise
    """
    if not admin_token or not provided_token:
        return False
    return hmac.compare_digest(provided_token.encode(), admin_token.encode())
