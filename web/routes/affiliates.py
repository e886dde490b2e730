"""Affiliate summary route."""

from __future__ import annotations

from flask import Blueprint

from web import get_container
from web.responses import ok

affiliates_bp = Blueprint("affiliates", __name__)


@affiliates_bp.get("/affiliates/<int:user_id>")
def affiliate_summary(user_id: int):
    return ok(get_container().affiliate_service.get_summary(user_id))
