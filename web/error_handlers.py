"""Centralized error handlers."""

from __future__ import annotations

import logging

from flask import Flask
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from services import error_codes
from services.errors import LotteryError
from web.responses import fail

logger = logging.getLogger("huay.web")

# HTTP status per service error code; anything unlisted is a 400
STATUS_BY_CODE = {
    error_codes.NOT_FOUND: 404,
    error_codes.USER_NOT_FOUND: 404,
    error_codes.TRANSACTION_NOT_FOUND: 404,
    error_codes.BET_NOT_FOUND: 404,
    error_codes.DRAW_NOT_FOUND: 404,
    error_codes.INVALID_CREDENTIALS: 401,
    error_codes.PERMISSION_DENIED: 403,
    error_codes.INSUFFICIENT_BALANCE: 402,
    error_codes.CONFLICT: 409,
    error_codes.USERNAME_TAKEN: 409,
    error_codes.ALREADY_REVIEWED: 409,
    error_codes.DRAW_ALREADY_EXISTS: 409,
    error_codes.ALREADY_PROCESSED: 409,
    error_codes.ALREADY_PROCESSING: 409,
    error_codes.BETTING_CLOSED: 409,
    error_codes.ACCOUNT_BLOCKED: 423,
    error_codes.BLOCKED_NUMBER: 400,
    error_codes.LIMIT_EXCEEDED: 400,
    error_codes.MISSING_RATE: 500,
    error_codes.PERSISTENCE_ERROR: 500,
}


def status_for(code: str) -> int:
    return STATUS_BY_CODE.get(code, 400)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(LotteryError)
    def _handle_lottery_error(exc: LotteryError):
        status = status_for(exc.code)
        if status >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        return fail(exc.code, exc.message, status, exc.details)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        # exc.messages is a dict of field -> list[str]
        return fail(error_codes.VALIDATION_ERROR, "Validation error", 400, exc.messages)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail(error_codes.NOT_FOUND, "Not found", 404)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return fail("internal_error", "Internal server error", 500)
