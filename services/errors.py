"""
Service-layer exception taxonomy.

Every error carries a stable code from services.error_codes. All of them
subclass ValueError so callers that only care about "the request was refused"
can keep catching ValueError.
"""

from typing import Any

from services import error_codes


class LotteryError(ValueError):
    """Base class for refused operations."""

    code = error_codes.VALIDATION_ERROR

    def __init__(self, message: str, *, code: str | None = None, details: Any | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(LotteryError):
    """Bad input: digit count, unknown type, non-positive amount."""

    code = error_codes.VALIDATION_ERROR


class NotFoundError(LotteryError):
    code = error_codes.NOT_FOUND


class ConflictError(LotteryError):
    code = error_codes.CONFLICT


class InsufficientBalance(LotteryError):
    code = error_codes.INSUFFICIENT_BALANCE


class BlockedNumberError(LotteryError):
    code = error_codes.BLOCKED_NUMBER


class LimitExceeded(LotteryError):
    code = error_codes.LIMIT_EXCEEDED


class BettingClosed(LotteryError):
    code = error_codes.BETTING_CLOSED


class AccountBlocked(LotteryError):
    code = error_codes.ACCOUNT_BLOCKED


class AlreadyProcessed(LotteryError):
    code = error_codes.ALREADY_PROCESSED


class AlreadyProcessing(LotteryError):
    code = error_codes.ALREADY_PROCESSING


class MissingRateConfiguration(LotteryError):
    code = error_codes.MISSING_RATE


class PersistenceError(LotteryError):
    """Storage failure; the operation was not committed and may be retried."""

    code = error_codes.PERSISTENCE_ERROR
