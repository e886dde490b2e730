"""
Standard error codes for service layer.

These error codes allow the HTTP layer to programmatically handle
specific error conditions without parsing error message text.

Usage:
    from services import error_codes
    from services.errors import InsufficientBalance

    raise InsufficientBalance("Insufficient balance")  # .code == INSUFFICIENT_BALANCE
"""

# General errors
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
CONFLICT = "conflict"
PERMISSION_DENIED = "permission_denied"
PERSISTENCE_ERROR = "persistence_error"

# Account errors
USER_NOT_FOUND = "user_not_found"
USERNAME_TAKEN = "username_taken"
INVALID_CREDENTIALS = "invalid_credentials"
ACCOUNT_BLOCKED = "account_blocked"
INVALID_REFERRAL = "invalid_referral"
TRANSACTION_NOT_FOUND = "transaction_not_found"
ALREADY_REVIEWED = "already_reviewed"

# Economy/betting errors
INSUFFICIENT_BALANCE = "insufficient_balance"
BLOCKED_NUMBER = "blocked_number"
LIMIT_EXCEEDED = "limit_exceeded"
BETTING_CLOSED = "betting_closed"
BET_TYPE_DISABLED = "bet_type_disabled"
BET_NOT_FOUND = "bet_not_found"

# Settlement errors
DRAW_NOT_FOUND = "draw_not_found"
DRAW_ALREADY_EXISTS = "draw_already_exists"
ALREADY_PROCESSED = "already_processed"
ALREADY_PROCESSING = "already_processing"
MISSING_RATE = "missing_rate_configuration"
