"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
Concrete services are imported from their own modules; this package only
re-exports the error taxonomy so repositories can depend on it without
pulling in the service graph.
"""

from services import error_codes
from services.errors import (
    AccountBlocked,
    AlreadyProcessed,
    AlreadyProcessing,
    BettingClosed,
    BlockedNumberError,
    ConflictError,
    InsufficientBalance,
    LimitExceeded,
    LotteryError,
    MissingRateConfiguration,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "error_codes",
    "LotteryError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InsufficientBalance",
    "BlockedNumberError",
    "LimitExceeded",
    "BettingClosed",
    "AccountBlocked",
    "AlreadyProcessed",
    "AlreadyProcessing",
    "MissingRateConfiguration",
    "PersistenceError",
]
