"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.bet_limit_repository import BetLimitRepository
from repositories.bet_repository import BetRepository
from repositories.blocked_number_repository import BlockedNumberRepository
from repositories.draw_result_repository import DrawResultRepository
from repositories.interfaces import (
    IBetLimitRepository,
    IBetRepository,
    IBlockedNumberRepository,
    IDrawResultRepository,
    IPayoutRateRepository,
    ITransactionRepository,
    IUserRepository,
)
from repositories.payout_rate_repository import PayoutRateRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "TransactionRepository",
    "BetRepository",
    "DrawResultRepository",
    "PayoutRateRepository",
    "BlockedNumberRepository",
    "BetLimitRepository",
    "IUserRepository",
    "ITransactionRepository",
    "IBetRepository",
    "IDrawResultRepository",
    "IPayoutRateRepository",
    "IBlockedNumberRepository",
    "IBetLimitRepository",
]
