"""
Domain models - pure data structures representing business entities.
"""

from domain.models.bet import Bet, BetItem
from domain.models.draw_result import DrawResult
from domain.models.lottery import BET_TYPE_RULES, BET_TYPES, LOTTERY_TYPES, BetTypeRule
from domain.models.user import User

__all__ = [
    "Bet",
    "BetItem",
    "BetTypeRule",
    "BET_TYPE_RULES",
    "BET_TYPES",
    "DrawResult",
    "LOTTERY_TYPES",
    "User",
]
