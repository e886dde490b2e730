"""
Lottery and bet-type taxonomy.

This module is the single source of truth for which lottery types and bet
types exist, how many digits each bet type takes, and the default payout rate
seeded into the rate table.
"""

from dataclasses import dataclass

LOTTERY_TYPES = (
    "THAI_GOV",
    "THAI_STOCK",
    "STOCK_NIKKEI",
    "STOCK_DOW",
    "STOCK_FTSE",
    "STOCK_DAX",
    "LAO",
    "HANOI",
    "MALAYSIA",
    "SINGAPORE",
    "KENO",
)

LOTTERY_TYPE_NAMES = {
    "THAI_GOV": "Thai Government",
    "THAI_STOCK": "Thai Stock",
    "STOCK_NIKKEI": "Nikkei Stock",
    "STOCK_DOW": "Dow Jones Stock",
    "STOCK_FTSE": "FTSE Stock",
    "STOCK_DAX": "DAX Stock",
    "LAO": "Lao Lottery",
    "HANOI": "Hanoi Lottery",
    "MALAYSIA": "Malaysia Lottery",
    "SINGAPORE": "Singapore Lottery",
    "KENO": "Keno Lottery",
}


@dataclass(frozen=True)
class BetTypeRule:
    """Static facts about a bet type."""

    name: str
    digits: int
    default_rate: float
    label: str


BET_TYPE_RULES: dict[str, BetTypeRule] = {
    rule.name: rule
    for rule in (
        BetTypeRule("THREE_TOP", 3, 900, "3 Digits Straight"),
        BetTypeRule("THREE_TOOD", 3, 150, "3 Digits Tod"),
        BetTypeRule("THREE_FRONT", 3, 450, "3 Digits Front"),
        BetTypeRule("THREE_BOTTOM", 3, 450, "3 Digits Bottom"),
        BetTypeRule("THREE_REVERSE", 3, 4500, "3 Digits Reverse"),
        BetTypeRule("TWO_TOP", 2, 90, "2 Digits Top"),
        BetTypeRule("TWO_BOTTOM", 2, 90, "2 Digits Bottom"),
        BetTypeRule("RUN_TOP", 1, 3.2, "Run Top"),
        BetTypeRule("RUN_BOTTOM", 1, 4.2, "Run Bottom"),
    )
}

BET_TYPES = tuple(BET_TYPE_RULES)


def is_lottery_type(value: str) -> bool:
    return value in LOTTERY_TYPES


def get_bet_rule(bet_type: str) -> BetTypeRule | None:
    """Return the rule for a bet type, or None if the type is unknown."""
    return BET_TYPE_RULES.get(bet_type)
