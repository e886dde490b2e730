"""
Shared formatting helpers for amounts, bets and lottery names.
"""

from collections.abc import Iterable

from domain.models.lottery import BET_TYPE_RULES, LOTTERY_TYPE_NAMES

CURRENCY_SYMBOL = "฿"

# Visual marker per notification event
EVENT_EMOJIS = {
    "deposit_requested": "💰",
    "withdrawal_requested": "🏧",
    "bet_placed": "🎫",
    "transaction_approved": "✅",
    "transaction_rejected": "❌",
    "draw_settled": "🏆",
}


def format_amount(amount: float) -> str:
    """Return amount with currency symbol and thousands separators (e.g., '฿1,234.50')."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def format_lottery_name(lottery_type: str) -> str:
    return LOTTERY_TYPE_NAMES.get(lottery_type, lottery_type)


def format_bet_type(bet_type: str) -> str:
    rule = BET_TYPE_RULES.get(bet_type)
    return rule.label if rule else bet_type


def format_bet_line(bet) -> str:
    """One bet as '2 Digits Bottom 56 x ฿100.00'."""
    return f"{format_bet_type(bet.bet_type)} {bet.numbers} x {format_amount(bet.amount)}"


def format_bet_lines(bets: Iterable, limit: int = 10) -> str:
    """Newline-joined bet lines, truncated with a '+N more' tail."""
    bets = list(bets)
    lines = [format_bet_line(b) for b in bets[:limit]]
    if len(bets) > limit:
        lines.append(f"+{len(bets) - limit} more")
    return "\n".join(lines)


def format_event_title(event: str) -> str:
    emoji = EVENT_EMOJIS.get(event, "")
    return f"{emoji} {event.replace('_', ' ').title()}".strip()
