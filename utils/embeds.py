"""
Discord embed builders for back-office notifications.
"""

import discord

from utils.formatting import format_amount, format_bet_lines, format_event_title, format_lottery_name

_EVENT_COLORS = {
    "deposit_requested": discord.Color.green,
    "withdrawal_requested": discord.Color.orange,
    "bet_placed": discord.Color.blue,
    "transaction_approved": discord.Color.dark_green,
    "transaction_rejected": discord.Color.red,
    "draw_settled": discord.Color.gold,
}


def create_event_embed(event: str, fields: dict) -> discord.Embed:
    """Generic embed: one inline field per key, in insertion order."""
    color = _EVENT_COLORS.get(event, discord.Color.light_grey)()
    embed = discord.Embed(title=format_event_title(event), color=color)
    for name, value in fields.items():
        if value is None or value == "":
            continue
        embed.add_field(name=name.replace("_", " ").title(), value=str(value), inline=True)
    return embed


def create_transaction_embed(event: str, username: str, transaction: dict) -> discord.Embed:
    """Embed for deposit/withdrawal requests and their review outcome."""
    embed = create_event_embed(
        event,
        {
            "user": username,
            "amount": format_amount(transaction["amount"]),
            "reference": transaction["reference"],
            "status": transaction["status"],
        },
    )
    if transaction.get("slip_url"):
        embed.add_field(name="Slip", value=transaction["slip_url"], inline=False)
    return embed


def create_bet_embed(username: str, bets: list, total: float) -> discord.Embed:
    first = bets[0]
    embed = create_event_embed(
        "bet_placed",
        {
            "user": username,
            "lottery": format_lottery_name(first.lottery_type),
            "draw_date": first.draw_date,
            "total": format_amount(total),
        },
    )
    embed.add_field(name=f"Bets ({len(bets)})", value=format_bet_lines(bets), inline=False)
    return embed


def create_settlement_embed(draw, summary) -> discord.Embed:
    return create_event_embed(
        "draw_settled",
        {
            "lottery": format_lottery_name(draw.lottery_type),
            "draw_date": draw.draw_date,
            "won": summary.won_count,
            "lost": summary.lost_count,
            "errors": summary.error_count,
            "payout": format_amount(summary.total_payout),
        },
    )
