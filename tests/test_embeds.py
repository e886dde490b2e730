"""
Tests for embed utilities.
"""

from types import SimpleNamespace

import discord

from domain.models.bet import Bet
from services.settlement_service import SettlementSummary
from utils.embeds import create_bet_embed, create_settlement_embed, create_transaction_embed


def _bet(numbers="56", amount=100.0):
    return Bet(
        id=1,
        user_id=1,
        lottery_type="THAI_GOV",
        bet_type="TWO_BOTTOM",
        numbers=numbers,
        amount=amount,
        rate=90,
        potential_win=amount * 90,
        status="pending",
        draw_date="2024-01-01",
    )


def _fields(embed):
    return {field.name: field.value for field in embed.fields}


class TestTransactionEmbed:
    def test_deposit_request_fields(self):
        tx = {"amount": 1500.0, "reference": "DEP-1", "status": "pending", "slip_url": "https://x/s.png"}

        embed = create_transaction_embed("deposit_requested", "alice", tx)

        fields = _fields(embed)
        assert "Deposit Requested" in embed.title
        assert fields["User"] == "alice"
        assert fields["Amount"] == "฿1,500.00"
        assert fields["Slip"] == "https://x/s.png"
        assert embed.color == discord.Color.green()

    def test_withdrawal_amount_is_negative(self):
        tx = {"amount": -200.0, "reference": "WDR-1", "status": "pending"}
        embed = create_transaction_embed("withdrawal_requested", "alice", tx)
        assert _fields(embed)["Amount"] == "-฿200.00"
        assert "Slip" not in _fields(embed)


class TestBetEmbed:
    def test_lists_bets(self):
        embed = create_bet_embed("alice", [_bet("56"), _bet("12", 50)], 150)

        fields = _fields(embed)
        assert fields["Lottery"] == "Thai Government"
        assert fields["Total"] == "฿150.00"
        assert fields["Bets (2)"].splitlines() == [
            "2 Digits Bottom 56 x ฿100.00",
            "2 Digits Bottom 12 x ฿50.00",
        ]

    def test_long_slips_are_truncated(self):
        bets = [_bet(f"{i:02d}", 1) for i in range(15)]
        embed = create_bet_embed("alice", bets, 15)
        lines = _fields(embed)["Bets (15)"].splitlines()
        assert len(lines) == 11
        assert lines[-1] == "+5 more"


def test_settlement_embed():
    draw = SimpleNamespace(lottery_type="LAO", draw_date="2024-01-01")
    summary = SettlementSummary(
        draw_id=1, lottery_type="LAO", draw_date="2024-01-01",
        won_count=2, lost_count=5, error_count=0, total_payout=9900.0,
    )

    embed = create_settlement_embed(draw, summary)

    fields = _fields(embed)
    assert fields["Lottery"] == "Lao Lottery"
    assert fields["Won"] == "2"
    assert fields["Errors"] == "0"
    assert fields["Payout"] == "฿9,900.00"
