"""
Tests for two-level affiliate commission and referral links.
"""

import logging

import pytest

from services import error_codes
from services.errors import PersistenceError, ValidationError


@pytest.fixture
def chain(make_user):
    """grandparent <- parent <- bettor referral chain."""
    grandparent = make_user("grandparent")
    parent = make_user("parent", referral_code=grandparent.referral_code)
    bettor = make_user("bettor", balance=5000, referral_code=parent.referral_code)
    return grandparent, parent, bettor


class TestDistribution:
    def test_two_levels_paid_on_wager(self, container, chain, bet_item):
        grandparent, parent, bettor = chain

        placed = container.betting_service.place_bets(
            bettor.id, [bet_item("TWO_TOP", "12", 600), bet_item("TWO_BOTTOM", "34", 400)]
        )

        assert [(c["level"], c["user_id"], c["amount"]) for c in placed["commissions"]] == [
            (1, parent.id, 100.0),
            (2, grandparent.id, 50.0),
        ]
        assert container.account_service.get_balance(parent.id) == 100
        assert container.account_service.get_balance(grandparent.id) == 50
        assert container.user_service.get_user(parent.id).affiliate_earnings == 100

        l1 = container.repos.transaction.get_by_reference(f"{placed['reference']}-L1")
        assert l1["type"] == "affiliate_commission"
        assert l1["source_user_id"] == bettor.id
        assert l1["level"] == 1

    def test_chain_of_one_pays_level_one_only(self, container, make_user):
        parent = make_user("parent")
        bettor = make_user("bettor", balance=1000, referral_code=parent.referral_code)

        credits = container.affiliate_service.distribute_commission(bettor.id, 1000, "BET-x")

        assert [c["level"] for c in credits] == [1]
        assert container.account_service.get_balance(parent.id) == 100

    def test_no_referrer_pays_nothing(self, container, make_user):
        bettor = make_user("bettor", balance=1000)
        assert container.affiliate_service.distribute_commission(bettor.id, 1000, "BET-x") == []

    def test_retry_with_same_reference_pays_once(self, container, chain):
        grandparent, parent, bettor = chain

        first = container.affiliate_service.distribute_commission(bettor.id, 1000, "BET-retry")
        second = container.affiliate_service.distribute_commission(bettor.id, 1000, "BET-retry")

        assert len(first) == 2
        assert second == []
        assert container.account_service.get_balance(parent.id) == 100
        assert container.account_service.get_balance(grandparent.id) == 50


    def test_commission_failure_keeps_committed_placement(self, container, chain, bet_item, monkeypatch, caplog):
        grandparent, parent, bettor = chain

        def failing_credit(**kwargs):
            raise PersistenceError("disk I/O error")

        monkeypatch.setattr(container.affiliate_service.transaction_repo, "adjust_balance_atomic", failing_credit)
        with caplog.at_level(logging.ERROR, logger="huay.services.betting"):
            placed = container.betting_service.place_bets(bettor.id, [bet_item("TWO_TOP", "12", 1000)])

        assert placed["commissions"] == []
        assert len(placed["bets"]) == 1
        assert container.account_service.get_balance(bettor.id) == 4000
        assert container.account_service.get_balance(parent.id) == 0
        assert placed["reference"] in caplog.text

        monkeypatch.undo()
        paid = container.affiliate_service.distribute_commission(bettor.id, 1000, placed["reference"])
        assert [c["level"] for c in paid] == [1, 2]
        assert container.account_service.get_balance(parent.id) == 100
        assert container.account_service.get_balance(grandparent.id) == 50


class TestReferralLinks:
    def test_unknown_code_rejected_at_registration(self, container):
        with pytest.raises(ValidationError) as exc_info:
            container.user_service.register("newbie", "secret123", "NOPE0000")
        assert exc_info.value.code == error_codes.INVALID_REFERRAL

    def test_cycle_is_rejected(self, container, chain):
        grandparent, _parent, bettor = chain
        with pytest.raises(ValidationError, match="cycle"):
            container.affiliate_service.assign_referrer(grandparent.id, bettor.referral_code)
        assert container.user_service.get_user(grandparent.id).referred_by is None

    def test_self_referral_is_rejected(self, container, make_user):
        user = make_user("loner")
        with pytest.raises(ValidationError):
            container.affiliate_service.assign_referrer(user.id, user.referral_code)

    def test_reassign_and_clear(self, container, make_user):
        a = make_user("aaa")
        b = make_user("bbb")
        user = make_user("ccc", referral_code=a.referral_code)

        moved = container.affiliate_service.assign_referrer(user.id, b.referral_code)
        assert moved.referred_by == b.referral_code
        cleared = container.affiliate_service.assign_referrer(user.id, None)
        assert cleared.referred_by is None


def test_summary_counts_both_levels(container, chain):
    grandparent, parent, bettor = chain
    container.affiliate_service.distribute_commission(bettor.id, 1000, "BET-sum")

    summary = container.affiliate_service.get_summary(grandparent.id)

    assert summary["direct_referrals"] == 1
    assert summary["second_level_referrals"] == 1
    assert summary["level1_commission"] == 0.0
    assert summary["level2_commission"] == 50.0
    assert summary["referrals"][0]["username"] == parent.username
