"""
Tests for balance adjustments and the deposit/withdrawal review queue.
"""

import pytest

from services import error_codes
from services.errors import (
    AccountBlocked,
    ConflictError,
    InsufficientBalance,
    NotFoundError,
    ValidationError,
)


class TestAdjustBalance:
    def test_adjustment_writes_transaction(self, container, make_user):
        user = make_user("alice", balance=100)
        tx = container.account_service.adjust_balance(user.id, 25.5, note="promo")

        assert tx["type"] == "adjustment"
        assert tx["status"] == "approved"
        assert tx["amount"] == 25.5
        assert tx["balance_after"] == 125.5
        assert container.account_service.get_balance(user.id) == 125.5

    def test_overdraw_is_refused(self, container, make_user):
        user = make_user("alice", balance=100)
        with pytest.raises(InsufficientBalance):
            container.account_service.adjust_balance(user.id, -150)
        assert container.account_service.get_balance(user.id) == 100
        assert len(container.account_service.list_transactions(user.id)) == 1

    def test_zero_and_unknown_type(self, container, make_user):
        user = make_user("alice")
        with pytest.raises(ValidationError):
            container.account_service.adjust_balance(user.id, 0)
        with pytest.raises(ValidationError):
            container.account_service.adjust_balance(user.id, 10, transaction_type="gift")

    @pytest.mark.parametrize("delta", [float("inf"), float("-inf"), float("nan"), "nan"])
    def test_non_finite_delta_is_refused(self, container, make_user, delta):
        user = make_user("alice", balance=100)
        with pytest.raises(ValidationError):
            container.account_service.adjust_balance(user.id, delta)
        assert container.account_service.get_balance(user.id) == 100

    def test_duplicate_reference(self, container, make_user):
        user = make_user("alice")
        container.account_service.adjust_balance(user.id, 10, reference="ADJ-fixed")
        with pytest.raises(ConflictError):
            container.account_service.adjust_balance(user.id, 10, reference="ADJ-fixed")
        assert container.account_service.get_balance(user.id) == 10

    def test_unknown_user(self, container):
        with pytest.raises(NotFoundError):
            container.account_service.adjust_balance(999, 10)


class TestDeposits:
    def test_approve_credits_balance(self, container, make_user, notifier):
        user = make_user("alice")
        tx = container.account_service.request_deposit(user.id, 500, "https://slips.example/1.png")
        assert tx["status"] == "pending"
        assert tx["reference"].startswith("DEP-")
        assert container.account_service.get_balance(user.id) == 0

        approved = container.account_service.approve_transaction(tx["id"])

        assert approved["status"] == "approved"
        assert approved["reviewed_at"] is not None
        assert container.account_service.get_balance(user.id) == 500
        assert notifier.names() == ["deposit_requested", "transaction_approved"]

    def test_reject_leaves_balance(self, container, make_user):
        user = make_user("alice")
        tx = container.account_service.request_deposit(user.id, 500)
        rejected = container.account_service.reject_transaction(tx["id"])
        assert rejected["status"] == "rejected"
        assert container.account_service.get_balance(user.id) == 0

    def test_double_review_conflicts(self, container, make_user):
        user = make_user("alice")
        tx = container.account_service.request_deposit(user.id, 500)
        container.account_service.approve_transaction(tx["id"])

        with pytest.raises(ConflictError) as exc_info:
            container.account_service.approve_transaction(tx["id"])
        assert exc_info.value.code == error_codes.ALREADY_REVIEWED
        with pytest.raises(ConflictError):
            container.account_service.reject_transaction(tx["id"])
        assert container.account_service.get_balance(user.id) == 500

    def test_non_positive_amount(self, container, make_user):
        user = make_user("alice")
        with pytest.raises(ValidationError):
            container.account_service.request_deposit(user.id, -5)

    @pytest.mark.parametrize("amount", ["inf", "nan", float("inf"), float("nan")])
    def test_non_finite_amount(self, container, make_user, amount):
        user = make_user("alice", balance=100)
        with pytest.raises(ValidationError):
            container.account_service.request_deposit(user.id, amount)
        with pytest.raises(ValidationError):
            container.account_service.request_withdrawal(user.id, amount)
        assert container.account_service.list_pending() == []
        assert container.account_service.get_balance(user.id) == 100

    def test_ledger_entries_are_not_reviewable(self, container, make_user):
        user = make_user("alice")
        tx = container.account_service.adjust_balance(user.id, 10)
        with pytest.raises(ValidationError):
            container.account_service.approve_transaction(tx["id"])

    def test_unknown_transaction(self, container):
        with pytest.raises(NotFoundError) as exc_info:
            container.account_service.approve_transaction(12345)
        assert exc_info.value.code == error_codes.TRANSACTION_NOT_FOUND


class TestWithdrawals:
    def test_approve_debits_balance(self, container, make_user):
        user = make_user("alice", balance=300)
        tx = container.account_service.request_withdrawal(user.id, 200)
        assert tx["amount"] == -200
        assert container.account_service.get_balance(user.id) == 300

        container.account_service.approve_transaction(tx["id"])
        assert container.account_service.get_balance(user.id) == 100

    def test_request_above_balance_is_refused(self, container, make_user):
        user = make_user("alice", balance=100)
        with pytest.raises(InsufficientBalance):
            container.account_service.request_withdrawal(user.id, 200)
        assert container.account_service.list_pending() == []

    def test_overdraw_at_approval_stays_pending(self, container, make_user, bet_item):
        user = make_user("alice", balance=100)
        tx = container.account_service.request_withdrawal(user.id, 100)
        container.betting_service.place_bets(user.id, [bet_item("TWO_TOP", "12", 50)])

        with pytest.raises(InsufficientBalance):
            container.account_service.approve_transaction(tx["id"])

        assert container.repos.transaction.get(tx["id"])["status"] == "pending"
        assert container.account_service.get_balance(user.id) == 50

    def test_blocked_account_cannot_withdraw(self, container, make_user):
        user = make_user("alice", balance=100)
        container.user_service.set_blocked(user.id, True)
        with pytest.raises(AccountBlocked):
            container.account_service.request_withdrawal(user.id, 50)


def test_list_pending_across_users(container, make_user):
    alice = make_user("alice", balance=100)
    bob = make_user("bob")
    container.account_service.request_withdrawal(alice.id, 50)
    container.account_service.request_deposit(bob.id, 20)

    pending = container.account_service.list_pending()

    assert [p["user_id"] for p in pending] == [alice.id, bob.id]
