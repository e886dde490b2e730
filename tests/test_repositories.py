"""
Repository-level tests for the conditional updates the services rely on.
"""

import pytest

from domain.models.user import TX_ADJUSTMENT
from services.errors import ConflictError, InsufficientBalance, NotFoundError
from tests.conftest import DRAW_DATE, LOTTERY


@pytest.fixture
def user_id(user_repository):
    return user_repository.add("alice", "hash", "CODE0001")


class TestUserRepository:
    def test_add_and_lookup(self, user_repository, user_id):
        user = user_repository.get_by_id(user_id)
        assert user.username == "alice"
        assert user_repository.get_by_username("alice").id == user_id
        assert user_repository.get_by_referral_code("CODE0001").id == user_id
        assert user_repository.get_balance(user_id) == 0

    def test_unique_username(self, user_repository, user_id):
        with pytest.raises(ConflictError):
            user_repository.add("alice", "hash", "CODE0002")

    def test_referral_counts(self, user_repository, user_id):
        child = user_repository.add("bob", "hash", "CODE0002", "CODE0001")
        user_repository.add("carol", "hash", "CODE0003", "CODE0002")

        assert [u.id for u in user_repository.get_referrals("CODE0001")] == [child]
        assert user_repository.count_second_level_referrals("CODE0001") == 1
        assert user_repository.get_user_counts()["total"] == 3


class TestTransactionRepository:
    def test_debit_cannot_overdraw(self, transaction_repository, user_repository, user_id):
        transaction_repository.adjust_balance_atomic(
            user_id=user_id, delta=50, tx_type=TX_ADJUSTMENT, reference="R-1"
        )
        with pytest.raises(InsufficientBalance):
            transaction_repository.adjust_balance_atomic(
                user_id=user_id, delta=-60, tx_type=TX_ADJUSTMENT, reference="R-2"
            )
        assert user_repository.get_balance(user_id) == 50
        assert transaction_repository.get_by_reference("R-2") is None

    def test_reference_is_unique(self, transaction_repository, user_repository, user_id):
        transaction_repository.adjust_balance_atomic(
            user_id=user_id, delta=50, tx_type=TX_ADJUSTMENT, reference="R-1"
        )
        with pytest.raises(ConflictError):
            transaction_repository.adjust_balance_atomic(
                user_id=user_id, delta=50, tx_type=TX_ADJUSTMENT, reference="R-1"
            )
        assert user_repository.get_balance(user_id) == 50

    def test_unknown_user(self, transaction_repository):
        with pytest.raises(NotFoundError):
            transaction_repository.adjust_balance_atomic(
                user_id=999, delta=10, tx_type=TX_ADJUSTMENT, reference="R-9"
            )


class TestDrawResultClaim:
    @pytest.fixture
    def draw_id(self, draw_result_repository):
        return draw_result_repository.create(LOTTERY, DRAW_DATE, two_digit_bottom="56")

    def test_duplicate_draw(self, draw_result_repository, draw_id):
        with pytest.raises(ConflictError):
            draw_result_repository.create(LOTTERY, DRAW_DATE, two_digit_bottom="12")

    def test_claim_is_exclusive(self, draw_result_repository, draw_id):
        assert draw_result_repository.claim_for_processing(draw_id, "a", 1000, 100)
        assert not draw_result_repository.claim_for_processing(draw_id, "b", 1001, 101)
        assert draw_result_repository.get(draw_id).status == "processing"

    def test_stale_claim_can_be_taken_over(self, draw_result_repository, draw_id):
        assert draw_result_repository.claim_for_processing(draw_id, "a", 1000, 100)
        assert draw_result_repository.claim_for_processing(draw_id, "b", 5000, 4000)
        # The original holder lost its claim and cannot finish
        assert not draw_result_repository.mark_processed(draw_id, "a", 5001, 0, 0)
        assert draw_result_repository.mark_processed(draw_id, "b", 5001, 0, 0)

    def test_processed_draw_cannot_be_claimed(self, draw_result_repository, draw_id):
        draw_result_repository.claim_for_processing(draw_id, "a", 1000, 100)
        draw_result_repository.mark_processed(draw_id, "a", 1001, 2, 180.0)

        stored = draw_result_repository.get(draw_id)
        assert stored.is_processed
        assert stored.total_winners == 2
        assert not draw_result_repository.claim_for_processing(draw_id, "b", 10**9, 10**9)

    def test_release_returns_to_unprocessed(self, draw_result_repository, draw_id):
        draw_result_repository.claim_for_processing(draw_id, "a", 1000, 100)
        assert not draw_result_repository.release_claim(draw_id, "wrong")
        assert draw_result_repository.release_claim(draw_id, "a")
        assert draw_result_repository.get(draw_id).status == "unprocessed"
        assert draw_result_repository.claim_for_processing(draw_id, "b", 1002, 102)


class TestPayoutRateRepository:
    def test_seeded_and_upsert(self, payout_rate_repository):
        assert payout_rate_repository.get_rate("THREE_TOP")["rate"] == 900
        payout_rate_repository.set_rate("THREE_TOP", 850)
        assert payout_rate_repository.get_rate("THREE_TOP")["rate"] == 850
        assert payout_rate_repository.delete("THREE_TOP")
        assert payout_rate_repository.get_rate("THREE_TOP") is None
        payout_rate_repository.set_rate("THREE_TOP", 800)
        assert payout_rate_repository.get_rate("THREE_TOP")["is_enabled"]
