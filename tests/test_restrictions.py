"""
Tests for blocked-number and bet-limit administration.
"""

import pytest

from services.errors import NotFoundError, ValidationError
from tests.conftest import LOTTERY


class TestBlockedNumbers:
    def test_block_and_list(self, container):
        created = container.restriction_service.block_number(LOTTERY, "123")
        assert created["number"] == "123"
        assert created["bet_type"] is None
        assert created["is_active"] is True

        assert [b["id"] for b in container.restriction_service.list_blocked_numbers()] == [created["id"]]
        assert container.restriction_service.list_blocked_numbers("LAO") == []

    def test_in_force_listing_skips_scheduled_and_inactive(self, container):
        now = container.restriction_service.block_number(LOTTERY, "11")
        container.restriction_service.block_number(LOTTERY, "22", start_date="2999-01-01")
        off = container.restriction_service.block_number(LOTTERY, "33")
        container.restriction_service.set_blocked_active(off["id"], False)

        in_force = container.restriction_service.list_blocked_numbers(in_force_only=True)

        assert [b["id"] for b in in_force] == [now["id"]]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"lottery_type": "MARS", "number": "12"},
            {"lottery_type": LOTTERY, "number": "1234"},
            {"lottery_type": LOTTERY, "number": "1a"},
            {"lottery_type": LOTTERY, "number": "１２３"},
            {"lottery_type": LOTTERY, "number": "12", "bet_type": "FOUR_TOP"},
            {"lottery_type": LOTTERY, "number": "12", "start_date": "2024-02-01", "end_date": "2024-01-01"},
            {"lottery_type": LOTTERY, "number": "12", "start_date": "01/02/2024"},
        ],
    )
    def test_invalid_block(self, container, kwargs):
        with pytest.raises(ValidationError):
            container.restriction_service.block_number(**kwargs)

    def test_delete(self, container):
        created = container.restriction_service.block_number(LOTTERY, "12")
        container.restriction_service.delete_blocked_number(created["id"])
        assert container.restriction_service.list_blocked_numbers() == []
        with pytest.raises(NotFoundError):
            container.restriction_service.delete_blocked_number(created["id"])
        with pytest.raises(NotFoundError):
            container.restriction_service.set_blocked_active(created["id"], True)


class TestBetLimits:
    def test_add_with_lottery_scope(self, container):
        limit = container.restriction_service.add_limit("12", 1000, lottery_types=["LAO", "HANOI", "LAO"])
        assert limit["lottery_types"] == ["LAO", "HANOI"]
        assert limit["max_amount"] == 1000
        assert limit["is_active"] is True

    def test_toggle_and_delete(self, container):
        limit = container.restriction_service.add_limit("12", 1000)
        assert container.restriction_service.set_limit_active(limit["id"], False)["is_active"] is False

        container.restriction_service.delete_limit(limit["id"])
        assert container.restriction_service.list_limits() == []
        with pytest.raises(NotFoundError):
            container.restriction_service.delete_limit(limit["id"])

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"number": "12", "max_amount": 0},
            {"number": "12", "max_amount": "lots"},
            {"number": "", "max_amount": 10},
            {"number": "12", "max_amount": 10, "lottery_types": ["MARS"]},
        ],
    )
    def test_invalid_limit(self, container, kwargs):
        with pytest.raises(ValidationError):
            container.restriction_service.add_limit(**kwargs)
