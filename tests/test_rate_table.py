"""
Tests for the payout rate table.
"""

import pytest

from domain.models.lottery import BET_TYPE_RULES
from services.errors import MissingRateConfiguration, NotFoundError, ValidationError
from services.rate_table_service import RateTableService


@pytest.fixture
def rate_service(payout_rate_repository):
    return RateTableService(payout_rate_repository)


class TestDefaults:
    def test_every_bet_type_has_positive_seeded_rate(self, rate_service):
        for bet_type, rule in BET_TYPE_RULES.items():
            rate = rate_service.get_rate(bet_type)
            assert rate > 0
            assert rate == pytest.approx(rule.default_rate)

    def test_list_rates_includes_digits_and_label(self, rate_service):
        rates = {r["bet_type"]: r for r in rate_service.list_rates()}
        assert set(rates) == set(BET_TYPE_RULES)
        assert rates["TWO_BOTTOM"]["digits"] == 2
        assert rates["RUN_TOP"]["is_enabled"] is True


class TestMissingRate:
    def test_missing_rate_raises_instead_of_defaulting(self, rate_service, payout_rate_repository):
        payout_rate_repository.delete("TWO_TOP")
        with pytest.raises(MissingRateConfiguration, match="TWO_TOP"):
            rate_service.get_rate("TWO_TOP")

    def test_unknown_type_raises(self, rate_service):
        with pytest.raises(MissingRateConfiguration):
            rate_service.get_rate("FIVE_TOP")


class TestEdits:
    def test_update_rate(self, rate_service):
        row = rate_service.update_rate("TWO_BOTTOM", 95)
        assert row["rate"] == 95
        assert rate_service.get_rate("TWO_BOTTOM") == 95

    def test_update_rejects_non_positive(self, rate_service):
        with pytest.raises(ValidationError, match="positive"):
            rate_service.update_rate("TWO_BOTTOM", 0)

    def test_update_rejects_unknown_type(self, rate_service):
        with pytest.raises(ValidationError, match="Unknown bet type"):
            rate_service.update_rate("FOUR_TOP", 10)

    def test_disable_and_enable(self, rate_service):
        assert rate_service.set_enabled("RUN_TOP", False)["is_enabled"] is False
        assert rate_service.set_enabled("RUN_TOP", True)["is_enabled"] is True

    def test_toggle_unknown_type_raises(self, rate_service):
        with pytest.raises(NotFoundError):
            rate_service.set_enabled("FOUR_TOP", False)
