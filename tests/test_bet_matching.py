"""
Tests for the pure bet matching rules.
"""

import pytest

from domain.models.draw_result import DrawResult
from domain.services.bet_matching_service import BetMatchingService, digit_permutations


@pytest.fixture
def matcher():
    return BetMatchingService()


@pytest.fixture
def draw():
    return DrawResult(
        id=1,
        lottery_type="THAI_GOV",
        draw_date="2024-01-01",
        first_prize="123456",
        three_digit_front="741,852",
        three_digit_bottom="369,258",
        two_digit_bottom="56",
    )


class TestStraightTypes:
    def test_three_top_falls_back_to_first_prize(self, matcher, draw):
        outcome = matcher.match("THREE_TOP", "456", draw)
        assert outcome.won
        assert outcome.matched_number == "456"

    def test_three_top_requires_exact_order(self, matcher, draw):
        assert not matcher.match("THREE_TOP", "654", draw).won

    def test_three_front_matches_any_listed_number(self, matcher, draw):
        assert matcher.match("THREE_FRONT", "852", draw).won
        assert not matcher.match("THREE_FRONT", "123", draw).won

    def test_three_front_falls_back_to_first_prize(self, matcher):
        draw = DrawResult(id=2, lottery_type="LAO", draw_date="2024-01-01", first_prize="987654")
        assert matcher.match("THREE_FRONT", "987", draw).won

    def test_three_bottom_has_no_fallback(self, matcher):
        draw = DrawResult(id=2, lottery_type="LAO", draw_date="2024-01-01", first_prize="987654")
        assert not matcher.match("THREE_BOTTOM", "654", draw).won

    def test_two_bottom_exact(self, matcher, draw):
        assert matcher.match("TWO_BOTTOM", "56", draw).won
        assert not matcher.match("TWO_BOTTOM", "65", draw).won

    def test_two_top_falls_back_to_last_two_digits(self, matcher, draw):
        assert matcher.match("TWO_TOP", "56", draw).won
        assert not matcher.match("TWO_TOP", "45", draw).won

    def test_explicit_two_top_wins_over_fallback(self, matcher):
        draw = DrawResult(
            id=3, lottery_type="HANOI", draw_date="2024-01-01", first_prize="123456", two_digit_top="11"
        )
        assert matcher.match("TWO_TOP", "11", draw).won
        assert not matcher.match("TWO_TOP", "56", draw).won


class TestPermutationTypes:
    """Tod and reverse accept any digit order; straight does not."""

    def test_tood_wins_on_permutation_of_top(self, matcher):
        draw = DrawResult(id=1, lottery_type="THAI_GOV", draw_date="2024-01-01", three_digit_top="231")
        outcome = matcher.match("THREE_TOOD", "123", draw)
        assert outcome.won
        assert outcome.matched_number == "231"
        assert not matcher.match("THREE_TOP", "123", draw).won

    def test_tood_also_checks_bottom(self, matcher, draw):
        assert matcher.match("THREE_TOOD", "963", draw).won

    def test_tood_respects_repeated_digits(self, matcher):
        draw = DrawResult(id=1, lottery_type="THAI_GOV", draw_date="2024-01-01", three_digit_top="112")
        assert matcher.match("THREE_TOOD", "211", draw).won
        assert not matcher.match("THREE_TOOD", "122", draw).won

    def test_reverse_wins_on_permutation(self, matcher):
        draw = DrawResult(id=1, lottery_type="THAI_GOV", draw_date="2024-01-01", three_digit_top="231")
        outcome = matcher.match("THREE_REVERSE", "123", draw)
        assert outcome.won
        assert outcome.matched_number == "231"

    def test_reverse_loses_on_different_digits(self, matcher):
        draw = DrawResult(id=1, lottery_type="THAI_GOV", draw_date="2024-01-01", three_digit_top="231")
        assert not matcher.match("THREE_REVERSE", "124", draw).won

    def test_digit_permutations_deduplicates(self):
        assert digit_permutations("112") == {"112", "121", "211"}
        assert len(digit_permutations("123")) == 6


class TestRunTypes:
    def test_run_top_digit_anywhere_in_first_prize(self, matcher, draw):
        assert matcher.match("RUN_TOP", "1", draw).won
        assert matcher.match("RUN_TOP", "6", draw).won
        assert not matcher.match("RUN_TOP", "9", draw).won

    def test_run_bottom_digit_in_two_bottom(self, matcher, draw):
        outcome = matcher.match("RUN_BOTTOM", "5", draw)
        assert outcome.won
        assert outcome.matched_number == "5"
        assert not matcher.match("RUN_BOTTOM", "1", draw).won

    def test_run_bottom_without_two_bottom_loses(self, matcher):
        draw = DrawResult(id=1, lottery_type="THAI_GOV", draw_date="2024-01-01", first_prize="123456")
        assert not matcher.match("RUN_BOTTOM", "5", draw).won


def test_unknown_bet_type_raises(matcher, draw):
    assert not matcher.supports("FOUR_TOP")
    with pytest.raises(ValueError, match="No matching rule"):
        matcher.match("FOUR_TOP", "1234", draw)
