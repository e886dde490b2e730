"""
Tests for recording draw results and reading them back.
"""

import pytest

from services import error_codes
from services.errors import ConflictError, NotFoundError, ValidationError
from tests.conftest import DRAW_DATE, LOTTERY


def test_create_cleans_numbers(container):
    draw = container.draw_result_service.create_result(
        LOTTERY, DRAW_DATE, first_prize="123456", three_digit_bottom="123, 456", two_digit_bottom="56"
    )
    assert draw.three_digit_bottom == "123,456"
    assert draw.three_bottom_numbers() == ["123", "456"]
    assert draw.status == "unprocessed"
    assert not draw.is_processed


@pytest.mark.parametrize(
    "numbers",
    [
        {},
        {"two_digit_bottom": "5"},
        {"three_digit_top": "12"},
        {"three_digit_front": "123,45"},
        {"first_prize": "12a456"},
        {"two_digit_bottom": "٥٦"},
        {"bonus": "1"},
    ],
)
def test_create_rejects_bad_numbers(container, numbers):
    with pytest.raises(ValidationError):
        container.draw_result_service.create_result(LOTTERY, DRAW_DATE, **numbers)


def test_create_rejects_bad_keys(container):
    with pytest.raises(ValidationError):
        container.draw_result_service.create_result("MARS", DRAW_DATE, two_digit_bottom="56")
    with pytest.raises(ValidationError):
        container.draw_result_service.create_result(LOTTERY, "2024-13-01", two_digit_bottom="56")


def test_one_result_per_draw(container):
    container.draw_result_service.create_result(LOTTERY, DRAW_DATE, two_digit_bottom="56")
    with pytest.raises(ConflictError) as exc_info:
        container.draw_result_service.create_result(LOTTERY, DRAW_DATE, two_digit_bottom="12")
    assert exc_info.value.code == error_codes.DRAW_ALREADY_EXISTS


def test_latest_and_listing(container):
    container.draw_result_service.create_result(LOTTERY, "2024-01-01", two_digit_bottom="11")
    newest = container.draw_result_service.create_result(LOTTERY, "2024-01-16", two_digit_bottom="22")
    container.draw_result_service.create_result("LAO", "2024-01-20", two_digit_bottom="33")

    assert container.draw_result_service.get_latest(LOTTERY).id == newest.id
    assert len(container.draw_result_service.list_results(LOTTERY)) == 2
    assert container.draw_result_service.list_results(processed_only=True) == []
    with pytest.raises(NotFoundError):
        container.draw_result_service.get_latest("HANOI")


def test_winners_before_settlement(container):
    container.draw_result_service.create_result(LOTTERY, DRAW_DATE, two_digit_bottom="56")
    winners = container.draw_result_service.get_winners(LOTTERY, DRAW_DATE)
    assert winners["total_winners"] == 0
    assert winners["draw"]["two_digit_bottom"] == "56"
    with pytest.raises(NotFoundError):
        container.draw_result_service.get_winners(LOTTERY, "2030-01-01")
