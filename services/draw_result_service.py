"""
Draw result entry and result read models.
"""

import logging

from domain.models.draw_result import DrawResult
from domain.models.lottery import is_lottery_type
from repositories.bet_repository import BetRepository
from repositories.draw_result_repository import DrawResultRepository
from services import error_codes
from services.errors import NotFoundError, ValidationError
from utils.clock import parse_draw_date

logger = logging.getLogger("huay.services.results")

# Expected digit count per field; three-digit fields accept comma-separated lists
_FIELD_DIGITS = {
    "first_prize": None,
    "three_digit_front": 3,
    "three_digit_top": 3,
    "three_digit_bottom": 3,
    "two_digit_top": 2,
    "two_digit_bottom": 2,
    "run_top": None,
    "run_bottom": None,
}


def _clean_field(name: str, raw) -> str | None:
    if raw is None:
        return None
    value = str(raw).replace(" ", "")
    if not value:
        return None
    digits = _FIELD_DIGITS[name]
    parts = value.split(",") if digits == 3 else [value]
    for part in parts:
        if not (part.isascii() and part.isdigit()) or (digits is not None and len(part) != digits):
            expected = f"{digits} digits" if digits else "digits only"
            raise ValidationError(f"{name} must be {expected}, got '{raw}'.")
    return ",".join(parts)


class DrawResultService:
    def __init__(self, draw_repo: DrawResultRepository, bet_repo: BetRepository):
        self.draw_repo = draw_repo
        self.bet_repo = bet_repo

    def create_result(self, lottery_type: str, draw_date: str, **numbers) -> DrawResult:
        """
        Record announced numbers for a draw. Recording a result closes betting
        on that draw.

        Raises:
            ValidationError: unknown lottery type, bad date, malformed numbers
            ConflictError: a result for the draw already exists
        """
        if not is_lottery_type(lottery_type or ""):
            raise ValidationError(f"Unknown lottery type: {lottery_type}")
        try:
            draw_date = parse_draw_date(draw_date or "")
        except ValueError:
            raise ValidationError(f"Invalid draw date: {draw_date}") from None

        unknown = set(numbers) - set(_FIELD_DIGITS)
        if unknown:
            raise ValidationError(f"Unknown result fields: {', '.join(sorted(unknown))}")
        cleaned = {name: _clean_field(name, numbers.get(name)) for name in _FIELD_DIGITS}
        if not any(cleaned.values()):
            raise ValidationError("A draw result needs at least one winning number.")

        draw_id = self.draw_repo.create(lottery_type, draw_date, **cleaned)
        logger.info(f"Recorded result {draw_id} for {lottery_type} {draw_date}")
        return self.draw_repo.get(draw_id)

    def get_result(self, draw_id: int) -> DrawResult:
        draw = self.draw_repo.get(draw_id)
        if draw is None:
            raise NotFoundError(f"Draw result {draw_id} not found.", code=error_codes.DRAW_NOT_FOUND)
        return draw

    def list_results(
        self, lottery_type: str | None = None, processed_only: bool = False, limit: int = 50
    ) -> list[DrawResult]:
        return self.draw_repo.list_results(lottery_type, processed_only, limit)

    def get_latest(self, lottery_type: str) -> DrawResult:
        draw = self.draw_repo.get_latest(lottery_type)
        if draw is None:
            raise NotFoundError(
                f"No results recorded for {lottery_type}.", code=error_codes.DRAW_NOT_FOUND
            )
        return draw

    def get_winners(self, lottery_type: str, draw_date: str) -> dict:
        draw = self.draw_repo.get_by_draw(lottery_type, draw_date)
        if draw is None:
            raise NotFoundError(
                f"No result recorded for {lottery_type} on {draw_date}.",
                code=error_codes.DRAW_NOT_FOUND,
            )
        winners = self.bet_repo.get_winning_bets(lottery_type, draw_date)
        return {
            "draw": draw.to_dict(),
            "winners": winners,
            "total_winners": len(winners),
            "total_payout": round(sum(w["win_amount"] or 0 for w in winners), 2),
        }
