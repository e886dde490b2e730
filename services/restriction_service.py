"""
Admin management of blocked numbers and per-number stake limits.
"""

import logging

from domain.models.lottery import BET_TYPE_RULES, is_lottery_type
from repositories.bet_limit_repository import BetLimitRepository
from repositories.blocked_number_repository import BlockedNumberRepository
from services.errors import NotFoundError, ValidationError
from utils.clock import parse_draw_date, today_iso

logger = logging.getLogger("huay.services.restrictions")


def _clean_window(start_date: str | None, end_date: str | None) -> tuple[str | None, str | None]:
    try:
        start = parse_draw_date(start_date) if start_date else None
        end = parse_draw_date(end_date) if end_date else None
    except ValueError:
        raise ValidationError("Schedule dates must be YYYY-MM-DD.") from None
    if start and end and start > end:
        raise ValidationError("Schedule start date is after its end date.")
    return start, end


def _clean_number(number) -> str:
    value = str(number or "").strip()
    if not (value.isascii() and value.isdigit()) or len(value) > 3:
        raise ValidationError(f"Number must be 1-3 digits, got '{number}'.")
    return value


class RestrictionService:
    """CRUD for blocked numbers and bet limits. Enforcement lives in bet placement."""

    def __init__(self, blocked_repo: BlockedNumberRepository, limit_repo: BetLimitRepository):
        self.blocked_repo = blocked_repo
        self.limit_repo = limit_repo

    # --- Blocked numbers ---

    def block_number(
        self,
        lottery_type: str,
        number: str,
        bet_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        is_active: bool = True,
    ) -> dict:
        """Block a number; bet_type None blocks it for every bet type."""
        if not is_lottery_type(lottery_type or ""):
            raise ValidationError(f"Unknown lottery type: {lottery_type}")
        if bet_type is not None and bet_type not in BET_TYPE_RULES:
            raise ValidationError(f"Unknown bet type: {bet_type}")
        start, end = _clean_window(start_date, end_date)
        blocked_id = self.blocked_repo.add(
            lottery_type, _clean_number(number), bet_type, start, end, is_active
        )
        logger.info(f"Blocked number {number} on {lottery_type} ({bet_type or 'all types'})")
        return self.blocked_repo.get(blocked_id)

    def list_blocked_numbers(
        self, lottery_type: str | None = None, in_force_only: bool = False
    ) -> list[dict]:
        if in_force_only:
            return self.blocked_repo.list_in_force(today_iso(), lottery_type)
        return self.blocked_repo.list_blocked(lottery_type)

    def set_blocked_active(self, blocked_id: int, is_active: bool) -> dict:
        if not self.blocked_repo.set_active(blocked_id, is_active):
            raise NotFoundError(f"Blocked number {blocked_id} not found.")
        return self.blocked_repo.get(blocked_id)

    def delete_blocked_number(self, blocked_id: int) -> None:
        if not self.blocked_repo.delete(blocked_id):
            raise NotFoundError(f"Blocked number {blocked_id} not found.")
        logger.info(f"Deleted blocked number {blocked_id}")

    # --- Bet limits ---

    def add_limit(
        self,
        number: str,
        max_amount: float,
        lottery_types: list[str] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict:
        """Cap the aggregate stake on a number; empty lottery_types covers all lotteries."""
        try:
            max_amount = float(max_amount)
        except (TypeError, ValueError):
            raise ValidationError("Limit amount must be a number.") from None
        if max_amount <= 0:
            raise ValidationError("Limit amount must be positive.")
        for lt in lottery_types or []:
            if not is_lottery_type(lt):
                raise ValidationError(f"Unknown lottery type: {lt}")
        start, end = _clean_window(start_date, end_date)
        limit_id = self.limit_repo.add(_clean_number(number), max_amount, lottery_types, start, end)
        logger.info(f"Added stake limit {max_amount:.2f} on {number}")
        return self.limit_repo.get(limit_id)

    def list_limits(self) -> list[dict]:
        return self.limit_repo.list_limits()

    def set_limit_active(self, limit_id: int, is_active: bool) -> dict:
        if not self.limit_repo.set_active(limit_id, is_active):
            raise NotFoundError(f"Bet limit {limit_id} not found.")
        return self.limit_repo.get(limit_id)

    def delete_limit(self, limit_id: int) -> None:
        if not self.limit_repo.delete(limit_id):
            raise NotFoundError(f"Bet limit {limit_id} not found.")
        logger.info(f"Deleted bet limit {limit_id}")
