"""
Handles bet placement and bet queries.
"""

import logging
import math

from config import MAX_BET_ITEMS, MIN_BET_AMOUNT
from domain.models.bet import BET_STATUSES, Bet, BetItem
from domain.models.lottery import get_bet_rule, is_lottery_type
from repositories.interfaces import IBetRepository, IUserRepository
from services import error_codes
from services.affiliate_service import AffiliateService
from services.errors import ConflictError, NotFoundError, ValidationError
from services.notification_service import NotificationService
from services.rate_table_service import RateTableService
from utils.clock import parse_draw_date, today_iso
from utils.references import make_reference

logger = logging.getLogger("huay.services.betting")


class BettingService:
    """Validates bet slips, places them atomically and pays affiliate commission."""

    def __init__(
        self,
        bet_repo: IBetRepository,
        user_repo: IUserRepository,
        rate_service: RateTableService,
        affiliate_service: AffiliateService,
        notifier: NotificationService | None = None,
        min_bet_amount: float | None = None,
        max_bet_items: int | None = None,
    ):
        self.bet_repo = bet_repo
        self.user_repo = user_repo
        self.rate_service = rate_service
        self.affiliate_service = affiliate_service
        self.notifier = notifier
        self.min_bet_amount = min_bet_amount if min_bet_amount is not None else MIN_BET_AMOUNT
        self.max_bet_items = max_bet_items if max_bet_items is not None else MAX_BET_ITEMS

    def _normalize_item(self, item: BetItem | dict, today: str) -> dict:
        if isinstance(item, dict):
            item = BetItem(
                lottery_type=item.get("lottery_type"),
                bet_type=item.get("bet_type"),
                numbers=item.get("numbers"),
                amount=item.get("amount"),
                draw_date=item.get("draw_date"),
            )

        if not item.lottery_type or not is_lottery_type(item.lottery_type):
            raise ValidationError(f"Unknown lottery type: {item.lottery_type}")

        rule = get_bet_rule(item.bet_type) if item.bet_type else None
        if rule is None:
            raise ValidationError(f"Unknown bet type: {item.bet_type}")

        numbers = str(item.numbers or "").strip()
        if not (numbers.isascii() and numbers.isdigit()) or len(numbers) != rule.digits:
            raise ValidationError(
                f"{item.bet_type} requires exactly {rule.digits} digit(s), got '{numbers}'.",
                details={"bet_type": item.bet_type, "numbers": numbers, "digits": rule.digits},
            )

        try:
            amount = float(item.amount)
        except (TypeError, ValueError):
            raise ValidationError("Bet amount must be a number.") from None
        if not math.isfinite(amount) or amount < self.min_bet_amount:
            raise ValidationError(f"Bet amount must be at least {self.min_bet_amount:.2f}.")

        if item.draw_date:
            try:
                draw_date = parse_draw_date(item.draw_date)
            except ValueError:
                raise ValidationError(f"Invalid draw date: {item.draw_date}") from None
        else:
            draw_date = today

        return {
            "lottery_type": item.lottery_type,
            "bet_type": item.bet_type,
            "numbers": numbers,
            "amount": round(amount, 2),
            "draw_date": draw_date,
        }

    def place_bets(self, user_id: int, items: list[BetItem | dict]) -> dict:
        """
        Place a batch of bets for a user.

        Every item is validated before anything is written; the repository
        then debits the total and inserts the bets in one transaction, so a
        refused batch leaves no bets and an unchanged balance.

        Returns:
            dict with `bets`, `total`, `balance`, `reference`, `commissions`
        """
        if not items:
            raise ValidationError("At least one bet is required.")
        if len(items) > self.max_bet_items:
            raise ValidationError(f"At most {self.max_bet_items} bets may be placed at once.")

        today = today_iso()
        rows = [self._normalize_item(item, today) for item in items]
        reference = make_reference("BET")

        placed = self.bet_repo.place_bets_atomic(
            user_id=user_id, rows=rows, reference=reference, today=today
        )
        bets: list[Bet] = placed["bets"]
        logger.info(
            f"User {user_id} placed {len(bets)} bet(s) totalling {placed['total']:.2f} "
            f"({reference})"
        )

        # The bets are committed; a commission failure must not read as a failed placement.
        # Credits are keyed on the batch reference, so a later re-run pays each level once.
        try:
            commissions = self.affiliate_service.distribute_commission(
                user_id, placed["total"], reference
            )
        except Exception:
            logger.exception(
                f"Commission for {reference} (user {user_id}, total {placed['total']:.2f}) "
                f"failed; re-run distribution for this reference"
            )
            commissions = []

        if self.notifier:
            user = self.user_repo.get_by_id(user_id)
            self.notifier.notify_bets_placed(
                user.username if user else str(user_id), bets, placed["total"]
            )

        return {
            "bets": bets,
            "total": placed["total"],
            "balance": placed["balance"],
            "reference": reference,
            "commissions": commissions,
        }

    def calculate_potential_win(self, bet_type: str, amount: float) -> float:
        return round(float(amount) * self.rate_service.get_rate(bet_type), 2)

    def list_bets(
        self,
        user_id: int | None = None,
        status: str | None = None,
        lottery_type: str | None = None,
        draw_date: str | None = None,
        limit: int = 500,
    ) -> list[Bet]:
        if status is not None and status not in BET_STATUSES:
            raise ValidationError(f"Unknown bet status: {status}")
        return self.bet_repo.list_bets(
            user_id=user_id,
            status=status,
            lottery_type=lottery_type,
            draw_date=draw_date,
            limit=limit,
        )

    def get_bet(self, bet_id: int) -> Bet:
        bet = self.bet_repo.get_bet(bet_id)
        if bet is None:
            raise NotFoundError(f"Bet {bet_id} not found.", code=error_codes.BET_NOT_FOUND)
        return bet

    def confirm_bet(self, bet_id: int) -> Bet:
        """Move a pending bet to confirmed (admin action)."""
        bet = self.get_bet(bet_id)
        if not self.bet_repo.confirm_bet(bet_id):
            raise ConflictError(
                f"Bet {bet_id} is {bet.status}; only pending bets can be confirmed.",
                details={"status": bet.status},
            )
        logger.info(f"Bet {bet_id} confirmed")
        return self.bet_repo.get_bet(bet_id)
