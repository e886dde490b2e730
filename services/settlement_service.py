"""
Settlement engine: resolves bets against an announced draw result.
"""

import logging
import uuid
from dataclasses import asdict, dataclass

from config import SETTLEMENT_STALE_SECONDS
from domain.models.bet import Bet
from domain.models.draw_result import DrawResult
from domain.services.bet_matching_service import BetMatchingService
from repositories.interfaces import IBetRepository, IDrawResultRepository
from services import error_codes
from services.errors import (
    AlreadyProcessed,
    AlreadyProcessing,
    MissingRateConfiguration,
    NotFoundError,
    PersistenceError,
)
from services.notification_service import NotificationService
from services.rate_table_service import RateTableService
from utils.clock import now_ts

logger = logging.getLogger("huay.services.settlement")

OUTCOME_WON = "won"
OUTCOME_LOST = "lost"
OUTCOME_ERROR = "error"
OUTCOME_SKIPPED = "skipped"


@dataclass
class SettlementSummary:
    """Totals for a draw after settlement, read back from the stored bets."""

    draw_id: int
    lottery_type: str
    draw_date: str
    won_count: int = 0
    lost_count: int = 0
    error_count: int = 0
    total_payout: float = 0.0
    settled_this_run: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class SettlementService:
    """
    Settles every unsettled bet of a draw exactly once.

    The draw row is claimed with a compare-and-set (unprocessed -> processing)
    before any bet is touched, and only marked processed after every bet has
    been visited. Each bet is resolved in its own transaction guarded by its
    status, so an interrupted run can be resumed and only revisits bets that
    are still pending or confirmed.
    """

    def __init__(
        self,
        draw_repo: IDrawResultRepository,
        bet_repo: IBetRepository,
        rate_service: RateTableService,
        matcher: BetMatchingService | None = None,
        notifier: NotificationService | None = None,
        stale_seconds: int | None = None,
    ):
        self.draw_repo = draw_repo
        self.bet_repo = bet_repo
        self.rate_service = rate_service
        self.matcher = matcher or BetMatchingService()
        self.notifier = notifier
        self.stale_seconds = stale_seconds if stale_seconds is not None else SETTLEMENT_STALE_SECONDS

    def process_result(self, draw_id: int) -> SettlementSummary:
        """
        Settle all bets for a draw result.

        Raises:
            NotFoundError: no such draw result
            AlreadyProcessed: the draw was settled before; nothing changes
            AlreadyProcessing: another run holds the claim
            PersistenceError: storage failed mid-run; the claim is released
                and the run can be retried
        """
        draw = self.draw_repo.get(draw_id)
        if draw is None:
            raise NotFoundError(
                f"Draw result {draw_id} not found.", code=error_codes.DRAW_NOT_FOUND
            )
        if draw.is_processed:
            raise AlreadyProcessed(
                f"Draw {draw.lottery_type} {draw.draw_date} was already processed."
            )

        token = uuid.uuid4().hex
        now = now_ts()
        if not self.draw_repo.claim_for_processing(
            draw_id, token, now, now - self.stale_seconds
        ):
            current = self.draw_repo.get(draw_id)
            if current is not None and current.is_processed:
                raise AlreadyProcessed(
                    f"Draw {draw.lottery_type} {draw.draw_date} was already processed."
                )
            raise AlreadyProcessing(
                f"Draw {draw.lottery_type} {draw.draw_date} is being processed."
            )

        logger.info(f"Settlement started for draw {draw_id} ({draw.lottery_type} {draw.draw_date})")
        try:
            bets = self.bet_repo.get_unsettled_bets(draw.lottery_type, draw.draw_date)
            settled = 0
            for bet in bets:
                if self._settle_bet(bet, draw) != OUTCOME_SKIPPED:
                    settled += 1
        except PersistenceError:
            logger.error(f"Settlement of draw {draw_id} aborted; releasing claim")
            self.draw_repo.release_claim(draw_id, token)
            raise

        totals = self.bet_repo.get_draw_summary(draw.lottery_type, draw.draw_date)
        summary = SettlementSummary(
            draw_id=draw_id,
            lottery_type=draw.lottery_type,
            draw_date=draw.draw_date,
            won_count=totals["won_count"],
            lost_count=totals["lost_count"],
            error_count=totals["error_count"],
            total_payout=totals["total_payout"],
            settled_this_run=settled,
        )
        if not self.draw_repo.mark_processed(
            draw_id, token, now_ts(), summary.won_count, summary.total_payout
        ):
            # A stale-claim takeover owns the draw now; it will finish the job
            raise AlreadyProcessing(
                f"Claim on draw {draw_id} was taken over before completion."
            )

        logger.info(
            f"Settlement finished for draw {draw_id}: won={summary.won_count} "
            f"lost={summary.lost_count} errors={summary.error_count} "
            f"payout={summary.total_payout:.2f}"
        )
        if self.notifier:
            self.notifier.notify_draw_settled(draw, summary)
        return summary

    def process_draw(self, lottery_type: str, draw_date: str) -> SettlementSummary:
        draw = self.draw_repo.get_by_draw(lottery_type, draw_date)
        if draw is None:
            raise NotFoundError(
                f"No result recorded for {lottery_type} on {draw_date}.",
                code=error_codes.DRAW_NOT_FOUND,
            )
        return self.process_result(draw.id)

    def _win_amount(self, bet: Bet) -> float:
        # Pay the price fixed at placement; the live table is only a fallback
        if bet.potential_win and bet.potential_win > 0:
            return round(bet.potential_win, 2)
        return round(bet.amount * self.rate_service.get_rate(bet.bet_type), 2)

    def _settle_bet(self, bet: Bet, draw: DrawResult) -> str:
        """Resolve one bet. PersistenceError propagates; other failures mark the bet."""
        processed_at = now_ts()
        if not self.matcher.supports(bet.bet_type):
            logger.error(f"Bet {bet.id} has unknown bet type {bet.bet_type}")
            self.bet_repo.mark_error(bet.id, f"Unknown bet type {bet.bet_type}", processed_at)
            return OUTCOME_ERROR
        try:
            outcome = self.matcher.match(bet.bet_type, bet.numbers, draw)
            if outcome.won:
                applied = self.bet_repo.settle_won_atomic(
                    bet_id=bet.id,
                    win_amount=self._win_amount(bet),
                    matched_number=outcome.matched_number,
                    reference=f"WIN-{bet.id}",
                    processed_at=processed_at,
                )
                return OUTCOME_WON if applied else OUTCOME_SKIPPED
            applied = self.bet_repo.settle_lost(bet.id, processed_at)
            return OUTCOME_LOST if applied else OUTCOME_SKIPPED
        except PersistenceError:
            raise
        except MissingRateConfiguration as exc:
            logger.error(f"Bet {bet.id} left for manual review: {exc.message}")
            self.bet_repo.mark_error(bet.id, exc.message, processed_at)
            return OUTCOME_ERROR
        except Exception as exc:
            logger.exception(f"Unexpected error settling bet {bet.id}")
            self.bet_repo.mark_error(bet.id, str(exc) or type(exc).__name__, processed_at)
            return OUTCOME_ERROR
