"""
Back-office statistics.
"""

from repositories.bet_repository import BetRepository
from repositories.draw_result_repository import DrawResultRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository


class AdminStatsService:
    """Aggregates read-only figures for the admin dashboard."""

    def __init__(
        self,
        user_repo: UserRepository,
        bet_repo: BetRepository,
        transaction_repo: TransactionRepository,
        draw_repo: DrawResultRepository,
    ):
        self.user_repo = user_repo
        self.bet_repo = bet_repo
        self.transaction_repo = transaction_repo
        self.draw_repo = draw_repo

    def get_stats(self) -> dict:
        bets = self.bet_repo.get_bet_stats()
        transactions = self.transaction_repo.get_transaction_stats()
        commission = transactions.get("affiliate_commission", {})
        return {
            "users": self.user_repo.get_user_counts(),
            "bets": bets,
            "house_gross": round(bets["total_wagered"] - bets["total_paid"], 2),
            "transactions": transactions,
            "affiliate": {
                "commission_paid": commission.get("approved_total", 0.0),
                "commission_count": commission.get("count", 0),
            },
            "draws": self.draw_repo.count_by_status(),
        }
