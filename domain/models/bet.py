"""
Bet domain models.
"""

from dataclasses import dataclass

# Bet statuses
BET_PENDING = "pending"
BET_CONFIRMED = "confirmed"
BET_WON = "won"
BET_LOST = "lost"
BET_ERROR = "error"  # Settlement could not price the bet; needs manual review

BET_STATUSES = (BET_PENDING, BET_CONFIRMED, BET_WON, BET_LOST, BET_ERROR)
UNSETTLED_STATUSES = (BET_PENDING, BET_CONFIRMED)


@dataclass(frozen=True)
class BetItem:
    """One line of a bet slip as submitted by a user."""

    lottery_type: str
    bet_type: str
    numbers: str
    amount: float
    draw_date: str | None = None


@dataclass
class Bet:
    """
    A placed bet.

    Bet facts (lottery, type, numbers, amount, rate, draw date) never change
    after placement. Only the resolution fields are written by settlement.
    """

    id: int
    user_id: int
    lottery_type: str
    bet_type: str
    numbers: str
    amount: float
    rate: float | None
    potential_win: float
    status: str
    draw_date: str
    reference: str | None = None
    win_amount: float | None = None
    matched_number: str | None = None
    error_message: str | None = None
    processed_at: int | None = None
    created_at: str | None = None

    @property
    def is_settled(self) -> bool:
        return self.status not in UNSETTLED_STATUSES

    @classmethod
    def from_row(cls, row) -> "Bet":
        data = dict(row)
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            lottery_type=data["lottery_type"],
            bet_type=data["bet_type"],
            numbers=data["numbers"],
            amount=data["amount"],
            rate=data.get("rate"),
            potential_win=data["potential_win"],
            status=data["status"],
            draw_date=data["draw_date"],
            reference=data.get("reference"),
            win_amount=data.get("win_amount"),
            matched_number=data.get("matched_number"),
            error_message=data.get("error_message"),
            processed_at=data.get("processed_at"),
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "lottery_type": self.lottery_type,
            "bet_type": self.bet_type,
            "numbers": self.numbers,
            "amount": self.amount,
            "rate": self.rate,
            "potential_win": self.potential_win,
            "status": self.status,
            "draw_date": self.draw_date,
            "reference": self.reference,
            "win_amount": self.win_amount,
            "matched_number": self.matched_number,
            "error_message": self.error_message,
            "processed_at": self.processed_at,
            "created_at": self.created_at,
        }
