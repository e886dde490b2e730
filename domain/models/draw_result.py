"""
Draw result domain model.
"""

from dataclasses import dataclass

# Settlement lifecycle of a draw result
DRAW_UNPROCESSED = "unprocessed"
DRAW_PROCESSING = "processing"
DRAW_PROCESSED = "processed"


def _split_numbers(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class DrawResult:
    """
    Announced winning numbers for one (lottery_type, draw_date).

    Three-digit fields may hold a comma-separated list, since some draws
    announce more than one front/back three-digit number.
    """

    id: int
    lottery_type: str
    draw_date: str
    first_prize: str | None = None
    three_digit_front: str | None = None
    three_digit_top: str | None = None
    three_digit_bottom: str | None = None
    two_digit_top: str | None = None
    two_digit_bottom: str | None = None
    run_top: str | None = None
    run_bottom: str | None = None
    status: str = DRAW_UNPROCESSED
    claimed_at: int | None = None
    processed_at: int | None = None
    total_winners: int = 0
    total_payout: float = 0.0
    created_at: str | None = None

    @property
    def is_processed(self) -> bool:
        return self.status == DRAW_PROCESSED

    # --- Winning-number views with fallbacks to the first prize ---

    def three_top_numbers(self) -> list[str]:
        values = _split_numbers(self.three_digit_top)
        if not values and self.first_prize and len(self.first_prize) >= 3:
            values = [self.first_prize[-3:]]
        return values

    def three_front_numbers(self) -> list[str]:
        values = _split_numbers(self.three_digit_front)
        if not values and self.first_prize and len(self.first_prize) >= 3:
            values = [self.first_prize[:3]]
        return values

    def three_bottom_numbers(self) -> list[str]:
        return _split_numbers(self.three_digit_bottom)

    def two_top_number(self) -> str:
        if self.two_digit_top:
            return self.two_digit_top.strip()
        if self.first_prize and len(self.first_prize) >= 2:
            return self.first_prize[-2:]
        return ""

    def two_bottom_number(self) -> str:
        return (self.two_digit_bottom or "").strip()

    def run_top_digits(self) -> str:
        """Digits a RUN_TOP bet is matched against (the whole first prize)."""
        if self.first_prize:
            return self.first_prize.strip()
        return "".join(self.three_top_numbers())

    @classmethod
    def from_row(cls, row) -> "DrawResult":
        data = dict(row)
        return cls(
            id=data["id"],
            lottery_type=data["lottery_type"],
            draw_date=data["draw_date"],
            first_prize=data.get("first_prize"),
            three_digit_front=data.get("three_digit_front"),
            three_digit_top=data.get("three_digit_top"),
            three_digit_bottom=data.get("three_digit_bottom"),
            two_digit_top=data.get("two_digit_top"),
            two_digit_bottom=data.get("two_digit_bottom"),
            run_top=data.get("run_top"),
            run_bottom=data.get("run_bottom"),
            status=data.get("status") or DRAW_UNPROCESSED,
            claimed_at=data.get("claimed_at"),
            processed_at=data.get("processed_at"),
            total_winners=data.get("total_winners") or 0,
            total_payout=data.get("total_payout") or 0.0,
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lottery_type": self.lottery_type,
            "draw_date": self.draw_date,
            "first_prize": self.first_prize,
            "three_digit_front": self.three_digit_front,
            "three_digit_top": self.three_digit_top,
            "three_digit_bottom": self.three_digit_bottom,
            "two_digit_top": self.two_digit_top,
            "two_digit_bottom": self.two_digit_bottom,
            "run_top": self.run_top,
            "run_bottom": self.run_bottom,
            "status": self.status,
            "is_processed": self.is_processed,
            "processed_at": self.processed_at,
            "total_winners": self.total_winners,
            "total_payout": self.total_payout,
            "created_at": self.created_at,
        }
