"""
User and transaction domain models.
"""

from dataclasses import dataclass

# Transaction types
TX_DEPOSIT = "deposit"
TX_WITHDRAWAL = "withdrawal"
TX_BET = "bet"
TX_WIN = "win"
TX_AFFILIATE_COMMISSION = "affiliate_commission"
TX_ADJUSTMENT = "adjustment"

TRANSACTION_TYPES = (
    TX_DEPOSIT,
    TX_WITHDRAWAL,
    TX_BET,
    TX_WIN,
    TX_AFFILIATE_COMMISSION,
    TX_ADJUSTMENT,
)

# Only these types go through manual admin review
REVIEWABLE_TYPES = (TX_DEPOSIT, TX_WITHDRAWAL)

# Transaction statuses
TX_PENDING = "pending"
TX_APPROVED = "approved"
TX_REJECTED = "rejected"


@dataclass
class User:
    """
    A betting account.

    The password hash never leaves the repository/service layer; to_dict()
    omits it.
    """

    id: int
    username: str
    password_hash: str
    balance: float = 0.0
    referral_code: str = ""
    referred_by: str | None = None
    affiliate_earnings: float = 0.0
    is_blocked: bool = False
    created_at: str | None = None

    @classmethod
    def from_row(cls, row) -> "User":
        data = dict(row)
        return cls(
            id=data["id"],
            username=data["username"],
            password_hash=data["password_hash"],
            balance=data["balance"] or 0.0,
            referral_code=data["referral_code"],
            referred_by=data.get("referred_by"),
            affiliate_earnings=data.get("affiliate_earnings") or 0.0,
            is_blocked=bool(data.get("is_blocked")),
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "balance": self.balance,
            "referral_code": self.referral_code,
            "referred_by": self.referred_by,
            "affiliate_earnings": self.affiliate_earnings,
            "is_blocked": self.is_blocked,
            "created_at": self.created_at,
        }
