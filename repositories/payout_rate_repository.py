"""
Repository for the payout rate table.
"""

from repositories.base_repository import BaseRepository
from repositories.interfaces import IPayoutRateRepository


def _to_dict(row) -> dict:
    return {
        "bet_type": row["bet_type"],
        "rate": float(row["rate"]),
        "is_enabled": bool(row["is_enabled"]),
        "updated_at": row["updated_at"],
    }


class PayoutRateRepository(BaseRepository, IPayoutRateRepository):
    """
    One row per bet type: multiplier plus an enabled flag.
    """

    @staticmethod
    def get_rate_row(cursor, bet_type: str) -> dict | None:
        """Read a rate on the caller's cursor (used inside bet placement)."""
        cursor.execute(
            "SELECT bet_type, rate, is_enabled, updated_at FROM payout_rates WHERE bet_type = ?",
            (bet_type,),
        )
        row = cursor.fetchone()
        return _to_dict(row) if row else None

    def get_rate(self, bet_type: str) -> dict | None:
        with self.connection() as conn:
            return self.get_rate_row(conn.cursor(), bet_type)

    def get_all(self) -> list[dict]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT bet_type, rate, is_enabled, updated_at FROM payout_rates ORDER BY bet_type"
            )
            return [_to_dict(row) for row in cursor.fetchall()]

    def set_rate(self, bet_type: str, rate: float) -> None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO payout_rates (bet_type, rate, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(bet_type) DO UPDATE SET
                    rate = excluded.rate,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (bet_type, rate),
            )

    def set_enabled(self, bet_type: str, enabled: bool) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE payout_rates
                SET is_enabled = ?, updated_at = CURRENT_TIMESTAMP
                WHERE bet_type = ?
                """,
                (1 if enabled else 0, bet_type),
            )
            return cursor.rowcount > 0

    def delete(self, bet_type: str) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM payout_rates WHERE bet_type = ?", (bet_type,))
            return cursor.rowcount > 0
