"""
Repository for per-number stake limits.
"""

from __future__ import annotations

from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetLimitRepository

_LIMIT_COLUMNS = "id, number, max_amount, is_active, start_date, end_date, created_at"


class BetLimitRepository(BaseRepository, IBetLimitRepository):
    """
    Handles bet_limits and its bet_limit_lottery_types child rows.

    A limit with no lottery type rows applies to every lottery type.
    """

    @staticmethod
    def _lottery_types_for(cursor, limit_id: int) -> list[str]:
        cursor.execute(
            "SELECT lottery_type FROM bet_limit_lottery_types WHERE bet_limit_id = ? ORDER BY id",
            (limit_id,),
        )
        return [row["lottery_type"] for row in cursor.fetchall()]

    @classmethod
    def _hydrate(cls, cursor, row) -> dict:
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        data["lottery_types"] = cls._lottery_types_for(cursor, data["id"])
        return data

    @classmethod
    def find_applicable_limits(
        cls, cursor, number: str, lottery_type: str, on_date: str
    ) -> list[dict]:
        """
        Limits in force on a date that cover (number, lottery_type).

        Runs on the caller's cursor so the check shares the placement transaction.
        """
        cursor.execute(
            f"""
            SELECT {_LIMIT_COLUMNS}
            FROM bet_limits AS bl
            WHERE bl.number = ?
              AND bl.is_active = 1
              AND (bl.start_date IS NULL OR bl.start_date <= ?)
              AND (bl.end_date IS NULL OR bl.end_date >= ?)
              AND (
                NOT EXISTS (
                    SELECT 1 FROM bet_limit_lottery_types t WHERE t.bet_limit_id = bl.id
                )
                OR EXISTS (
                    SELECT 1 FROM bet_limit_lottery_types t
                    WHERE t.bet_limit_id = bl.id AND t.lottery_type = ?
                )
              )
            ORDER BY bl.max_amount
            """,
            (number, on_date, on_date, lottery_type),
        )
        rows = cursor.fetchall()
        return [cls._hydrate(cursor, row) for row in rows]

    def add(
        self,
        number: str,
        max_amount: float,
        lottery_types: list[str] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> int:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO bet_limits (number, max_amount, start_date, end_date)
                VALUES (?, ?, ?, ?)
                """,
                (number, max_amount, start_date, end_date),
            )
            limit_id = cursor.lastrowid
            if lottery_types:
                cursor.executemany(
                    "INSERT INTO bet_limit_lottery_types (bet_limit_id, lottery_type) VALUES (?, ?)",
                    [(limit_id, lt) for lt in dict.fromkeys(lottery_types)],
                )
            return limit_id

    def get(self, limit_id: int) -> dict | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_LIMIT_COLUMNS} FROM bet_limits WHERE id = ?", (limit_id,))
            row = cursor.fetchone()
            return self._hydrate(cursor, row) if row else None

    def list_limits(self) -> list[dict]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_LIMIT_COLUMNS} FROM bet_limits ORDER BY id")
            rows = cursor.fetchall()
            return [self._hydrate(cursor, row) for row in rows]

    def set_active(self, limit_id: int, is_active: bool) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE bet_limits SET is_active = ? WHERE id = ?",
                (1 if is_active else 0, limit_id),
            )
            return cursor.rowcount > 0

    def delete(self, limit_id: int) -> bool:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM bet_limit_lottery_types WHERE bet_limit_id = ?", (limit_id,))
            cursor.execute("DELETE FROM bet_limits WHERE id = ?", (limit_id,))
            return cursor.rowcount > 0
