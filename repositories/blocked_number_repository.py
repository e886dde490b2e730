"""
Repository for blocked (forbidden) numbers.
"""

from __future__ import annotations

from repositories.base_repository import BaseRepository
from repositories.interfaces import IBlockedNumberRepository

_BLOCKED_COLUMNS = "id, lottery_type, number, bet_type, is_active, start_date, end_date, created_at"

# A row is in force when active and today falls inside its optional window.
# ISO dates compare correctly as text.
_IN_FORCE = """
    is_active = 1
    AND (start_date IS NULL OR start_date <= ?)
    AND (end_date IS NULL OR end_date >= ?)
"""


def _to_dict(row) -> dict:
    data = dict(row)
    data["is_active"] = bool(data["is_active"])
    return data


class BlockedNumberRepository(BaseRepository, IBlockedNumberRepository):
    """
    CRUD for blocked_numbers plus the in-transaction lookup used by bet placement.
    """

    @staticmethod
    def find_active_block(
        cursor, lottery_type: str, number: str, bet_type: str, on_date: str
    ) -> dict | None:
        """
        Return the first block in force for (lottery, number, bet type) on a date.

        A NULL bet_type on the block applies to every bet type. Runs on the
        caller's cursor so the check shares the placement transaction.
        """
        cursor.execute(
            f"""
            SELECT {_BLOCKED_COLUMNS}
            FROM blocked_numbers
            WHERE lottery_type = ? AND number = ?
              AND (bet_type IS NULL OR bet_type = ?)
              AND {_IN_FORCE}
            ORDER BY id
            LIMIT 1
            """,
            (lottery_type, number, bet_type, on_date, on_date),
        )
        row = cursor.fetchone()
        return _to_dict(row) if row else None

    def add(
        self,
        lottery_type: str,
        number: str,
        bet_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        is_active: bool = True,
    ) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO blocked_numbers
                    (lottery_type, number, bet_type, is_active, start_date, end_date)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (lottery_type, number, bet_type, 1 if is_active else 0, start_date, end_date),
            )
            return cursor.lastrowid

    def get(self, blocked_id: int) -> dict | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_BLOCKED_COLUMNS} FROM blocked_numbers WHERE id = ?", (blocked_id,)
            )
            row = cursor.fetchone()
            return _to_dict(row) if row else None

    def list_blocked(self, lottery_type: str | None = None, active_only: bool = False) -> list[dict]:
        clauses = []
        params: list = []
        if lottery_type:
            clauses.append("lottery_type = ?")
            params.append(lottery_type)
        if active_only:
            clauses.append("is_active = 1")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_BLOCKED_COLUMNS} FROM blocked_numbers {where} ORDER BY id",
                params,
            )
            return [_to_dict(row) for row in cursor.fetchall()]

    def list_in_force(self, on_date: str, lottery_type: str | None = None) -> list[dict]:
        """Blocks that would reject a bet placed on the given date."""
        params: list = [on_date, on_date]
        extra = ""
        if lottery_type:
            extra = "AND lottery_type = ?"
            params.append(lottery_type)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_BLOCKED_COLUMNS}
                FROM blocked_numbers
                WHERE {_IN_FORCE} {extra}
                ORDER BY lottery_type, number
                """,
                params,
            )
            return [_to_dict(row) for row in cursor.fetchall()]

    def set_active(self, blocked_id: int, is_active: bool) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE blocked_numbers SET is_active = ? WHERE id = ?",
                (1 if is_active else 0, blocked_id),
            )
            return cursor.rowcount > 0

    def delete(self, blocked_id: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM blocked_numbers WHERE id = ?", (blocked_id,))
            return cursor.rowcount > 0
