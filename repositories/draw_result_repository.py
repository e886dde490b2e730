"""
Repository for announced draw results and their settlement claim.
"""

from __future__ import annotations

from domain.models.draw_result import (
    DRAW_PROCESSED,
    DRAW_PROCESSING,
    DRAW_UNPROCESSED,
    DrawResult,
)
from repositories.base_repository import BaseRepository
from repositories.interfaces import IDrawResultRepository
from services import error_codes
from services.errors import ConflictError

_RESULT_COLUMNS = """
    id, lottery_type, draw_date, first_prize, three_digit_front, three_digit_top,
    three_digit_bottom, two_digit_top, two_digit_bottom, run_top, run_bottom,
    status, claimed_at, processed_at, total_winners, total_payout, created_at
"""

NUMBER_FIELDS = (
    "first_prize",
    "three_digit_front",
    "three_digit_top",
    "three_digit_bottom",
    "two_digit_top",
    "two_digit_bottom",
    "run_top",
    "run_bottom",
)


class DrawResultRepository(BaseRepository, IDrawResultRepository):
    """
    Stores draw results and owns the unprocessed -> processing -> processed
    state machine. Every transition is a conditional UPDATE, so the database
    row is the only lock.
    """

    def create(self, lottery_type: str, draw_date: str, **numbers) -> int:
        unknown = set(numbers) - set(NUMBER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown result fields: {sorted(unknown)}")
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id FROM draw_results WHERE lottery_type = ? AND draw_date = ?",
                (lottery_type, draw_date),
            )
            existing = cursor.fetchone()
            if existing:
                raise ConflictError(
                    f"A result for {lottery_type} on {draw_date} already exists.",
                    code=error_codes.DRAW_ALREADY_EXISTS,
                    details={"draw_result_id": existing["id"]},
                )
            columns = ["lottery_type", "draw_date", *NUMBER_FIELDS]
            values = [lottery_type, draw_date, *(numbers.get(f) for f in NUMBER_FIELDS)]
            cursor.execute(
                f"""
                INSERT INTO draw_results ({", ".join(columns)})
                VALUES ({", ".join("?" for _ in columns)})
                """,
                values,
            )
            return cursor.lastrowid

    def get(self, draw_id: int) -> DrawResult | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_RESULT_COLUMNS} FROM draw_results WHERE id = ?", (draw_id,))
            row = cursor.fetchone()
            return DrawResult.from_row(row) if row else None

    def get_by_draw(self, lottery_type: str, draw_date: str) -> DrawResult | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_RESULT_COLUMNS} FROM draw_results WHERE lottery_type = ? AND draw_date = ?",
                (lottery_type, draw_date),
            )
            row = cursor.fetchone()
            return DrawResult.from_row(row) if row else None

    def list_results(
        self,
        lottery_type: str | None = None,
        processed_only: bool = False,
        limit: int = 50,
    ) -> list[DrawResult]:
        clauses = []
        params: list = []
        if lottery_type:
            clauses.append("lottery_type = ?")
            params.append(lottery_type)
        if processed_only:
            clauses.append("status = ?")
            params.append(DRAW_PROCESSED)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_RESULT_COLUMNS}
                FROM draw_results
                {where}
                ORDER BY draw_date DESC, id DESC
                LIMIT ?
                """,
                params,
            )
            return [DrawResult.from_row(row) for row in cursor.fetchall()]

    def get_latest(self, lottery_type: str) -> DrawResult | None:
        results = self.list_results(lottery_type=lottery_type, limit=1)
        return results[0] if results else None

    def claim_for_processing(self, draw_id: int, token: str, now: int, stale_before: int) -> bool:
        """
        Compare-and-set claim of a draw for settlement.

        Succeeds when the draw is unprocessed, or when it is stuck in
        processing with a claim older than stale_before.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE draw_results
                SET status = ?, claim_token = ?, claimed_at = ?
                WHERE id = ?
                  AND (
                    status = ?
                    OR (status = ? AND (claimed_at IS NULL OR claimed_at < ?))
                  )
                """,
                (
                    DRAW_PROCESSING,
                    token,
                    now,
                    draw_id,
                    DRAW_UNPROCESSED,
                    DRAW_PROCESSING,
                    stale_before,
                ),
            )
            return cursor.rowcount > 0

    def mark_processed(
        self, draw_id: int, token: str, now: int, total_winners: int, total_payout: float
    ) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE draw_results
                SET status = ?, is_processed = 1, processed_at = ?,
                    total_winners = ?, total_payout = ?, claim_token = NULL
                WHERE id = ? AND status = ? AND claim_token = ?
                """,
                (
                    DRAW_PROCESSED,
                    now,
                    total_winners,
                    round(total_payout, 2),
                    draw_id,
                    DRAW_PROCESSING,
                    token,
                ),
            )
            return cursor.rowcount > 0

    def release_claim(self, draw_id: int, token: str) -> bool:
        """Return a claimed draw to unprocessed so a later run can resume it."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE draw_results
                SET status = ?, claim_token = NULL, claimed_at = NULL
                WHERE id = ? AND status = ? AND claim_token = ?
                """,
                (DRAW_UNPROCESSED, draw_id, DRAW_PROCESSING, token),
            )
            return cursor.rowcount > 0

    def count_by_status(self) -> dict:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT status, COUNT(*) AS cnt FROM draw_results GROUP BY status")
            return {row["status"]: int(row["cnt"]) for row in cursor.fetchall()}
