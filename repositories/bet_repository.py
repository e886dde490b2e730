"""
Repository for placed bets.
"""

from __future__ import annotations

from collections import defaultdict

from domain.models.bet import (
    BET_CONFIRMED,
    BET_ERROR,
    BET_LOST,
    BET_PENDING,
    BET_WON,
    UNSETTLED_STATUSES,
    Bet,
)
from domain.models.user import TX_BET, TX_WIN
from repositories.base_repository import BaseRepository
from repositories.bet_limit_repository import BetLimitRepository
from repositories.blocked_number_repository import BlockedNumberRepository
from repositories.interfaces import IBetRepository
from repositories.payout_rate_repository import PayoutRateRepository
from repositories.transaction_repository import apply_balance_delta, insert_transaction
from services import error_codes
from services.errors import (
    AccountBlocked,
    BettingClosed,
    BlockedNumberError,
    LimitExceeded,
    MissingRateConfiguration,
    NotFoundError,
    ValidationError,
)

_BET_COLUMNS = """
    id, user_id, lottery_type, bet_type, numbers, amount, rate, potential_win,
    status, draw_date, reference, win_amount, matched_number, error_message,
    processed_at, created_at
"""

_UNSETTLED_SQL = ", ".join(f"'{s}'" for s in UNSETTLED_STATUSES)


class BetRepository(BaseRepository, IBetRepository):
    """
    Handles CRUD operations against the bets table.
    """

    def place_bets_atomic(
        self,
        *,
        user_id: int,
        rows: list[dict],
        reference: str,
        today: str,
    ) -> dict:
        """
        Atomically place a batch of bets:
        - ensure the account exists and is not blocked
        - ensure no result has been recorded for any item's draw
        - price each item from the rate table (disabled or missing types refused)
        - refuse numbers blocked on `today`
        - refuse items that push a number past an applicable stake limit
        - debit the batch total with a conditional update
        - insert one bet row per item and one `bet` transaction for the total

        Every check runs under the BEGIN IMMEDIATE lock, so the whole batch
        is placed or none of it is.

        Returns:
            dict with `bets` (list[Bet]), `total` and `balance` (after debit)
        """
        if not rows:
            raise ValidationError("At least one bet is required.")

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT is_blocked FROM users WHERE id = ?", (user_id,))
            user_row = cursor.fetchone()
            if not user_row:
                raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
            if user_row["is_blocked"]:
                raise AccountBlocked("This account is blocked from betting.")

            for draw in {(r["lottery_type"], r["draw_date"]) for r in rows}:
                cursor.execute(
                    "SELECT 1 FROM draw_results WHERE lottery_type = ? AND draw_date = ?",
                    draw,
                )
                if cursor.fetchone():
                    raise BettingClosed(
                        f"Betting is closed for {draw[0]} on {draw[1]}.",
                        details={"lottery_type": draw[0], "draw_date": draw[1]},
                    )

            priced = []
            stake_by_number: dict[tuple, float] = defaultdict(float)
            for row in rows:
                rate_row = PayoutRateRepository.get_rate_row(cursor, row["bet_type"])
                if rate_row is None:
                    raise MissingRateConfiguration(
                        f"No payout rate configured for {row['bet_type']}."
                    )
                if not rate_row["is_enabled"]:
                    raise ValidationError(
                        f"Bet type {row['bet_type']} is currently disabled.",
                        code=error_codes.BET_TYPE_DISABLED,
                    )

                block = BlockedNumberRepository.find_active_block(
                    cursor, row["lottery_type"], row["numbers"], row["bet_type"], today
                )
                if block:
                    raise BlockedNumberError(
                        f"Number {row['numbers']} is blocked for {row['lottery_type']}.",
                        details={"blocked_number_id": block["id"], "numbers": row["numbers"]},
                    )

                rate = rate_row["rate"]
                priced.append({**row, "rate": rate, "potential_win": round(row["amount"] * rate, 2)})
                stake_by_number[(row["numbers"], row["lottery_type"], row["draw_date"])] += row["amount"]

            for (numbers, lottery_type, draw_date), batch_stake in stake_by_number.items():
                limits = BetLimitRepository.find_applicable_limits(
                    cursor, numbers, lottery_type, today
                )
                if not limits:
                    continue
                cursor.execute(
                    """
                    SELECT COALESCE(SUM(amount), 0) AS staked
                    FROM bets
                    WHERE numbers = ? AND lottery_type = ? AND draw_date = ?
                    """,
                    (numbers, lottery_type, draw_date),
                )
                staked = float(cursor.fetchone()["staked"])
                for limit in limits:
                    if staked + batch_stake > limit["max_amount"]:
                        raise LimitExceeded(
                            f"Stake limit for {numbers} is {limit['max_amount']:.2f}; "
                            f"{max(limit['max_amount'] - staked, 0):.2f} remaining.",
                            details={
                                "bet_limit_id": limit["id"],
                                "numbers": numbers,
                                "staked": staked,
                                "requested": batch_stake,
                            },
                        )

            total = round(sum(item["amount"] for item in priced), 2)
            new_balance = apply_balance_delta(cursor, user_id, -total)

            bet_ids = []
            for index, item in enumerate(priced, start=1):
                cursor.execute(
                    """
                    INSERT INTO bets
                        (user_id, lottery_type, bet_type, numbers, amount, rate,
                         potential_win, status, draw_date, reference)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        item["lottery_type"],
                        item["bet_type"],
                        item["numbers"],
                        item["amount"],
                        item["rate"],
                        item["potential_win"],
                        BET_PENDING,
                        item["draw_date"],
                        f"{reference}-{index}",
                    ),
                )
                bet_ids.append(cursor.lastrowid)

            insert_transaction(
                cursor,
                user_id=user_id,
                tx_type=TX_BET,
                amount=-total,
                reference=reference,
                note=f"{len(bet_ids)} bet(s)",
            )

            placeholders = ",".join("?" for _ in bet_ids)
            cursor.execute(
                f"SELECT {_BET_COLUMNS} FROM bets WHERE id IN ({placeholders}) ORDER BY id",
                bet_ids,
            )
            bets = [Bet.from_row(r) for r in cursor.fetchall()]
            return {"bets": bets, "total": total, "balance": new_balance}

    def get_bet(self, bet_id: int) -> Bet | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_BET_COLUMNS} FROM bets WHERE id = ?", (bet_id,))
            row = cursor.fetchone()
            return Bet.from_row(row) if row else None

    def list_bets(
        self,
        user_id: int | None = None,
        status: str | None = None,
        lottery_type: str | None = None,
        draw_date: str | None = None,
        limit: int = 500,
    ) -> list[Bet]:
        clauses = []
        params: list = []
        for column, value in (
            ("user_id", user_id),
            ("status", status),
            ("lottery_type", lottery_type),
            ("draw_date", draw_date),
        ):
            if value is not None:
                clauses.append(f"{column} = ?")
                params.append(value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_BET_COLUMNS} FROM bets {where} ORDER BY id DESC LIMIT ?",
                params,
            )
            return [Bet.from_row(row) for row in cursor.fetchall()]

    def get_unsettled_bets(self, lottery_type: str, draw_date: str) -> list[Bet]:
        """Bets for a draw still waiting on settlement (pending or confirmed)."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_BET_COLUMNS}
                FROM bets
                WHERE lottery_type = ? AND draw_date = ? AND status IN ({_UNSETTLED_SQL})
                ORDER BY id
                """,
                (lottery_type, draw_date),
            )
            return [Bet.from_row(row) for row in cursor.fetchall()]

    def confirm_bet(self, bet_id: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE bets SET status = ? WHERE id = ? AND status = ?",
                (BET_CONFIRMED, bet_id, BET_PENDING),
            )
            return cursor.rowcount > 0

    def settle_won_atomic(
        self,
        *,
        bet_id: int,
        win_amount: float,
        matched_number: str | None,
        reference: str,
        processed_at: int,
    ) -> bool:
        """
        Mark a bet won, credit the winner and record the `win` transaction.

        The status update is a compare-and-set on the unsettled statuses, so a
        bet already resolved by an earlier run is left alone and False is
        returned without crediting anything.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                UPDATE bets
                SET status = ?, win_amount = ?, matched_number = ?, processed_at = ?,
                    error_message = NULL
                WHERE id = ? AND status IN ({_UNSETTLED_SQL})
                """,
                (BET_WON, round(win_amount, 2), matched_number, processed_at, bet_id),
            )
            if cursor.rowcount == 0:
                return False
            cursor.execute("SELECT user_id FROM bets WHERE id = ?", (bet_id,))
            user_id = cursor.fetchone()["user_id"]
            apply_balance_delta(cursor, user_id, win_amount)
            insert_transaction(
                cursor,
                user_id=user_id,
                tx_type=TX_WIN,
                amount=win_amount,
                reference=reference,
                note=f"bet {bet_id}",
            )
            return True

    def settle_lost(self, bet_id: int, processed_at: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                UPDATE bets
                SET status = ?, win_amount = 0, processed_at = ?
                WHERE id = ? AND status IN ({_UNSETTLED_SQL})
                """,
                (BET_LOST, processed_at, bet_id),
            )
            return cursor.rowcount > 0

    def mark_error(self, bet_id: int, message: str, processed_at: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                UPDATE bets
                SET status = ?, error_message = ?, processed_at = ?
                WHERE id = ? AND status IN ({_UNSETTLED_SQL})
                """,
                (BET_ERROR, message, processed_at, bet_id),
            )
            return cursor.rowcount > 0

    def get_draw_summary(self, lottery_type: str, draw_date: str) -> dict:
        """Status counts and payout for every bet on a draw, from stored rows."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT status, COUNT(*) AS cnt, COALESCE(SUM(win_amount), 0) AS paid
                FROM bets
                WHERE lottery_type = ? AND draw_date = ?
                GROUP BY status
                """,
                (lottery_type, draw_date),
            )
            counts = {row["status"]: (int(row["cnt"]), float(row["paid"])) for row in cursor.fetchall()}
        return {
            "won_count": counts.get(BET_WON, (0, 0.0))[0],
            "lost_count": counts.get(BET_LOST, (0, 0.0))[0],
            "error_count": counts.get(BET_ERROR, (0, 0.0))[0],
            "unsettled_count": sum(counts.get(s, (0, 0.0))[0] for s in UNSETTLED_STATUSES),
            "total_payout": round(counts.get(BET_WON, (0, 0.0))[1], 2),
        }

    def get_winning_bets(self, lottery_type: str, draw_date: str) -> list[dict]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT b.id, b.user_id, u.username, b.bet_type, b.numbers, b.amount,
                       b.win_amount, b.matched_number, b.processed_at
                FROM bets AS b
                JOIN users AS u ON u.id = b.user_id
                WHERE b.lottery_type = ? AND b.draw_date = ? AND b.status = ?
                ORDER BY b.win_amount DESC, b.id
                """,
                (lottery_type, draw_date, BET_WON),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_bet_stats(self) -> dict:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT status, COUNT(*) AS cnt,
                       COALESCE(SUM(amount), 0) AS wagered,
                       COALESCE(SUM(win_amount), 0) AS paid
                FROM bets
                GROUP BY status
                """
            )
            by_status = {
                row["status"]: {
                    "count": int(row["cnt"]),
                    "wagered": round(float(row["wagered"]), 2),
                    "paid": round(float(row["paid"]), 2),
                }
                for row in cursor.fetchall()
            }
        return {
            "by_status": by_status,
            "total_count": sum(v["count"] for v in by_status.values()),
            "total_wagered": round(sum(v["wagered"] for v in by_status.values()), 2),
            "total_paid": round(sum(v["paid"] for v in by_status.values()), 2),
        }
