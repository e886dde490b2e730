"""
Repository for the transactions audit log and balance mutations.

Every balance change in the system is written together with a transaction row
inside one BEGIN IMMEDIATE transaction. The module-level helpers are shared
with BetRepository so bet placement and settlement use the same primitives.
"""

from __future__ import annotations

from domain.models.user import REVIEWABLE_TYPES, TX_APPROVED, TX_PENDING, TX_REJECTED
from repositories.base_repository import BaseRepository
from repositories.interfaces import ITransactionRepository
from services import error_codes
from services.errors import (
    ConflictError,
    InsufficientBalance,
    NotFoundError,
    ValidationError,
)

_TX_COLUMNS = """
    id, user_id, type, amount, status, reference, slip_url, source_user_id,
    level, note, reviewed_at, created_at
"""


def apply_balance_delta(cursor, user_id: int, delta: float) -> float:
    """
    Apply a signed balance change with a conditional update.

    Debits only succeed when the balance covers them, so two concurrent
    debits can never drive an account negative. Returns the new balance.
    """
    delta = round(delta, 2)
    if delta < 0:
        cursor.execute(
            "UPDATE users SET balance = ROUND(balance + ?, 2) WHERE id = ? AND balance >= ?",
            (delta, user_id, -delta),
        )
    else:
        cursor.execute(
            "UPDATE users SET balance = ROUND(balance + ?, 2) WHERE id = ?",
            (delta, user_id),
        )
    if cursor.rowcount == 0:
        cursor.execute("SELECT balance FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        raise InsufficientBalance(
            f"Insufficient balance: {row['balance']:.2f} available, {-delta:.2f} required.",
            details={"balance": row["balance"], "required": -delta},
        )
    cursor.execute("SELECT balance FROM users WHERE id = ?", (user_id,))
    return float(cursor.fetchone()["balance"])


def insert_transaction(
    cursor,
    *,
    user_id: int,
    tx_type: str,
    amount: float,
    reference: str,
    status: str = TX_APPROVED,
    slip_url: str | None = None,
    source_user_id: int | None = None,
    level: int | None = None,
    note: str | None = None,
) -> int:
    cursor.execute("SELECT 1 FROM transactions WHERE reference = ?", (reference,))
    if cursor.fetchone():
        raise ConflictError(
            f"Transaction reference {reference} already exists.",
            details={"reference": reference},
        )
    cursor.execute(
        """
        INSERT INTO transactions
            (user_id, type, amount, status, reference, slip_url, source_user_id, level, note)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            tx_type,
            round(amount, 2),
            status,
            reference,
            slip_url,
            source_user_id,
            level,
            note,
        ),
    )
    return cursor.lastrowid


def _fetch_transaction(cursor, transaction_id: int) -> dict | None:
    cursor.execute(f"SELECT {_TX_COLUMNS} FROM transactions WHERE id = ?", (transaction_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


class TransactionRepository(BaseRepository, ITransactionRepository):
    """
    Handles balance mutations and the append-only transactions table.
    """

    def adjust_balance_atomic(
        self,
        *,
        user_id: int,
        delta: float,
        tx_type: str,
        reference: str,
        note: str | None = None,
        source_user_id: int | None = None,
        level: int | None = None,
        is_affiliate_credit: bool = False,
    ) -> dict:
        """
        Atomically change a user's balance and append an approved transaction.

        Raises:
            InsufficientBalance: a debit larger than the current balance
            NotFoundError: unknown user
            ConflictError: the reference was already used
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            # Reference check first so a retried credit never touches the balance
            tx_id = insert_transaction(
                cursor,
                user_id=user_id,
                tx_type=tx_type,
                amount=delta,
                reference=reference,
                source_user_id=source_user_id,
                level=level,
                note=note,
            )
            new_balance = apply_balance_delta(cursor, user_id, delta)
            if is_affiliate_credit:
                cursor.execute(
                    """
                    UPDATE users
                    SET affiliate_earnings = ROUND(affiliate_earnings + ?, 2)
                    WHERE id = ?
                    """,
                    (round(delta, 2), user_id),
                )
            tx = _fetch_transaction(cursor, tx_id)
            tx["balance_after"] = new_balance
            return tx

    def create_pending(
        self,
        user_id: int,
        tx_type: str,
        amount: float,
        reference: str,
        slip_url: str | None = None,
    ) -> dict:
        with self.connection() as conn:
            cursor = conn.cursor()
            tx_id = insert_transaction(
                cursor,
                user_id=user_id,
                tx_type=tx_type,
                amount=amount,
                reference=reference,
                status=TX_PENDING,
                slip_url=slip_url,
            )
            return _fetch_transaction(cursor, tx_id)

    def get(self, transaction_id: int) -> dict | None:
        with self.connection() as conn:
            return _fetch_transaction(conn.cursor(), transaction_id)

    def get_by_reference(self, reference: str) -> dict | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_TX_COLUMNS} FROM transactions WHERE reference = ?", (reference,)
            )
            row = cursor.fetchone()
            return dict(row) if row else None

    def list_for_user(self, user_id: int, limit: int = 100) -> list[dict]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                WHERE user_id = ?
                ORDER BY id DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
            return [dict(row) for row in cursor.fetchall()]

    def list_pending(self, limit: int = 100) -> list[dict]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_TX_COLUMNS}
                FROM transactions
                WHERE status = ?
                ORDER BY id
                LIMIT ?
                """,
                (TX_PENDING, limit),
            )
            return [dict(row) for row in cursor.fetchall()]

    def _load_reviewable(self, cursor, transaction_id: int) -> dict:
        tx = _fetch_transaction(cursor, transaction_id)
        if tx is None:
            raise NotFoundError(
                f"Transaction {transaction_id} not found.",
                code=error_codes.TRANSACTION_NOT_FOUND,
            )
        if tx["type"] not in REVIEWABLE_TYPES:
            raise ValidationError(f"Transactions of type {tx['type']} are not reviewable.")
        if tx["status"] != TX_PENDING:
            raise ConflictError(
                f"Transaction {transaction_id} was already {tx['status']}.",
                code=error_codes.ALREADY_REVIEWED,
            )
        return tx

    def approve_pending_atomic(self, transaction_id: int, reviewed_at: int) -> dict:
        """
        Approve a pending deposit/withdrawal and apply its signed amount.

        The status flip and the balance change commit together; a withdrawal
        that would overdraw raises InsufficientBalance and stays pending.
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            tx = self._load_reviewable(cursor, transaction_id)
            cursor.execute(
                """
                UPDATE transactions
                SET status = ?, reviewed_at = ?
                WHERE id = ? AND status = ?
                """,
                (TX_APPROVED, reviewed_at, transaction_id, TX_PENDING),
            )
            if cursor.rowcount == 0:
                raise ConflictError(
                    f"Transaction {transaction_id} was already reviewed.",
                    code=error_codes.ALREADY_REVIEWED,
                )
            new_balance = apply_balance_delta(cursor, tx["user_id"], tx["amount"])
            updated = _fetch_transaction(cursor, transaction_id)
            updated["balance_after"] = new_balance
            return updated

    def reject_pending(self, transaction_id: int, reviewed_at: int) -> dict:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            self._load_reviewable(cursor, transaction_id)
            cursor.execute(
                """
                UPDATE transactions
                SET status = ?, reviewed_at = ?
                WHERE id = ? AND status = ?
                """,
                (TX_REJECTED, reviewed_at, transaction_id, TX_PENDING),
            )
            return _fetch_transaction(cursor, transaction_id)

    def get_transaction_stats(self) -> dict:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT type,
                       COUNT(*) AS count,
                       COALESCE(SUM(CASE WHEN status = 'approved' THEN amount ELSE 0 END), 0) AS approved_total,
                       COALESCE(SUM(CASE WHEN status = 'pending' THEN 1 ELSE 0 END), 0) AS pending_count
                FROM transactions
                GROUP BY type
                """
            )
            return {
                row["type"]: {
                    "count": int(row["count"]),
                    "approved_total": round(float(row["approved_total"]), 2),
                    "pending_count": int(row["pending_count"]),
                }
                for row in cursor.fetchall()
            }

    def get_commission_totals(self, user_id: int) -> dict[int, float]:
        """Approved affiliate commission received by a user, keyed by level."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT level, COALESCE(SUM(amount), 0) AS total
                FROM transactions
                WHERE user_id = ? AND type = 'affiliate_commission' AND status = 'approved'
                GROUP BY level
                """,
                (user_id,),
            )
            return {int(row["level"]): round(float(row["total"]), 2) for row in cursor.fetchall()}
