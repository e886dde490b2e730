"""
Repository for managing user accounts.
"""

from domain.models.user import User
from repositories.base_repository import BaseRepository
from repositories.interfaces import IUserRepository

_USER_COLUMNS = """
    id, username, password_hash, balance, referral_code, referred_by,
    affiliate_earnings, is_blocked, created_at
"""


class UserRepository(BaseRepository, IUserRepository):
    """
    Handles CRUD operations against the users table.

    Balance mutations are not exposed here; they go through
    TransactionRepository so every change has an audit row.
    """

    def add(
        self,
        username: str,
        password_hash: str,
        referral_code: str,
        referred_by: str | None = None,
    ) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO users (username, password_hash, referral_code, referred_by)
                VALUES (?, ?, ?, ?)
                """,
                (username, password_hash, referral_code, referred_by),
            )
            return cursor.lastrowid

    def _get_one(self, where: str, params: tuple) -> User | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}", params)
            row = cursor.fetchone()
            return User.from_row(row) if row else None

    def get_by_id(self, user_id: int) -> User | None:
        return self._get_one("id = ?", (user_id,))

    def get_by_username(self, username: str) -> User | None:
        return self._get_one("username = ?", (username,))

    def get_by_referral_code(self, referral_code: str) -> User | None:
        return self._get_one("referral_code = ?", (referral_code,))

    def get_all(self) -> list[User]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY id")
            return [User.from_row(row) for row in cursor.fetchall()]

    def get_balance(self, user_id: int) -> float | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT balance FROM users WHERE id = ?", (user_id,))
            row = cursor.fetchone()
            return float(row["balance"]) if row else None

    def set_blocked(self, user_id: int, blocked: bool) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET is_blocked = ? WHERE id = ?",
                (1 if blocked else 0, user_id),
            )
            return cursor.rowcount > 0

    def set_referred_by(self, user_id: int, referral_code: str | None) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET referred_by = ? WHERE id = ?",
                (referral_code, user_id),
            )
            return cursor.rowcount > 0

    def get_referrals(self, referral_code: str) -> list[User]:
        """Users directly referred by the owner of referral_code."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE referred_by = ? ORDER BY id",
                (referral_code,),
            )
            return [User.from_row(row) for row in cursor.fetchall()]

    def count_second_level_referrals(self, referral_code: str) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT COUNT(*) AS cnt
                FROM users AS downline
                JOIN users AS direct ON downline.referred_by = direct.referral_code
                WHERE direct.referred_by = ?
                """,
                (referral_code,),
            )
            return int(cursor.fetchone()["cnt"])

    def get_user_counts(self) -> dict:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(CASE WHEN is_blocked = 1 THEN 1 ELSE 0 END), 0) AS blocked,
                       COALESCE(SUM(balance), 0) AS total_balance
                FROM users
                """
            )
            row = cursor.fetchone()
            return {
                "total": int(row["total"]),
                "blocked": int(row["blocked"]),
                "active": int(row["total"]) - int(row["blocked"]),
                "total_balance": round(float(row["total_balance"]), 2),
            }
