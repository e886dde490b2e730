"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

from domain.models.lottery import BET_TYPE_RULES

logger = logging.getLogger("huay.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        with self._connect() as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Users (accounts, balances, referral links)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                balance REAL NOT NULL DEFAULT 0 CHECK (balance >= 0),
                referral_code TEXT NOT NULL UNIQUE,
                referred_by TEXT,
                affiliate_earnings REAL NOT NULL DEFAULT 0,
                is_blocked INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # Bets
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                lottery_type TEXT NOT NULL,
                bet_type TEXT NOT NULL,
                numbers TEXT NOT NULL,
                amount REAL NOT NULL,
                potential_win REAL NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                draw_date TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id)
            )
            """
        )

        # Transactions (append-only audit log)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                amount REAL NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                reference TEXT NOT NULL UNIQUE,
                slip_url TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("create_draw_results_table", self._migration_create_draw_results_table),
            ("add_bet_settlement_columns", self._migration_add_bet_settlement_columns),
            ("add_transaction_audit_columns", self._migration_add_transaction_audit_columns),
            ("create_payout_rates_table", self._migration_create_payout_rates_table),
            ("seed_default_payout_rates", self._migration_seed_default_payout_rates),
            ("create_blocked_numbers_table", self._migration_create_blocked_numbers_table),
            ("create_bet_limits_tables", self._migration_create_bet_limits_tables),
            ("add_indexes_v1", self._migration_add_indexes_v1),
        ]

    # --- Migrations ---

    def _migration_create_draw_results_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS draw_results (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                lottery_type TEXT NOT NULL,
                draw_date TEXT NOT NULL,
                first_prize TEXT,
                three_digit_front TEXT,
                three_digit_top TEXT,
                three_digit_bottom TEXT,
                two_digit_top TEXT,
                two_digit_bottom TEXT,
                run_top TEXT,
                run_bottom TEXT,
                status TEXT NOT NULL DEFAULT 'unprocessed',
                is_processed INTEGER NOT NULL DEFAULT 0,
                claim_token TEXT,
                claimed_at INTEGER,
                processed_at INTEGER,
                total_winners INTEGER NOT NULL DEFAULT 0,
                total_payout REAL NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (lottery_type, draw_date)
            )
            """
        )

    def _migration_add_bet_settlement_columns(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "bets", "rate", "REAL")
        self._add_column_if_not_exists(cursor, "bets", "reference", "TEXT")
        self._add_column_if_not_exists(cursor, "bets", "win_amount", "REAL")
        self._add_column_if_not_exists(cursor, "bets", "matched_number", "TEXT")
        self._add_column_if_not_exists(cursor, "bets", "error_message", "TEXT")
        self._add_column_if_not_exists(cursor, "bets", "processed_at", "INTEGER")

    def _migration_add_transaction_audit_columns(self, cursor) -> None:
        # source_user_id/level tag affiliate commission rows with the bettor and tier
        self._add_column_if_not_exists(cursor, "transactions", "source_user_id", "INTEGER")
        self._add_column_if_not_exists(cursor, "transactions", "level", "INTEGER")
        self._add_column_if_not_exists(cursor, "transactions", "note", "TEXT")
        self._add_column_if_not_exists(cursor, "transactions", "reviewed_at", "INTEGER")

    def _migration_create_payout_rates_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS payout_rates (
                bet_type TEXT PRIMARY KEY,
                rate REAL NOT NULL CHECK (rate > 0),
                is_enabled INTEGER NOT NULL DEFAULT 1,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _migration_seed_default_payout_rates(self, cursor) -> None:
        cursor.executemany(
            "INSERT OR IGNORE INTO payout_rates (bet_type, rate) VALUES (?, ?)",
            [(rule.name, rule.default_rate) for rule in BET_TYPE_RULES.values()],
        )

    def _migration_create_blocked_numbers_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS blocked_numbers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                lottery_type TEXT NOT NULL,
                number TEXT NOT NULL,
                bet_type TEXT,
                is_active INTEGER NOT NULL DEFAULT 1,
                start_date TEXT,
                end_date TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _migration_create_bet_limits_tables(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_limits (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                number TEXT NOT NULL,
                max_amount REAL NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                start_date TEXT,
                end_date TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_limit_lottery_types (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                bet_limit_id INTEGER NOT NULL,
                lottery_type TEXT NOT NULL,
                FOREIGN KEY (bet_limit_id) REFERENCES bet_limits(id) ON DELETE CASCADE
            )
            """
        )

    def _migration_add_indexes_v1(self, cursor) -> None:
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_bets_draw_status ON bets(lottery_type, draw_date, status)"
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_user ON bets(user_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_bets_number_draw ON bets(numbers, lottery_type, draw_date)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_transactions_user ON transactions(user_id, created_at)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_blocked_numbers_lookup ON blocked_numbers(lottery_type, number)"
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_referred_by ON users(referred_by)")
