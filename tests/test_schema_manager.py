"""
Tests for schema creation and migrations.
"""

import sqlite3

from domain.models.lottery import BET_TYPE_RULES
from infrastructure.schema_manager import SchemaManager


def _tables(db_path):
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        return {row[0] for row in rows}
    finally:
        conn.close()


def test_initialize_creates_tables(temp_db_path):
    SchemaManager(temp_db_path).initialize()
    assert {
        "users",
        "bets",
        "transactions",
        "draw_results",
        "payout_rates",
        "blocked_numbers",
        "bet_limits",
        "bet_limit_lottery_types",
        "schema_migrations",
    } <= _tables(temp_db_path)


def test_default_rates_seeded(temp_db_path):
    SchemaManager(temp_db_path).initialize()
    conn = sqlite3.connect(temp_db_path)
    try:
        rates = dict(conn.execute("SELECT bet_type, rate FROM payout_rates").fetchall())
    finally:
        conn.close()
    assert rates == {name: rule.default_rate for name, rule in BET_TYPE_RULES.items()}


def test_initialize_is_idempotent(temp_db_path):
    manager = SchemaManager(temp_db_path)
    manager.initialize()
    conn = sqlite3.connect(temp_db_path)
    try:
        conn.execute("UPDATE payout_rates SET rate = 1 WHERE bet_type = 'TWO_TOP'")
        conn.commit()
    finally:
        conn.close()

    manager.initialize()

    conn = sqlite3.connect(temp_db_path)
    try:
        applied = conn.execute("SELECT COUNT(*) FROM schema_migrations").fetchone()[0]
        rate = conn.execute("SELECT rate FROM payout_rates WHERE bet_type = 'TWO_TOP'").fetchone()[0]
    finally:
        conn.close()
    assert applied == len(manager._get_migrations())
    assert rate == 1
