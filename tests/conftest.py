"""
Pytest fixtures for tests.

Performance optimization: Uses a session-scoped schema template so migrations
run once; each test copies the resulting database file instead of
re-initializing it.

Import DRAW_DATE / LOTTERY from here instead of defining them locally.
"""

import shutil

import pytest

from database import Database
from domain.models.user import TX_DEPOSIT
from infrastructure.service_container import ServiceConfig, ServiceContainer
from repositories.bet_limit_repository import BetLimitRepository
from repositories.bet_repository import BetRepository
from repositories.blocked_number_repository import BlockedNumberRepository
from repositories.draw_result_repository import DrawResultRepository
from repositories.payout_rate_repository import PayoutRateRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository
from services.notification_service import NotificationService

# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

LOTTERY = "THAI_GOV"
"""Lottery type used by single-draw tests."""

DRAW_DATE = "2024-01-01"
"""Draw date used by single-draw tests."""


class RecordingNotifier(NotificationService):
    """Notification sink that records calls instead of posting them."""

    def __init__(self):
        super().__init__(webhook_url=None)
        self.events: list[tuple] = []

    def notify_transaction(self, event, username, transaction):
        self.events.append((event, username, transaction))

    def notify_bets_placed(self, username, bets, total):
        self.events.append(("bet_placed", username, total))

    def notify_draw_settled(self, draw, summary):
        self.events.append(("draw_settled", draw.id, summary))

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    All migrations run ONCE here. Tests copy from this template
    instead of running schema initialization each time.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    yield str(tmp_path / "temp.db")


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


# =============================================================================
# REPOSITORIES
# =============================================================================


@pytest.fixture
def user_repository(repo_db_path):
    return UserRepository(repo_db_path)


@pytest.fixture
def transaction_repository(repo_db_path):
    return TransactionRepository(repo_db_path)


@pytest.fixture
def bet_repository(repo_db_path):
    return BetRepository(repo_db_path)


@pytest.fixture
def draw_result_repository(repo_db_path):
    return DrawResultRepository(repo_db_path)


@pytest.fixture
def payout_rate_repository(repo_db_path):
    return PayoutRateRepository(repo_db_path)


@pytest.fixture
def blocked_number_repository(repo_db_path):
    return BlockedNumberRepository(repo_db_path)


@pytest.fixture
def bet_limit_repository(repo_db_path):
    return BetLimitRepository(repo_db_path)


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def container(repo_db_path, notifier):
    """Fully wired services over a fresh database with default rates."""
    config = ServiceConfig(
        db_path=repo_db_path,
        affiliate_level1_rate=0.10,
        affiliate_level2_rate=0.05,
        min_bet_amount=1.0,
        max_bet_items=100,
        settlement_stale_seconds=900,
        notify_webhook_url=None,
    )
    container = ServiceContainer(config, notifier=notifier)
    container.initialize()
    return container


@pytest.fixture
def make_user(container):
    """
    Factory: register a user and fund it with an approved deposit.

    make_user("alice", balance=1000, referral_code=bob.referral_code)
    """

    def _make(username: str, balance: float = 0.0, referral_code: str | None = None):
        user = container.user_service.register(username, "secret123", referral_code)
        if balance:
            container.account_service.adjust_balance(user.id, balance, TX_DEPOSIT)
        return container.user_service.get_user(user.id)

    return _make


@pytest.fixture
def bet_item():
    """Factory for bet slip items on the default draw."""

    def _item(bet_type: str, numbers: str, amount: float = 100, lottery_type: str = LOTTERY, draw_date: str = DRAW_DATE):
        return {
            "lottery_type": lottery_type,
            "bet_type": bet_type,
            "numbers": numbers,
            "amount": amount,
            "draw_date": draw_date,
        }

    return _item
