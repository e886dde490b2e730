"""
Service container for dependency injection and initialization.

This module centralizes repository and service creation and wiring so the
HTTP layer, scripts and tests all build the same object graph.

Usage:
    container = ServiceContainer(ServiceConfig(db_path="huay.db"))
    container.initialize()

    betting_service = container.betting_service
    settlement_service = container.settlement_service
"""

import logging
from dataclasses import dataclass
from typing import Any

import config
from database import Database
from repositories.bet_limit_repository import BetLimitRepository
from repositories.bet_repository import BetRepository
from repositories.blocked_number_repository import BlockedNumberRepository
from repositories.draw_result_repository import DrawResultRepository
from repositories.payout_rate_repository import PayoutRateRepository
from repositories.transaction_repository import TransactionRepository
from repositories.user_repository import UserRepository
from services.account_service import AccountService
from services.admin_stats_service import AdminStatsService
from services.affiliate_service import AffiliateService
from services.betting_service import BettingService
from services.draw_result_service import DrawResultService
from services.notification_service import NotificationService
from services.rate_table_service import RateTableService
from services.restriction_service import RestrictionService
from services.settlement_service import SettlementService
from services.user_service import UserService

logger = logging.getLogger("huay.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    user: UserRepository | None = None
    transaction: TransactionRepository | None = None
    bet: BetRepository | None = None
    draw_result: DrawResultRepository | None = None
    payout_rate: PayoutRateRepository | None = None
    blocked_number: BlockedNumberRepository | None = None
    bet_limit: BetLimitRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = config.DB_PATH

    # Affiliate commission
    affiliate_level1_rate: float = config.AFFILIATE_LEVEL1_RATE
    affiliate_level2_rate: float = config.AFFILIATE_LEVEL2_RATE

    # Bet placement
    min_bet_amount: float = config.MIN_BET_AMOUNT
    max_bet_items: int = config.MAX_BET_ITEMS

    # Settlement
    settlement_stale_seconds: int = config.SETTLEMENT_STALE_SECONDS

    # Notifications
    notify_webhook_url: str | None = config.NOTIFY_WEBHOOK_URL
    notify_username: str = config.NOTIFY_USERNAME
    notify_async: bool = True


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.
    """

    def __init__(self, config: ServiceConfig | None = None, notifier: NotificationService | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
            notifier: Notification sink override (tests pass a recorder)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()
        self._notifier_override = notifier

        self._database: Database | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        self._init_database()
        self._init_repositories()
        self._init_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Create the schema and apply migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        self._database = Database(self.config.db_path)

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")
        db_path = self.config.db_path
        self._repos.user = UserRepository(db_path)
        self._repos.transaction = TransactionRepository(db_path)
        self._repos.bet = BetRepository(db_path)
        self._repos.draw_result = DrawResultRepository(db_path)
        self._repos.payout_rate = PayoutRateRepository(db_path)
        self._repos.blocked_number = BlockedNumberRepository(db_path)
        self._repos.bet_limit = BetLimitRepository(db_path)

    def _init_services(self) -> None:
        """Build services in dependency order."""
        logger.debug("Initializing services")
        cfg = self.config

        notifier = self._notifier_override or NotificationService(
            webhook_url=cfg.notify_webhook_url,
            username=cfg.notify_username,
            run_async=cfg.notify_async,
        )
        self._services["notification"] = notifier

        rates = RateTableService(self._repos.payout_rate)
        self._services["rates"] = rates

        affiliate = AffiliateService(
            user_repo=self._repos.user,
            transaction_repo=self._repos.transaction,
            level1_rate=cfg.affiliate_level1_rate,
            level2_rate=cfg.affiliate_level2_rate,
        )
        self._services["affiliate"] = affiliate

        self._services["user"] = UserService(self._repos.user, affiliate)
        self._services["account"] = AccountService(
            self._repos.user, self._repos.transaction, notifier=notifier
        )
        self._services["betting"] = BettingService(
            bet_repo=self._repos.bet,
            user_repo=self._repos.user,
            rate_service=rates,
            affiliate_service=affiliate,
            notifier=notifier,
            min_bet_amount=cfg.min_bet_amount,
            max_bet_items=cfg.max_bet_items,
        )
        self._services["settlement"] = SettlementService(
            draw_repo=self._repos.draw_result,
            bet_repo=self._repos.bet,
            rate_service=rates,
            notifier=notifier,
            stale_seconds=cfg.settlement_stale_seconds,
        )
        self._services["results"] = DrawResultService(self._repos.draw_result, self._repos.bet)
        self._services["restrictions"] = RestrictionService(
            self._repos.blocked_number, self._repos.bet_limit
        )
        self._services["stats"] = AdminStatsService(
            self._repos.user, self._repos.bet, self._repos.transaction, self._repos.draw_result
        )

    # --- Repository accessors ---

    @property
    def repos(self) -> RepositoryContainer:
        return self._repos

    @property
    def database(self) -> Database | None:
        return self._database

    # --- Service accessors ---

    @property
    def notification_service(self) -> NotificationService:
        return self._services["notification"]

    @property
    def rate_table_service(self) -> RateTableService:
        return self._services["rates"]

    @property
    def affiliate_service(self) -> AffiliateService:
        return self._services["affiliate"]

    @property
    def user_service(self) -> UserService:
        return self._services["user"]

    @property
    def account_service(self) -> AccountService:
        return self._services["account"]

    @property
    def betting_service(self) -> BettingService:
        return self._services["betting"]

    @property
    def settlement_service(self) -> SettlementService:
        return self._services["settlement"]

    @property
    def draw_result_service(self) -> DrawResultService:
        return self._services["results"]

    @property
    def restriction_service(self) -> RestrictionService:
        return self._services["restrictions"]

    @property
    def admin_stats_service(self) -> AdminStatsService:
        return self._services["stats"]
