"""
Payout rate table: bet type -> multiplier.
"""

import logging

from domain.models.lottery import BET_TYPE_RULES
from repositories.interfaces import IPayoutRateRepository
from services import error_codes
from services.errors import MissingRateConfiguration, NotFoundError, ValidationError

logger = logging.getLogger("huay.services.rates")


class RateTableService:
    """
    Reads and edits payout multipliers.

    A missing rate is a configuration error and is raised, never defaulted.
    Edits only affect bets placed afterwards: every bet stores the rate it was
    priced with.
    """

    def __init__(self, rate_repo: IPayoutRateRepository):
        self.rate_repo = rate_repo

    def get_rate(self, bet_type: str) -> float:
        """
        Return the configured multiplier for a bet type.

        Raises:
            MissingRateConfiguration: no row (or a non-positive rate) for bet_type
        """
        row = self.rate_repo.get_rate(bet_type)
        if row is None or row["rate"] <= 0:
            raise MissingRateConfiguration(
                f"No payout rate configured for {bet_type}.",
                details={"bet_type": bet_type},
            )
        return row["rate"]

    def list_rates(self) -> list[dict]:
        """All configured rates with their static digit count and label."""
        rates = []
        for row in self.rate_repo.get_all():
            rule = BET_TYPE_RULES.get(row["bet_type"])
            rates.append(
                {
                    **row,
                    "digits": rule.digits if rule else None,
                    "label": rule.label if rule else row["bet_type"],
                }
            )
        return rates

    def update_rate(self, bet_type: str, rate: float) -> dict:
        if bet_type not in BET_TYPE_RULES:
            raise ValidationError(f"Unknown bet type: {bet_type}")
        if rate is None or rate <= 0:
            raise ValidationError("Payout rate must be positive.")
        self.rate_repo.set_rate(bet_type, float(rate))
        logger.info(f"Payout rate for {bet_type} set to {rate}")
        return self.rate_repo.get_rate(bet_type)

    def set_enabled(self, bet_type: str, enabled: bool) -> dict:
        if not self.rate_repo.set_enabled(bet_type, enabled):
            raise NotFoundError(
                f"No payout rate configured for {bet_type}.",
                code=error_codes.MISSING_RATE,
            )
        logger.info(f"Bet type {bet_type} {'enabled' if enabled else 'disabled'}")
        return self.rate_repo.get_rate(bet_type)
