"""
Account ledger: balance adjustments, deposit and withdrawal requests.
"""

import logging
import math

from domain.models.user import TX_ADJUSTMENT, TX_DEPOSIT, TX_WITHDRAWAL, TRANSACTION_TYPES
from repositories.interfaces import ITransactionRepository, IUserRepository
from services import error_codes
from services.errors import (
    AccountBlocked,
    InsufficientBalance,
    NotFoundError,
    ValidationError,
)
from services.notification_service import NotificationService
from utils.clock import now_ts
from utils.references import make_reference

logger = logging.getLogger("huay.services.account")


class AccountService:
    """
    All balance mutations go through adjust_balance or through the
    approval of a pending request; both write the balance change and its
    transaction row in one atomic step.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        transaction_repo: ITransactionRepository,
        notifier: NotificationService | None = None,
    ):
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo
        self.notifier = notifier

    def _require_user(self, user_id: int):
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        return user

    @staticmethod
    def _positive_amount(amount) -> float:
        try:
            value = round(float(amount), 2)
        except (TypeError, ValueError):
            raise ValidationError("Amount must be a number.") from None
        if not math.isfinite(value) or value <= 0:
            raise ValidationError("Amount must be positive.")
        return value

    def adjust_balance(
        self,
        user_id: int,
        delta: float,
        transaction_type: str = TX_ADJUSTMENT,
        reference: str | None = None,
        note: str | None = None,
    ) -> dict:
        """
        Atomically apply a signed balance change and append an approved transaction.

        Raises:
            ValidationError: zero delta or unknown transaction type
            InsufficientBalance: a debit larger than the balance
            ConflictError: reference already used
        """
        if transaction_type not in TRANSACTION_TYPES:
            raise ValidationError(f"Unknown transaction type: {transaction_type}")
        try:
            delta = float(delta)
        except (TypeError, ValueError):
            raise ValidationError("Balance adjustment must be a number.") from None
        if not math.isfinite(delta) or not delta:
            raise ValidationError("Balance adjustment must be a finite, non-zero number.")
        self._require_user(user_id)
        tx = self.transaction_repo.adjust_balance_atomic(
            user_id=user_id,
            delta=delta,
            tx_type=transaction_type,
            reference=reference or make_reference("ADJ"),
            note=note,
        )
        logger.info(
            f"Balance of user {user_id} adjusted by {delta:+.2f} ({transaction_type}), "
            f"now {tx['balance_after']:.2f}"
        )
        return tx

    def request_deposit(self, user_id: int, amount, slip_url: str | None = None) -> dict:
        value = self._positive_amount(amount)
        user = self._require_user(user_id)
        tx = self.transaction_repo.create_pending(
            user_id, TX_DEPOSIT, value, make_reference("DEP"), slip_url=slip_url
        )
        logger.info(f"Deposit request {tx['reference']} for user {user_id}: {value:.2f}")
        if self.notifier:
            self.notifier.notify_transaction("deposit_requested", user.username, tx)
        return tx

    def request_withdrawal(self, user_id: int, amount) -> dict:
        """
        Queue a withdrawal for admin review.

        The balance is only checked here and debited on approval, where the
        conditional update enforces it again.
        """
        value = self._positive_amount(amount)
        user = self._require_user(user_id)
        if user.is_blocked:
            raise AccountBlocked("This account is blocked from withdrawals.")
        if user.balance < value:
            raise InsufficientBalance(
                f"Insufficient balance: {user.balance:.2f} available, {value:.2f} requested.",
                details={"balance": user.balance, "required": value},
            )
        tx = self.transaction_repo.create_pending(
            user_id, TX_WITHDRAWAL, -value, make_reference("WDR")
        )
        logger.info(f"Withdrawal request {tx['reference']} for user {user_id}: {value:.2f}")
        if self.notifier:
            self.notifier.notify_transaction("withdrawal_requested", user.username, tx)
        return tx

    def approve_transaction(self, transaction_id: int) -> dict:
        tx = self.transaction_repo.approve_pending_atomic(transaction_id, now_ts())
        logger.info(
            f"Transaction {tx['reference']} approved; user {tx['user_id']} "
            f"balance {tx['balance_after']:.2f}"
        )
        self._notify_review("transaction_approved", tx)
        return tx

    def reject_transaction(self, transaction_id: int) -> dict:
        tx = self.transaction_repo.reject_pending(transaction_id, now_ts())
        logger.info(f"Transaction {tx['reference']} rejected")
        self._notify_review("transaction_rejected", tx)
        return tx

    def _notify_review(self, event: str, tx: dict) -> None:
        if not self.notifier:
            return
        user = self.user_repo.get_by_id(tx["user_id"])
        self.notifier.notify_transaction(event, user.username if user else str(tx["user_id"]), tx)

    def get_balance(self, user_id: int) -> float:
        balance = self.user_repo.get_balance(user_id)
        if balance is None:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        return balance

    def list_transactions(self, user_id: int, limit: int = 100) -> list[dict]:
        self._require_user(user_id)
        return self.transaction_repo.list_for_user(user_id, limit)

    def list_pending(self, limit: int = 100) -> list[dict]:
        return self.transaction_repo.list_pending(limit)
