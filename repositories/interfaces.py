"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod


class IUserRepository(ABC):
    @abstractmethod
    def add(
        self,
        username: str,
        password_hash: str,
        referral_code: str,
        referred_by: str | None = None,
    ) -> int: ...

    @abstractmethod
    def get_by_id(self, user_id: int): ...

    @abstractmethod
    def get_by_username(self, username: str): ...

    @abstractmethod
    def get_by_referral_code(self, referral_code: str): ...

    @abstractmethod
    def get_all(self): ...

    @abstractmethod
    def get_balance(self, user_id: int) -> float | None: ...

    @abstractmethod
    def set_blocked(self, user_id: int, blocked: bool) -> bool: ...

    @abstractmethod
    def set_referred_by(self, user_id: int, referral_code: str | None) -> bool: ...

    @abstractmethod
    def get_referrals(self, referral_code: str): ...


class ITransactionRepository(ABC):
    @abstractmethod
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
    ) -> dict: ...

    @abstractmethod
    def create_pending(
        self,
        user_id: int,
        tx_type: str,
        amount: float,
        reference: str,
        slip_url: str | None = None,
    ) -> dict: ...

    @abstractmethod
    def get(self, transaction_id: int) -> dict | None: ...

    @abstractmethod
    def get_by_reference(self, reference: str) -> dict | None: ...

    @abstractmethod
    def list_for_user(self, user_id: int, limit: int = 100) -> list[dict]: ...

    @abstractmethod
    def approve_pending_atomic(self, transaction_id: int, reviewed_at: int) -> dict: ...

    @abstractmethod
    def reject_pending(self, transaction_id: int, reviewed_at: int) -> dict: ...


class IBetRepository(ABC):
    @abstractmethod
    def place_bets_atomic(
        self,
        *,
        user_id: int,
        rows: list[dict],
        reference: str,
        today: str,
    ): ...

    @abstractmethod
    def get_bet(self, bet_id: int): ...

    @abstractmethod
    def list_bets(
        self,
        user_id: int | None = None,
        status: str | None = None,
        lottery_type: str | None = None,
        draw_date: str | None = None,
        limit: int = 500,
    ): ...

    @abstractmethod
    def get_unsettled_bets(self, lottery_type: str, draw_date: str): ...

    @abstractmethod
    def settle_won_atomic(
        self,
        *,
        bet_id: int,
        win_amount: float,
        matched_number: str | None,
        reference: str,
        processed_at: int,
    ) -> bool: ...

    @abstractmethod
    def settle_lost(self, bet_id: int, processed_at: int) -> bool: ...

    @abstractmethod
    def mark_error(self, bet_id: int, message: str, processed_at: int) -> bool: ...

    @abstractmethod
    def get_draw_summary(self, lottery_type: str, draw_date: str) -> dict: ...


class IDrawResultRepository(ABC):
    @abstractmethod
    def create(self, lottery_type: str, draw_date: str, **numbers) -> int: ...

    @abstractmethod
    def get(self, draw_id: int): ...

    @abstractmethod
    def get_by_draw(self, lottery_type: str, draw_date: str): ...

    @abstractmethod
    def claim_for_processing(self, draw_id: int, token: str, now: int, stale_before: int) -> bool: ...

    @abstractmethod
    def mark_processed(
        self, draw_id: int, token: str, now: int, total_winners: int, total_payout: float
    ) -> bool: ...

    @abstractmethod
    def release_claim(self, draw_id: int, token: str) -> bool: ...


class IPayoutRateRepository(ABC):
    @abstractmethod
    def get_rate(self, bet_type: str) -> dict | None: ...

    @abstractmethod
    def get_all(self) -> list[dict]: ...

    @abstractmethod
    def set_rate(self, bet_type: str, rate: float) -> None: ...

    @abstractmethod
    def set_enabled(self, bet_type: str, enabled: bool) -> bool: ...


class IBlockedNumberRepository(ABC):
    @abstractmethod
    def add(
        self,
        lottery_type: str,
        number: str,
        bet_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        is_active: bool = True,
    ) -> int: ...

    @abstractmethod
    def get(self, blocked_id: int) -> dict | None: ...

    @abstractmethod
    def list_blocked(self, lottery_type: str | None = None, active_only: bool = False) -> list[dict]: ...

    @abstractmethod
    def set_active(self, blocked_id: int, is_active: bool) -> bool: ...

    @abstractmethod
    def delete(self, blocked_id: int) -> bool: ...


class IBetLimitRepository(ABC):
    @abstractmethod
    def add(
        self,
        number: str,
        max_amount: float,
        lottery_types: list[str] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> int: ...

    @abstractmethod
    def get(self, limit_id: int) -> dict | None: ...

    @abstractmethod
    def list_limits(self) -> list[dict]: ...

    @abstractmethod
    def set_active(self, limit_id: int, is_active: bool) -> bool: ...

    @abstractmethod
    def delete(self, limit_id: int) -> bool: ...
