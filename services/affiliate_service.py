"""
Two-level affiliate commission.
"""

import logging

from config import AFFILIATE_LEVEL1_RATE, AFFILIATE_LEVEL2_RATE
from domain.models.user import TX_AFFILIATE_COMMISSION, User
from repositories.interfaces import ITransactionRepository, IUserRepository
from services import error_codes
from services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("huay.services.affiliate")


class AffiliateService:
    """
    Pays commission up the referral chain when a user wagers.

    The chain is read from `referred_by` pointers at commission time:
    Level 1 is the bettor's referrer, Level 2 is the referrer's referrer.
    Each credit commits atomically with its `affiliate_commission` row and
    is keyed by a deterministic reference, so retrying a distribution never
    pays twice.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        transaction_repo: ITransactionRepository,
        level1_rate: float | None = None,
        level2_rate: float | None = None,
    ):
        self.user_repo = user_repo
        self.transaction_repo = transaction_repo
        self.level1_rate = level1_rate if level1_rate is not None else AFFILIATE_LEVEL1_RATE
        self.level2_rate = level2_rate if level2_rate is not None else AFFILIATE_LEVEL2_RATE

    def _referrer_of(self, user: User) -> User | None:
        if not user.referred_by:
            return None
        return self.user_repo.get_by_referral_code(user.referred_by)

    def get_upline(self, user: User) -> list[User]:
        """[level1, level2] referrers, shorter when the chain ends early."""
        upline = []
        seen = {user.id}
        current = user
        for _ in (1, 2):
            referrer = self._referrer_of(current)
            if referrer is None or referrer.id in seen:
                break
            upline.append(referrer)
            seen.add(referrer.id)
            current = referrer
        return upline

    def distribute_commission(
        self, betting_user_id: int, wagered_amount: float, reference: str
    ) -> list[dict]:
        """
        Credit Level 1 and Level 2 referrers for a wager.

        Args:
            betting_user_id: User who placed the bet
            wagered_amount: Total stake the commission is computed on
            reference: Reference of the bet batch; commission rows use
                `{reference}-L1` and `{reference}-L2`

        Returns:
            List of credits made, each {level, user_id, amount, reference}.
            Empty when the bettor has no referrer.
        """
        if wagered_amount <= 0:
            return []
        user = self.user_repo.get_by_id(betting_user_id)
        if user is None:
            raise NotFoundError(
                f"User {betting_user_id} not found.", code=error_codes.USER_NOT_FOUND
            )

        credits = []
        rates = (self.level1_rate, self.level2_rate)
        for level, (referrer, rate) in enumerate(zip(self.get_upline(user), rates), start=1):
            amount = round(wagered_amount * rate, 2)
            if amount <= 0:
                continue
            level_ref = f"{reference}-L{level}"
            try:
                self.transaction_repo.adjust_balance_atomic(
                    user_id=referrer.id,
                    delta=amount,
                    tx_type=TX_AFFILIATE_COMMISSION,
                    reference=level_ref,
                    note=f"level {level} commission from user {betting_user_id}",
                    source_user_id=betting_user_id,
                    level=level,
                    is_affiliate_credit=True,
                )
            except ConflictError:
                # Reference already used: this level was credited by an earlier attempt
                logger.info(f"Commission {level_ref} already credited; skipping")
                continue
            credits.append(
                {"level": level, "user_id": referrer.id, "amount": amount, "reference": level_ref}
            )
        if credits:
            logger.info(
                f"Distributed commission for user {betting_user_id} on {wagered_amount:.2f}: "
                + ", ".join(f"L{c['level']}={c['amount']:.2f}" for c in credits)
            )
        return credits

    def resolve_referral_code(self, referral_code: str | None) -> User | None:
        """Look up the owner of a referral code; unknown codes are a ValidationError."""
        if not referral_code:
            return None
        referrer = self.user_repo.get_by_referral_code(referral_code.strip().upper())
        if referrer is None:
            raise ValidationError(
                f"Unknown referral code: {referral_code}", code=error_codes.INVALID_REFERRAL
            )
        return referrer

    def assign_referrer(self, user_id: int, referral_code: str | None) -> User:
        """
        Point a user's `referred_by` at another user (or clear it).

        Rejects links that would make the user their own ancestor.
        """
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        referrer = self.resolve_referral_code(referral_code)
        if referrer is not None:
            ancestor = referrer
            visited = set()
            while ancestor is not None and ancestor.id not in visited:
                if ancestor.id == user.id:
                    raise ValidationError(
                        "Referral link would create a cycle.",
                        code=error_codes.INVALID_REFERRAL,
                        details={"user_id": user.id, "referral_code": referrer.referral_code},
                    )
                visited.add(ancestor.id)
                ancestor = self._referrer_of(ancestor)
        new_code = referrer.referral_code if referrer else None
        self.user_repo.set_referred_by(user.id, new_code)
        logger.info(f"User {user.id} referrer set to {new_code}")
        return self.user_repo.get_by_id(user.id)

    def get_summary(self, user_id: int) -> dict:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        direct = self.user_repo.get_referrals(user.referral_code)
        totals = self.transaction_repo.get_commission_totals(user.id)
        return {
            "user_id": user.id,
            "referral_code": user.referral_code,
            "affiliate_earnings": user.affiliate_earnings,
            "direct_referrals": len(direct),
            "second_level_referrals": self.user_repo.count_second_level_referrals(
                user.referral_code
            ),
            "level1_commission": totals.get(1, 0.0),
            "level2_commission": totals.get(2, 0.0),
            "level1_rate": self.level1_rate,
            "level2_rate": self.level2_rate,
            "referrals": [
                {"id": r.id, "username": r.username, "created_at": r.created_at} for r in direct
            ],
        }
