"""
User registration, login and account administration.
"""

import logging
import re

from werkzeug.security import check_password_hash, generate_password_hash

from domain.models.user import User
from repositories.interfaces import IUserRepository
from services import error_codes
from services.affiliate_service import AffiliateService
from services.errors import AccountBlocked, ConflictError, NotFoundError, ValidationError
from utils.references import make_referral_code

logger = logging.getLogger("huay.services.user")

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,32}$")
MIN_PASSWORD_LENGTH = 6
_REFERRAL_CODE_ATTEMPTS = 5


class UserService:
    """Handles account lifecycle; balances are owned by AccountService."""

    def __init__(self, user_repo: IUserRepository, affiliate_service: AffiliateService):
        self.user_repo = user_repo
        self.affiliate_service = affiliate_service

    def register(self, username: str, password: str, referral_code: str | None = None) -> User:
        """
        Create an account with a fresh referral code.

        Raises:
            ValidationError: bad username/password or unknown referral code
            ConflictError: username already taken
        """
        username = (username or "").strip()
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username must be 3-32 characters of letters, digits, '_' or '.'."
            )
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if self.user_repo.get_by_username(username):
            raise ConflictError(f"Username {username} is taken.", code=error_codes.USERNAME_TAKEN)

        # A brand-new account has no downline, so any existing referrer is cycle-free
        referrer = self.affiliate_service.resolve_referral_code(referral_code)
        password_hash = generate_password_hash(password, method="scrypt")

        for attempt in range(_REFERRAL_CODE_ATTEMPTS):
            code = make_referral_code()
            if self.user_repo.get_by_referral_code(code):
                continue
            try:
                user_id = self.user_repo.add(
                    username,
                    password_hash,
                    code,
                    referrer.referral_code if referrer else None,
                )
            except ConflictError:
                if self.user_repo.get_by_username(username):
                    raise ConflictError(
                        f"Username {username} is taken.", code=error_codes.USERNAME_TAKEN
                    )
                logger.debug(f"Referral code collision on attempt {attempt + 1}")
                continue
            logger.info(
                f"Registered user {user_id} ({username})"
                + (f" referred by {referrer.id}" if referrer else "")
            )
            return self.user_repo.get_by_id(user_id)
        raise ConflictError("Could not allocate a unique referral code; try again.")

    def authenticate(self, username: str, password: str) -> User:
        user = self.user_repo.get_by_username((username or "").strip())
        if user is None or not check_password_hash(user.password_hash, password or ""):
            raise ValidationError(
                "Invalid username or password.", code=error_codes.INVALID_CREDENTIALS
            )
        if user.is_blocked:
            raise AccountBlocked("This account is blocked.")
        return user

    def get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        return user

    def list_users(self) -> list[User]:
        return self.user_repo.get_all()

    def set_blocked(self, user_id: int, blocked: bool) -> User:
        if not self.user_repo.set_blocked(user_id, blocked):
            raise NotFoundError(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        logger.info(f"User {user_id} {'blocked' if blocked else 'unblocked'}")
        return self.user_repo.get_by_id(user_id)
