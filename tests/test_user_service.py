"""
Tests for registration, login and account blocking.
"""

import pytest

from services import error_codes
from services.errors import AccountBlocked, ConflictError, NotFoundError, ValidationError


def test_register_and_login(container):
    user = container.user_service.register("alice", "secret123")

    assert user.balance == 0
    assert len(user.referral_code) == 8
    assert user.password_hash != "secret123"
    assert container.user_service.authenticate("alice", "secret123").id == user.id


def test_referral_codes_are_unique(container):
    codes = {container.user_service.register(f"user{i}", "secret123").referral_code for i in range(10)}
    assert len(codes) == 10


def test_register_with_referral(container):
    parent = container.user_service.register("parent", "secret123")
    child = container.user_service.register("child", "secret123", parent.referral_code.lower())
    assert child.referred_by == parent.referral_code


def test_duplicate_username(container):
    container.user_service.register("alice", "secret123")
    with pytest.raises(ConflictError) as exc_info:
        container.user_service.register("alice", "another123")
    assert exc_info.value.code == error_codes.USERNAME_TAKEN


@pytest.mark.parametrize(
    "username,password",
    [("ab", "secret123"), ("has space", "secret123"), ("alice", "123")],
)
def test_register_validation(container, username, password):
    with pytest.raises(ValidationError):
        container.user_service.register(username, password)


def test_wrong_password(container):
    container.user_service.register("alice", "secret123")
    with pytest.raises(ValidationError) as exc_info:
        container.user_service.authenticate("alice", "wrong-one")
    assert exc_info.value.code == error_codes.INVALID_CREDENTIALS
    with pytest.raises(ValidationError):
        container.user_service.authenticate("nobody", "secret123")


def test_blocked_user_cannot_login(container):
    user = container.user_service.register("alice", "secret123")
    blocked = container.user_service.set_blocked(user.id, True)
    assert blocked.is_blocked

    with pytest.raises(AccountBlocked):
        container.user_service.authenticate("alice", "secret123")

    container.user_service.set_blocked(user.id, False)
    assert container.user_service.authenticate("alice", "secret123").id == user.id


def test_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.user_service.get_user(404)
    with pytest.raises(NotFoundError):
        container.user_service.set_blocked(404, True)
