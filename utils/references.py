"""
Reference and code generators.
"""

import secrets
import string
import time

_BASE36 = string.digits + string.ascii_uppercase


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def make_reference(prefix: str) -> str:
    """
    Unique transaction reference such as ``BET-LX3K9Q2A-7F3A91``.

    Millisecond timestamp plus random hex; the transactions table enforces
    uniqueness, so a collision surfaces as ConflictError rather than a
    silent duplicate.
    """
    return f"{prefix}-{_base36(int(time.time() * 1000))}-{secrets.token_hex(3).upper()}"


def make_referral_code(length: int = 8) -> str:
    """Random upper-case alphanumeric referral code."""
    return "".join(secrets.choice(_BASE36) for _ in range(length))
