"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from domain.models.bet import BET_STATUSES
from domain.models.lottery import BET_TYPES, LOTTERY_TYPES

_digits = validate.Regexp(r"^[0-9]+$", error="Must contain digits only.")
_iso_date = validate.Regexp(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$", error="Must be YYYY-MM-DD.")
_positive = validate.Range(min=0, min_inclusive=False)


# --- Users ---


class UserSchema(Schema):
    """Serialize User (never the password hash)."""

    id = fields.Int(required=True)
    username = fields.Str(required=True)
    balance = fields.Float()
    referral_code = fields.Str()
    referred_by = fields.Str(allow_none=True)
    affiliate_earnings = fields.Float()
    is_blocked = fields.Bool()
    created_at = fields.Str(allow_none=True)


class RegisterSchema(Schema):
    username = fields.Str(required=True, validate=validate.Length(min=3, max=32))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))
    referral_code = fields.Str(load_default=None, allow_none=True)


class LoginSchema(Schema):
    username = fields.Str(required=True)
    password = fields.Str(required=True, load_only=True)


class BlockUserSchema(Schema):
    blocked = fields.Bool(required=True)


class ReferrerSchema(Schema):
    referral_code = fields.Str(required=True, allow_none=True)


# --- Bets ---


class BetItemSchema(Schema):
    lottery_type = fields.Str(required=True, validate=validate.OneOf(LOTTERY_TYPES))
    bet_type = fields.Str(required=True, validate=validate.OneOf(BET_TYPES))
    numbers = fields.Str(required=True, validate=[validate.Length(min=1, max=3), _digits])
    amount = fields.Float(required=True, validate=_positive)
    draw_date = fields.Str(load_default=None, allow_none=True, validate=_iso_date)


class PlaceBetsSchema(Schema):
    user_id = fields.Int(required=True)
    items = fields.List(fields.Nested(BetItemSchema), required=True, validate=validate.Length(min=1))


class BetQuerySchema(Schema):
    user_id = fields.Int(load_default=None)
    status = fields.Str(load_default=None, validate=validate.OneOf(BET_STATUSES))
    lottery_type = fields.Str(load_default=None, validate=validate.OneOf(LOTTERY_TYPES))
    draw_date = fields.Str(load_default=None, validate=_iso_date)
    limit = fields.Int(load_default=500, validate=validate.Range(min=1, max=1000))


class BetSchema(Schema):
    id = fields.Int(required=True)
    user_id = fields.Int()
    lottery_type = fields.Str()
    bet_type = fields.Str()
    numbers = fields.Str()
    amount = fields.Float()
    rate = fields.Float(allow_none=True)
    potential_win = fields.Float()
    status = fields.Str()
    draw_date = fields.Str()
    reference = fields.Str(allow_none=True)
    win_amount = fields.Float(allow_none=True)
    matched_number = fields.Str(allow_none=True)
    error_message = fields.Str(allow_none=True)
    processed_at = fields.Int(allow_none=True)
    created_at = fields.Str(allow_none=True)


# --- Wallet ---


class TransactionSchema(Schema):
    id = fields.Int(required=True)
    user_id = fields.Int()
    type = fields.Str()
    amount = fields.Float()
    status = fields.Str()
    reference = fields.Str()
    slip_url = fields.Str(allow_none=True)
    source_user_id = fields.Int(allow_none=True)
    level = fields.Int(allow_none=True)
    note = fields.Str(allow_none=True)
    reviewed_at = fields.Int(allow_none=True)
    created_at = fields.Str(allow_none=True)
    balance_after = fields.Float()


class DepositSchema(Schema):
    user_id = fields.Int(required=True)
    amount = fields.Float(required=True, validate=_positive)
    slip_url = fields.Url(load_default=None, allow_none=True)


class WithdrawSchema(Schema):
    user_id = fields.Int(required=True)
    amount = fields.Float(required=True, validate=_positive)


class AdjustBalanceSchema(Schema):
    amount = fields.Float(required=True)
    note = fields.Str(load_default=None, allow_none=True)


# --- Results ---


class DrawResultCreateSchema(Schema):
    lottery_type = fields.Str(required=True, validate=validate.OneOf(LOTTERY_TYPES))
    draw_date = fields.Str(required=True, validate=_iso_date)
    first_prize = fields.Str(load_default=None, allow_none=True)
    three_digit_front = fields.Str(load_default=None, allow_none=True)
    three_digit_top = fields.Str(load_default=None, allow_none=True)
    three_digit_bottom = fields.Str(load_default=None, allow_none=True)
    two_digit_top = fields.Str(load_default=None, allow_none=True)
    two_digit_bottom = fields.Str(load_default=None, allow_none=True)
    run_top = fields.Str(load_default=None, allow_none=True)
    run_bottom = fields.Str(load_default=None, allow_none=True)


class DrawResultSchema(Schema):
    id = fields.Int(required=True)
    lottery_type = fields.Str()
    draw_date = fields.Str()
    first_prize = fields.Str(allow_none=True)
    three_digit_front = fields.Str(allow_none=True)
    three_digit_top = fields.Str(allow_none=True)
    three_digit_bottom = fields.Str(allow_none=True)
    two_digit_top = fields.Str(allow_none=True)
    two_digit_bottom = fields.Str(allow_none=True)
    run_top = fields.Str(allow_none=True)
    run_bottom = fields.Str(allow_none=True)
    status = fields.Str()
    is_processed = fields.Bool()
    processed_at = fields.Int(allow_none=True)
    total_winners = fields.Int()
    total_payout = fields.Float()
    created_at = fields.Str(allow_none=True)


class ResultQuerySchema(Schema):
    lottery_type = fields.Str(load_default=None, validate=validate.OneOf(LOTTERY_TYPES))
    processed = fields.Bool(load_default=False)
    limit = fields.Int(load_default=50, validate=validate.Range(min=1, max=500))


# --- Rates and restrictions ---


class RateUpdateSchema(Schema):
    rate = fields.Float(required=True, validate=_positive)


class ToggleSchema(Schema):
    is_enabled = fields.Bool(required=True)


class ActiveSchema(Schema):
    is_active = fields.Bool(required=True)


class BlockedNumberCreateSchema(Schema):
    lottery_type = fields.Str(required=True, validate=validate.OneOf(LOTTERY_TYPES))
    number = fields.Str(required=True, validate=[validate.Length(min=1, max=3), _digits])
    bet_type = fields.Str(load_default=None, allow_none=True, validate=validate.OneOf(BET_TYPES))
    start_date = fields.Str(load_default=None, allow_none=True, validate=_iso_date)
    end_date = fields.Str(load_default=None, allow_none=True, validate=_iso_date)
    is_active = fields.Bool(load_default=True)


class BlockedNumberSchema(Schema):
    id = fields.Int(required=True)
    lottery_type = fields.Str()
    number = fields.Str()
    bet_type = fields.Str(allow_none=True)
    is_active = fields.Bool()
    start_date = fields.Str(allow_none=True)
    end_date = fields.Str(allow_none=True)
    created_at = fields.Str(allow_none=True)


class BetLimitCreateSchema(Schema):
    number = fields.Str(required=True, validate=[validate.Length(min=1, max=3), _digits])
    max_amount = fields.Float(required=True, validate=_positive)
    lottery_types = fields.List(
        fields.Str(validate=validate.OneOf(LOTTERY_TYPES)), load_default=list
    )
    start_date = fields.Str(load_default=None, allow_none=True, validate=_iso_date)
    end_date = fields.Str(load_default=None, allow_none=True, validate=_iso_date)


class BetLimitSchema(Schema):
    id = fields.Int(required=True)
    number = fields.Str()
    max_amount = fields.Float()
    lottery_types = fields.List(fields.Str())
    is_active = fields.Bool()
    start_date = fields.Str(allow_none=True)
    end_date = fields.Str(allow_none=True)
    created_at = fields.Str(allow_none=True)
