"""Back-office routes. Every endpoint requires the X-Admin-Token header."""

from __future__ import annotations

from flask import Blueprint, request

from web import get_container
from web.auth import admin_required
from web.responses import ok
from web.schemas import (
    ActiveSchema,
    AdjustBalanceSchema,
    BetLimitCreateSchema,
    BetLimitSchema,
    BetSchema,
    BlockedNumberCreateSchema,
    BlockedNumberSchema,
    BlockUserSchema,
    DrawResultCreateSchema,
    DrawResultSchema,
    RateUpdateSchema,
    ReferrerSchema,
    ToggleSchema,
    TransactionSchema,
    UserSchema,
)

admin_bp = Blueprint("admin", __name__)

_result_schema = DrawResultSchema()
_result_create_schema = DrawResultCreateSchema()
_tx_schema = TransactionSchema()
_txs_schema = TransactionSchema(many=True)
_user_schema = UserSchema()
_users_schema = UserSchema(many=True)
_bet_schema = BetSchema()
_blocked_schema = BlockedNumberSchema()
_blocked_list_schema = BlockedNumberSchema(many=True)
_blocked_create_schema = BlockedNumberCreateSchema()
_limit_schema = BetLimitSchema()
_limits_schema = BetLimitSchema(many=True)
_limit_create_schema = BetLimitCreateSchema()


def _json() -> dict:
    return request.get_json(silent=True) or {}


# --- Results and settlement ---


@admin_bp.post("/results")
@admin_required
def create_result():
    data = _result_create_schema.load(_json())
    lottery_type = data.pop("lottery_type")
    draw_date = data.pop("draw_date")
    draw = get_container().draw_result_service.create_result(lottery_type, draw_date, **data)
    return ok(_result_schema.dump(draw), status_code=201)


@admin_bp.post("/results/<int:draw_id>/process")
@admin_required
def process_result(draw_id: int):
    summary = get_container().settlement_service.process_result(draw_id)
    return ok(summary.to_dict())


# --- Payout rates ---


@admin_bp.put("/payout-rates/<bet_type>")
@admin_required
def update_rate(bet_type: str):
    data = RateUpdateSchema().load(_json())
    return ok(get_container().rate_table_service.update_rate(bet_type, data["rate"]))


@admin_bp.patch("/payout-rates/<bet_type>")
@admin_required
def toggle_bet_type(bet_type: str):
    data = ToggleSchema().load(_json())
    return ok(get_container().rate_table_service.set_enabled(bet_type, data["is_enabled"]))


# --- Blocked numbers ---


@admin_bp.get("/blocked-numbers")
@admin_required
def list_blocked_numbers():
    lottery_type = request.args.get("lottery_type") or None
    blocked = get_container().restriction_service.list_blocked_numbers(lottery_type)
    return ok(_blocked_list_schema.dump(blocked))


@admin_bp.post("/blocked-numbers")
@admin_required
def create_blocked_number():
    data = _blocked_create_schema.load(_json())
    blocked = get_container().restriction_service.block_number(**data)
    return ok(_blocked_schema.dump(blocked), status_code=201)


@admin_bp.patch("/blocked-numbers/<int:blocked_id>")
@admin_required
def update_blocked_number(blocked_id: int):
    data = ActiveSchema().load(_json())
    blocked = get_container().restriction_service.set_blocked_active(blocked_id, data["is_active"])
    return ok(_blocked_schema.dump(blocked))


@admin_bp.delete("/blocked-numbers/<int:blocked_id>")
@admin_required
def delete_blocked_number(blocked_id: int):
    get_container().restriction_service.delete_blocked_number(blocked_id)
    return ok({"deleted": blocked_id})


# --- Bet limits ---


@admin_bp.get("/bet-limits")
@admin_required
def list_bet_limits():
    return ok(_limits_schema.dump(get_container().restriction_service.list_limits()))


@admin_bp.post("/bet-limits")
@admin_required
def create_bet_limit():
    data = _limit_create_schema.load(_json())
    limit = get_container().restriction_service.add_limit(**data)
    return ok(_limit_schema.dump(limit), status_code=201)


@admin_bp.patch("/bet-limits/<int:limit_id>")
@admin_required
def update_bet_limit(limit_id: int):
    data = ActiveSchema().load(_json())
    limit = get_container().restriction_service.set_limit_active(limit_id, data["is_active"])
    return ok(_limit_schema.dump(limit))


@admin_bp.delete("/bet-limits/<int:limit_id>")
@admin_required
def delete_bet_limit(limit_id: int):
    get_container().restriction_service.delete_limit(limit_id)
    return ok({"deleted": limit_id})


# --- Wallet review ---


@admin_bp.get("/transactions/pending")
@admin_required
def list_pending_transactions():
    return ok(_txs_schema.dump(get_container().account_service.list_pending()))


@admin_bp.post("/transactions/<int:transaction_id>/approve")
@admin_required
def approve_transaction(transaction_id: int):
    tx = get_container().account_service.approve_transaction(transaction_id)
    return ok(_tx_schema.dump(tx))


@admin_bp.post("/transactions/<int:transaction_id>/reject")
@admin_required
def reject_transaction(transaction_id: int):
    tx = get_container().account_service.reject_transaction(transaction_id)
    return ok(_tx_schema.dump(tx))


# --- Users ---


@admin_bp.get("/users")
@admin_required
def list_users():
    return ok(_users_schema.dump(get_container().user_service.list_users()))


@admin_bp.post("/users/<int:user_id>/block")
@admin_required
def block_user(user_id: int):
    data = BlockUserSchema().load(_json())
    user = get_container().user_service.set_blocked(user_id, data["blocked"])
    return ok(_user_schema.dump(user))


@admin_bp.put("/users/<int:user_id>/referrer")
@admin_required
def reassign_referrer(user_id: int):
    data = ReferrerSchema().load(_json())
    user = get_container().affiliate_service.assign_referrer(user_id, data["referral_code"])
    return ok(_user_schema.dump(user))


@admin_bp.post("/users/<int:user_id>/adjust-balance")
@admin_required
def adjust_balance(user_id: int):
    data = AdjustBalanceSchema().load(_json())
    tx = get_container().account_service.adjust_balance(user_id, data["amount"], note=data["note"])
    return ok(_tx_schema.dump(tx))


# --- Bets and stats ---


@admin_bp.post("/bets/<int:bet_id>/confirm")
@admin_required
def confirm_bet(bet_id: int):
    bet = get_container().betting_service.confirm_bet(bet_id)
    return ok(_bet_schema.dump(bet))


@admin_bp.get("/stats")
@admin_required
def stats():
    return ok(get_container().admin_stats_service.get_stats())
