"""Deposit, withdrawal and transaction history routes."""

from __future__ import annotations

from flask import Blueprint, request

from web import get_container
from web.responses import ok
from web.schemas import DepositSchema, TransactionSchema, WithdrawSchema

wallet_bp = Blueprint("wallet", __name__)

_tx_schema = TransactionSchema()
_txs_schema = TransactionSchema(many=True)
_deposit_schema = DepositSchema()
_withdraw_schema = WithdrawSchema()


@wallet_bp.get("/transactions/<int:user_id>")
def list_transactions(user_id: int):
    txs = get_container().account_service.list_transactions(user_id)
    return ok(_txs_schema.dump(txs))


@wallet_bp.post("/transactions/deposit")
def request_deposit():
    data = _deposit_schema.load(request.get_json(silent=True) or {})
    tx = get_container().account_service.request_deposit(
        data["user_id"], data["amount"], data.get("slip_url")
    )
    return ok(_tx_schema.dump(tx), status_code=201)


@wallet_bp.post("/transactions/withdraw")
def request_withdrawal():
    data = _withdraw_schema.load(request.get_json(silent=True) or {})
    tx = get_container().account_service.request_withdrawal(data["user_id"], data["amount"])
    return ok(_tx_schema.dump(tx), status_code=201)
