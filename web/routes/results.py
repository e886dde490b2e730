"""Public draw result, blocked number and payout rate routes."""

from __future__ import annotations

from flask import Blueprint, request

from web import get_container
from web.responses import ok
from web.schemas import BlockedNumberSchema, DrawResultSchema, ResultQuerySchema

results_bp = Blueprint("results", __name__)

_result_schema = DrawResultSchema()
_results_schema = DrawResultSchema(many=True)
_blocked_schema = BlockedNumberSchema(many=True)
_query_schema = ResultQuerySchema()


@results_bp.get("/results")
def list_results():
    query = _query_schema.load(request.args.to_dict())
    results = get_container().draw_result_service.list_results(
        query["lottery_type"], query["processed"], query["limit"]
    )
    return ok(_results_schema.dump(results))


@results_bp.get("/results/<lottery_type>/latest")
def latest_result(lottery_type: str):
    draw = get_container().draw_result_service.get_latest(lottery_type)
    return ok(_result_schema.dump(draw))


@results_bp.get("/results/<lottery_type>/<draw_date>/winners")
def draw_winners(lottery_type: str, draw_date: str):
    return ok(get_container().draw_result_service.get_winners(lottery_type, draw_date))


@results_bp.get("/blocked-numbers")
def list_blocked_numbers():
    """Blocks currently in force, optionally for one lottery type."""

    lottery_type = request.args.get("lottery_type") or None
    blocked = get_container().restriction_service.list_blocked_numbers(
        lottery_type, in_force_only=True
    )
    return ok(_blocked_schema.dump(blocked))


@results_bp.get("/payout-rates")
def list_payout_rates():
    return ok(get_container().rate_table_service.list_rates())
