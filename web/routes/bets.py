"""Bet placement and bet listing routes."""

from __future__ import annotations

from flask import Blueprint, request

from web import get_container
from web.responses import ok
from web.schemas import BetQuerySchema, BetSchema, PlaceBetsSchema

bets_bp = Blueprint("bets", __name__)

_bets_schema = BetSchema(many=True)
_place_schema = PlaceBetsSchema()
_query_schema = BetQuerySchema()


@bets_bp.post("/bets")
def place_bets():
    """Place a batch of bets; all or nothing."""

    data = _place_schema.load(request.get_json(silent=True) or {})
    placed = get_container().betting_service.place_bets(data["user_id"], data["items"])
    return ok(
        {
            "bets": _bets_schema.dump(placed["bets"]),
            "total": placed["total"],
            "balance": placed["balance"],
            "reference": placed["reference"],
        },
        status_code=201,
    )


@bets_bp.get("/bets")
def list_bets():
    query = _query_schema.load(request.args.to_dict())
    bets = get_container().betting_service.list_bets(**query)
    return ok(_bets_schema.dump(bets))
