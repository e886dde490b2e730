"""Registration, login and user profile routes."""

from __future__ import annotations

from flask import Blueprint, request

from web import get_container
from web.responses import ok
from web.schemas import LoginSchema, RegisterSchema, UserSchema

auth_bp = Blueprint("auth", __name__)

_user_schema = UserSchema()
_register_schema = RegisterSchema()
_login_schema = LoginSchema()


@auth_bp.post("/auth/register")
def register():
    data = _register_schema.load(request.get_json(silent=True) or {})
    user = get_container().user_service.register(
        data["username"], data["password"], data.get("referral_code")
    )
    return ok(_user_schema.dump(user), status_code=201)


@auth_bp.post("/auth/login")
def login():
    data = _login_schema.load(request.get_json(silent=True) or {})
    user = get_container().user_service.authenticate(data["username"], data["password"])
    return ok(_user_schema.dump(user))


@auth_bp.get("/users/<int:user_id>")
def get_user(user_id: int):
    user = get_container().user_service.get_user(user_id)
    return ok(_user_schema.dump(user))
