"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, jwt_required
from pydantic import ValidationError

from lifechrono.core.auth.services import authenticate_user, issue_tokens, register_user, revoke_token
from lifechrono.core.users.schemas import LoginRequest, UserCreateRequest, serialize_user
from lifechrono.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = UserCreateRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}), 400
    user = register_user(data)
    return (
        jsonify({"ok": True, "user": serialize_user(user).model_dump(mode="json"), **issue_tokens(user)}),
        201,
    )


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}), 400
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return jsonify({"ok": True, **issue_tokens(user), "user": serialize_user(user).model_dump(mode="json")})


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
@limiter.limit("30/minute")
def refresh():
    claims = get_jwt()
    new_access = create_access_token(
        identity=str(get_jwt_identity()), additional_claims={"roles": claims.get("roles") or []}
    )
    return jsonify({"ok": True, "access_token": new_access})


@auth_bp.post("/logout")
@jwt_required(refresh=True)
def logout():
    jti = get_jwt().get("jti")
    if jti:
        revoke_token(jti, int(get_jwt_identity()))
    return jsonify({"ok": True})
