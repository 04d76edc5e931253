"""User controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from lifechrono.core.users.schemas import WeeklyGoalsUpdate, serialize_user
from lifechrono.core.users.services import get_me, update_weekly_goals

user_api_bp = Blueprint("user_api", __name__)


@user_api_bp.get("/me")
@jwt_required()
def api_me():
    user = get_me(int(get_jwt_identity()))
    return jsonify({"ok": True, "user": serialize_user(user).model_dump(mode="json")})


@user_api_bp.patch("/goals")
@jwt_required()
def api_update_goals():
    payload = request.get_json(silent=True) or {}
    try:
        data = WeeklyGoalsUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    user = update_weekly_goals(int(get_jwt_identity()), data.model_dump())
    return jsonify({"ok": True, "user": serialize_user(user).model_dump(mode="json")})
