"""Mood log JSON API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from lifechrono.domains.mood import services as mood_services
from lifechrono.domains.mood.schemas.mood_schemas import MoodDaySummary, MoodLogCreate, MoodLogResponse

mood_api_bp = Blueprint("mood_api", __name__)


def _dump_log(log) -> dict:
    return MoodLogResponse.model_validate(log).model_dump(mode="json")


@mood_api_bp.post("")
@jwt_required()
def create_mood_log():
    payload = request.get_json(silent=True) or {}
    try:
        data = MoodLogCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    log = mood_services.log_mood(int(get_jwt_identity()), data.score, data.note)
    return jsonify({"ok": True, "mood": _dump_log(log)}), 201


@mood_api_bp.get("")
@jwt_required()
def list_mood_logs():
    logs = mood_services.list_moods(int(get_jwt_identity()))
    return jsonify({"ok": True, "moods": [_dump_log(log) for log in logs]})


@mood_api_bp.get("/today")
@jwt_required()
def today_mood():
    summary = mood_services.get_today_summary(int(get_jwt_identity()))
    if summary is None:
        return jsonify({"ok": True, "today": None})
    data = MoodDaySummary(
        **{**summary, "logs": [MoodLogResponse.model_validate(log) for log in summary["logs"]]}
    )
    return jsonify({"ok": True, "today": data.model_dump(mode="json", by_alias=True)})
