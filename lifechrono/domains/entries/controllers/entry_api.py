"""Time entry JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from lifechrono.core.utils.validation import parse_date_arg
from lifechrono.domains.entries import services as entry_services
from lifechrono.domains.entries.schemas.entry_schemas import EntryCreate, EntryResponse, EntryUpdate

entry_api_bp = Blueprint("entry_api", __name__)


def _dump(entry) -> dict:
    return EntryResponse.model_validate(entry).model_dump(mode="json")


@entry_api_bp.get("")
@jwt_required()
def list_entries():
    """Entries for one day, one week, or an inclusive date range."""
    user_id = int(get_jwt_identity())
    day = parse_date_arg(request.args.get("date"), "date")
    week_start = parse_date_arg(request.args.get("weekStart"), "weekStart")
    start = parse_date_arg(request.args.get("startDate"), "startDate")
    end = parse_date_arg(request.args.get("endDate"), "endDate")

    if day:
        entries = entry_services.get_by_date(user_id, day)
    elif week_start:
        entries = entry_services.get_by_week(user_id, week_start)
    elif start and end:
        entries = entry_services.get_by_range(user_id, start, end)
    else:
        return jsonify({"ok": False, "error": "validation_error", "message": "Provide date, weekStart, or startDate and endDate"}), 400
    return jsonify({"ok": True, "entries": [_dump(e) for e in entries]})


@entry_api_bp.post("")
@jwt_required()
def create_entry():
    payload = request.get_json(silent=True) or {}
    try:
        data = EntryCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    entry = entry_services.create_entry(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "entry": _dump(entry)}), 201


@entry_api_bp.put("/<int:entry_id>")
@entry_api_bp.patch("/<int:entry_id>")
@jwt_required()
def update_entry(entry_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = EntryUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    entry = entry_services.update_entry(
        int(get_jwt_identity()), entry_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"ok": True, "entry": _dump(entry)})


@entry_api_bp.delete("/<int:entry_id>")
@jwt_required()
def delete_entry(entry_id: int):
    entry_services.delete_entry(int(get_jwt_identity()), entry_id)
    return jsonify({"ok": True})
