"""Recurring template JSON API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from lifechrono.core.utils.dates import utc_today
from lifechrono.core.utils.validation import parse_date_arg
from lifechrono.domains.recurring import services as recurring_services
from lifechrono.domains.recurring.schemas.recurring_schemas import (
    RecurringCreate,
    RecurringResponse,
    RecurringUpdate,
)

recurring_api_bp = Blueprint("recurring_api", __name__)


def _dump(template) -> dict:
    return RecurringResponse.model_validate(template).model_dump(mode="json")


@recurring_api_bp.get("")
@jwt_required()
def list_templates():
    templates = recurring_services.list_templates(int(get_jwt_identity()))
    return jsonify({"ok": True, "templates": [_dump(t) for t in templates]})


@recurring_api_bp.post("")
@jwt_required()
def create_template():
    payload = request.get_json(silent=True) or {}
    try:
        data = RecurringCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    template = recurring_services.create_template(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "template": _dump(template)}), 201


@recurring_api_bp.get("/suggestions")
@jwt_required()
def suggestions():
    day = parse_date_arg(request.args.get("date"), "date") or utc_today()
    templates = recurring_services.get_suggestions(int(get_jwt_identity()), day)
    return jsonify({"ok": True, "date": day.isoformat(), "suggestions": [_dump(t) for t in templates]})


@recurring_api_bp.patch("/<int:template_id>")
@jwt_required()
def update_template(template_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = RecurringUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": exc.errors(include_context=False)}), 400
    template = recurring_services.update_template(
        int(get_jwt_identity()), template_id, **data.model_dump(exclude_unset=True)
    )
    return jsonify({"ok": True, "template": _dump(template)})


@recurring_api_bp.delete("/<int:template_id>")
@jwt_required()
def delete_template(template_id: int):
    recurring_services.delete_template(int(get_jwt_identity()), template_id)
    return jsonify({"ok": True})
