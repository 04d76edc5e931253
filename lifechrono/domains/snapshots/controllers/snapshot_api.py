"""Snapshot admin API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from lifechrono.core.utils.decorators import super_admin_required
from lifechrono.core.utils.validation import parse_int_arg
from lifechrono.domains.snapshots.services import roll_weekly_snapshots

snapshot_api_bp = Blueprint("snapshot_api", __name__)


@snapshot_api_bp.post("/force")
@super_admin_required
def force_snapshots():
    weeks_back = max(0, parse_int_arg(request.args.get("weeksBack"), "weeksBack", 0))
    result = roll_weekly_snapshots(weeks_back)
    return jsonify({"ok": True, **result})
