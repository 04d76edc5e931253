"""Dashboard JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from lifechrono.core.utils.validation import parse_date_arg
from lifechrono.domains.dashboard.services import get_weekly_dashboard

dashboard_api_bp = Blueprint("dashboard_api", __name__)


@dashboard_api_bp.get("/week")
@jwt_required()
def week():
    week_start = parse_date_arg(request.args.get("weekStart"), "weekStart")
    data = get_weekly_dashboard(int(get_jwt_identity()), week_start)
    return jsonify({"ok": True, "dashboard": data})
