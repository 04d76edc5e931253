"""Insight API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from lifechrono.core.insights import services as insight_services
from lifechrono.core.insights.schemas import InsightResponse
from lifechrono.core.utils.decorators import super_admin_required
from lifechrono.core.utils.validation import parse_int_arg

insights_api_bp = Blueprint("insights_api", __name__)


def _dump(insight) -> dict | None:
    if insight is None:
        return None
    return InsightResponse.model_validate(insight).model_dump(mode="json", by_alias=True)


def _offset_arg(name: str) -> int:
    return max(0, parse_int_arg(request.args.get(name), name, 0))


@insights_api_bp.get("/current-week")
@jwt_required()
def current_week():
    insight = insight_services.get_current_week_insight(int(get_jwt_identity()))
    return jsonify({"ok": True, "insight": _dump(insight)})


@insights_api_bp.delete("/reset")
@jwt_required()
def reset_current_week():
    insight = insight_services.reset_current_week(int(get_jwt_identity()))
    return jsonify({"ok": True, "insight": _dump(insight)})


@insights_api_bp.get("/latest")
@jwt_required()
def latest():
    insights = insight_services.get_latest_insights(int(get_jwt_identity()))
    return jsonify({"ok": True, "insights": [_dump(i) for i in insights]})


@insights_api_bp.get("/weekly-history")
@jwt_required()
def weekly_history():
    history = insight_services.get_weekly_history(int(get_jwt_identity()))
    return jsonify(
        {
            "ok": True,
            "weeks": [
                {
                    "weekStart": item["weekStart"].isoformat(),
                    "weekEnd": item["weekEnd"].isoformat(),
                    "label": item["label"],
                    "insight": _dump(item["insight"]),
                }
                for item in history
            ],
        }
    )


@insights_api_bp.post("/generate-week")
@jwt_required()
def generate_week():
    insight = insight_services.generate_week_insight(int(get_jwt_identity()), _offset_arg("weeksBack"))
    return jsonify({"ok": True, "insight": _dump(insight)})


@insights_api_bp.get("/monthly-history")
@jwt_required()
def monthly_history():
    history = insight_services.get_monthly_history(int(get_jwt_identity()))
    return jsonify(
        {
            "ok": True,
            "months": [
                {
                    "monthStart": item["monthStart"].isoformat(),
                    "monthEnd": item["monthEnd"].isoformat(),
                    "label": item["label"],
                    "insight": _dump(item["insight"]),
                }
                for item in history
            ],
        }
    )


@insights_api_bp.post("/generate-month")
@jwt_required()
def generate_month():
    insight = insight_services.generate_month_insight(int(get_jwt_identity()), _offset_arg("monthsBack"))
    return jsonify({"ok": True, "insight": _dump(insight)})


@insights_api_bp.get("/test")
@super_admin_required
def test_connection():
    return jsonify({"ok": True, **insight_services.test_model_connection()})
