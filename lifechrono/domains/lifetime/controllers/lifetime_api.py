"""Lifetime statistics API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from lifechrono.core.errors import ValidationError
from lifechrono.core.utils.dates import utc_today
from lifechrono.core.utils.validation import parse_int_arg
from lifechrono.domains.lifetime import services as lifetime_services

lifetime_api_bp = Blueprint("lifetime_api", __name__)


@lifetime_api_bp.get("/stats")
@jwt_required()
def stats():
    return jsonify({"ok": True, "stats": lifetime_services.get_stats(int(get_jwt_identity()))})


@lifetime_api_bp.get("/monthly")
@jwt_required()
def monthly():
    year = parse_int_arg(request.args.get("year"), "year", utc_today().year)
    if not 1970 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year}")
    months = lifetime_services.get_monthly(int(get_jwt_identity()), year)
    return jsonify({"ok": True, "year": year, "months": months})


@lifetime_api_bp.get("/mood-correlation")
@jwt_required()
def mood_correlation():
    series = lifetime_services.get_mood_correlation(int(get_jwt_identity()))
    return jsonify({"ok": True, "weeks": series})
