"""Insight generation: narrative styles, model client fallback and persistence."""

import dataclasses
import re
from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from lifechrono.core.categories import CATEGORIES, DEFAULT_WEEKLY_GOALS, Category
from lifechrono.core.errors import ExternalServiceError
from lifechrono.core.insights import services as insight_services
from lifechrono.core.insights.ai_client import GeminiClient, parse_insight_payload
from lifechrono.core.insights.context import InsightContext, assemble_context, previous_period
from lifechrono.core.insights.models import PERIOD_MONTH, PERIOD_WEEK, SOURCE_FALLBACK, SOURCE_MODEL, Insight
from lifechrono.core.insights.narrative import (
    OBSERVER_BANNED_PHRASES,
    OBSERVER_BANNED_WORDS,
    OBSERVER_OPENERS,
    CoachStyle,
    ObserverStyle,
    get_style,
)
from lifechrono.domains.entries.services import create_entry
from lifechrono.domains.mood.services import log_mood
from lifechrono.tests.helpers import auth_headers, span

MONDAY = date(2026, 3, 2)
TODAY = date(2026, 3, 4)


def _ctx(logged=0.0, actual=None, mood_days=0, coverage=None, goals=None, streak=0, days=0):
    actual = actual or {c: 0.0 for c in CATEGORIES}
    return InsightContext(
        user_name="River",
        period=PERIOD_WEEK,
        period_start=MONDAY,
        period_end=MONDAY + timedelta(days=6),
        member_since=None,
        goals=goals or dict(DEFAULT_WEEKLY_GOALS),
        actual_hours=actual,
        daily=[],
        logged_hours=logged,
        unlogged_hours=168 - logged,
        period_hours=168,
        coverage=coverage if coverage is not None else logged / 168 * 100,
        days_with_entries=days,
        mood_days=mood_days,
        avg_mood=None,
        streak_days=streak,
    )


def _seed(user_id):
    for day, hour, minutes, category in (
        (MONDAY, 9, 120, "productive"),
        (TODAY, 9, 90, "productive"),
        (TODAY, 20, 60, "restoration"),
    ):
        start, end = span(day, hour, minutes)
        create_entry(user_id, title="Block", category=category, start_time=start, end_time=end)
    log_mood(user_id, 4, "steady", today=TODAY)


def _assert_observer_voice(payload):
    text = " ".join([payload.summary, *payload.recommendations]).lower()
    for phrase in OBSERVER_BANNED_PHRASES:
        assert phrase not in text, phrase
    for word in OBSERVER_BANNED_WORDS:
        assert not re.search(rf"\b{word}\b", text), word
    assert len(payload.recommendations) == 3
    for rec, opener in zip(payload.recommendations, OBSERVER_OPENERS):
        assert rec.startswith(opener)


def _gemini_response(text, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return resp


# ============== Narrative styles ==============


@pytest.mark.unit
class TestNarrativeStyles:
    def test_observer_balance_is_visibility_plus_mood_bonus(self):
        style = ObserverStyle()
        assert style.balance_score(_ctx(logged=84)) == 50
        assert style.balance_score(_ctx(logged=84, mood_days=2)) == 55
        assert style.balance_score(_ctx(logged=84, mood_days=3)) == 60
        assert style.balance_score(_ctx(logged=168, mood_days=7)) == 100

    def test_observer_empty_period_stays_neutral(self):
        _assert_observer_voice(ObserverStyle().analyze(_ctx()))

    def test_single_day_reads_singular(self):
        observer = ObserverStyle().analyze(_ctx(logged=3, days=1, streak=1))
        coach = CoachStyle().build_summary(_ctx(logged=3, days=1))
        assert "across 1 day this week" in observer.summary
        assert "stands at 1 day." in observer.recommendations[2]
        assert coach.endswith("across 1 day.")
        for text in (observer.summary, *observer.recommendations, coach):
            assert "1 days" not in text
        _assert_observer_voice(observer)
        assert "across 2 days" in ObserverStyle().build_summary(_ctx(logged=3, days=2))

    def test_observer_month_balance_uses_period_hours(self):
        month = dataclasses.replace(
            _ctx(logged=360),
            period=PERIOD_MONTH,
            period_end=MONDAY + timedelta(days=29),
            period_hours=720,
            unlogged_hours=360,
            coverage=50.0,
        )
        assert ObserverStyle().balance_score(month) == 50

    def test_coach_balance_penalizes_gaps(self):
        actual = {
            Category.PRODUCTIVE: 40.0,
            Category.LEISURE: 20.0,
            Category.RESTORATION: 50.0,
            Category.NEUTRAL: 10.0,
        }
        # 100 - 0 (productive on goal) - 6 (restoration deficit) - 0 (coverage above 50%)
        assert CoachStyle().balance_score(_ctx(logged=120, actual=actual)) == 94

    def test_coach_balance_floors_at_zero(self):
        assert CoachStyle().balance_score(_ctx()) == 0

    def test_coach_recommendations_name_the_gap(self):
        payload = CoachStyle().analyze(_ctx())
        assert 1 <= len(payload.recommendations) <= 3
        assert "productive goal" in payload.recommendations[0]

    def test_unknown_style_defaults_to_observer(self):
        assert isinstance(get_style("bogus"), ObserverStyle)
        assert isinstance(get_style(None), ObserverStyle)
        assert isinstance(get_style("COACH"), CoachStyle)


# ============== Model payload parsing ==============


@pytest.mark.unit
class TestPayloadParsing:
    def test_extracts_json_from_fenced_text(self):
        payload = parse_insight_payload(
            'Sure!\n```json\n{"summary": "Calm week.", "balanceScore": 72.5, "recommendations": ["a"]}\n```'
        )
        assert payload.summary == "Calm week."
        assert payload.balance_score == 73
        assert payload.recommendations == ["a"]

    def test_clamps_score_and_caps_recommendations(self):
        payload = parse_insight_payload(
            '{"summary": "x", "balanceScore": 140, "recommendations": ["1", "2", "3", "4"]}'
        )
        assert payload.balance_score == 100
        assert payload.recommendations == ["1", "2", "3"]
        assert parse_insight_payload('{"summary": "x", "balanceScore": -3, "recommendations": []}').balance_score == 0
        huge = '{"summary": "x", "balanceScore": 1' + "0" * 400 + ', "recommendations": []}'
        assert parse_insight_payload(huge).balance_score == 100

    @pytest.mark.parametrize(
        "text",
        [
            "no json here",
            "{not json}",
            '{"balanceScore": 50, "recommendations": []}',
            '{"summary": "", "balanceScore": 50, "recommendations": []}',
            '{"summary": "x", "balanceScore": "high", "recommendations": []}',
            '{"summary": "x", "balanceScore": 50, "recommendations": "do things"}',
            '{"summary": "x", "balanceScore": Infinity, "recommendations": []}',
            '{"summary": "x", "balanceScore": -Infinity, "recommendations": []}',
            '{"summary": "x", "balanceScore": 1e999, "recommendations": []}',
            '{"summary": "x", "balanceScore": NaN, "recommendations": []}',
        ],
    )
    def test_malformed_output_rejected(self, text):
        with pytest.raises(ExternalServiceError):
            parse_insight_payload(text)

    def test_client_sends_key_header_and_json_mime(self):
        client = GeminiClient(api_key="secret-key", model="gemini-test", api_url="https://example.test/v1beta/")
        with patch("lifechrono.core.insights.ai_client.requests.post", return_value=_gemini_response("{}")) as post:
            assert client.generate("hello") == "{}"
        args, kwargs = post.call_args
        assert args[0] == "https://example.test/v1beta/models/gemini-test:generateContent"
        assert kwargs["headers"]["x-goog-api-key"] == "secret-key"
        assert kwargs["json"]["generationConfig"]["responseMimeType"] == "application/json"

    def test_client_quota_error(self):
        client = GeminiClient(api_key="k")
        with patch("lifechrono.core.insights.ai_client.requests.post", return_value=_gemini_response("", 429)):
            with pytest.raises(ExternalServiceError, match="429"):
                client.generate("hello")
            assert client.test_connection()["isQuotaError"] is True


# ============== Context ==============


@pytest.mark.unit
def test_previous_period_bounds():
    assert previous_period(PERIOD_WEEK, MONDAY, MONDAY + timedelta(days=6)) == (date(2026, 2, 23), date(2026, 3, 1))
    assert previous_period(PERIOD_MONTH, date(2026, 3, 1), date(2026, 3, 31)) == (
        date(2026, 2, 1),
        date(2026, 2, 28),
    )


@pytest.mark.integration
def test_assemble_context(app, user):
    _seed(user.id)
    ctx = assemble_context(user.id, MONDAY, MONDAY + timedelta(days=6), today=TODAY)
    assert ctx.logged_hours == 4.5
    assert ctx.unlogged_hours == 163.5
    assert ctx.actual_hours[Category.PRODUCTIVE] == 3.5
    assert ctx.days_with_entries == 2
    assert ctx.mood_days == 1
    assert ctx.avg_mood == 4.0
    assert ctx.streak_days == 1
    assert [d.label for d in ctx.daily] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert ctx.daily[2].mood_note == "steady"
    prompt = ctx.to_prompt_dict()
    assert prompt["trackingCoverage"] == "2.7%"
    assert prompt["dailyBreakdown"][0]["productive"] == 2.0


# ============== Generation and persistence ==============


@pytest.mark.integration
class TestInsightGeneration:
    def test_fallback_observer_insight(self, app, user):
        _seed(user.id)
        insight = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert insight.source == SOURCE_FALLBACK
        assert insight.narrative_style == "observer"
        assert insight.week_start == MONDAY
        assert insight.week_end == MONDAY + timedelta(days=6)
        # 4.5h of 168h is 3%, plus 5 for a single mood day
        assert insight.balance_score == 8
        _assert_observer_voice(ObserverStyle().analyze(assemble_context(user.id, MONDAY, insight.week_end, today=TODAY)))

    def test_second_request_returns_stored_insight(self, app, user):
        first = insight_services.get_current_week_insight(user.id, today=TODAY)
        second = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert second.id == first.id
        assert second.generated_at == first.generated_at
        assert Insight.query.count() == 1

    def test_lost_race_returns_winner(self, app, user):
        winner = insight_services.get_current_week_insight(user.id, today=TODAY)
        real_find = insight_services.find_insight
        calls = {"n": 0}

        def stale_then_real(*args):
            calls["n"] += 1
            return None if calls["n"] == 1 else real_find(*args)

        with patch.object(insight_services, "find_insight", side_effect=stale_then_real):
            result = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert result.id == winner.id
        assert Insight.query.count() == 1

    def test_reset_regenerates_with_current_style(self, app, user):
        first = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert first.narrative_style == "observer"
        app.config["INSIGHT_NARRATIVE_STYLE"] = "coach"
        regenerated = insight_services.reset_current_week(user.id, today=TODAY)
        assert regenerated.narrative_style == "coach"
        assert Insight.query.count() == 1

    def test_model_output_is_used_when_valid(self, app, user):
        app.config["GEMINI_API_KEY"] = "test-key"
        text = '{"summary": "Model view of the week.", "balanceScore": 64, "recommendations": ["a", "b", "c", "d"]}'
        with patch("lifechrono.core.insights.ai_client.requests.post", return_value=_gemini_response(text)) as post:
            insight = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert post.called
        assert insight.source == SOURCE_MODEL
        assert insight.summary == "Model view of the week."
        assert insight.balance_score == 64
        assert insight.recommendations == ["a", "b", "c"]

    @pytest.mark.parametrize(
        "mock_kwargs",
        [
            {"return_value": _gemini_response("I cannot help with that.")},
            {"return_value": _gemini_response("", status=500)},
            {"side_effect": requests.Timeout("slow")},
            {"side_effect": requests.ConnectionError("down")},
            {"return_value": _gemini_response('{"summary": "x", "balanceScore": Infinity, "recommendations": ["a"]}')},
            {"return_value": _gemini_response('{"summary": "x", "balanceScore": -Infinity, "recommendations": ["a"]}')},
            {"return_value": _gemini_response('{"summary": "x", "balanceScore": 1e999, "recommendations": ["a"]}')},
        ],
    )
    def test_model_failure_falls_back(self, app, user, mock_kwargs):
        app.config["GEMINI_API_KEY"] = "test-key"
        with patch("lifechrono.core.insights.ai_client.requests.post", **mock_kwargs):
            insight = insight_services.get_current_week_insight(user.id, today=TODAY)
        assert insight.source == SOURCE_FALLBACK
        assert 0 <= insight.balance_score <= 100
        assert len(insight.recommendations) == 3

    def test_month_insight_bounds(self, app, user):
        insight = insight_services.generate_month_insight(user.id, 1, today=TODAY)
        assert insight.period == PERIOD_MONTH
        assert insight.week_start == date(2026, 2, 1)
        assert insight.week_end == date(2026, 2, 28)
        # A week insight for the same start date is a separate record.
        week = insight_services.get_or_generate(user.id, date(2026, 2, 1), date(2026, 2, 7), PERIOD_WEEK, TODAY)
        assert week.id != insight.id

    def test_history_shapes(self, app, user):
        insight_services.generate_week_insight(user.id, 2, today=TODAY)
        weeks = insight_services.get_weekly_history(user.id, today=TODAY)
        assert [w["label"] for w in weeks] == ["Week of Feb 23", "Week of Feb 16", "Week of Feb 9", "Week of Feb 2"]
        assert weeks[0]["insight"] is None
        assert weeks[1]["insight"] is not None

        months = insight_services.get_monthly_history(user.id, today=TODAY)
        assert [m["label"] for m in months] == ["February 2026", "January 2026", "December 2025"]
        assert months[2]["monthEnd"] == date(2025, 12, 31)

    def test_latest_newest_first(self, app, user):
        for weeks_back in range(6):
            insight_services.generate_week_insight(user.id, weeks_back, today=TODAY)
        latest = insight_services.get_latest_insights(user.id)
        assert len(latest) == 4
        assert latest[0].week_start == MONDAY
        assert [i.week_start for i in latest] == sorted((i.week_start for i in latest), reverse=True)


# ============== API ==============


@pytest.mark.integration
class TestInsightApi:
    def test_current_week_and_latest(self, client, headers):
        resp = client.get("/api/insights/current-week", headers=headers)
        assert resp.status_code == 200
        insight = resp.get_json()["insight"]
        assert insight["source"] == SOURCE_FALLBACK
        assert set(insight) >= {"weekStart", "weekEnd", "balanceScore", "narrativeStyle", "generatedAt"}

        latest = client.get("/api/insights/latest", headers=headers).get_json()["insights"]
        assert [i["id"] for i in latest] == [insight["id"]]

    def test_generate_and_history_routes(self, client, headers):
        resp = client.post("/api/insights/generate-week?weeksBack=1", headers=headers)
        assert resp.status_code == 200
        weeks = client.get("/api/insights/weekly-history", headers=headers).get_json()["weeks"]
        assert len(weeks) == 4
        assert weeks[0]["insight"]["id"] == resp.get_json()["insight"]["id"]

        month = client.post("/api/insights/generate-month?monthsBack=1", headers=headers).get_json()["insight"]
        assert month["period"] == PERIOD_MONTH
        months = client.get("/api/insights/monthly-history", headers=headers).get_json()["months"]
        assert months[0]["insight"]["id"] == month["id"]

    def test_reset_route(self, client, headers):
        client.get("/api/insights/current-week", headers=headers)
        resp = client.delete("/api/insights/reset", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()["insight"] is not None

    def test_connection_route_is_admin_only(self, client, headers, make_user):
        assert client.get("/api/insights/test", headers=headers).status_code == 404
        admin = make_user(is_super_admin=True)
        body = client.get("/api/insights/test", headers=auth_headers(admin)).get_json()
        assert body["connected"] is False
