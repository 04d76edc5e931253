"""Mood check-ins and the recurring suggestion matcher."""

from datetime import date, timedelta

import pytest

pytestmark = pytest.mark.integration

from lifechrono.core.errors import AuthorizationError, NotFoundError, ValidationError
from lifechrono.domains.entries.services import create_entry
from lifechrono.domains.mood.services import daily_summaries, get_today_summary, list_moods, log_mood
from lifechrono.domains.recurring.services import (
    create_template,
    delete_template,
    get_suggestions,
    list_templates,
    sunday_weekday,
    update_template,
)
from lifechrono.tests.helpers import auth_headers, span

WEDNESDAY = date(2026, 3, 4)


# ============== Mood ==============


class TestMood:
    def test_many_logs_per_day_are_averaged(self, app, user):
        log_mood(user.id, 4, "fine", today=WEDNESDAY)
        log_mood(user.id, 5, "great", today=WEDNESDAY)
        summary = get_today_summary(user.id, today=WEDNESDAY)
        assert summary["count"] == 2
        assert summary["avg_score"] == 4.5
        assert summary["rounded_score"] == 5
        assert summary["latest_note"] == "great"

    def test_no_logs_gives_none(self, app, user):
        assert get_today_summary(user.id, today=WEDNESDAY) is None

    @pytest.mark.parametrize("score", [0, 6, True, "3"])
    def test_invalid_scores_rejected(self, app, user, score):
        with pytest.raises(ValidationError):
            log_mood(user.id, score)

    def test_daily_summaries_cover_only_logged_days(self, app, user):
        log_mood(user.id, 2, today=WEDNESDAY)
        log_mood(user.id, 3, today=WEDNESDAY + timedelta(days=2))
        summaries = daily_summaries(user.id, WEDNESDAY, WEDNESDAY + timedelta(days=6))
        assert list(summaries) == [WEDNESDAY, WEDNESDAY + timedelta(days=2)]

    def test_list_newest_first(self, app, user):
        log_mood(user.id, 2, today=WEDNESDAY)
        log_mood(user.id, 3, today=WEDNESDAY + timedelta(days=1))
        assert [m.score for m in list_moods(user.id)] == [3, 2]

    def test_api_roundtrip(self, client, headers):
        assert client.get("/api/mood-logs/today", headers=headers).get_json()["today"] is None
        resp = client.post("/api/mood-logs", json={"score": 4, "note": "calm"}, headers=headers)
        assert resp.status_code == 201
        client.post("/api/mood-logs", json={"score": 3}, headers=headers)
        today = client.get("/api/mood-logs/today", headers=headers).get_json()["today"]
        assert today["avgScore"] == 3.5
        assert today["roundedScore"] == 4
        assert today["count"] == 2
        assert len(client.get("/api/mood-logs", headers=headers).get_json()["moods"]) == 2

    @pytest.mark.parametrize("payload", [{"score": 0}, {"score": 6}, {"score": "4"}, {"score": 3, "note": "x" * 501}])
    def test_api_rejects_malformed(self, client, headers, payload):
        resp = client.post("/api/mood-logs", json=payload, headers=headers)
        assert resp.status_code == 400


# ============== Recurring ==============


class TestRecurring:
    def test_weekday_numbering_starts_sunday(self):
        assert sunday_weekday(date(2026, 3, 1)) == 0  # Sunday
        assert sunday_weekday(WEDNESDAY) == 3
        assert sunday_weekday(date(2026, 3, 7)) == 6  # Saturday

    def test_days_are_deduplicated_and_sorted(self, app, user):
        template = create_template(
            user.id, title="Gym", category="restoration", default_duration=60, days_of_week=[5, 1, 3, 1]
        )
        assert template.days_of_week == [1, 3, 5]

    def test_suggestions_match_weekday_and_skip_logged(self, app, user):
        gym = create_template(user.id, title="Gym", category="restoration", default_duration=60, days_of_week=[3])
        study = create_template(user.id, title="Study", category="productive", default_duration=90, days_of_week=[1, 3])
        create_template(user.id, title="Weekend hike", category="leisure", default_duration=120, days_of_week=[0, 6])
        paused = create_template(user.id, title="Piano", category="leisure", default_duration=30, days_of_week=[3])
        update_template(user.id, paused.id, is_active=False)

        assert [t.id for t in get_suggestions(user.id, WEDNESDAY)] == [gym.id, study.id]

        start, end = span(WEDNESDAY, 7, 60)
        create_entry(
            user.id, title="Gym", category="restoration", start_time=start, end_time=end, recurring_task_id=gym.id
        )
        assert [t.id for t in get_suggestions(user.id, WEDNESDAY)] == [study.id]
        # Next Wednesday is unaffected.
        assert [t.id for t in get_suggestions(user.id, WEDNESDAY + timedelta(days=7))] == [gym.id, study.id]

    def test_ownership_errors(self, app, make_user):
        owner, other = make_user(), make_user()
        template = create_template(owner.id, title="Gym", category="restoration", default_duration=60)
        with pytest.raises(AuthorizationError):
            update_template(other.id, template.id, title="Mine")
        with pytest.raises(NotFoundError):
            delete_template(owner.id, 12345)

    def test_delete_keeps_entries(self, app, user):
        template = create_template(user.id, title="Gym", category="restoration", default_duration=60, days_of_week=[3])
        start, end = span(WEDNESDAY, 7, 60)
        entry = create_entry(
            user.id, title="Gym", category="restoration", start_time=start, end_time=end, recurring_task_id=template.id
        )
        delete_template(user.id, template.id)
        assert list_templates(user.id) == []
        from lifechrono.domains.entries.models.entry_models import TimeEntry
        from lifechrono.extensions import db

        db.session.expire_all()
        assert db.session.get(TimeEntry, entry.id).recurring_task_id is None

    def test_api_crud_and_suggestions(self, client, headers, make_user):
        resp = client.post(
            "/api/recurring",
            json={"title": "Gym", "category": "restoration", "default_duration": 60, "days_of_week": [3, 3]},
            headers=headers,
        )
        assert resp.status_code == 201
        template = resp.get_json()["template"]
        assert template["days_of_week"] == [3]

        suggestions = client.get("/api/recurring/suggestions?date=2026-03-04", headers=headers).get_json()
        assert [s["id"] for s in suggestions["suggestions"]] == [template["id"]]

        bad = client.post(
            "/api/recurring",
            json={"title": "Gym", "category": "restoration", "default_duration": 0, "days_of_week": [7]},
            headers=headers,
        )
        assert bad.status_code == 400

        other = auth_headers(make_user())
        assert client.patch(f"/api/recurring/{template['id']}", json={"title": "x"}, headers=other).status_code == 403
        assert client.delete(f"/api/recurring/{template['id']}", headers=headers).status_code == 200
        assert client.get("/api/recurring", headers=headers).get_json()["templates"] == []
