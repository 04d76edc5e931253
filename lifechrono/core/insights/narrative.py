"""Narrative styles: the deterministic analyzer behind every fallback insight.

A style turns an ``InsightContext`` into the insight contract (summary,
balance score, up to three recommendations) and supplies the system prompt
used when the generative model is asked for the same thing.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Dict, List, Type

from lifechrono.core.categories import CATEGORIES, Category
from lifechrono.core.insights.context import InsightContext
from lifechrono.core.insights.schemas import MAX_RECOMMENDATIONS, InsightPayload
from lifechrono.core.utils.numbers import clamp, round_int

OBSERVER_OPENERS = ("One thing noticed:", "Your river showed:", "Something in the data:")

# Phrases the observer voice never produces, matched case-insensitively as substrings.
OBSERVER_BANNED_PHRASES = ("should", "must", "need to", "behind", "only logged", "failed", "not enough")
# Banned as whole words only ("entry" contains "try").
OBSERVER_BANNED_WORDS = ("try", "improve", "only", "short", "missing")

RESPONSE_FORMAT = """Respond ONLY in this exact JSON format (no markdown, no extra text):
{
  "summary": "2-3 sentences referencing specific numbers",
  "balanceScore": 75,
  "recommendations": ["...", "...", "..."]
}"""


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def _days(count: int) -> str:
    return f"{count} {_plural(count, 'day')}"


class NarrativeStyle(ABC):
    """Strategy interface for insight wording and scoring."""

    name: str = ""
    system_prompt: str = ""

    @abstractmethod
    def build_summary(self, ctx: InsightContext) -> str:
        raise NotImplementedError

    @abstractmethod
    def build_recommendations(self, ctx: InsightContext) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def balance_score(self, ctx: InsightContext) -> int:
        raise NotImplementedError

    def analyze(self, ctx: InsightContext) -> InsightPayload:
        return InsightPayload(
            summary=self.build_summary(ctx),
            balance_score=self.balance_score(ctx),
            recommendations=self.build_recommendations(ctx)[:MAX_RECOMMENDATIONS],
        )

    def build_prompt(self, ctx: InsightContext, data_json: str) -> str:
        return f"{self.system_prompt}\n\nDATA: {data_json}\n\n{RESPONSE_FORMAT}"


class ObserverStyle(NarrativeStyle):
    """Descriptive, non-judgmental observations about where the time went."""

    name = "observer"
    system_prompt = """You are LifeChrono, a calm observer of how someone spent their time.

You receive one period of time tracking data as JSON. Describe what the data
shows without judging it.

Rules:
- Reference specific numbers from the data: hours, percentages, day names.
- If mood scores exist, describe how they sit next to the time on those days.
- Do not compare the person to anyone, including their past self.
- Do not give advice or instructions. No "should", "must", "need to", "try", "improve".
- Do not frame anything as a deficit. No "only", "not enough", "behind", "short", "missing", "failed".
- Do not grade the person.
- Write exactly three observations in "recommendations", each starting with one of:
  "One thing noticed:", "Your river showed:", "Something in the data:".
- balanceScore reflects how much of the period is visible in the data (0-100)."""

    def build_summary(self, ctx: InsightContext) -> str:
        label = ctx.period_label
        sentences = [
            f"You logged {ctx.logged_hours:.1f}h across {_days(ctx.days_with_entries)} this {label}, "
            f"covering {ctx.coverage:.0f}% of its {ctx.period_hours} hours."
        ]
        dominant = ctx.dominant_category
        if dominant is None:
            sentences.append("No category carries recorded time yet, so all four sit at 0.0h.")
        else:
            sentences.append(
                f"{dominant.label} time took the largest share at {ctx.actual_hours[dominant]:.1f}h."
            )
        if ctx.avg_mood is not None:
            sentences.append(
                f"Your mood averaged {ctx.avg_mood:.1f} out of 5 across "
                f"{ctx.mood_days} check-in {_plural(ctx.mood_days, 'day')}."
            )
        return " ".join(sentences)

    def build_recommendations(self, ctx: InsightContext) -> List[str]:
        first, second, third = OBSERVER_OPENERS
        observations = []

        busiest = max(ctx.daily, key=lambda d: d.total_logged, default=None)
        if busiest is not None and busiest.total_logged > 0:
            observations.append(
                f"{first} {busiest.weekday_name} held the most recorded time, {busiest.total_logged:.1f}h."
            )
        else:
            observations.append(
                f"{first} this {ctx.period_label} holds 0.0h of recorded time so far, "
                f"leaving all {ctx.period_hours} hours open."
            )

        split = ", ".join(f"{c.value} {ctx.actual_hours[c]:.1f}h" for c in CATEGORIES)
        observations.append(f"{second} {split}.")

        mood_days = [d for d in ctx.daily if d.mood_avg is not None]
        if mood_days:
            brightest = max(mood_days, key=lambda d: d.mood_avg)
            observations.append(
                f"{third} the brightest mood check-in came on {brightest.weekday_name} "
                f"({brightest.mood_avg:.1f} of 5), alongside {brightest.total_logged:.1f}h of logged time."
            )
        elif ctx.streak_days > 0:
            observations.append(f"{third} the current logging run stands at {_days(ctx.streak_days)}.")
        else:
            observations.append(
                f"{third} {ctx.days_with_entries} of {ctx.period_days} days carry logged time."
            )
        return observations

    def balance_score(self, ctx: InsightContext) -> int:
        # Divides by the period's hours: 168 for a week, days * 24 for a month.
        visibility = min(100, round_int(ctx.logged_hours / ctx.period_hours * 100))
        if ctx.mood_days >= 3:
            visibility += 10
        elif ctx.mood_days >= 1:
            visibility += 5
        return int(clamp(visibility, 0, 100))


class CoachStyle(NarrativeStyle):
    """Goal-gap driven coaching with prescriptive recommendations."""

    name = "coach"
    system_prompt = """You are LifeChrono AI, a personal productivity coach.
Tone: direct, warm, specific.

You receive one period of time tracking data as JSON. Analyze patterns, connect
mood scores to time usage, and give actionable advice for the next period.

Rules:
- Always reference specific numbers from the data: hours, percentages, day names.
- If mood scores exist, connect them to the time patterns on those days.
- If productive hours are below goal, address it directly and specifically.
- If tracking coverage is below 70%, mention the tracking gap first.
- If streakDays >= 7, acknowledge the consistency.
- Never give generic advice; be specific to their numbers."""

    def _scaled_goals(self, ctx: InsightContext) -> Dict[Category, float]:
        factor = ctx.period_days / 7
        return {c: ctx.goals[c] * factor for c in CATEGORIES}

    def build_summary(self, ctx: InsightContext) -> str:
        goals = self._scaled_goals(ctx)
        actual = ctx.actual_hours
        parts = []
        productive_gap = actual[Category.PRODUCTIVE] - goals[Category.PRODUCTIVE]
        if productive_gap >= 0:
            parts.append(
                f"you hit your productive goal ({actual[Category.PRODUCTIVE]:.1f}h vs "
                f"{goals[Category.PRODUCTIVE]:g}h target)"
            )
        else:
            parts.append(
                f"you logged {actual[Category.PRODUCTIVE]:.1f}h of productive time, "
                f"{abs(productive_gap):.1f}h short of your {goals[Category.PRODUCTIVE]:g}h goal"
            )
        restoration_gap = actual[Category.RESTORATION] - goals[Category.RESTORATION]
        if restoration_gap < -5:
            parts.append(
                f"restoration was low at {actual[Category.RESTORATION]:.1f}h vs your "
                f"{goals[Category.RESTORATION]:g}h target"
            )
        if ctx.coverage < 50:
            parts.append(f"{ctx.period_hours - ctx.logged_hours:.1f} hours are untracked")
        if ctx.streak_days >= 3:
            parts.append(f"you're on a {ctx.streak_days}-day logging streak")
        return (
            f"This {ctx.period_label}, {', and '.join(parts[:2])}. "
            f"You logged {ctx.logged_hours:.1f}h across {_days(ctx.days_with_entries)}."
        )

    def build_recommendations(self, ctx: InsightContext) -> List[str]:
        goals = self._scaled_goals(ctx)
        actual = ctx.actual_hours
        recs: List[str] = []
        productive_gap = actual[Category.PRODUCTIVE] - goals[Category.PRODUCTIVE]
        if productive_gap < 0:
            recs.append(
                f"Block {math.ceil(abs(productive_gap) / 5)}h daily for focused work to reach your "
                f"{goals[Category.PRODUCTIVE]:g}h productive goal"
            )
        restoration_gap = actual[Category.RESTORATION] - goals[Category.RESTORATION]
        if restoration_gap < -5:
            recs.append(
                f"Add {math.ceil(abs(restoration_gap) / 7)}h of sleep or rest daily; you're "
                f"{abs(restoration_gap):.1f}h behind on restoration"
            )
        if ctx.coverage < 50:
            recs.append(
                f"You tracked {ctx.coverage:.0f}% of the {ctx.period_label}; log at least "
                f"{max(0, 7 - ctx.days_with_entries)} more days for better insights"
            )
        if not recs:
            recs.append("Your balance looks solid; keep this pattern going")
        if len(recs) < MAX_RECOMMENDATIONS:
            if actual[Category.LEISURE] < goals[Category.LEISURE]:
                recs.append(
                    f"Schedule {goals[Category.LEISURE] - actual[Category.LEISURE]:.1f}h more leisure; "
                    f"you logged {actual[Category.LEISURE]:.1f}h vs your {goals[Category.LEISURE]:g}h goal"
                )
            else:
                recs.append(
                    f"You logged {ctx.logged_hours:.1f}h total; aim to track at least 120h a week for full visibility"
                )
        return recs[:MAX_RECOMMENDATIONS]

    def balance_score(self, ctx: InsightContext) -> int:
        goals = self._scaled_goals(ctx)
        actual = ctx.actual_hours
        productive_gap = actual[Category.PRODUCTIVE] - goals[Category.PRODUCTIVE]
        restoration_gap = actual[Category.RESTORATION] - goals[Category.RESTORATION]
        score = (
            100
            - abs(productive_gap) * 1.5
            - max(0.0, -restoration_gap)
            - max(0.0, 50 - ctx.coverage) * 0.5
        )
        return round_int(clamp(score, 0, 100))


STYLES: Dict[str, Type[NarrativeStyle]] = {
    ObserverStyle.name: ObserverStyle,
    CoachStyle.name: CoachStyle,
}


def get_style(name: str | None) -> NarrativeStyle:
    """Instantiate a style by name; unknown names get the observer."""
    return STYLES.get((name or "").lower(), ObserverStyle)()
