"""Mood wording and trend maths shared by the journal and insight views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# Mood logs use a 1-5 scale; 3 is neutral.
NEUTRAL_MOOD = 3
# (lower bound, emoji, label) for journal scores on a 0-10 scale, best first.
_JOURNAL_MOOD_BANDS = (
    (8, "😊", "Happy"),
    (6, "🙂", "Good"),
    (4, "😐", "Neutral"),
    (2, "🙁", "Sad"),
    (0, "😢", "Very Sad"),
)
# Half-averages closer than this count as "stable".
TREND_TOLERANCE = 0.25


def _band(score: float):
    for lower, emoji, label in _JOURNAL_MOOD_BANDS:
        if score >= lower:
            return emoji, label
    return _JOURNAL_MOOD_BANDS[-1][1:]


def mood_emoji(score: float) -> str:
    return _band(score)[0]


def mood_label(score: float) -> str:
    return _band(score)[1]


def describe_mood_score(score: float | None, tags: Sequence[str] | None = None) -> str:
    if score is not None:
        return f"{mood_emoji(score)} {mood_label(score)}"
    if tags:
        return ", ".join(tags)
    return "No mood recorded"


@dataclass(frozen=True)
class MoodTrend:
    average_mood: float
    mood_trend: str
    total_entries: int
    mood_change: float


def summarise_trend(scores: Sequence[int]) -> MoodTrend | None:
    """Summarise chronologically ordered mood scores, or ``None`` if empty."""

    if not scores:
        return None
    average = sum(scores) / len(scores)
    trend = "stable"
    if len(scores) >= 2:
        middle = len(scores) // 2
        first = sum(scores[:middle]) / middle
        second = sum(scores[middle:]) / (len(scores) - middle)
        if second - first > TREND_TOLERANCE:
            trend = "improving"
        elif first - second > TREND_TOLERANCE:
            trend = "declining"
    change = (average - NEUTRAL_MOOD) / NEUTRAL_MOOD * 100
    return MoodTrend(
        average_mood=round(average, 2),
        mood_trend=trend,
        total_entries=len(scores),
        mood_change=round(change, 2),
    )
