"""Match catalogue activities to how the user is feeling."""

from __future__ import annotations

import json
from typing import Iterable, Sequence

DEFAULT_MOOD_TAGS = ("neutral",)

# Preferred categories per mood tag, best match first.
MOOD_TAG_CATEGORIES: dict[str, tuple[str, ...]] = {
    "anxious": ("mental", "physical"),
    "stressed": ("mental", "physical"),
    "overwhelmed": ("mental",),
    "tired": ("mental",),
    "angry": ("physical", "mental"),
    "restless": ("physical",),
    "sad": ("social", "physical"),
    "down": ("social", "physical"),
    "lonely": ("social",),
    "happy": ("social", "physical"),
    "excited": ("physical", "social"),
    "calm": ("mental", "social"),
    "grateful": ("social",),
}


def parse_mood_tags(raw: str | None) -> list[str]:
    """Accept a JSON array (``["sad","tired"]``) or a comma separated list."""

    raw = (raw or "").strip()
    if not raw:
        return []
    values: Iterable = raw.split(",")
    if raw.startswith("["):
        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            values = decoded
        else:
            values = raw.strip("[]").split(",")
    return [tag for tag in (str(value).strip().strip('"').lower() for value in values) if tag]


def tags_for_score(score: int) -> list[str]:
    """Tags implied by a 1-5 mood log score."""

    if score <= 2:
        return ["sad"]
    if score >= 4:
        return ["happy"]
    return ["neutral"]


def category_weights(mood_tags: Sequence[str]) -> dict[str, int]:
    weights: dict[str, int] = {}
    for tag in mood_tags:
        preferred = MOOD_TAG_CATEGORIES.get(tag, ())
        for rank, category in enumerate(preferred):
            weights[category] = weights.get(category, 0) + len(preferred) - rank
    return weights


def rank_activities(activities: Sequence, mood_tags: Sequence[str], exclude_ids: Iterable[int] = (), limit: int = 5) -> list:
    """Best matching activities first; ties keep alphabetical order."""

    weights = category_weights(mood_tags)
    excluded = set(exclude_ids)
    candidates = [activity for activity in activities if activity.id not in excluded]
    candidates.sort(key=lambda activity: (-weights.get(activity.category, 0), activity.title, activity.id))
    return candidates[:limit]
