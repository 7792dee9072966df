"""Score comparison between two assessments of the same child."""

from typing import Any

from motorskills.core.fms import FMS_CATEGORIES, FMS_ORDER


def calculate_change(old_score: float, new_score: float) -> tuple[float, float | None]:
    """Return ``(diff, percent_change)`` for one score.

    The percent change is rounded to one decimal and is ``None`` when the
    old score is 0.
    """
    diff = new_score - old_score
    if old_score == 0:
        return diff, None
    return diff, round(diff / old_score * 100, 1)


def compare_scores(old_scores: Any, new_scores: Any) -> list[dict[str, Any]]:
    """Build the per-movement comparison table in FMS order.

    Accepts mappings or objects exposing the seven movement attributes
    (ORM rows or pydantic models).
    """
    rows = []
    for key in FMS_ORDER:
        old = _score_of(old_scores, key)
        new = _score_of(new_scores, key)
        diff, percent_change = calculate_change(old, new)
        rows.append({
            "key": key,
            "label": FMS_CATEGORIES[key]["label"],
            "old": old,
            "new": new,
            "diff": diff,
            "percent_change": percent_change,
        })
    return rows


def _score_of(scores: Any, key: str):
    if isinstance(scores, dict):
        return scores[key]
    return getattr(scores, key)
