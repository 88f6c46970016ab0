"""Calendar heatmap levels (GitHub-style, 0-4)."""

from typing import Iterable

from .models import DailyQualityScores, HeatmapDataPoint

# Lower bound of levels 2, 3 and 4; a boundary value belongs to the higher level
LEVEL_BOUNDARIES = (0.25, 0.5, 0.75)


def score_to_level(score: float) -> int:
    """Bucket a score into an intensity level. Scores above 1.0 map to 4."""
    if score <= 0:
        return 0
    level = 1
    for boundary in LEVEL_BOUNDARIES:
        if score >= boundary:
            level += 1
    return level


def scores_to_heatmap_levels(
    scores: Iterable[DailyQualityScores],
) -> list[HeatmapDataPoint]:
    """Convert daily scores to heatmap cells using each day's overall score."""
    return [
        HeatmapDataPoint(date=s.date, value=s.overall, level=score_to_level(s.overall))
        for s in scores
    ]
