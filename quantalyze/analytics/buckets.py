"""Quality bucket metadata and display summaries."""

from types import MappingProxyType

from .models import BucketScore, Category, ScoreCalculationResult
from .normalizer import round_half_up

FALLBACK_COLOR = "#6b7280"

QUALITY_BUCKETS = MappingProxyType({
    Category.VITALITY: MappingProxyType({
        "label": "Vitality",
        "description": "Physical health and energy",
        "color": "#10b981",
        "default_habits": (
            "Sleep (7-8 hours)",
            "Exercise",
            "Healthy eating",
            "Hydration (8 glasses)",
            "No alcohol",
            "Vitamins/Supplements",
        ),
    }),
    Category.FOCUS: MappingProxyType({
        "label": "Focus",
        "description": "Cognitive performance and deep work",
        "color": "#3b82f6",
        "default_habits": (
            "Deep work session",
            "Reading (30 mins)",
            "Learning/Course",
            "No social media",
            "Meditation",
            "Single-tasking",
        ),
    }),
    Category.DISCIPLINE: MappingProxyType({
        "label": "Discipline",
        "description": "Consistency and daily routines",
        "color": "#f59e0b",
        "default_habits": (
            "Wake up early",
            "Morning routine",
            "Cold shower",
            "Journaling",
            "Bed by 10pm",
            "No snooze",
        ),
    }),
    Category.SOCIAL: MappingProxyType({
        "label": "Social/Legacy",
        "description": "Relationships and meaningful connections",
        "color": "#8b5cf6",
        "default_habits": (
            "Family time",
            "Call a friend",
            "Networking",
            "Mentoring",
            "Community service",
            "Date night",
        ),
    }),
})


def get_bucket_label(category: Category) -> str:
    bucket = QUALITY_BUCKETS.get(category)
    return bucket["label"] if bucket else getattr(category, "value", str(category))


def get_bucket_color(category: Category) -> str:
    bucket = QUALITY_BUCKETS.get(category)
    return bucket["color"] if bucket else FALLBACK_COLOR


def get_default_habits(category: Category) -> list[str]:
    bucket = QUALITY_BUCKETS.get(category)
    return list(bucket["default_habits"]) if bucket else []


def build_bucket_scores(result: ScoreCalculationResult) -> list[BucketScore]:
    """
    Build one display summary per category from a day's scores.

    The completion rate is the weighted completion before the consistency
    multiplier, as a whole percentage.
    """
    bucket_scores = []
    for category in Category:
        detail = result.detail_for(category)
        total_weight = detail.total_weight if detail else 0
        weighted_sum = detail.weighted_sum if detail else 0.0

        completion = weighted_sum / total_weight if total_weight > 0 else 0.0

        bucket_scores.append(
            BucketScore(
                category=category,
                label=get_bucket_label(category),
                color=get_bucket_color(category),
                score=result.category_scores.get(category, 0.0),
                habit_count=detail.habit_count if detail else 0,
                completion_rate=int(round_half_up(completion * 100, 0)),
            )
        )
    return bucket_scores
