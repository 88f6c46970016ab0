"""Data models for habits, daily logs and computed scores."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union


class Category(str, Enum):
    """The four quality buckets. Iteration order is the aggregation order."""

    VITALITY = "vitality"
    FOCUS = "focus"
    DISCIPLINE = "discipline"
    SOCIAL = "social"


class GoalType(str, Enum):
    """How completion of a habit is measured."""

    BINARY = "binary"
    NUMBER = "number"
    DURATION = "duration"


MIN_WEIGHT = 1
MAX_WEIGHT = 5
DEFAULT_WEIGHT = 3

RawValue = Union[bool, int, float, str, None]


@dataclass
class Habit:
    """A habit definition owned by a user."""
    id: str
    name: str
    category: Category
    weight: int = DEFAULT_WEIGHT
    goal_type: GoalType = GoalType.BINARY
    goal_value: Optional[float] = None  # Only meaningful for number/duration
    unit: Optional[str] = None
    is_active: bool = True
    description: Optional[str] = None


@dataclass
class DailyLog:
    """One logged value for a habit on a calendar day."""
    habit_id: str
    date: date
    raw_value: float
    normalized_value: float = 0.0


@dataclass
class HabitWithLog:
    """A habit paired with its log for the day being scored, if any."""
    habit: Habit
    log: Optional[DailyLog] = None


@dataclass
class NormalizationConfig:
    """Input to the value normalizer."""
    goal_type: GoalType
    raw_value: RawValue
    goal_value: Optional[float] = None


@dataclass
class NormalizedResult:
    """Output of the value normalizer."""
    normalized_value: float
    raw_value: float
    percentage: int


@dataclass
class CategoryDetail:
    """Per-category aggregation detail."""
    category: Category
    total_weight: int = 0
    weighted_sum: float = 0.0
    habit_count: int = 0


@dataclass
class ScoreCalculationResult:
    """Scores for a single day."""
    category_scores: dict[Category, float]
    overall_score: float
    consistency_multiplier: float
    details: list[CategoryDetail] = field(default_factory=list)

    def detail_for(self, category: Category) -> Optional[CategoryDetail]:
        """Return the aggregation detail for a category."""
        for detail in self.details:
            if detail.category == category:
                return detail
        return None


@dataclass
class DailyQualityScores:
    """Flattened daily score record, one per day of a date range."""
    date: date
    vitality: float
    focus: float
    discipline: float
    social: float
    overall: float
    consistency_multiplier: float


@dataclass
class StreakInfo:
    """Streak derived from the set of days with at least one log."""
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[date] = None


@dataclass
class HeatmapDataPoint:
    """Calendar heatmap cell."""
    date: date
    value: float
    level: int  # 0-4, GitHub-style intensity


@dataclass
class BucketScore:
    """Display summary of one quality bucket."""
    category: Category
    label: str
    color: str
    score: float
    habit_count: int
    completion_rate: int  # 0-100, before the consistency multiplier
