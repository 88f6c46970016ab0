"""Request and response models for the HTTP API."""

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field

from ..analytics.models import DEFAULT_WEIGHT, MAX_WEIGHT, MIN_WEIGHT, Category, GoalType

RawValueIn = Union[bool, int, float, str, None]
CellIn = Union[int, float, str, None]


class NormalizeRequest(BaseModel):
    """Body for /api/normalize."""

    goal_type: GoalType
    goal_value: Optional[float] = None
    raw_value: RawValueIn = None


class NormalizeResponse(BaseModel):
    normalized_value: float
    raw_value: float
    percentage: int


class HabitModel(BaseModel):
    """Habit definition as stored by the caller."""

    id: str
    name: str = ""
    category: Category
    weight: int = Field(DEFAULT_WEIGHT, ge=MIN_WEIGHT, le=MAX_WEIGHT)
    goal_type: GoalType = GoalType.BINARY
    goal_value: Optional[float] = None
    unit: Optional[str] = None
    is_active: bool = True
    description: Optional[str] = None


class DailyLogModel(BaseModel):
    """Daily log row. normalized_value is ignored on input."""

    habit_id: str
    date: date
    raw_value: float
    normalized_value: Optional[float] = None


class HabitWithLogModel(HabitModel):
    """Habit with the raw value logged for the scored day, if any."""

    raw_value: Optional[RawValueIn] = None


class DailyScoresRequest(BaseModel):
    """Body for /api/scores/daily."""

    habits: list[HabitWithLogModel]
    consistency_multiplier: float = 1.0


class CategoryDetailModel(BaseModel):
    category: Category
    total_weight: int
    weighted_sum: float
    habit_count: int


class BucketScoreModel(BaseModel):
    category: Category
    label: str
    color: str
    score: float
    habit_count: int
    completion_rate: int


class DailyScoresResponse(BaseModel):
    category_scores: dict[str, float]
    overall_score: float
    consistency_multiplier: float
    details: list[CategoryDetailModel]
    buckets: list[BucketScoreModel]


class ScoreRangeRequest(BaseModel):
    """Body for /api/scores/range."""

    habits: list[HabitModel]
    logs: list[DailyLogModel] = []
    start_date: date
    end_date: date


class DailyQualityScoresModel(BaseModel):
    date: date
    vitality: float
    focus: float
    discipline: float
    social: float
    overall: float
    consistency_multiplier: float


class HeatmapPointModel(BaseModel):
    date: date
    value: float
    level: int


class StreakRequest(BaseModel):
    """Body for /api/streak."""

    dates: list[date]
    reference_date: Optional[date] = None


class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_active_date: Optional[date] = None
    consistency_multiplier: float


class ScoreRangeResponse(BaseModel):
    scores: list[DailyQualityScoresModel]
    heatmap: list[HeatmapPointModel]
    streak: StreakResponse


class ParsedSheetModel(BaseModel):
    """Headers and rows from the client-side spreadsheet decoder."""

    headers: list[str]
    rows: list[list[CellIn]]
    row_count: Optional[int] = None


class ColumnMappingModel(BaseModel):
    column_index: int = Field(..., ge=0)
    column_name: str
    habit_name: str
    category: Category
    goal_type: GoalType
    goal_value: Optional[float] = None
    unit: Optional[str] = None
    weight: int = Field(DEFAULT_WEIGHT, ge=MIN_WEIGHT, le=MAX_WEIGHT)


class ImportPreviewRequest(BaseModel):
    """Body for /api/import/preview."""

    filename: str
    data: ParsedSheetModel


class ImportPreviewResponse(BaseModel):
    is_valid: bool
    errors: list[str]
    row_count: int
    date_column: int
    mappings: list[ColumnMappingModel]


class ImportCommitRequest(BaseModel):
    """Body for /api/import/commit."""

    data: ParsedSheetModel
    date_column: int = Field(..., ge=0)
    column_mappings: list[ColumnMappingModel]


class ImportCommitResponse(BaseModel):
    habits: list[HabitModel]
    logs: list[DailyLogModel]
