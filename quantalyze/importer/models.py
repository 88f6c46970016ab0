"""Data models for spreadsheet import."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from ..analytics.models import DEFAULT_WEIGHT, Category, GoalType

Cell = Union[str, int, float, None]


@dataclass
class ParsedSpreadsheetData:
    """Headers and rows produced by an external CSV/XLSX decoder."""
    headers: list[str]
    rows: list[list[Cell]]
    row_count: Optional[int] = None

    def __post_init__(self):
        if self.row_count is None:
            self.row_count = len(self.rows)

    def column(self, index: int) -> list[Cell]:
        """Values of one column; short rows yield None."""
        return [row[index] if index < len(row) else None for row in self.rows]


@dataclass
class ColumnTypeSuggestion:
    """Goal type inferred from a column's sample values."""
    goal_type: GoalType
    suggested_goal_value: Optional[float] = None


@dataclass
class ColumnMapping:
    """How one spreadsheet column becomes a habit."""
    column_index: int
    column_name: str
    habit_name: str
    category: Category
    goal_type: GoalType
    goal_value: Optional[float] = None
    unit: Optional[str] = None
    weight: int = DEFAULT_WEIGHT


@dataclass
class ImportConfig:
    """User-confirmed import settings."""
    date_column: int
    column_mappings: list[ColumnMapping] = field(default_factory=list)


@dataclass
class ImportedValue:
    column_index: int
    value: Cell


@dataclass
class ImportedRow:
    """One spreadsheet row with a recognized date."""
    date: date
    values: list[ImportedValue] = field(default_factory=list)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
