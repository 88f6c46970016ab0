"""Column type, category and date column auto-detection for imports."""

import logging
import math
import re
from typing import Iterable

from ..analytics.models import DEFAULT_WEIGHT, Category, GoalType
from ..analytics.normalizer import parse_leading_float, strip_separators
from .models import Cell, ColumnMapping, ColumnTypeSuggestion, ParsedSpreadsheetData

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10
NUMERIC_SHARE_THRESHOLD = 0.7
DEFAULT_DURATION_GOAL = 60  # minutes

BINARY_TOKENS = frozenset(
    {"yes", "no", "y", "n", "true", "false", "1", "0", "done", "skip", "✓", "✔", "x", "-"}
)

DURATION_PATTERNS = (
    re.compile(r"^\d+:\d+"),  # HH:MM
    re.compile(r"\d+\s*h", re.IGNORECASE),  # Xh
    re.compile(r"\d+\s*m", re.IGNORECASE),  # Xm
    re.compile(r"\d+\s*min", re.IGNORECASE),  # X min
    re.compile(r"\d+\s*hour", re.IGNORECASE),  # X hour
)

# Checked in order; the first category with a matching keyword wins
CATEGORY_KEYWORDS = (
    (Category.VITALITY, (
        "sleep", "exercise", "workout", "gym", "run", "walk", "diet", "food",
        "eat", "water", "hydrat", "vitamin", "health", "steps", "weight",
    )),
    (Category.FOCUS, (
        "work", "read", "learn", "study", "course", "book", "code", "project",
        "focus", "meditat", "social media", "phone",
    )),
    (Category.DISCIPLINE, (
        "wake", "morning", "routine", "journal", "cold", "shower", "early",
        "bed", "snooze", "habit",
    )),
    (Category.SOCIAL, (
        "family", "friend", "call", "network", "mentor", "community", "date",
        "social", "relationship",
    )),
)
DEFAULT_CATEGORY = Category.DISCIPLINE

DATE_KEYWORDS = ("date", "day", "time", "timestamp", "when")


def detect_column_type(values: Iterable[Cell]) -> ColumnTypeSuggestion:
    """
    Guess the goal type of a column from its first non-empty values.

    Args:
        values: Raw cell values of the column

    Returns:
        ColumnTypeSuggestion, with a suggested goal for duration/number columns

    Example:
        ["yes", "no", "yes"] -> binary
        ["8000", "9500", "10200"] -> number, goal 10200
    """
    samples = []
    for value in values:
        if value is None or value == "":
            continue
        samples.append(_cell_to_text(value).lower().strip())
        if len(samples) == SAMPLE_SIZE:
            break

    if not samples:
        return ColumnTypeSuggestion(goal_type=GoalType.BINARY)

    if all(s in BINARY_TOKENS for s in samples):
        return ColumnTypeSuggestion(goal_type=GoalType.BINARY)

    if any(pattern.search(s) for s in samples for pattern in DURATION_PATTERNS):
        return ColumnTypeSuggestion(
            goal_type=GoalType.DURATION, suggested_goal_value=DEFAULT_DURATION_GOAL
        )

    numeric_values = []
    for s in samples:
        parsed = parse_leading_float(strip_separators(s))
        if parsed is not None and math.isfinite(parsed):
            numeric_values.append(parsed)

    if len(numeric_values) > len(samples) * NUMERIC_SHARE_THRESHOLD:
        return ColumnTypeSuggestion(
            goal_type=GoalType.NUMBER,
            suggested_goal_value=math.ceil(max(numeric_values)),
        )

    return ColumnTypeSuggestion(goal_type=GoalType.BINARY)


def detect_category(column_name: str) -> Category:
    """Guess a habit's category from its column header."""
    name = (column_name or "").lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category

    return DEFAULT_CATEGORY


def detect_date_column(headers: list[str]) -> int:
    """Index of the first date-like header, or 0 if there is none."""
    for index, header in enumerate(headers):
        name = (header or "").lower()
        if any(keyword in name for keyword in DATE_KEYWORDS):
            return index
    return 0


def auto_map_columns(
    data: ParsedSpreadsheetData,
    date_column_index: int,
    default_weight: int = DEFAULT_WEIGHT,
) -> list[ColumnMapping]:
    """
    Create a default mapping for every column except the date column.

    The mappings only pre-fill the import form; every field can be changed
    before the import is committed.
    """
    mappings = []

    for index, header in enumerate(data.headers):
        if index == date_column_index:
            continue

        suggestion = detect_column_type(data.column(index))
        category = detect_category(header)

        mappings.append(
            ColumnMapping(
                column_index=index,
                column_name=header,
                habit_name=header,
                category=category,
                goal_type=suggestion.goal_type,
                goal_value=suggestion.suggested_goal_value,
                weight=default_weight,
            )
        )
        logger.debug(
            f"  Column {index} '{header}': {category.value}, {suggestion.goal_type.value}"
            f" (goal: {suggestion.suggested_goal_value})"
        )

    logger.info(f"Auto-mapped {len(mappings)} columns")
    return mappings


def _cell_to_text(value: Cell) -> str:
    # Spreadsheet decoders hand back 8000.0 for 8000
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
