"""
Value normalization.

Maps a raw logged value onto a 0-1.0 scale relative to a habit's goal:

- Binary: Yes/No, 1/0 -> 1.0 or 0.0
- Number: 8000 of 10000 steps -> min(value/goal, 1.0)
- Duration: 45 of 60 mins -> min(value/goal, 1.0)

Normalization never raises. Anything that cannot be understood counts as 0.
"""

import logging
import math
import re
from typing import Iterable, Optional

from .models import GoalType, NormalizationConfig, NormalizedResult, RawValue

logger = logging.getLogger(__name__)

AFFIRMATIVE_TOKENS = frozenset(
    {"yes", "true", "y", "1", "done", "completed", "✓", "✔", "x"}
)
NEGATIVE_TOKENS = frozenset({"no", "false", "n", "0", "", "skip", "skipped", "-"})

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_SEPARATORS = re.compile(r"[,\s]")
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*h(?:ours?)?", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+(?:\.\d+)?)\s*m(?:ins?|inutes?)?", re.IGNORECASE)


def round_half_up(value: float, digits: int = 3) -> float:
    """Round like a spreadsheet does (0.5 goes up), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def parse_leading_float(text: str) -> Optional[float]:
    """
    Parse the longest numeric prefix of a string.

    "8000steps" -> 8000.0, "abc" -> None. Surrounding whitespace is ignored.
    """
    match = _LEADING_FLOAT.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def strip_separators(text: str) -> str:
    """Remove thousands separators and whitespace ("10, 000" -> "10000")."""
    return _SEPARATORS.sub("", text)


def coerce_goal_type(goal_type) -> Optional[GoalType]:
    """Return a GoalType for an enum or its string value, None if unknown."""
    if isinstance(goal_type, GoalType):
        return goal_type
    try:
        return GoalType(str(goal_type).strip().lower())
    except ValueError:
        return None


def normalize(config: NormalizationConfig) -> NormalizedResult:
    """
    Normalize a raw value to the 0-1.0 scale.

    Args:
        config: Goal type, optional goal value and the raw logged value

    Returns:
        NormalizedResult with the value rounded to 3 decimals, the numeric
        form of the raw value and an integer percentage
    """
    goal_type = coerce_goal_type(config.goal_type)
    numeric_value = to_numeric(config.raw_value, goal_type)
    goal_value = config.goal_value

    if goal_type is GoalType.BINARY:
        normalized_value = 1.0 if numeric_value > 0 else 0.0
    elif goal_type in (GoalType.NUMBER, GoalType.DURATION):
        if _is_positive_number(goal_value):
            normalized_value = min(numeric_value / float(goal_value), 1.0)
        else:
            # No goal set: did something > 0
            normalized_value = 1.0 if numeric_value > 0 else 0.0
    else:
        logger.debug(f"Unknown goal type {config.goal_type!r}, normalizing to 0")
        normalized_value = 0.0

    normalized_value = max(normalized_value, 0.0)

    return NormalizedResult(
        normalized_value=round_half_up(normalized_value, 3),
        raw_value=numeric_value,
        percentage=int(round_half_up(normalized_value * 100, 0)),
    )


def to_numeric(raw_value: RawValue, goal_type: Optional[GoalType]) -> float:
    """Coerce a raw logged value to a number (0 for anything unusable)."""
    if raw_value is None:
        return 0.0

    if isinstance(raw_value, bool):
        return 1.0 if raw_value else 0.0

    if isinstance(raw_value, str):
        return parse_string_value(raw_value, goal_type)

    try:
        numeric_value = float(raw_value)
    except (TypeError, ValueError):
        logger.debug(f"Unsupported raw value type: {type(raw_value).__name__}")
        return 0.0

    return numeric_value if math.isfinite(numeric_value) else 0.0


def parse_string_value(value: str, goal_type: Optional[GoalType]) -> float:
    """
    Parse a string value into numeric form.

    Recognizes yes/no style tokens, duration strings for duration goals and
    plain numbers with thousands separators.
    """
    trimmed = value.strip().lower()

    if trimmed in AFFIRMATIVE_TOKENS:
        return 1.0
    if trimmed in NEGATIVE_TOKENS:
        return 0.0

    # e.g. "1h 30m", "90 mins", "1:30"
    if goal_type is GoalType.DURATION:
        return parse_duration_string(trimmed)

    parsed = parse_leading_float(strip_separators(value))
    if parsed is None or not math.isfinite(parsed):
        logger.debug(f"Could not parse {value!r} as a number, using 0")
        return 0.0
    return parsed


def parse_duration_string(value: str) -> float:
    """
    Parse a duration string into minutes.

    Examples:
        "1:30" -> 90
        "1:30:30" -> 90.5
        "1h 30m" -> 90
        "45" -> 45 (plain numbers are minutes)
    """
    if ":" in value:
        parts = value.split(":")
        if len(parts) in (2, 3):
            numbers = [_leading_int(part) for part in parts]
            if all(n is not None for n in numbers):
                minutes = numbers[0] * 60 + numbers[1]
                if len(numbers) == 3:
                    minutes += numbers[2] / 60
                return float(minutes)

    hour_match = _HOURS.search(value)
    minute_match = _MINUTES.search(value)

    total = 0.0
    if hour_match:
        total += float(hour_match.group(1)) * 60
    if minute_match:
        total += float(minute_match.group(1))

    if total > 0:
        return total

    plain = parse_leading_float(value)
    if plain is None or not math.isfinite(plain):
        return 0.0
    return plain


def normalize_values(
    values: Iterable[RawValue],
    goal_type: GoalType,
    goal_value: Optional[float] = None,
) -> list[NormalizedResult]:
    """Normalize a batch of raw values against the same goal."""
    return [
        normalize(NormalizationConfig(goal_type=goal_type, goal_value=goal_value, raw_value=raw))
        for raw in values
    ]


def calculate_average_normalized(
    values: list[RawValue],
    goal_type: GoalType,
    goal_value: Optional[float] = None,
) -> float:
    """Average normalized value of a batch, 0 for an empty batch."""
    if not values:
        return 0.0

    results = normalize_values(values, goal_type, goal_value)
    return sum(r.normalized_value for r in results) / len(values)


def _is_positive_number(value) -> bool:
    if isinstance(value, bool) or value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None
