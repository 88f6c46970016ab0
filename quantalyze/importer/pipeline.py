"""
Post-parse import pipeline.

Takes the headers/rows produced by an external spreadsheet decoder and the
user-confirmed column mappings, and produces habit definitions plus
normalized daily log rows for the caller to persist.
"""

import logging
import uuid
from typing import Callable, Optional

from ..analytics.models import MAX_WEIGHT, MIN_WEIGHT, DailyLog, Habit, NormalizationConfig
from ..analytics.normalizer import normalize
from .dates import parse_date
from .models import (
    ColumnMapping,
    ImportConfig,
    ImportedRow,
    ImportedValue,
    ParsedSpreadsheetData,
    ValidationResult,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({"csv", "xlsx", "xls"})


class QuantalyzeImportError(ValueError):
    """Base class for import failures reported back to the user."""


class UnsupportedFileFormatError(QuantalyzeImportError):
    """The uploaded file is not a CSV or Excel file."""


class ImportValidationError(QuantalyzeImportError):
    """The parsed sheet cannot be imported."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def ensure_supported_file(filename: str) -> str:
    """
    Check that a file can be handed to a spreadsheet decoder.

    Returns:
        The lower-cased extension

    Raises:
        UnsupportedFileFormatError: For anything but csv/xlsx/xls
    """
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileFormatError(
            f"Unsupported file format: {extension or filename}. Please use CSV or Excel files."
        )
    return extension


def validate_parsed_data(data: ParsedSpreadsheetData) -> ValidationResult:
    """Collect every reason the parsed sheet cannot be imported."""
    errors = []

    if not data.headers:
        errors.append("No headers found in the file")

    if data.row_count == 0:
        errors.append("No data rows found in the file")

    if len(data.headers) < 2:
        errors.append("File must have at least 2 columns (date + at least one habit)")

    header_count = len(data.headers)
    inconsistent_rows = sum(1 for row in data.rows if len(row) != header_count)
    if inconsistent_rows > 0:
        errors.append(f"{inconsistent_rows} rows have inconsistent column counts")

    return ValidationResult(is_valid=not errors, errors=errors)


def require_valid(data: ParsedSpreadsheetData) -> None:
    """Raise ImportValidationError if the sheet fails validation."""
    result = validate_parsed_data(data)
    if not result.is_valid:
        logger.warning(f"Rejected import: {'; '.join(result.errors)}")
        raise ImportValidationError(result.errors)


def process_imported_data(
    data: ParsedSpreadsheetData, config: ImportConfig
) -> list[ImportedRow]:
    """
    Pick the mapped cells out of every row that has a recognizable date.

    Rows whose date cell cannot be parsed are skipped.
    """
    results = []
    skipped = 0

    for row in data.rows:
        date_value = row[config.date_column] if config.date_column < len(row) else None
        day = parse_date(date_value)

        if day is None:
            skipped += 1
            continue

        values = [
            ImportedValue(
                column_index=mapping.column_index,
                value=row[mapping.column_index] if mapping.column_index < len(row) else None,
            )
            for mapping in config.column_mappings
        ]
        results.append(ImportedRow(date=day, values=values))

    if skipped:
        logger.debug(f"Skipped {skipped} row(s) without a recognizable date")

    return results


def build_habits(
    mappings: list[ColumnMapping],
    id_factory: Optional[Callable[[], str]] = None,
) -> dict[int, Habit]:
    """
    Create one habit per column mapping.

    Returns:
        Habits keyed by the spreadsheet column they were mapped from
    """
    id_factory = id_factory or (lambda: str(uuid.uuid4()))
    habits = {}

    for mapping in mappings:
        habits[mapping.column_index] = Habit(
            id=id_factory(),
            name=mapping.habit_name or mapping.column_name,
            category=mapping.category,
            weight=min(max(int(mapping.weight), MIN_WEIGHT), MAX_WEIGHT),
            goal_type=mapping.goal_type,
            goal_value=mapping.goal_value,
            unit=mapping.unit,
            is_active=True,
        )

    return habits


def upsert_log(logs: dict[tuple, DailyLog], log: DailyLog) -> None:
    """Store a log, replacing any earlier log for the same habit and day."""
    logs[(log.habit_id, log.date)] = log


def build_daily_logs(
    data: ParsedSpreadsheetData,
    config: ImportConfig,
    habits_by_column: dict[int, Habit],
) -> list[DailyLog]:
    """
    Turn every mapped cell of every dated row into a normalized daily log.

    A sheet with the same date twice keeps the later row.
    """
    logs: dict[tuple, DailyLog] = {}

    for imported in process_imported_data(data, config):
        for cell in imported.values:
            habit = habits_by_column.get(cell.column_index)
            if habit is None:
                continue

            normalized = normalize(
                NormalizationConfig(
                    goal_type=habit.goal_type,
                    goal_value=habit.goal_value,
                    raw_value=cell.value,
                )
            )
            upsert_log(
                logs,
                DailyLog(
                    habit_id=habit.id,
                    date=imported.date,
                    raw_value=normalized.raw_value,
                    normalized_value=normalized.normalized_value,
                ),
            )

    return list(logs.values())


def run_import(
    data: ParsedSpreadsheetData,
    config: ImportConfig,
    id_factory: Optional[Callable[[], str]] = None,
) -> tuple[list[Habit], list[DailyLog]]:
    """
    Validate the sheet and build habits and daily logs from it.

    Raises:
        ImportValidationError: If the sheet or the mappings are unusable
    """
    require_valid(data)

    if not config.column_mappings:
        raise ImportValidationError(["Select at least one column to import"])

    column_count = len(data.headers)
    indexes = [config.date_column] + [m.column_index for m in config.column_mappings]
    out_of_range = [i for i in indexes if not 0 <= i < column_count]
    if out_of_range:
        raise ImportValidationError(
            [f"Column index out of range: {i}" for i in out_of_range]
        )

    habits_by_column = build_habits(config.column_mappings, id_factory)
    logs = build_daily_logs(data, config, habits_by_column)

    logger.info(
        f"Imported {len(habits_by_column)} habits and {len(logs)} daily logs "
        f"from {data.row_count} rows"
    )
    return list(habits_by_column.values()), logs
