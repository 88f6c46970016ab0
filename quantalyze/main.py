"""Main FastAPI application."""

import logging
from dataclasses import asdict
from datetime import date, datetime

from fastapi import FastAPI, HTTPException

from .analytics.buckets import build_bucket_scores
from .analytics.heatmap import scores_to_heatmap_levels
from .analytics.models import DailyLog, Habit, HabitWithLog, NormalizationConfig
from .analytics.normalizer import normalize
from .analytics.scoring import calculate_daily_scores, generate_scores_for_date_range
from .analytics.streaks import calculate_consistency_multiplier, calculate_streak
from .api.models import (
    DailyScoresRequest,
    DailyScoresResponse,
    HabitModel,
    ImportCommitRequest,
    ImportCommitResponse,
    ImportPreviewRequest,
    ImportPreviewResponse,
    NormalizeRequest,
    NormalizeResponse,
    ParsedSheetModel,
    ScoreRangeRequest,
    ScoreRangeResponse,
    StreakRequest,
    StreakResponse,
)
from .config import settings
from .importer.detection import auto_map_columns, detect_date_column
from .importer.models import ColumnMapping, ImportConfig, ParsedSpreadsheetData
from .importer.pipeline import (
    ImportValidationError,
    UnsupportedFileFormatError,
    ensure_supported_file,
    run_import,
    validate_parsed_data,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="Quantalyze",
    description="Quality Score engine for habit tracking dashboards",
    version=VERSION,
)


def to_habit(model: HabitModel) -> Habit:
    """Convert an API habit to the engine's Habit record."""
    return Habit(
        id=model.id,
        name=model.name,
        category=model.category,
        weight=model.weight,
        goal_type=model.goal_type,
        goal_value=model.goal_value,
        unit=model.unit,
        is_active=model.is_active,
        description=model.description,
    )


def to_sheet(model: ParsedSheetModel) -> ParsedSpreadsheetData:
    """Convert an API sheet to ParsedSpreadsheetData."""
    return ParsedSpreadsheetData(
        headers=[str(h or "").strip() for h in model.headers],
        rows=model.rows,
        row_count=model.row_count if model.row_count is not None else len(model.rows),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Quantalyze Quality Score engine",
        "version": VERSION,
        "endpoints": {
            "normalize": "/api/normalize",
            "daily_scores": "/api/scores/daily",
            "score_range": "/api/scores/range",
            "streak": "/api/streak",
            "import_preview": "/api/import/preview",
            "import_commit": "/api/import/commit",
            "status": "/status",
        },
    }


@app.get("/status")
async def status():
    """Server status endpoint."""
    return {
        "status": "running",
        "version": VERSION,
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.post("/api/normalize", response_model=NormalizeResponse)
async def normalize_endpoint(request: NormalizeRequest):
    """Normalize a single raw value against a goal."""
    result = normalize(
        NormalizationConfig(
            goal_type=request.goal_type,
            goal_value=request.goal_value,
            raw_value=request.raw_value,
        )
    )
    return NormalizeResponse(**asdict(result))


@app.post("/api/scores/daily", response_model=DailyScoresResponse)
async def daily_scores_endpoint(request: DailyScoresRequest):
    """
    Score one day.

    Each habit carries the raw value logged that day; habits without a value
    count as missed.
    """
    habits_with_logs = []
    for item in request.habits:
        habit = to_habit(item)
        log = None
        if item.raw_value is not None:
            log = DailyLog(habit_id=habit.id, date=date.today(), raw_value=item.raw_value)
        habits_with_logs.append(HabitWithLog(habit=habit, log=log))

    result = calculate_daily_scores(habits_with_logs, request.consistency_multiplier)
    logger.info(
        f"Daily score for {len(habits_with_logs)} habits: {result.overall_score} "
        f"(multiplier {result.consistency_multiplier})"
    )

    return DailyScoresResponse(
        category_scores={c.value: score for c, score in result.category_scores.items()},
        overall_score=result.overall_score,
        consistency_multiplier=result.consistency_multiplier,
        details=[asdict(d) for d in result.details],
        buckets=[asdict(b) for b in build_bucket_scores(result)],
    )


@app.post("/api/scores/range", response_model=ScoreRangeResponse)
async def score_range_endpoint(request: ScoreRangeRequest):
    """Score every day of a date range and build the heatmap for it."""
    if request.start_date > request.end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    habits = [to_habit(h) for h in request.habits]
    logs = [
        DailyLog(habit_id=log.habit_id, date=log.date, raw_value=log.raw_value)
        for log in request.logs
    ]

    scores = generate_scores_for_date_range(habits, logs, request.start_date, request.end_date)
    streak = calculate_streak({log.date for log in logs}, request.end_date)

    logger.info(
        f"Scored {len(scores)} days for {len(habits)} habits "
        f"({request.start_date} to {request.end_date})"
    )

    return ScoreRangeResponse(
        scores=[asdict(s) for s in scores],
        heatmap=[asdict(p) for p in scores_to_heatmap_levels(scores)],
        streak=StreakResponse(
            **asdict(streak),
            consistency_multiplier=calculate_consistency_multiplier(streak.current_streak),
        ),
    )


@app.post("/api/streak", response_model=StreakResponse)
async def streak_endpoint(request: StreakRequest):
    """Current and longest streak plus the resulting consistency multiplier."""
    streak = calculate_streak(request.dates, request.reference_date)
    return StreakResponse(
        **asdict(streak),
        consistency_multiplier=calculate_consistency_multiplier(streak.current_streak),
    )


@app.post("/api/import/preview", response_model=ImportPreviewResponse)
async def import_preview_endpoint(request: ImportPreviewRequest):
    """
    Validate a parsed spreadsheet and suggest column mappings.

    The suggestions pre-fill the mapping form; nothing is created here.
    """
    try:
        ensure_supported_file(request.filename)
    except UnsupportedFileFormatError as e:
        raise HTTPException(status_code=415, detail=str(e))

    data = to_sheet(request.data)
    validation = validate_parsed_data(data)

    date_column = detect_date_column(data.headers)
    mappings = []
    if data.headers:
        mappings = auto_map_columns(data, date_column, settings.default_habit_weight)

    logger.info(
        f"Import preview for {request.filename}: {data.row_count} rows, "
        f"{len(mappings)} columns, valid={validation.is_valid}"
    )

    return ImportPreviewResponse(
        is_valid=validation.is_valid,
        errors=validation.errors,
        row_count=data.row_count,
        date_column=date_column,
        mappings=[asdict(m) for m in mappings],
    )


@app.post("/api/import/commit", response_model=ImportCommitResponse)
async def import_commit_endpoint(request: ImportCommitRequest):
    """Build habits and normalized daily logs from confirmed mappings."""
    data = to_sheet(request.data)
    config = ImportConfig(
        date_column=request.date_column,
        column_mappings=[ColumnMapping(**m.model_dump()) for m in request.column_mappings],
    )

    try:
        habits, logs = run_import(data, config)
    except ImportValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors)

    return ImportCommitResponse(
        habits=[asdict(h) for h in habits],
        logs=[asdict(log) for log in logs],
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
