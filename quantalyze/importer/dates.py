"""Date cell parsing for spreadsheet imports."""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

# Excel serial day 0; the offset absorbs Excel's 1900 leap-year bug
EXCEL_EPOCH = date(1899, 12, 30)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
)


def parse_date(value) -> Optional[date]:
    """
    Parse a spreadsheet date cell.

    Numbers are Excel serial dates. Strings are tried against the common
    formats in DATE_FORMATS and then ISO 8601. Month-first wins when a
    string fits both US and European layouts.

    Returns:
        The calendar date, or None if the value is not a date
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        return _from_excel_serial(value)

    text = str(value).strip()
    if not text:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        logger.debug(f"Unrecognized date value: {text!r}")
        return None


def _from_excel_serial(serial: float) -> Optional[date]:
    if not math.isfinite(serial):
        return None
    try:
        return EXCEL_EPOCH + timedelta(days=int(serial))
    except OverflowError:
        logger.debug(f"Excel serial date out of range: {serial}")
        return None
