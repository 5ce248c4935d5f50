import calendar
import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

from stock_analytics import settings
from stock_analytics.schemas import DateRange

logger = logging.getLogger(__name__)

_FILE_DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})\.csv$")


def get_date_suffix_for_filename(now: datetime) -> str:
    """Returns the given moment as a YYYY-MM-DD string for filenames."""
    return now.strftime("%Y-%m-%d")


def as_day(value: date | datetime) -> date:
    """Collapses a datetime to its calendar day; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def window_start(now: date | datetime, window_days: int) -> date:
    """First calendar day (inclusive) of a trailing window ending at `now`."""
    return as_day(now) - timedelta(days=window_days)


def days_in_month(day: date | datetime) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def month_start(day: date | datetime) -> date:
    return as_day(day).replace(day=1)


def resolve_date_range(
    preset: str,
    now: date | datetime,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> DateRange:
    """
    Turns a report preset ('today', 'yesterday', 'week', 'month', 'custom')
    into inclusive calendar bounds. Unknown presets fall back to 'today'.
    """
    today = as_day(now)
    if preset == "yesterday":
        yesterday = today - timedelta(days=1)
        return DateRange(start=yesterday, end=yesterday, label="Yesterday")
    if preset == "week":
        return DateRange(start=today - timedelta(days=7), end=today, label="This Week")
    if preset == "month":
        return DateRange(start=month_start(today), end=today, label="This Month")
    if preset == "custom":
        return DateRange(start=start or today, end=end or today, label="Custom")
    return DateRange(start=today, end=today, label="Today")


def days_left_sort_key(days_left: Optional[float]) -> float:
    """Orders projections soonest-empty first, with no-projection items last."""
    return days_left if days_left is not None else float("inf")


def format_days_left(days_left: Optional[float]) -> float:
    """Display value for a projection: the configured sentinel when there is none."""
    if days_left is None:
        return float(settings.NO_PROJECTION_DAYS)
    return round(days_left, 1)


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.csv' file in a directory.
    Returns the path together with the date parsed from its name.
    """
    if not directory.exists():
        logger.warning(f"Input directory {directory} does not exist.")
        return None

    candidates = []
    for path in directory.glob(f"{prefix}*.csv"):
        match = _FILE_DATE_PATTERN.search(path.name)
        if not match:
            continue
        try:
            file_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            logger.warning(f"Ignoring {path.name}: unparseable date in filename.")
            continue
        candidates.append((file_date, path))

    if not candidates:
        return None

    file_date, path = max(candidates)
    return path, file_date


def load_csv(file_path: Path, skiprows: int = 0) -> pd.DataFrame | None:
    """
    CSV loader with an encoding fallback.
    Tries UTF-8 with BOM support first, then latin-1, which can read any byte.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", skiprows=skiprows)

    except UnicodeDecodeError:
        logger.info(f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'.")
        try:
            return pd.read_csv(file_path, encoding="latin-1", skiprows=skiprows)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e_latin1:
            logger.error(f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}")
            return None

    except FileNotFoundError:
        logger.info(f"Export not found at {file_path}, skipping.")
        return None

    except pd.errors.EmptyDataError:
        logger.warning(f"{file_path.name} is empty.")
        return None

    except pd.errors.ParserError as e_parse:
        logger.error(f"Malformed CSV in {file_path.name}. Reason: {e_parse}")
        return None
