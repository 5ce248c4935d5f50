import logging
from datetime import date, datetime
from typing import Iterable, Mapping

import pandas as pd

from stock_analytics import settings
from stock_analytics.schemas import DeductionEvent
from stock_analytics.utils import window_start

logger = logging.getLogger(__name__)


def compute_usage_stats(
    deductions: Iterable[DeductionEvent],
    now: date | datetime,
    window_days: int = settings.USAGE_WINDOW_DAYS,
) -> dict[str, float]:
    """
    Average daily consumption per item over a trailing window.

    Deductions dated on or after `now - window_days` count (calendar days,
    inclusive lower bound). The sum is divided by the full window length, not
    by the number of active days. Items with nothing in the window are left
    out of the mapping; read them through `usage_for`.
    """
    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")

    cutoff = window_start(now, window_days)
    rows = [(d.item_id, d.quantity) for d in deductions if d.date >= cutoff]
    if not rows:
        return {}

    df = pd.DataFrame(rows, columns=["item_id", "quantity"])
    totals = df.groupby("item_id", sort=False)["quantity"].sum()

    stats = {str(item_id): float(total) / window_days for item_id, total in totals.items()}
    logger.debug(f"Usage stats for {len(stats)} items since {cutoff.isoformat()}.")
    return stats


def usage_for(usage_stats: Mapping[str, float], item_id: str) -> float:
    """Daily usage for an item, 0 when it has no recorded usage."""
    return usage_stats.get(item_id, 0.0)
