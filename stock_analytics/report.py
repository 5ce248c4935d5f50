import logging
from datetime import datetime
from typing import Iterable, Optional

from stock_analytics import settings
from stock_analytics.ledger import build_truth_table
from stock_analytics.normalizer import index_items, normalize_deductions, normalize_wastage
from stock_analytics.restock import build_low_stock_report, build_restock_plan
from stock_analytics.schemas import (
    DateRange,
    DeductionEvent,
    InventoryItem,
    StockReport,
    WastageEvent,
)
from stock_analytics.summary import build_dashboard_summary
from stock_analytics.timeline import merge_movements
from stock_analytics.usage import compute_usage_stats
from stock_analytics.utils import resolve_date_range
from stock_analytics.wastage import analyze_wastage, month_to_date

logger = logging.getLogger(__name__)


def build_report(
    items: Iterable[InventoryItem],
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
    now: datetime,
    date_range: Optional[DateRange] = None,
    window_days: int = settings.USAGE_WINDOW_DAYS,
) -> StockReport:
    """
    Runs every analytic over one snapshot.

    Usage rates and restock/low-stock lists always look at the full deduction
    history through the trailing window ending at `now`. The summary, truth
    table, wastage attribution and movement feed are limited to `date_range`
    (today when omitted). The month-end projection uses month-to-date wastage.
    """
    items = list(items)
    deductions = list(deductions)
    wastage = list(wastage)
    date_range = date_range or resolve_date_range("today", now)

    period_deductions = [d for d in deductions if date_range.contains(d.date)]
    period_wastage = [w for w in wastage if date_range.contains(w.date)]
    month_wastage = month_to_date(wastage, now)
    logger.info(
        f"Building report for {date_range.label} ({date_range.start} to {date_range.end}): "
        f"{len(period_deductions)} deductions, {len(period_wastage)} wastage entries."
    )

    usage_stats = compute_usage_stats(deductions, now, window_days)
    lookup = index_items(items)

    return StockReport(
        generated_at=now,
        date_range=date_range,
        summary=build_dashboard_summary(items, period_deductions, period_wastage, month_wastage),
        restock_plan=build_restock_plan(items, usage_stats),
        low_stock=build_low_stock_report(items, usage_stats),
        truth_table=build_truth_table(
            items, deductions, wastage, date_range.start, date_range.end, usage_stats
        ),
        wastage=analyze_wastage(items, period_deductions, period_wastage, month_wastage, now),
        movements=merge_movements(
            normalize_deductions(period_deductions, lookup),
            normalize_wastage(period_wastage, lookup),
        ),
    )
