import logging
from datetime import date, datetime
from typing import Iterable, Optional

from stock_analytics import settings
from stock_analytics.normalizer import (
    events_frame,
    index_items,
    normalize_deductions,
    normalize_wastage,
)
from stock_analytics.schemas import (
    DeductionEvent,
    InventoryItem,
    TopLossItem,
    WastageEvent,
    WastageReport,
)
from stock_analytics.utils import as_day, days_in_month, month_start

logger = logging.getLogger(__name__)


def month_to_date(wastage: Iterable[WastageEvent], now: date | datetime) -> list[WastageEvent]:
    """Wastage dated from the 1st of `now`'s month through `now`."""
    first, today = month_start(now), as_day(now)
    return [w for w in wastage if first <= w.date <= today]


def wastage_percent(total_wasted: float, total_used: float) -> float:
    """Share of money lost to wastage out of all money that left stock."""
    denominator = total_wasted + total_used
    if denominator <= 0:
        return 0.0
    return total_wasted / denominator * 100


def project_monthly_loss(
    month_to_date_cost: float, now: date | datetime, days_elapsed: Optional[int] = None
) -> float:
    """Linear run-rate of the month-to-date loss over the whole month."""
    elapsed = now.day if days_elapsed is None else days_elapsed
    if elapsed <= 0:
        return 0.0
    return month_to_date_cost / elapsed * days_in_month(now)


def analyze_wastage(
    items: Iterable[InventoryItem],
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
    month_wastage: Iterable[WastageEvent],
    now: date | datetime,
    top_n: int = settings.TOP_LOSS_LIMIT,
) -> WastageReport:
    """
    Loss attribution for a period: wastage share of outgoing value, month-end
    projection, the costliest items and the cost per cause.
    `deductions` and `wastage` are the period's events; `month_wastage` is
    the month-to-date subset used for the projection.
    """
    lookup = index_items(items)
    used = events_frame(normalize_deductions(deductions, lookup))
    wasted = events_frame(normalize_wastage(wastage, lookup))
    month = events_frame(normalize_wastage(month_wastage, lookup))

    total_used = float(used["value"].sum())
    total_wasted = float(wasted["value"].sum())
    month_loss = float(month["value"].sum())

    report = WastageReport(
        total_wasted=total_wasted,
        total_used=total_used,
        wastage_percent=wastage_percent(total_wasted, total_used),
        month_to_date_loss=month_loss,
        projected_monthly_loss=project_monthly_loss(month_loss, now),
    )
    if wasted.empty:
        return report

    by_item = (
        wasted.groupby("item_id", sort=False)
        .agg(name=("item_name", "first"), cost=("value", "sum"), quantity=("quantity", "sum"))
        .sort_values("cost", ascending=False, kind="stable")
        .head(top_n)
    )
    report.top_items = [
        TopLossItem(
            item_id=str(item_id),
            name=row["name"],
            cost=float(row["cost"]),
            quantity=float(row["quantity"]),
        )
        for item_id, row in by_item.iterrows()
    ]

    by_reason = (
        wasted.groupby("reason", sort=False)["value"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    report.by_reason = {str(reason): float(cost) for reason, cost in by_reason.items()}

    logger.debug(
        f"Wastage {total_wasted:.2f} of {total_used + total_wasted:.2f} outgoing "
        f"({report.wastage_percent:.1f}%)."
    )
    return report
