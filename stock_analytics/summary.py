"""Dashboard headline numbers and the per-item drill-down."""

from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

from stock_analytics import settings
from stock_analytics.normalizer import events_frame, index_items, normalize_deductions, normalize_wastage
from stock_analytics.projection import days_left, stock_status
from stock_analytics.schemas import (
    DailyMovement,
    DashboardSummary,
    DeductionEvent,
    InventoryItem,
    ItemDetail,
    WastageEvent,
)
from stock_analytics.utils import as_day


def filter_inventory(items: Iterable[InventoryItem], view: str = "all") -> list[InventoryItem]:
    """'all', 'low' (at or under min stock) or a category label."""
    if view == "all":
        return list(items)
    if view == "low":
        return [i for i in items if i.quantity <= i.min_stock]
    return [i for i in items if i.category == view]


def stock_value(items: Iterable[InventoryItem]) -> float:
    return sum(i.quantity * i.cost_per_unit for i in items)


def build_dashboard_summary(
    items: Iterable[InventoryItem],
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
    month_wastage: Iterable[WastageEvent],
) -> DashboardSummary:
    items = list(items)
    lookup = index_items(items)
    used = normalize_deductions(deductions, lookup)
    wasted = normalize_wastage(wastage, lookup)
    month = normalize_wastage(month_wastage, lookup)

    return DashboardSummary(
        total_items=len(items),
        total_stock_value=stock_value(items),
        consumed_value=sum(e.value for e in used),
        consumed_count=len(used),
        wasted_value=sum(e.value for e in wasted),
        monthly_wastage_loss=sum(e.value for e in month),
        low_stock_count=sum(1 for i in items if i.quantity <= i.min_stock),
        zero_stock_count=sum(1 for i in items if i.quantity == 0),
    )


def _daily_trend(df: pd.DataFrame, now: date | datetime, trend_days: int) -> list[DailyMovement]:
    today = as_day(now)
    days = [today - timedelta(days=offset) for offset in range(trend_days - 1, -1, -1)]
    if df.empty:
        return [DailyMovement(day=d) for d in days]

    per_day = (
        df.groupby(["date", "kind"])["quantity"]
        .sum()
        .unstack(fill_value=0.0)
        .reindex(columns=["USED", "WASTED"], fill_value=0.0)
    )
    trend = []
    for d in days:
        if d in per_day.index:
            trend.append(
                DailyMovement(
                    day=d,
                    used=float(per_day.at[d, "USED"]),
                    wasted=float(per_day.at[d, "WASTED"]),
                )
            )
        else:
            trend.append(DailyMovement(day=d))
    return trend


def build_item_detail(
    item: InventoryItem,
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
    now: date | datetime,
    trend_days: int = settings.ITEM_TREND_DAYS,
) -> ItemDetail:
    """
    Lifetime totals and a daily used/wasted series for one item.
    Average usage divides lifetime usage by `trend_days`.
    """
    lookup = {item.id: item}
    used = events_frame(normalize_deductions((d for d in deductions if d.item_id == item.id), lookup))
    wasted = events_frame(normalize_wastage((w for w in wastage if w.item_id == item.id), lookup))

    total_used = float(used["quantity"].sum())
    total_wasted = float(wasted["quantity"].sum())
    avg_daily_usage = total_used / trend_days

    movement = total_used + total_wasted
    usage_percent = total_used / movement * 100 if movement > 0 else 100.0
    wastage_share = total_wasted / movement * 100 if movement > 0 else 0.0

    by_reason = {}
    if not wasted.empty:
        reasons = (
            wasted.groupby("reason", sort=False)["value"]
            .sum()
            .sort_values(ascending=False, kind="stable")
        )
        by_reason = {str(reason): float(cost) for reason, cost in reasons.items()}

    return ItemDetail(
        item_id=item.id,
        name=item.name,
        unit=item.unit,
        status=stock_status(item),
        current_value=item.quantity * item.cost_per_unit,
        total_used=total_used,
        total_wasted=total_wasted,
        total_usage_cost=float(used["value"].sum()),
        total_wastage_cost=float(wasted["value"].sum()),
        avg_daily_usage=avg_daily_usage,
        days_until_empty=days_left(item.quantity, avg_daily_usage),
        usage_percent=usage_percent,
        wastage_percent=wastage_share,
        wastage_by_reason=by_reason,
        trend=_daily_trend(pd.concat([used, wasted], ignore_index=True), now, trend_days),
    )
