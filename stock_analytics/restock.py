"""
Purchase planning.

Two separate policies live here and must stay separate:

* build_restock_plan: "how much to buy to hold RESTOCK_COVERAGE_DAYS of usage".
* build_low_stock_report: "how much to clear the min-stock danger zone",
  used for urgency triage of items already at or under their minimum.
"""

import logging
import math
from typing import Iterable, Mapping

from stock_analytics import settings
from stock_analytics.projection import project_stockout
from stock_analytics.schemas import (
    InventoryItem,
    LowStockEntry,
    LowStockReport,
    RestockPlan,
    RestockSuggestion,
)
from stock_analytics.usage import usage_for
from stock_analytics.utils import days_left_sort_key

logger = logging.getLogger(__name__)


def target_stock(daily_usage: float) -> float:
    return daily_usage * settings.RESTOCK_COVERAGE_DAYS


def suggested_quantity(quantity: float, daily_usage: float) -> int:
    return max(0, math.ceil(target_stock(daily_usage) - quantity))


def reorder_quantity(quantity: float, min_stock: float) -> float:
    """Low-stock policy: double the minimum, but never less than the minimum itself."""
    return max(min_stock * 2 - quantity, min_stock)


def build_restock_plan(
    items: Iterable[InventoryItem], usage_stats: Mapping[str, float]
) -> RestockPlan:
    """
    Ranked "what to buy now" list. Only items that need restocking and have a
    positive suggested quantity are included, soonest-to-empty first.
    """
    suggestions = []
    for item in items:
        daily_usage = usage_for(usage_stats, item.id)
        projection = project_stockout(item, daily_usage)
        qty = suggested_quantity(item.quantity, daily_usage)

        if not projection.needs_restock or qty <= 0:
            continue

        suggestions.append(
            RestockSuggestion(
                item_id=item.id,
                name=item.name,
                unit=item.unit,
                quantity=item.quantity,
                daily_usage=daily_usage,
                days_left=projection.days_left,
                target_stock=target_stock(daily_usage),
                suggested_qty=qty,
                suggested_cost=qty * item.cost_per_unit,
            )
        )

    suggestions.sort(key=lambda s: days_left_sort_key(s.days_left))
    total = sum(s.suggested_cost for s in suggestions)
    logger.debug(f"Restock plan: {len(suggestions)} items, total cost {total:.2f}.")
    return RestockPlan(suggestions=suggestions, total_restock_cost=total)


def build_low_stock_report(
    items: Iterable[InventoryItem], usage_stats: Mapping[str, float]
) -> LowStockReport:
    """Items at or below min stock, with the doubling reorder policy applied."""
    entries = []
    for item in items:
        if item.quantity > item.min_stock:
            continue

        daily_usage = usage_for(usage_stats, item.id)
        projection = project_stockout(item, daily_usage)
        reorder_qty = reorder_quantity(item.quantity, item.min_stock)

        entries.append(
            LowStockEntry(
                item_id=item.id,
                name=item.name,
                unit=item.unit,
                quantity=item.quantity,
                min_stock=item.min_stock,
                daily_usage=daily_usage,
                days_left=projection.days_left,
                reorder_qty=reorder_qty,
                reorder_cost=reorder_qty * item.cost_per_unit,
                is_zero=item.quantity == 0,
                is_critical=projection.is_critical,
            )
        )

    entries.sort(key=lambda e: days_left_sort_key(e.days_left))
    return LowStockReport(
        entries=entries,
        total_reorder_cost=sum(e.reorder_cost for e in entries),
    )
