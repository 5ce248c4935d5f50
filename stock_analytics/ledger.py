"""
Reconciliation ledger ("truth table").

The current inventory snapshot is the closing stock. Opening stock is
reconstructed by adding back everything used or wasted inside the range.
No purchase/receipt events exist yet, so `purchased` is always 0 and opening
stock is understated whenever stock was received mid-range.
"""

import logging
from datetime import date
from typing import Iterable, Mapping, Optional

from stock_analytics.normalizer import events_frame, index_items, normalize_events
from stock_analytics.schemas import (
    DeductionEvent,
    InventoryItem,
    TruthTable,
    TruthTableRow,
    WastageEvent,
)
from stock_analytics.usage import usage_for

logger = logging.getLogger(__name__)


def build_truth_table(
    items: Iterable[InventoryItem],
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
    start: date,
    end: date,
    usage_stats: Optional[Mapping[str, float]] = None,
) -> TruthTable:
    """
    Per-item opening/closing/used/wasted for [start, end] (inclusive).
    Rows without activity are dropped; the rest are ranked by wastage cost,
    then by total money burned. A reversed range yields an empty table.
    """
    table = TruthTable(start=start, end=end)
    if start > end:
        logger.debug(f"Reversed range {start} > {end}; returning an empty truth table.")
        return table

    items = list(items)
    lookup = index_items(items)
    in_range = [
        e for e in normalize_events(items, deductions, wastage) if start <= e.date <= end
    ]
    df = events_frame(in_range)
    # Events for items outside the snapshot have no closing stock to reconcile against
    df = df[df["item_id"].isin(list(lookup))]
    if df.empty:
        return table

    totals = (
        df.groupby(["item_id", "kind"])["quantity"]
        .sum()
        .unstack(fill_value=0.0)
        .reindex(columns=["USED", "WASTED"], fill_value=0.0)
    )

    rows = []
    for item_id, row in totals.iterrows():
        item = lookup[str(item_id)]
        used = float(row["USED"])
        wasted = float(row["WASTED"])
        if used <= 0 and wasted <= 0:
            continue

        rows.append(
            TruthTableRow(
                item_id=item.id,
                name=item.name,
                category=item.category,
                unit=item.unit,
                cost_per_unit=item.cost_per_unit,
                closing_stock=item.quantity,
                opening_stock=item.quantity + used + wasted,
                purchased=0.0,
                used=used,
                wasted=wasted,
                money_burned=(used + wasted) * item.cost_per_unit,
                wastage_cost=wasted * item.cost_per_unit,
                avg_daily_usage=usage_for(usage_stats or {}, item.id),
            )
        )

    rows.sort(key=lambda r: (r.wastage_cost, r.money_burned), reverse=True)

    table.rows = rows
    table.total_money_burned = sum(r.money_burned for r in rows)
    table.total_wastage_cost = sum(r.wastage_cost for r in rows)
    return table
