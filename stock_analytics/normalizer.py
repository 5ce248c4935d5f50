"""
Event normalization.

Deduction and wastage records arrive in two different shapes. Everything
downstream works on one tagged movement type (UsedEvent | WastedEvent) whose
monetary value is the cost snapshot stored with the record, or the current
inventory price when the record carries none.
"""

import logging
from typing import Iterable, Mapping

import pandas as pd

from stock_analytics.schemas import (
    DeductionEvent,
    InventoryItem,
    StockEvent,
    UsedEvent,
    WastageEvent,
    WastedEvent,
)

logger = logging.getLogger(__name__)

MOVEMENT_COLUMNS = [
    "kind",
    "id",
    "item_id",
    "item_name",
    "unit",
    "quantity",
    "value",
    "date",
    "created_at",
    "order_id",
    "reason",
]


def index_items(items: Iterable[InventoryItem]) -> dict[str, InventoryItem]:
    """Maps item id -> item. Later duplicates win."""
    return {item.id: item for item in items}


def _price(
    quantity: float, item: InventoryItem | None, stored_cost: float | None
) -> float:
    # The cost written with the record is what the stock was worth at the time
    if stored_cost is not None:
        return stored_cost
    if item is not None:
        return quantity * item.cost_per_unit
    return 0.0



def normalize_deductions(
    deductions: Iterable[DeductionEvent], items: Mapping[str, InventoryItem]
) -> list[UsedEvent]:
    normalized = []
    for d in deductions:
        item = items.get(d.item_id)
        normalized.append(
            UsedEvent(
                id=d.id,
                item_id=d.item_id,
                item_name=item.name if item else (d.item_name or d.item_id),
                unit=d.unit or (item.unit if item else ""),
                quantity=d.quantity,
                value=_price(d.quantity, item, d.total_cost),
                date=d.date,
                created_at=d.created_at,
                order_id=d.order_id,
            )
        )
    return normalized


def normalize_wastage(
    wastage: Iterable[WastageEvent], items: Mapping[str, InventoryItem]
) -> list[WastedEvent]:
    """
    Wastage records carry no unit snapshot, so the unit comes from the
    current item (empty when the item is gone). The movement feed shows it
    next to the quantity the same way it does for deductions.
    """
    normalized = []
    for w in wastage:
        item = items.get(w.item_id)
        normalized.append(
            WastedEvent(
                id=w.id,
                item_id=w.item_id,
                item_name=item.name if item else (w.item_name or w.item_id),
                unit=item.unit if item else "",
                quantity=w.quantity,
                value=_price(w.quantity, item, w.cost_loss),
                date=w.date,
                created_at=w.created_at,
                reason=w.reason,
            )
        )
    return normalized


def normalize_events(
    items: Iterable[InventoryItem],
    deductions: Iterable[DeductionEvent],
    wastage: Iterable[WastageEvent],
) -> list[StockEvent]:
    """Deductions first, then wastage; input order is kept within each kind."""
    lookup = index_items(items)
    events: list[StockEvent] = []
    events.extend(normalize_deductions(deductions, lookup))
    events.extend(normalize_wastage(wastage, lookup))
    logger.debug(f"Normalized {len(events)} stock events.")
    return events


def events_frame(events: Iterable[StockEvent]) -> pd.DataFrame:
    """
    Flattens movements into a DataFrame for grouping.
    The column set is fixed so that an empty input still aggregates cleanly.
    """
    records = [event.model_dump() for event in events]
    df = pd.DataFrame(records, columns=MOVEMENT_COLUMNS)
    df["quantity"] = df["quantity"].astype(float)
    df["value"] = df["value"].astype(float)
    return df
