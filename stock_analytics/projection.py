from typing import Optional

from stock_analytics import settings
from stock_analytics.schemas import InventoryItem, StockoutProjection, StockStatus


def days_left(quantity: float, daily_usage: float) -> Optional[float]:
    """Days until empty at the current rate; None when nothing is being used."""
    if daily_usage > 0:
        return quantity / daily_usage
    return None


def stock_status(item: InventoryItem) -> StockStatus:
    """Badge tier from the item's own thresholds, independent of usage."""
    if item.quantity == 0:
        return StockStatus.ZERO
    if item.quantity <= item.min_stock * settings.CRITICAL_STOCK_RATIO:
        return StockStatus.CRITICAL
    if item.quantity <= item.min_stock:
        return StockStatus.LOW
    return StockStatus.OK


def needs_restock(item: InventoryItem, remaining_days: Optional[float]) -> bool:
    if item.quantity <= item.min_stock:
        return True
    return remaining_days is not None and remaining_days <= settings.RESTOCK_HORIZON_DAYS


def project_stockout(
    item: InventoryItem, daily_usage: Optional[float] = None
) -> StockoutProjection:
    daily_usage = daily_usage or 0.0
    remaining = days_left(item.quantity, daily_usage)
    return StockoutProjection(
        item_id=item.id,
        daily_usage=daily_usage,
        days_left=remaining,
        needs_restock=needs_restock(item, remaining),
        is_critical=remaining is not None and remaining <= settings.CRITICAL_DAYS_LEFT,
        status=stock_status(item),
    )
