from typing import Iterable

from stock_analytics import settings
from stock_analytics.schemas import StockEvent


def merge_movements(*streams: Iterable[StockEvent]) -> list[StockEvent]:
    """
    One feed of every movement, newest first by creation timestamp.
    Nothing is dropped or truncated; see `preview_movements` for paging.
    """
    merged = [event for stream in streams for event in stream]
    return sorted(merged, key=lambda e: e.created_at, reverse=True)


def preview_movements(
    movements: list[StockEvent], limit: int = settings.TIMELINE_PREVIEW_LIMIT
) -> tuple[list[StockEvent], int]:
    """First `limit` movements plus how many are hidden behind "show all"."""
    return movements[:limit], max(0, len(movements) - limit)
