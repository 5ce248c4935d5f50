"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest

from stock_analytics.schemas import DeductionEvent, InventoryItem, WastageEvent

NOW = datetime(2026, 10, 19, 18, 30)
TODAY = NOW.date()


@pytest.fixture
def now() -> datetime:
    """Fixed reference moment for every computation."""
    return NOW


@pytest.fixture
def oil() -> InventoryItem:
    return InventoryItem(
        id="oil",
        name="Oil",
        unit="L",
        quantity=10,
        min_stock=5,
        cost_per_unit=150,
        category="oils",
    )


@pytest.fixture
def paneer() -> InventoryItem:
    return InventoryItem(
        id="paneer",
        name="Paneer",
        unit="kg",
        quantity=8,
        min_stock=3,
        cost_per_unit=10,
        category="dairy",
    )


@pytest.fixture
def rice() -> InventoryItem:
    return InventoryItem(
        id="rice",
        name="Rice",
        unit="kg",
        quantity=0,
        min_stock=20,
        cost_per_unit=60,
        category="grains",
    )


@pytest.fixture
def inventory(oil: InventoryItem, paneer: InventoryItem, rice: InventoryItem) -> list[InventoryItem]:
    return [oil, paneer, rice]


@pytest.fixture
def make_deduction() -> Callable[..., DeductionEvent]:
    """Factory for deductions dated `days_ago` days before NOW."""
    counter = iter(range(1, 10_000))

    def _make(
        item_id: str,
        quantity: float,
        days_ago: int = 0,
        minutes: int = 0,
        order_id: Optional[str] = "ORD-1",
        **extra,
    ) -> DeductionEvent:
        n = next(counter)
        day = TODAY - timedelta(days=days_ago)
        return DeductionEvent(
            id=f"d{n}",
            item_id=item_id,
            quantity=quantity,
            order_id=order_id,
            date=day,
            created_at=datetime.combine(day, datetime.min.time()) + timedelta(hours=9, minutes=minutes),
            **extra,
        )

    return _make


@pytest.fixture
def make_wastage() -> Callable[..., WastageEvent]:
    """Factory for wastage entries dated `days_ago` days before NOW."""
    counter = iter(range(1, 10_000))

    def _make(
        item_id: str,
        quantity: float,
        reason: str = "Spoiled",
        days_ago: int = 0,
        minutes: int = 0,
        **extra,
    ) -> WastageEvent:
        n = next(counter)
        day = TODAY - timedelta(days=days_ago)
        return WastageEvent(
            id=f"w{n}",
            item_id=item_id,
            quantity=quantity,
            reason=reason,
            date=day,
            created_at=datetime.combine(day, datetime.min.time()) + timedelta(hours=10, minutes=minutes),
            **extra,
        )

    return _make


@pytest.fixture
def oil_week(make_deduction) -> list[DeductionEvent]:
    """Two litres of oil used on each of the last seven days, today included."""
    return [make_deduction("oil", 2, days_ago=d) for d in range(7)]
