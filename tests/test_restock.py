"""Tests for the restock plan and the low-stock reorder policy."""

import pytest

from stock_analytics.restock import (
    build_low_stock_report,
    build_restock_plan,
    reorder_quantity,
    suggested_quantity,
)
from stock_analytics.schemas import InventoryItem
from stock_analytics.usage import compute_usage_stats


def test_oil_suggestion(oil, oil_week, now) -> None:
    plan = build_restock_plan([oil], compute_usage_stats(oil_week, now))

    assert len(plan.suggestions) == 1
    suggestion = plan.suggestions[0]
    assert suggestion.daily_usage == pytest.approx(2.0)
    assert suggestion.days_left == pytest.approx(5.0)
    assert suggestion.target_stock == pytest.approx(28.0)
    assert suggestion.suggested_qty == 18
    assert suggestion.suggested_cost == pytest.approx(18 * 150)
    assert plan.total_restock_cost == pytest.approx(2700)


def test_sorted_soonest_empty_first(inventory, oil_week, make_deduction, now) -> None:
    rice_usage = [make_deduction("rice", 1, days_ago=d) for d in range(7)]
    plan = build_restock_plan(inventory, compute_usage_stats(oil_week + rice_usage, now))

    assert [s.item_id for s in plan.suggestions] == ["rice", "oil"]
    assert plan.suggestions[0].days_left == 0
    assert plan.total_restock_cost == pytest.approx(14 * 60 + 18 * 150)


def test_items_without_usage_are_not_suggested(inventory, now) -> None:
    """Rice is at zero but has no usage, so the 14-day target is zero too."""
    plan = build_restock_plan(inventory, {})

    assert plan.suggestions == []
    assert plan.total_restock_cost == 0


def test_healthy_item_is_skipped(paneer, make_deduction, now) -> None:
    usage = compute_usage_stats([make_deduction("paneer", 7, days_ago=2)], now)

    # 8 kg at 1 kg/day is 8 days of cover, above the 7-day horizon
    assert build_restock_plan([paneer], usage).suggestions == []


def test_never_suggests_non_positive_quantity(now) -> None:
    items = [
        InventoryItem(id=f"i{q}", name=f"Item {q}", quantity=q, min_stock=100, cost_per_unit=1)
        for q in (0, 5, 27.5, 28, 50)
    ]
    usage = {item.id: 2.0 for item in items}

    plan = build_restock_plan(items, usage)

    assert plan.suggestions
    assert all(s.suggested_qty > 0 for s in plan.suggestions)
    assert {s.item_id for s in plan.suggestions} == {"i0", "i5", "i27.5"}


def test_suggested_quantity_rounds_up() -> None:
    assert suggested_quantity(27.5, 2.0) == 1
    assert suggested_quantity(30, 2.0) == 0


@pytest.mark.parametrize(
    "quantity,min_stock,expected",
    [(0, 20, 40), (8, 10, 12), (10, 10, 10), (15, 5, 5)],
)
def test_reorder_quantity(quantity, min_stock, expected) -> None:
    assert reorder_quantity(quantity, min_stock) == expected


def test_low_stock_report(inventory, oil_week, now) -> None:
    report = build_low_stock_report(inventory, compute_usage_stats(oil_week, now))

    assert [e.item_id for e in report.entries] == ["rice"]
    entry = report.entries[0]
    assert entry.is_zero is True
    assert entry.days_left is None
    assert entry.reorder_qty == 40
    assert entry.reorder_cost == pytest.approx(2400)
    assert report.total_reorder_cost == pytest.approx(2400)


def test_low_stock_policies_differ(now) -> None:
    """Same item, two policies, two different answers."""
    item = InventoryItem(id="ghee", name="Ghee", quantity=4, min_stock=5, cost_per_unit=500)
    usage = {"ghee": 1.0}

    plan = build_restock_plan([item], usage)
    low = build_low_stock_report([item], usage)

    assert plan.suggestions[0].suggested_qty == 10
    assert low.entries[0].reorder_qty == 6


def test_low_stock_sorted_by_days_left() -> None:
    items = [
        InventoryItem(id="a", name="A", quantity=4, min_stock=5),
        InventoryItem(id="b", name="B", quantity=3, min_stock=5),
        InventoryItem(id="c", name="C", quantity=2, min_stock=5),
    ]
    usage = {"a": 4.0, "c": 0.5}

    report = build_low_stock_report(items, usage)

    assert [e.item_id for e in report.entries] == ["a", "c", "b"]
    assert report.entries[0].is_critical is True
