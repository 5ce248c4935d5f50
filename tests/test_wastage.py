"""Tests for wastage attribution."""

from datetime import datetime

import pytest

from stock_analytics.schemas import InventoryItem
from stock_analytics.wastage import (
    analyze_wastage,
    month_to_date,
    project_monthly_loss,
    wastage_percent,
)


def test_same_cause_same_item_collapses(paneer, make_wastage, now) -> None:
    # Paneer costs 10/kg: 5 kg -> 50, 3 kg -> 30
    wastage = [make_wastage("paneer", 5, "Spoiled"), make_wastage("paneer", 3, "Spoiled")]

    report = analyze_wastage([paneer], [], wastage, wastage, now)

    assert report.by_reason == {"Spoiled": pytest.approx(80.0)}
    assert len(report.top_items) == 1
    assert report.top_items[0].name == "Paneer"
    assert report.top_items[0].cost == pytest.approx(80.0)
    assert report.top_items[0].quantity == pytest.approx(8.0)


def test_percent_on_money_basis(inventory, make_deduction, make_wastage, now) -> None:
    deductions = [make_deduction("paneer", 6)]  # 60
    wastage = [make_wastage("paneer", 2)]  # 20

    report = analyze_wastage(inventory, deductions, wastage, [], now)

    assert report.total_used == pytest.approx(60.0)
    assert report.total_wasted == pytest.approx(20.0)
    assert report.wastage_percent == pytest.approx(25.0)


def test_empty_inputs(inventory, now) -> None:
    report = analyze_wastage(inventory, [], [], [], now)

    assert report.wastage_percent == 0
    assert report.projected_monthly_loss == 0
    assert report.top_items == []
    assert report.by_reason == {}


@pytest.mark.parametrize("wasted,used", [(0, 0), (0, 10), (10, 0), (3.3, 7.1), (1e6, 1e-6)])
def test_percent_stays_in_bounds(wasted, used) -> None:
    assert 0 <= wastage_percent(wasted, used) <= 100


def test_top_five_by_cost(make_wastage, now) -> None:
    items = [
        InventoryItem(id=f"i{n}", name=f"Item {n}", quantity=1, cost_per_unit=n)
        for n in range(1, 8)
    ]
    wastage = [make_wastage(item.id, 1) for item in items]

    report = analyze_wastage(items, [], wastage, [], now)

    assert [t.item_id for t in report.top_items] == ["i7", "i6", "i5", "i4", "i3"]


def test_causes_sorted_by_cost(inventory, make_wastage, now) -> None:
    wastage = [
        make_wastage("paneer", 1, "Dropped"),  # 10
        make_wastage("oil", 1, "Expired"),  # 150
        make_wastage("paneer", 2, "Overcooked"),  # 20
        make_wastage("rice", 1, "Dropped"),  # 60
    ]

    report = analyze_wastage(inventory, [], wastage, [], now)

    assert list(report.by_reason.items()) == [
        ("Expired", pytest.approx(150.0)),
        ("Dropped", pytest.approx(70.0)),
        ("Overcooked", pytest.approx(20.0)),
    ]


def test_monthly_projection(inventory, make_wastage, now) -> None:
    # October has 31 days; NOW is the 19th
    month = [make_wastage("paneer", 19)]  # 190 so far

    report = analyze_wastage(inventory, [], [], month, now)

    assert report.month_to_date_loss == pytest.approx(190.0)
    assert report.projected_monthly_loss == pytest.approx(310.0)


def test_projection_guards_zero_days() -> None:
    assert project_monthly_loss(500, datetime(2026, 2, 10), days_elapsed=0) == 0.0
    assert project_monthly_loss(280, datetime(2026, 2, 10)) == pytest.approx(784.0)


def test_month_to_date(make_wastage, now) -> None:
    this_month = make_wastage("oil", 1, days_ago=18)  # Oct 1st
    last_month = make_wastage("oil", 1, days_ago=19)  # Sep 30th

    assert month_to_date([this_month, last_month], now) == [this_month]


def test_deleted_item_uses_stored_cost(make_wastage, now) -> None:
    wastage = [make_wastage("gone", 2, item_name="Saffron", cost_loss=900)]

    report = analyze_wastage([], [], wastage, [], now)

    assert report.top_items[0].name == "Saffron"
    assert report.top_items[0].cost == pytest.approx(900.0)


def test_attribution_uses_stored_cost_after_price_change(make_wastage, now) -> None:
    # Paneer has since gone up to 25/kg; the losses were logged at 10/kg
    paneer = InventoryItem(id="paneer", name="Paneer", quantity=8, cost_per_unit=25)
    wastage = [
        make_wastage("paneer", 5, "Spoiled", cost_loss=50),
        make_wastage("paneer", 3, "Spoiled", cost_loss=30),
    ]

    report = analyze_wastage([paneer], [], wastage, wastage, now)

    assert report.by_reason == {"Spoiled": pytest.approx(80.0)}
    assert report.top_items[0].cost == pytest.approx(80.0)
    assert report.month_to_date_loss == pytest.approx(80.0)
