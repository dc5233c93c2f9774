from datetime import timedelta

import pandas as pd
import pytest

from pos_analytics import reports, seed_data
from pos_analytics.schemas import Trend

from conftest import TODAY, make_product, make_transaction


@pytest.fixture
def seed():
    return seed_data.seed_transactions(TODAY), seed_data.seed_products()


def test_daily_sales_is_continuous_and_zero_filled():
    transactions = [
        make_transaction("a", TODAY, 10.0),
        make_transaction("b", TODAY, 2.5),
        make_transaction("c", TODAY - timedelta(days=3), 7.0),
        make_transaction("old", TODAY - timedelta(days=90), 99.0),
    ]
    frame = reports.daily_sales(transactions, days=5, today=TODAY)

    expected_dates = pd.date_range(end=pd.Timestamp(TODAY), periods=5, freq="D")
    pd.testing.assert_index_equal(pd.Index(frame["date"]), expected_dates, check_names=False)
    assert list(frame["total"]) == [0.0, 7.0, 0.0, 0.0, 12.5]


def test_daily_sales_without_transactions():
    frame = reports.daily_sales([], days=30, today=TODAY)
    assert len(frame) == 30
    assert (frame["total"] == 0).all()


def test_sales_by_category(seed):
    transactions, products = seed
    categories = reports.sales_by_category(transactions, products)

    assert [c.category for c in categories] == ["Personal Care", "Foods", "Drinks"]
    by_name = {c.category: c.total for c in categories}
    assert by_name["Foods"] == pytest.approx(26.97)
    assert by_name["Drinks"] == pytest.approx(17.45)


def test_sales_by_category_unknown_product():
    transactions = [make_transaction("a", TODAY, 4.0, [("ghost", 2, 2.0)])]
    [category] = reports.sales_by_category(transactions, [])
    assert category.category == "Uncategorized"
    assert category.total == 4.0


def test_low_stock_products(seed):
    _, products = seed
    low = reports.low_stock_products(products, threshold=35, target_stock=100)

    assert [(item.product_id, item.stock, item.target_stock) for item in low] == [("p3", 32, 100)]


def test_low_stock_threshold_is_strict():
    assert reports.low_stock_products([make_product("p1", 35)], threshold=35) == []


def test_summarize_finance():
    summary = reports.summarize_finance(seed_data.seed_finance_entries(TODAY))
    assert summary.total_income == 2500
    assert summary.total_expense == 1750
    assert summary.balance == 750


def test_summarize_finance_empty():
    summary = reports.summarize_finance([])
    assert (summary.total_income, summary.total_expense, summary.balance) == (0, 0, 0)


def test_dashboard_metrics(seed):
    transactions, products = seed
    metrics = {m.label: m for m in reports.dashboard_metrics(transactions, products, today=TODAY)}

    sales = metrics["Total Sales (Today)"]
    assert sales.value == "$26.98"
    assert sales.change == pytest.approx(-42.5)
    assert sales.trend == Trend.DOWN

    items = metrics["Items Sold (Today)"]
    assert items.value == "3"
    assert items.change == pytest.approx(-25.0)

    assert metrics["Low Stock Items"].value == "1"
    assert metrics["Profit Margin"].value.endswith("%")


def test_dashboard_metrics_without_history():
    metrics = reports.dashboard_metrics([], [], today=TODAY)
    by_label = {m.label: m for m in metrics}

    assert by_label["Total Sales (Today)"].value == "$0.00"
    assert by_label["Total Sales (Today)"].trend == Trend.NEUTRAL
    assert by_label["Profit Margin"].value == "n/a"


def test_gross_margin():
    products = [make_product("p1", 10, price=10.0, cost=6.0), make_product("p2", 10, price=5.0)]
    transactions = [make_transaction("a", TODAY, 25.0, [("p1", 2, 10.0), ("p2", 1, 5.0)])]

    # p2 has no cost price and is left out: (20 - 12) / 20
    assert reports.gross_margin(transactions, products) == pytest.approx(40.0)
