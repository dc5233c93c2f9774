"""
Dashboard aggregations: the trailing daily sales chart, sales by category,
the low-stock list, the finance ledger summary and the headline metrics.
"""

from datetime import date, timedelta
from typing import Iterable, Optional
import pandas as pd

from . import settings
from .schemas import (
    CategorySales,
    DashboardMetric,
    EntryType,
    FinanceEntry,
    FinanceSummary,
    LowStockItem,
    Product,
    Transaction,
    Trend,
)


def daily_sales(
    transactions: Iterable[Transaction],
    days: int = settings.DAILY_SALES_WINDOW_DAYS,
    today: Optional[date] = None,
) -> pd.DataFrame:
    """
    Returns a continuous `days`-long series ending on `today` with columns
    'date' and 'total'. Days without sales are zero-filled; sales outside the
    window are dropped.
    """
    end = pd.Timestamp(today or date.today())
    index = pd.date_range(end=end, periods=days, freq="D", name="date")

    rows = [(t.day, t.amount) for t in transactions]
    if rows:
        frame = pd.DataFrame(rows, columns=["date", "total"])
        frame["date"] = pd.to_datetime(frame["date"])
        totals = frame.groupby("date")["total"].sum()
    else:
        totals = pd.Series(dtype="float64")

    series = totals.reindex(index, fill_value=0.0).astype("float64").round(2)
    return series.rename("total").reset_index()


def sales_by_category(
    transactions: Iterable[Transaction], products: Iterable[Product]
) -> list[CategorySales]:
    """Sums line totals per product category, highest first."""
    categories = {product.id: product.category for product in products}

    rows = [
        (categories.get(item.product_id, settings.UNCATEGORIZED_LABEL), item.line_total)
        for transaction in transactions
        for item in transaction.line_items
    ]
    if not rows:
        return []

    frame = pd.DataFrame(rows, columns=["category", "total"])
    totals = (
        frame.groupby("category", sort=False)["total"]
        .sum()
        .round(2)
        .sort_values(ascending=False, kind="stable")
    )
    return [CategorySales(category=cat, total=float(total)) for cat, total in totals.items()]


def low_stock_products(
    products: Iterable[Product],
    threshold: int = settings.LOW_STOCK_THRESHOLD,
    target_stock: int = settings.LOW_STOCK_TARGET,
) -> list[LowStockItem]:
    """Products whose stock is strictly below `threshold`, in input order."""
    return [
        LowStockItem(
            product_id=product.id,
            name=product.name,
            stock=product.stock_on_hand,
            target_stock=target_stock,
        )
        for product in products
        if product.stock_on_hand < threshold
    ]


def summarize_finance(entries: Iterable[FinanceEntry]) -> FinanceSummary:
    entries = list(entries)
    income = sum(e.amount for e in entries if e.entry_type == EntryType.INCOME)
    expense = sum(e.amount for e in entries if e.entry_type == EntryType.EXPENSE)
    return FinanceSummary(
        total_income=round(income, 2),
        total_expense=round(expense, 2),
        balance=round(income - expense, 2),
    )


def _percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def _trend(change: float) -> Trend:
    if change > 0:
        return Trend.UP
    if change < 0:
        return Trend.DOWN
    return Trend.NEUTRAL


def gross_margin(
    transactions: Iterable[Transaction], products: Iterable[Product]
) -> Optional[float]:
    """
    Gross margin (percent) over line items whose product has a known cost
    price. Returns None when no such line items exist.
    """
    costs = {p.id: p.cost_price for p in products if p.cost_price is not None}
    revenue = 0.0
    cost = 0.0
    for transaction in transactions:
        for item in transaction.line_items:
            if item.product_id in costs:
                revenue += item.line_total
                cost += costs[item.product_id] * item.quantity
    if revenue == 0:
        return None
    return (revenue - cost) / revenue * 100


def dashboard_metrics(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    today: Optional[date] = None,
    low_stock_threshold: int = settings.LOW_STOCK_THRESHOLD,
) -> list[DashboardMetric]:
    """Headline cards: today's sales and units (vs. yesterday), low-stock count and gross margin."""
    transactions = list(transactions)
    products = list(products)
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    todays = [t for t in transactions if t.day == today]
    yesterdays = [t for t in transactions if t.day == yesterday]

    sales_today = sum(t.amount for t in todays)
    sales_change = _percent_change(sales_today, sum(t.amount for t in yesterdays))

    units_today = sum(t.units for t in todays)
    units_change = _percent_change(units_today, sum(t.units for t in yesterdays))

    low_stock_count = len(low_stock_products(products, threshold=low_stock_threshold))
    margin = gross_margin(transactions, products)

    return [
        DashboardMetric(
            label="Total Sales (Today)",
            value=f"${sales_today:,.2f}",
            change=sales_change,
            trend=_trend(sales_change),
        ),
        DashboardMetric(
            label="Items Sold (Today)",
            value=str(units_today),
            change=units_change,
            trend=_trend(units_change),
        ),
        DashboardMetric(
            label="Low Stock Items",
            value=str(low_stock_count),
            change=0.0,
            trend=Trend.NEUTRAL,
        ),
        DashboardMetric(
            label="Profit Margin",
            value=f"{margin:.0f}%" if margin is not None else "n/a",
            change=0.0,
            trend=Trend.NEUTRAL,
        ),
    ]
