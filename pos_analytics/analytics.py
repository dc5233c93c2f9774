import logging
import math
from datetime import date, timedelta
from typing import Iterable, Optional
import numpy as np
import pandas as pd

from .exceptions import AnalyticsError, DegenerateRegressionError, InsufficientDataError
from .schemas import Anomaly, ForecastPoint, Product, ReorderRecommendation, Transaction

logger = logging.getLogger(__name__)

# Half-width of the forecast band as a fraction of the fitted value.
CONFIDENCE_BAND = 0.15
MIN_FORECAST_DAYS = 2


def daily_revenue(
    transactions: Iterable[Transaction], chronological: bool = False
) -> pd.Series:
    """
    Sums transaction amounts per calendar day.

    Days keep the order in which they first appear in `transactions`. Pass
    chronological=True to sort them by date instead.
    """
    rows = [(t.day, t.amount) for t in transactions]
    if not rows:
        return pd.Series(
            [], index=pd.Index([], name="day"), dtype="float64", name="revenue"
        )

    frame = pd.DataFrame(rows, columns=["day", "amount"])
    # sort=False keeps first-seen order of the group keys.
    series = frame.groupby("day", sort=chronological)["amount"].sum()
    return series.rename("revenue").astype("float64")


def fit_trend(revenue: pd.Series) -> tuple[float, float]:
    """
    Ordinary least squares fit of revenue against its position (0..n-1).
    Returns (slope, intercept).
    """
    y = revenue.to_numpy(dtype="float64")
    x = np.arange(len(y), dtype="float64")

    mean_x = x.mean()
    mean_y = y.mean()

    numerator = float(((x - mean_x) * (y - mean_y)).sum())
    denominator = float(((x - mean_x) ** 2).sum())
    if denominator == 0:
        raise DegenerateRegressionError(
            "Cannot fit a trend: every x value is identical."
        )

    slope = numerator / denominator
    intercept = mean_y - slope * mean_x
    return slope, intercept


def forecast(
    transactions: Iterable[Transaction],
    horizon_days: int = 7,
    *,
    today: Optional[date] = None,
    chronological: bool = False,
) -> list[ForecastPoint]:
    """
    Predicts daily revenue for the next `horizon_days` days with a linear trend.

    The band around each prediction is +/- CONFIDENCE_BAND of the raw fitted
    value. The prediction and the lower bound are clamped at zero; the upper
    bound is not. Forecast dates count forward from `today` (default: the
    current date), not from the last day in the data.

    Raises InsufficientDataError when fewer than two distinct days exist.
    """
    if horizon_days < 1:
        raise AnalyticsError(f"horizon_days must be at least 1, got {horizon_days}.")

    revenue = daily_revenue(transactions, chronological=chronological)
    n = len(revenue)
    if n < MIN_FORECAST_DAYS:
        raise InsufficientDataError(n, MIN_FORECAST_DAYS)

    slope, intercept = fit_trend(revenue)
    logger.debug(f"Fitted trend over {n} days: slope={slope:.4f}, intercept={intercept:.4f}")

    start = today or date.today()
    points = []
    for i in range(1, horizon_days + 1):
        raw_value = slope * (n + i - 1) + intercept
        half_width = CONFIDENCE_BAND * raw_value
        points.append(
            ForecastPoint(
                day=start + timedelta(days=i),
                predicted_amount=max(0.0, raw_value),
                lower_bound=max(0.0, raw_value - half_width),
                upper_bound=raw_value + half_width,
            )
        )
    return points


def recommend_stock(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    history_window_days: int = 30,
    target_coverage_days: int = 14,
    *,
    filter_window: bool = False,
    today: Optional[date] = None,
) -> list[ReorderRecommendation]:
    """
    Sizes stock for `target_coverage_days` of sales at the observed velocity.

    velocity = units sold / history_window_days. By default every transaction
    is counted and the window is only the divisor; with filter_window=True
    only transactions from the trailing window ending on `today` are counted.
    Returns one recommendation per product, in input order.
    """
    if history_window_days < 1 or target_coverage_days < 1:
        raise AnalyticsError(
            "history_window_days and target_coverage_days must both be positive."
        )

    products = list(products)
    units_sold = {product.id: 0 for product in products}

    if filter_window:
        window_start = (today or date.today()) - timedelta(days=history_window_days - 1)
        window_end = today or date.today()
        transactions = [
            t for t in transactions if window_start <= t.day <= window_end
        ]

    for transaction in transactions:
        for item in transaction.line_items:
            # Line items for products we don't stock are ignored.
            if item.product_id in units_sold:
                units_sold[item.product_id] += item.quantity

    recommendations = []
    for product in products:
        daily_velocity = units_sold[product.id] / history_window_days
        recommended = math.ceil(daily_velocity * target_coverage_days)
        recommendations.append(
            ReorderRecommendation(
                product_id=product.id,
                product_name=product.name,
                current_stock=product.stock_on_hand,
                recommended_stock=recommended,
                needs_reorder=product.stock_on_hand < recommended,
            )
        )
    return recommendations


def detect_anomalies(
    transactions: Iterable[Transaction],
    *,
    threshold_std: float = 2.0,
    min_days: int = 5,
) -> list[Anomaly]:
    """
    Flags days whose revenue is more than `threshold_std` population standard
    deviations away from the mean daily revenue.

    Returns an empty list when fewer than `min_days` distinct days exist, or
    when every day has the same revenue.
    """
    revenue = daily_revenue(transactions)
    if len(revenue) < min_days:
        logger.debug(
            f"Skipping anomaly detection: {len(revenue)} day(s), {min_days} required."
        )
        return []

    mean = float(revenue.mean())
    std_dev = float(revenue.std(ddof=0))
    if std_dev == 0:
        return []

    flagged = revenue[(revenue - mean).abs() > threshold_std * std_dev]
    return [
        Anomaly(
            day=day,
            actual_amount=float(amount),
            expected_amount=mean,
            deviation_in_std_devs=(float(amount) - mean) / std_dev,
        )
        for day, amount in flagged.items()
    ]
