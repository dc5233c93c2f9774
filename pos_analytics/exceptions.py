"""
Errors raised by the analytics library.

Statistical insufficiency that still has a neutral answer (too few days for
anomaly detection, products with no sales) is not an error; only results that
cannot be computed at all are raised.
"""


class AnalyticsError(Exception):
    """Base class for every error raised by pos_analytics."""

    pass


class InsufficientDataError(AnalyticsError):
    """Raised when a forecast is requested with fewer than two distinct days of revenue."""

    def __init__(self, distinct_days: int, required: int = 2):
        self.distinct_days = distinct_days
        self.required = required
        super().__init__(
            f"Not enough data for prediction: {distinct_days} distinct day(s), "
            f"at least {required} required."
        )


class DegenerateRegressionError(AnalyticsError):
    """Raised when every x value of a regression is identical."""

    pass


class DataLoadError(AnalyticsError):
    """Raised when an input report is missing, unreadable or fails validation."""

    pass
