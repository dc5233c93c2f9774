import logging
from datetime import date
from typing import Any, Optional
from pydantic import BaseModel

from pos_analytics import analytics, seed_data, settings
from pos_analytics.exceptions import AnalyticsError, InsufficientDataError
from pos_analytics.pipeline import DataPipeline
from pos_analytics.schemas import Transaction

logger = logging.getLogger(__name__)


class SalesPipeline(DataPipeline):
    """Revenue forecast and anomaly report over the latest transactions export."""

    def __init__(
        self,
        use_seed_data: bool = False,
        test_mode: bool = False,
        today: Optional[date] = None,
    ):
        super().__init__(
            "sales",
            sources=["transactions"],
            use_seed_data=use_seed_data,
            test_mode=test_mode,
            today=today,
        )

    def extract(self) -> dict[str, list[Any]] | None:
        logger.info("--- Loading Transactions ---")

        if self.use_seed_data:
            transactions = seed_data.seed_transactions(self.today)
            self.mark_seeded("transactions")
        else:
            transactions = self.extract_source(
                "transactions", settings.TRANSACTIONS_FILENAME_PREFIX, Transaction
            )

        if not transactions:
            return None

        logger.info(f"  > 📊 {len(transactions)} transactions loaded.")
        return {"transactions": transactions}

    def transform(self, dataset: dict[str, list[Any]]) -> dict[str, list[BaseModel]] | None:
        transactions = dataset["transactions"]

        logger.info("\n--- Forecasting Revenue ---")
        try:
            forecast_points = analytics.forecast(
                transactions,
                settings.FORECAST_HORIZON_DAYS,
                today=self.today,
                chronological=settings.SORT_DAYS_CHRONOLOGICALLY,
            )
            logger.info(f"✅ Forecast generated for {len(forecast_points)} days.")
        except InsufficientDataError as e:
            # No forecast is still a valid report; the anomaly scan can run.
            logger.warning(f"⚠️ {e}")
            forecast_points = []
        except AnalyticsError as e:
            logger.error(f"❌ Forecast failed: {e}")
            return None

        logger.info("--- Scanning for Anomalies ---")
        anomalies = analytics.detect_anomalies(
            transactions,
            threshold_std=settings.ANOMALY_THRESHOLD_STD,
            min_days=settings.ANOMALY_MIN_DAYS,
        )
        for anomaly in anomalies:
            logger.warning(
                f"  > ⚠️  {anomaly.day}: {anomaly.actual_amount:.2f} "
                f"(expected {anomaly.expected_amount:.2f}, {anomaly.deviation_in_std_devs:+.2f} σ)"
            )
        logger.info(f"✅ {len(anomalies)} anomalous day(s) found.")

        return {"forecast": forecast_points, "anomalies": anomalies}
