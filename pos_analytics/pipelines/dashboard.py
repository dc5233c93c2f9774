import logging
from datetime import date
from typing import Any, Optional
from pydantic import BaseModel

from pos_analytics import reports, seed_data, settings
from pos_analytics.pipeline import DataPipeline
from pos_analytics.schemas import DailySalesPoint, FinanceEntry, Product, Transaction

logger = logging.getLogger(__name__)


class DashboardPipeline(DataPipeline):
    """Headline metrics, chart series and the finance summary."""

    def __init__(
        self,
        use_seed_data: bool = False,
        test_mode: bool = False,
        today: Optional[date] = None,
    ):
        super().__init__(
            "dashboard",
            sources=["transactions", "products", "finance"],
            use_seed_data=use_seed_data,
            test_mode=test_mode,
            today=today,
        )

    def extract(self) -> dict[str, list[Any]] | None:
        logger.info("--- Loading Dashboard Sources ---")

        if self.use_seed_data:
            dataset = {
                "transactions": seed_data.seed_transactions(self.today),
                "products": seed_data.seed_products(),
                "finance": seed_data.seed_finance_entries(self.today),
            }
            for source in self.sources:
                self.mark_seeded(source)
            return dataset

        dataset = {
            "transactions": self.extract_source(
                "transactions", settings.TRANSACTIONS_FILENAME_PREFIX, Transaction
            ),
            "products": self.extract_source(
                "products", settings.PRODUCTS_FILENAME_PREFIX, Product
            ),
            "finance": self.extract_source(
                "finance", settings.FINANCE_FILENAME_PREFIX, FinanceEntry
            ),
        }
        if not any(dataset.values()):
            return None

        # Missing sources are treated as empty.
        return {name: records or [] for name, records in dataset.items()}

    def transform(self, dataset: dict[str, list[Any]]) -> dict[str, list[BaseModel]] | None:
        transactions = dataset["transactions"]
        products = dataset["products"]

        logger.info("\n--- Building Dashboard ---")
        metrics = reports.dashboard_metrics(
            transactions, products, today=self.today,
            low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        )
        for metric in metrics:
            logger.info(f"  > {metric.label}: {metric.value}")

        chart = reports.daily_sales(
            transactions, settings.DAILY_SALES_WINDOW_DAYS, today=self.today
        )
        daily_points = [
            DailySalesPoint(day=row["date"].date(), total=row["total"])
            for row in chart.to_dict("records")
        ]

        categories = reports.sales_by_category(transactions, products)
        finance = reports.summarize_finance(dataset["finance"])
        logger.info(
            f"  > Finance: income {finance.total_income:.2f}, "
            f"expense {finance.total_expense:.2f}, balance {finance.balance:.2f}"
        )

        return {
            "metrics": metrics,
            "daily_sales": daily_points,
            "category_sales": categories,
            "finance_summary": [finance],
        }
