import logging
from datetime import date
from typing import Any, Optional
from pydantic import BaseModel

from pos_analytics import analytics, reports, seed_data, settings
from pos_analytics.exceptions import AnalyticsError
from pos_analytics.pipeline import DataPipeline
from pos_analytics.schemas import Product, Transaction

logger = logging.getLogger(__name__)


class InventoryPipeline(DataPipeline):
    def __init__(
        self,
        use_seed_data: bool = False,
        test_mode: bool = False,
        today: Optional[date] = None,
    ):
        super().__init__(
            "inventory",
            sources=["products", "transactions"],
            use_seed_data=use_seed_data,
            test_mode=test_mode,
            today=today,
        )

    def extract(self) -> dict[str, list[Any]] | None:
        logger.info("--- Starting Inventory Report Process ---")

        if self.use_seed_data:
            products = seed_data.seed_products()
            transactions = seed_data.seed_transactions(self.today)
            self.mark_seeded("products")
            self.mark_seeded("transactions")
        else:
            products = self.extract_source(
                "products", settings.PRODUCTS_FILENAME_PREFIX, Product
            )
            transactions = self.extract_source(
                "transactions", settings.TRANSACTIONS_FILENAME_PREFIX, Transaction
            )

        if not products:
            logger.error("  > ERROR: No product snapshot available.")
            return None

        if transactions is None:
            logger.info("  > INFO: No transactions found. Every velocity will be zero.")
            transactions = []

        return {"products": products, "transactions": transactions}

    def transform(self, dataset: dict[str, list[Any]]) -> dict[str, list[BaseModel]] | None:
        products = dataset["products"]
        transactions = dataset["transactions"]

        logger.info("\n--- Calculating Reorder Recommendations ---")
        try:
            recommendations = analytics.recommend_stock(
                transactions,
                products,
                settings.HISTORY_WINDOW_DAYS,
                settings.TARGET_COVERAGE_DAYS,
                filter_window=settings.FILTER_HISTORY_WINDOW,
                today=self.today,
            )
        except AnalyticsError as e:
            logger.error(f"❌ {e}")
            return None

        to_reorder = [r for r in recommendations if r.needs_reorder]
        for rec in to_reorder:
            logger.warning(
                f"  > ⚠️  Reorder {rec.product_name}: {rec.current_stock} on hand, "
                f"{rec.recommended_stock} recommended."
            )
        logger.info(f"✅ {len(to_reorder)} of {len(recommendations)} products need reordering.")

        low_stock = reports.low_stock_products(
            products, settings.LOW_STOCK_THRESHOLD, settings.LOW_STOCK_TARGET
        )
        logger.info(f"  > {len(low_stock)} product(s) below {settings.LOW_STOCK_THRESHOLD} units.")

        return {"restock": recommendations, "low_stock": low_stock}
