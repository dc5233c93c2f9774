import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional
from pydantic import BaseModel, ValidationError

from pos_analytics import settings, data_handler, parsers, utils
from pos_analytics.exceptions import DataLoadError

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for analytics pipelines (Sales, Inventory, Dashboard).
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(
        self,
        report_type: str,
        sources: Optional[list[str]] = None,
        use_seed_data: bool = False,
        test_mode: bool = False,
        today: Optional[date] = None,
    ):
        self.report_type = report_type
        self.sources = sources if sources is not None else []
        self.use_seed_data = use_seed_data
        self.test_mode = test_mode
        self.today = today or date.today()
        # Status summary tracks the report date used for each input source
        self.status_summary: dict[str, Optional[date]] = {src: None for src in self.sources}
        self.outputs: dict[str, list[BaseModel]] = {}

    def run(self) -> bool:
        """
        Orchestrates the pipeline execution. Returns True when outputs were produced.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        dataset = self.extract()
        if not dataset:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Nothing to analyse.")
            self.load({})
            return False

        # --- 2. TRANSFORM ---
        # Transform returns named lists of Pydantic models (validated data)
        outputs = self.transform(dataset)
        if outputs is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return False

        # --- 3. LOAD ---
        self.load(outputs)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return True

    @abstractmethod
    def extract(self) -> dict[str, list[Any]] | None:
        """
        Responsible for finding input files (or seed data) and returning validated input records.
        Should also populate self.status_summary as it processes sources.
        """
        pass

    @abstractmethod
    def transform(self, dataset: dict[str, list[Any]]) -> dict[str, list[BaseModel]] | None:
        """
        Responsible for running the analytics over the extracted records.
        Returns named lists of output models.
        """
        pass

    def load(self, outputs: dict[str, list[BaseModel]]):
        """
        Saves every output to disk and posts it to the webhook.
        """
        self.outputs = outputs

        # 1. Print Status Summary
        if self.sources:
            logger.info("\n--- Final Status Summary ---")
            for src in self.sources:
                date_val = self.status_summary.get(src)
                logger.info(f"{src}: {date_val.isoformat() if date_val else 'No data'}")

        for name, records in outputs.items():
            report_name = f"{self.report_type}_{name}"

            # 2. Save Outputs (CSV/JSON)
            if records:
                data_handler.save_outputs(records, f"{report_name}_report")
            else:
                logger.warning(f"No {name} records to save to disk.")

            # 3. Post to Webhook
            if not self.test_mode:
                data_handler.post_to_webhook(
                    validated_data=records,
                    metadata={**self.status_summary, "count": len(records)},
                    report_type=report_name,
                )
            else:
                logger.info(f"🧪 Test Mode: Skipping webhook post for {name}.")

    def extract_source(self, source: str, prefix: str, model: type[BaseModel]) -> list[Any] | None:
        """
        Loads the newest '<prefix>YYYY-MM-DD' report for `source` from the input directory.
        Missing or invalid files are logged and yield None.
        """
        found_info = utils.find_latest_report(settings.INPUT_DIR, prefix)
        if not found_info:
            logger.warning(f"  > ⚠️  File missing ({prefix}*). Skipping {source}.")
            return None

        path, file_date = found_info
        logger.info(f"  > Found '{source}': {path.name} (File Date: {file_date})")

        try:
            records = parsers.load_report(path, model)
        except DataLoadError as e:
            logger.error(f"  > ❌ {e}")
            return None
        except ValidationError as e:
            logger.error(f"  > ❌ Data validation failed for {path.name}!")
            logger.error(e)
            return None

        self.status_summary[source] = file_date
        return records

    def mark_seeded(self, source: str):
        self.status_summary[source] = self.today
        logger.info(f"  > Using built-in seed data for '{source}'.")
