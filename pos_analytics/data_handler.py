import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional
import pandas as pd
import requests
from pydantic import BaseModel

from . import settings
from . import utils

logger = logging.getLogger(__name__)


def save_outputs(validated_data: list[BaseModel], filename_base: str) -> list[Path]:
    """Saves the records to CSV and conditionally to JSON, with dated filenames."""
    if not validated_data:
        logger.warning(f"No records to save for {filename_base}.")
        return []

    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.csv"
    json_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.json"

    rows = [item.model_dump(mode="json", by_alias=True) for item in validated_data]
    pd.DataFrame(rows).to_csv(csv_path, index=False)
    logger.info(f"✅ Report saved to: {csv_path}")
    written = [csv_path]

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2, default=str)
        logger.info(f"✅ JSON output saved to: {json_path}")
        written.append(json_path)
    else:
        logger.info("Skipping JSON file save as per configuration.")

    return written


def post_to_webhook(
    validated_data: list[BaseModel],
    metadata: dict[str, Any],
    report_type: str,
) -> bool:
    """
    Posts the validated records AND the run metadata to the webhook.
    Request failures are logged and reported through the return value.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} data to webhook: {settings.WEBHOOK_URL}")

    payload = {
        "reportType": report_type,
        "reportData": [
            item.model_dump(mode="json", by_alias=True) for item in validated_data
        ],
        "metadata": {key: _jsonable(value) for key, value in metadata.items()},
    }

    try:
        response = requests.post(
            settings.WEBHOOK_URL, json=payload, timeout=settings.WEBHOOK_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        logger.info(f"✅ {report_type.capitalize()} data successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False


def _jsonable(value: Any) -> Optional[Any]:
    if isinstance(value, date):
        return value.isoformat()
    return value
