import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Path Configuration ---
# Use Path objects for robust, OS-agnostic path handling.
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILENAME = os.getenv("LOG_FILENAME", "analytics.log")

# --- Filename Configuration ---
# Input files are expected as <prefix>YYYY-MM-DD.csv (or .json); the newest wins.
TRANSACTIONS_FILENAME_PREFIX = os.getenv("TRANSACTIONS_FILENAME_PREFIX", "transactions_")
PRODUCTS_FILENAME_PREFIX = os.getenv("PRODUCTS_FILENAME_PREFIX", "products_")
FINANCE_FILENAME_PREFIX = os.getenv("FINANCE_FILENAME_PREFIX", "finance_")

# --- Outputs ---
SAVE_JSON_OUTPUT = _env_bool("SAVE_JSON_OUTPUT", True)

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")
WEBHOOK_TIMEOUT_SECONDS = int(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "15"))

# --- Forecasting ---
FORECAST_HORIZON_DAYS = int(os.getenv("FORECAST_HORIZON_DAYS", "7"))
# Index days in calendar order instead of first-seen order.
SORT_DAYS_CHRONOLOGICALLY = _env_bool("SORT_DAYS_CHRONOLOGICALLY", False)

# --- Stock Recommendations ---
HISTORY_WINDOW_DAYS = int(os.getenv("HISTORY_WINDOW_DAYS", "30"))
TARGET_COVERAGE_DAYS = int(os.getenv("TARGET_COVERAGE_DAYS", "14"))
# When False the history window is only a divisor; when True it also filters.
FILTER_HISTORY_WINDOW = _env_bool("FILTER_HISTORY_WINDOW", False)

# --- Anomaly Detection ---
ANOMALY_MIN_DAYS = int(os.getenv("ANOMALY_MIN_DAYS", "5"))
ANOMALY_THRESHOLD_STD = float(os.getenv("ANOMALY_THRESHOLD_STD", "2.0"))

# --- Dashboard ---
LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "35"))
LOW_STOCK_TARGET = int(os.getenv("LOW_STOCK_TARGET", "100"))
DAILY_SALES_WINDOW_DAYS = int(os.getenv("DAILY_SALES_WINDOW_DAYS", "30"))
UNCATEGORIZED_LABEL = "Uncategorized"
