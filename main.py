import argparse
import logging

from pos_analytics.logger import setup_logger
from pos_analytics.pipelines.dashboard import DashboardPipeline
from pos_analytics.pipelines.inventory import InventoryPipeline
from pos_analytics.pipelines.sales import SalesPipeline

# --- Pipeline Registry ---
# To add a report, just add a new entry here.
PIPELINE_REGISTRY = {
    "sales": SalesPipeline,
    "inventory": InventoryPipeline,
    "dashboard": DashboardPipeline,
}

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the POS analytics reports.")
    parser.add_argument(
        "reports",
        nargs="*",
        help=f"Reports to run: {', '.join(PIPELINE_REGISTRY)} (default: all).",
    )
    parser.add_argument(
        "--seed", action="store_true", help="Use the built-in demo dataset instead of input files."
    )
    parser.add_argument(
        "--test", action="store_true", help="Test mode: save outputs but skip the webhook."
    )
    args = parser.parse_args(argv)
    unknown = [name for name in args.reports if name not in PIPELINE_REGISTRY]
    if unknown:
        parser.error(f"unknown report(s): {', '.join(unknown)}")
    return args


def run_process(argv=None) -> int:
    """Main orchestration function. Returns the number of reports that produced no output."""
    args = parse_args(argv)
    setup_logger()

    logger.info("--- Starting POS Analytics Process ---")
    failures = 0
    for name in args.reports or list(PIPELINE_REGISTRY):
        pipeline = PIPELINE_REGISTRY[name](use_seed_data=args.seed, test_mode=args.test)
        if not pipeline.run():
            failures += 1

    logger.info("\n--- Process Finished ---")
    return failures


if __name__ == "__main__":
    raise SystemExit(1 if run_process() else 0)
