import logging
import re
from datetime import date, datetime
from pathlib import Path
import pandas as pd

logger = logging.getLogger(__name__)

REPORT_SUFFIXES = (".csv", ".json")
_DATE_IN_NAME = re.compile(r"(\d{4}-\d{2}-\d{2})$")


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.csv' (or .json) file in `directory`.
    Returns (path, report_date) or None when nothing matches.
    """
    if not directory.exists():
        return None

    candidates = []
    for path in directory.iterdir():
        if not path.is_file() or path.suffix.lower() not in REPORT_SUFFIXES:
            continue
        if not path.name.startswith(prefix):
            continue
        match = _DATE_IN_NAME.search(path.stem[len(prefix):])
        if not match:
            continue
        try:
            report_date = date.fromisoformat(match.group(1))
        except ValueError:
            logger.warning(f"  > Ignoring {path.name}: invalid date in filename.")
            continue
        candidates.append((report_date, path.suffix.lower() == ".csv", path))

    if not candidates:
        return None

    # Newest date wins; on a tie prefer the CSV export.
    report_date, _, path = max(candidates, key=lambda c: (c[0], c[1]))
    return path, report_date


def load_csv(file_path: Path, skiprows: int = 0) -> pd.DataFrame | None:
    """
    A CSV loader with a multi-stage encoding fallback.
    It will attempt to read a file in the following order:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1 - A permissive fallback that never fails but might misinterpret characters.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", skiprows=skiprows)

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", skiprows=skiprows)
        except Exception as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"Report not found at {file_path}, skipping.")
        return None

    except Exception as e_general:
        logger.error(
            f"An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
