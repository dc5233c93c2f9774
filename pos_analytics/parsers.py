import json
import logging
from pathlib import Path
from typing import TypeVar
import pandas as pd
from pydantic import BaseModel

from .exceptions import DataLoadError
from .schemas import FinanceEntry, Product, Transaction
from .utils import load_csv

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Register exports are flat: one row per line item, transaction fields repeated.
TRANSACTION_REQUIRED_COLUMNS = [
    "transaction_id",
    "date",
    "amount",
    "product_id",
    "quantity",
    "unit_price",
]
PRODUCT_REQUIRED_COLUMNS = ["id", "name", "price", "stock", "category"]
FINANCE_REQUIRED_COLUMNS = ["id", "date", "amount", "category", "type"]


def _read_required(path: Path, required_columns: list[str]) -> pd.DataFrame:
    df = load_csv(path)
    if df is None:
        raise DataLoadError(f"Could not read {path.name}.")

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in required_columns if c not in df.columns]
    if missing:
        raise DataLoadError(f"{path.name} is missing columns: {', '.join(missing)}")

    # Empty cells become None so optional model fields fall back to their defaults.
    return df.astype(object).where(pd.notna(df), None)


def _as_id(value) -> str | None:
    if value is None:
        return None
    # Numeric ids read by pandas as floats (e.g. 101.0) are written back as '101'.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_transactions_csv(path: Path) -> list[Transaction]:
    """
    Loads a line-item level register export and groups it into transactions.
    Transactions keep the order in which they first appear in the file.
    Rows with an empty product_id contribute the transaction but no line item.
    """
    df = _read_required(path, TRANSACTION_REQUIRED_COLUMNS)
    df["transaction_id"] = df["transaction_id"].map(_as_id)

    ids = df["transaction_id"]
    blank_ids = df.index[ids.isna() | (ids == "")]
    if len(blank_ids):
        # +2: one for the header, one for 1-based line numbers.
        lines = ", ".join(str(i + 2) for i in blank_ids)
        raise DataLoadError(f"{path.name} has rows without a transaction_id (lines {lines}).")

    transactions = []
    for transaction_id, group in df.groupby("transaction_id", sort=False):
        rows = group.to_dict("records")
        first = rows[0]

        line_items = [
            {
                "product_id": _as_id(row["product_id"]),
                "product_name": row.get("product_name"),
                "quantity": row["quantity"],
                "unit_price": row["unit_price"],
                "line_total": row.get("line_total"),
            }
            for row in rows
            if row["product_id"] is not None
        ]

        transactions.append(
            Transaction(
                id=transaction_id,
                timestamp=first["date"],
                amount=first["amount"],
                line_items=line_items,
                payment_method=first.get("payment_method") or "cash",
                customer=first.get("customer"),
            )
        )

    logger.info(f"✅ Parsed {len(transactions)} transactions from {path.name}.")
    return transactions


def parse_products_csv(path: Path) -> list[Product]:
    """Loads an inventory export (one row per product)."""
    df = _read_required(path, PRODUCT_REQUIRED_COLUMNS)

    products = [
        Product(
            id=_as_id(row["id"]),
            name=row["name"],
            unit_price=row["price"],
            stock_on_hand=row["stock"],
            category=row["category"],
            description=row.get("description"),
            cost_price=row.get("cost_price"),
        )
        for row in df.to_dict("records")
    ]

    logger.info(f"✅ Parsed {len(products)} products from {path.name}.")
    return products


def parse_finance_csv(path: Path) -> list[FinanceEntry]:
    """Loads the finance ledger (income and expense entries)."""
    df = _read_required(path, FINANCE_REQUIRED_COLUMNS)

    entries = [
        FinanceEntry(
            id=_as_id(row["id"]),
            timestamp=row["date"],
            amount=row["amount"],
            category=row["category"],
            description=row.get("description") or "",
            entry_type=row["type"],
        )
        for row in df.to_dict("records")
    ]

    logger.info(f"✅ Parsed {len(entries)} finance entries from {path.name}.")
    return entries


def load_records_json(path: Path, model: type[ModelT]) -> list[ModelT]:
    """Loads a JSON array of records (camelCase or snake_case keys) into `model` instances."""
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Could not read {path.name}: {e}") from e

    if not isinstance(payload, list):
        raise DataLoadError(f"{path.name} must contain a JSON array of records.")

    records = [model.model_validate(item) for item in payload]
    logger.info(f"✅ Parsed {len(records)} {model.__name__} records from {path.name}.")
    return records


# Per-model CSV parsers; JSON files go through load_records_json.
CSV_PARSERS = {
    Transaction: parse_transactions_csv,
    Product: parse_products_csv,
    FinanceEntry: parse_finance_csv,
}


def load_report(path: Path, model: type[ModelT]) -> list[ModelT]:
    """Dispatches on file extension."""
    if path.suffix.lower() == ".json":
        return load_records_json(path, model)
    return CSV_PARSERS[model](path)
