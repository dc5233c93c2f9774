import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pos_analytics import settings  # noqa: E402
from pos_analytics.schemas import Product, Transaction  # noqa: E402

TODAY = date(2024, 3, 15)


def make_transaction(txn_id, day, amount, items=(), payment_method="cash"):
    """items: (product_id, quantity, unit_price) tuples."""
    return Transaction(
        id=txn_id,
        timestamp=day,
        amount=amount,
        line_items=[
            {"product_id": pid, "quantity": qty, "unit_price": price}
            for pid, qty, price in items
        ],
        payment_method=payment_method,
    )


def make_product(product_id, stock, name=None, category="General", price=1.0, cost=None):
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        unit_price=price,
        stock_on_hand=stock,
        category=category,
        cost_price=cost,
    )


def revenue_days(amounts, start=date(2024, 3, 1)):
    """One transaction per consecutive day with the given amounts."""
    return [
        make_transaction(f"t{i}", date.fromordinal(start.toordinal() + i), amount)
        for i, amount in enumerate(amounts)
    ]


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Points input/output at a temp dir and disables the webhook."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    monkeypatch.setattr(settings, "INPUT_DIR", input_dir)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output_dir)
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    return input_dir, output_dir
