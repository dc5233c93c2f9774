"""
Built-in demo dataset for the Coco store: five products, six sales spread
over the last four days and five finance ledger entries. Dates are relative
to `today` so the demo always looks current.
"""

from datetime import date, timedelta
from typing import Optional

from .schemas import FinanceEntry, Product, Transaction


def _days_ago(today: date, days: int) -> str:
    return (today - timedelta(days=days)).isoformat()


def seed_products() -> list[Product]:
    return [
        Product(
            id="p1",
            name="Coco Shampoo",
            description="Natural coconut shampoo",
            unit_price=12.99,
            stock_on_hand=45,
            category="Personal Care",
            cost_price=5.50,
        ),
        Product(
            id="p2",
            name="Coconut Oil",
            description="Organic virgin coconut oil",
            unit_price=8.99,
            stock_on_hand=78,
            category="Foods",
            cost_price=3.75,
        ),
        Product(
            id="p3",
            name="Coco Body Lotion",
            description="Moisturizing coconut body lotion",
            unit_price=14.50,
            stock_on_hand=32,
            category="Personal Care",
            cost_price=6.20,
        ),
        Product(
            id="p4",
            name="Coconut Water",
            description="Pure coconut water",
            unit_price=3.49,
            stock_on_hand=120,
            category="Drinks",
            cost_price=1.25,
        ),
        Product(
            id="p5",
            name="Coconut Lip Balm",
            description="Hydrating coconut lip balm",
            unit_price=4.99,
            stock_on_hand=65,
            category="Personal Care",
            cost_price=1.80,
        ),
    ]


def seed_transactions(today: Optional[date] = None) -> list[Transaction]:
    """Newest first, the way the register lists recent sales."""
    today = today or date.today()
    raw = [
        {
            "id": "s1",
            "date": _days_ago(today, 0),
            "amount": 26.98,
            "items": [
                {"productId": "p1", "productName": "Coco Shampoo", "quantity": 1, "unitPrice": 12.99},
                {"productId": "p2", "productName": "Coconut Oil", "quantity": 1, "unitPrice": 8.99},
                {"productId": "p5", "productName": "Coconut Lip Balm", "quantity": 1, "unitPrice": 4.99},
            ],
            "customer": "Maria Rodriguez",
            "paymentMethod": "cash",
        },
        {
            "id": "s2",
            "date": _days_ago(today, 1),
            "amount": 18.98,
            "items": [
                {"productId": "p3", "productName": "Coco Body Lotion", "quantity": 1, "unitPrice": 14.50},
                {"productId": "p4", "productName": "Coconut Water", "quantity": 1, "unitPrice": 3.49},
            ],
            "customer": "John Smith",
            "paymentMethod": "credit",
        },
        {
            "id": "s3",
            "date": _days_ago(today, 1),
            "amount": 27.98,
            "items": [
                {"productId": "p1", "productName": "Coco Shampoo", "quantity": 1, "unitPrice": 12.99},
                {"productId": "p3", "productName": "Coco Body Lotion", "quantity": 1, "unitPrice": 14.50},
            ],
            "customer": "Ana Lopez",
            "paymentMethod": "debit",
        },
        {
            "id": "s4",
            "date": _days_ago(today, 2),
            "amount": 12.99,
            "items": [
                {"productId": "p1", "productName": "Coco Shampoo", "quantity": 1, "unitPrice": 12.99},
            ],
            "paymentMethod": "cash",
        },
        {
            "id": "s5",
            "date": _days_ago(today, 3),
            "amount": 13.98,
            "items": [
                {"productId": "p4", "productName": "Coconut Water", "quantity": 4, "unitPrice": 3.49},
            ],
            "customer": "Carlos Mendez",
            "paymentMethod": "cash",
        },
        {
            "id": "s6",
            "date": _days_ago(today, 3),
            "amount": 31.47,
            "items": [
                {"productId": "p2", "productName": "Coconut Oil", "quantity": 2, "unitPrice": 8.99},
                {"productId": "p5", "productName": "Coconut Lip Balm", "quantity": 3, "unitPrice": 4.49},
            ],
            "customer": "Elena Torres",
            "paymentMethod": "credit",
        },
    ]
    return [Transaction.model_validate(record) for record in raw]


def seed_finance_entries(today: Optional[date] = None) -> list[FinanceEntry]:
    today = today or date.today()
    raw = [
        ("f1", 0, 500, "Salary", "Withdrew for employee salary", "expense"),
        ("f2", 7, 300, "Rent", "Store rent payment", "expense"),
        ("f3", 10, 2500, "Investment", "Personal investment into business", "income"),
        ("f4", 14, 150, "Utilities", "Electricity bill", "expense"),
        ("f5", 21, 800, "Supplies", "New product inventory", "expense"),
    ]
    return [
        FinanceEntry(
            id=entry_id,
            timestamp=_days_ago(today, days),
            amount=amount,
            category=category,
            description=description,
            entry_type=entry_type,
        )
        for entry_id, days, amount, category, description, entry_type in raw
    ]
