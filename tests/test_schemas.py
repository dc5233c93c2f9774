from datetime import date, datetime

import pytest
from pydantic import ValidationError

from pos_analytics.schemas import ForecastPoint, LineItem, PaymentMethod, Transaction


class TestLineItem:
    def test_line_total_is_derived(self):
        item = LineItem(product_id="p4", quantity=4, unit_price=3.49)
        assert item.line_total == 13.96

    def test_camel_case_payload(self):
        item = LineItem.model_validate(
            {"productId": "p1", "productName": "Coco Shampoo", "quantity": 2, "unitPrice": 12.99, "total": 25.98}
        )
        assert item.product_name == "Coco Shampoo"
        assert item.line_total == 25.98

    def test_inconsistent_line_total_is_rejected(self):
        with pytest.raises(ValidationError):
            LineItem(product_id="p4", quantity=4, unit_price=3.49, line_total=13.98)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError):
            LineItem(product_id="p1", quantity=quantity, unit_price=1.0)


class TestTransaction:
    def test_day_ignores_time_component(self):
        txn = Transaction(id="s1", timestamp="2024-03-01T23:59:59.000Z", amount=5)
        assert txn.day == date(2024, 3, 1)

    def test_accepts_datetime_objects(self):
        txn = Transaction(id="s1", timestamp=datetime(2024, 3, 1, 10, 30), amount=5)
        assert txn.timestamp == "2024-03-01T10:30:00"
        assert txn.day == date(2024, 3, 1)

    def test_rejects_non_iso_dates(self):
        with pytest.raises(ValidationError):
            Transaction(id="s1", timestamp="03/01/2024", amount=5)

    def test_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            Transaction(id="s1", timestamp="2024-03-01", amount=-1)

    def test_is_immutable(self):
        txn = Transaction(id="s1", timestamp="2024-03-01", amount=5)
        with pytest.raises(ValidationError):
            txn.amount = 10

    def test_defaults_and_units(self):
        txn = Transaction.model_validate(
            {
                "id": "s6",
                "date": "2024-03-01",
                "amount": 31.47,
                "items": [
                    {"productId": "p2", "quantity": 2, "unitPrice": 8.99},
                    {"productId": "p5", "quantity": 3, "unitPrice": 4.49},
                ],
            }
        )
        assert txn.payment_method == PaymentMethod.CASH
        assert txn.units == 5


def test_forecast_point_serialises_with_aliases():
    point = ForecastPoint(day=date(2024, 3, 16), predicted_amount=40, lower_bound=34, upper_bound=46)
    assert point.model_dump(mode="json", by_alias=True) == {
        "date": "2024-03-16",
        "predictedSales": 40.0,
        "lowerBound": 34.0,
        "upperBound": 46.0,
    }
