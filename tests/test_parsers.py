import json
from datetime import date

import pytest
from pydantic import ValidationError

from pos_analytics import parsers, utils
from pos_analytics.exceptions import DataLoadError
from pos_analytics.schemas import FinanceEntry, PaymentMethod, Product, Transaction

TRANSACTIONS_CSV = """transaction_id,date,amount,payment_method,customer,product_id,product_name,quantity,unit_price
s2,2024-03-02T10:00:00,18.98,credit,John Smith,p3,Coco Body Lotion,1,14.50
s2,2024-03-02T10:00:00,18.98,credit,John Smith,p4,Coconut Water,1,3.49
s1,2024-03-01,12.99,,,p1,Coco Shampoo,1,12.99
s3,2024-03-03,0,other,,,,,
"""


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_transactions_groups_line_items(tmp_path):
    path = _write(tmp_path / "transactions_2024-03-03.csv", TRANSACTIONS_CSV)
    transactions = parsers.parse_transactions_csv(path)

    assert [t.id for t in transactions] == ["s2", "s1", "s3"]

    s2, s1, s3 = transactions
    assert s2.day == date(2024, 3, 2)
    assert s2.payment_method == PaymentMethod.CREDIT
    assert s2.customer == "John Smith"
    assert [(i.product_id, i.quantity, i.line_total) for i in s2.line_items] == [
        ("p3", 1, 14.5),
        ("p4", 1, 3.49),
    ]

    assert s1.payment_method == PaymentMethod.CASH
    assert s1.customer is None
    assert s3.line_items == []


def test_parse_transactions_missing_columns(tmp_path):
    path = _write(tmp_path / "transactions_2024-03-03.csv", "transaction_id,date\ns1,2024-03-01\n")
    with pytest.raises(DataLoadError, match="amount"):
        parsers.parse_transactions_csv(path)


def test_parse_transactions_rejects_blank_transaction_id(tmp_path):
    text = (
        "transaction_id,date,amount,product_id,quantity,unit_price\n"
        "t1,2024-03-01,10,p1,1,10.00\n"
        ",2024-03-02,99,p1,1,99.00\n"
        "  ,2024-03-03,5,p1,1,5.00\n"
    )
    path = _write(tmp_path / "transactions_2024-03-03.csv", text)
    with pytest.raises(DataLoadError, match=r"lines 3, 4"):
        parsers.parse_transactions_csv(path)


def test_parse_transactions_invalid_line(tmp_path):
    text = (
        "transaction_id,date,amount,product_id,quantity,unit_price,line_total\n"
        "s1,2024-03-01,10,p1,2,4.00,9.00\n"
    )
    path = _write(tmp_path / "transactions_2024-03-01.csv", text)
    with pytest.raises(ValidationError):
        parsers.parse_transactions_csv(path)


def test_unreadable_file(tmp_path):
    with pytest.raises(DataLoadError):
        parsers.parse_transactions_csv(tmp_path / "missing.csv")


def test_parse_products(tmp_path):
    text = (
        "id,name,price,stock,category,description,cost_price\n"
        "p1,Coco Shampoo,12.99,45,Personal Care,Natural coconut shampoo,5.50\n"
        "101,Coconut Water,3.49,120,Drinks,,\n"
    )
    products = parsers.parse_products_csv(_write(tmp_path / "products_2024-03-01.csv", text))

    assert [p.id for p in products] == ["p1", "101"]
    assert products[0].stock_on_hand == 45
    assert products[0].cost_price == 5.5
    assert products[1].cost_price is None
    assert products[1].description is None


def test_parse_finance(tmp_path):
    text = (
        "id,date,amount,category,description,type\n"
        "f1,2024-03-01,500,Salary,Withdrew for employee salary,expense\n"
        "f3,2024-02-20,2500,Investment,,income\n"
    )
    entries = parsers.parse_finance_csv(_write(tmp_path / "finance_2024-03-01.csv", text))

    assert [e.entry_type.value for e in entries] == ["expense", "income"]
    assert entries[1].description == ""


def test_load_records_json(tmp_path):
    payload = [
        {
            "id": "s1",
            "date": "2024-03-01T09:00:00.000Z",
            "amount": 26.98,
            "items": [{"productId": "p1", "quantity": 1, "unitPrice": 12.99, "total": 12.99}],
            "paymentMethod": "debit",
        }
    ]
    path = tmp_path / "transactions_2024-03-01.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    [txn] = parsers.load_report(path, Transaction)
    assert txn.payment_method == PaymentMethod.DEBIT
    assert txn.line_items[0].product_id == "p1"


def test_load_records_json_requires_array(tmp_path):
    path = tmp_path / "products_2024-03-01.json"
    path.write_text(json.dumps({"id": "p1"}), encoding="utf-8")
    with pytest.raises(DataLoadError):
        parsers.load_records_json(path, Product)


def test_load_report_dispatches_csv(tmp_path):
    text = "id,date,amount,category,type\nf1,2024-03-01,5,Misc,income\n"
    [entry] = parsers.load_report(_write(tmp_path / "finance_2024-03-01.csv", text), FinanceEntry)
    assert entry.amount == 5


class TestFindLatestReport:
    def test_picks_newest_date(self, tmp_path):
        for name in [
            "transactions_2024-03-01.csv",
            "transactions_2024-03-10.json",
            "transactions_2024-03-05.csv",
            "products_2024-04-01.csv",
            "transactions_notes.txt",
        ]:
            (tmp_path / name).write_text("x")

        path, report_date = utils.find_latest_report(tmp_path, "transactions_")
        assert path.name == "transactions_2024-03-10.json"
        assert report_date == date(2024, 3, 10)

    def test_prefers_csv_on_same_day(self, tmp_path):
        (tmp_path / "products_2024-03-01.json").write_text("[]")
        (tmp_path / "products_2024-03-01.csv").write_text("x")

        path, _ = utils.find_latest_report(tmp_path, "products_")
        assert path.suffix == ".csv"

    def test_nothing_found(self, tmp_path):
        assert utils.find_latest_report(tmp_path, "finance_") is None
        assert utils.find_latest_report(tmp_path / "absent", "finance_") is None
