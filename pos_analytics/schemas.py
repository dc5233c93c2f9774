import math
from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT = "credit"
    DEBIT = "debit"
    OTHER = "other"


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


def _to_iso_string(value):
    """Accepts date/datetime objects or strings and returns an ISO string whose first 10 chars are the day."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    text = str(value).strip()
    # Raises ValueError (surfaced as a ValidationError) for anything that isn't ISO.
    date.fromisoformat(text[:10])
    return text


# --- Input Records ---


class LineItem(BaseModel):
    """
    A single product line within a transaction.
    line_total is derived from quantity * unit_price when it is not supplied,
    and must agree with it (to the cent) when it is.
    """

    product_id: str = Field(..., alias="productId")
    product_name: Optional[str] = Field(default=None, alias="productName")
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0, alias="unitPrice")
    line_total: float = Field(..., ge=0, alias="total")

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _derive_line_total(cls, data):
        if not isinstance(data, dict):
            return data
        total = data.get("line_total", data.get("total"))
        quantity = data.get("quantity")
        unit_price = data.get("unit_price", data.get("unitPrice"))
        if total is None and quantity is not None and unit_price is not None:
            data = {k: v for k, v in data.items() if k != "total"}
            data["line_total"] = round(float(quantity) * float(unit_price), 2)
        return data

    @model_validator(mode="after")
    def _check_line_total(self):
        expected = round(self.quantity * self.unit_price, 2)
        if not math.isclose(self.line_total, expected, abs_tol=0.005):
            raise ValueError(
                f"line_total {self.line_total} does not equal "
                f"quantity * unit_price ({expected}) for product {self.product_id}"
            )
        return self


class Transaction(BaseModel):
    """A completed sale. Immutable once created."""

    id: str
    timestamp: str = Field(..., alias="date")
    amount: float = Field(..., ge=0)
    line_items: list[LineItem] = Field(default_factory=list, alias="items")
    payment_method: PaymentMethod = Field(
        default=PaymentMethod.CASH, alias="paymentMethod"
    )
    customer: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value):
        return _to_iso_string(value)

    @property
    def day(self) -> date:
        """Calendar day of the sale (the time component is ignored)."""
        return date.fromisoformat(self.timestamp[:10])

    @property
    def units(self) -> int:
        return sum(item.quantity for item in self.line_items)


class Product(BaseModel):
    """Read-only snapshot of an inventory product."""

    id: str
    name: str
    unit_price: float = Field(..., ge=0, alias="price")
    stock_on_hand: int = Field(..., ge=0, alias="stock")
    category: str
    description: Optional[str] = None
    cost_price: Optional[float] = Field(default=None, ge=0, alias="costPrice")

    class Config:
        populate_by_name = True
        frozen = True


class FinanceEntry(BaseModel):
    id: str
    timestamp: str = Field(..., alias="date")
    amount: float = Field(..., ge=0)
    category: str
    description: str = ""
    entry_type: EntryType = Field(..., alias="type")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value):
        return _to_iso_string(value)


# --- Analytics Outputs ---
# Display-only value objects. Exported with camelCase aliases.


class ForecastPoint(BaseModel):
    day: date = Field(..., alias="date")
    predicted_amount: float = Field(..., ge=0, alias="predictedSales")
    lower_bound: float = Field(..., ge=0, alias="lowerBound")
    upper_bound: float = Field(..., alias="upperBound")

    class Config:
        populate_by_name = True


class ReorderRecommendation(BaseModel):
    product_id: str = Field(..., alias="id")
    product_name: str = Field(..., alias="name")
    current_stock: int = Field(..., alias="currentStock")
    recommended_stock: int = Field(..., ge=0, alias="recommendedStock")
    needs_reorder: bool = Field(..., alias="needsReorder")

    class Config:
        populate_by_name = True


class Anomaly(BaseModel):
    day: date = Field(..., alias="date")
    actual_amount: float = Field(..., alias="amount")
    expected_amount: float = Field(..., alias="expected")
    deviation_in_std_devs: float = Field(..., alias="deviation")

    class Config:
        populate_by_name = True


class CategorySales(BaseModel):
    category: str
    total: float

    class Config:
        populate_by_name = True


class LowStockItem(BaseModel):
    product_id: str = Field(..., alias="id")
    name: str
    stock: int
    target_stock: int = Field(..., alias="total")

    class Config:
        populate_by_name = True


class FinanceSummary(BaseModel):
    total_income: float = Field(..., alias="totalIncome")
    total_expense: float = Field(..., alias="totalExpense")
    balance: float

    class Config:
        populate_by_name = True


class DashboardMetric(BaseModel):
    label: str
    value: str
    change: float
    trend: Trend

    class Config:
        populate_by_name = True


class DailySalesPoint(BaseModel):
    day: date = Field(..., alias="date")
    total: float

    class Config:
        populate_by_name = True
