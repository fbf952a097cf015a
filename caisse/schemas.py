# caisse/schemas.py
"""
Payload and response shapes exchanged with the command surface.

Prices and totals are integer cents throughout (150 == 1,50 EUR).
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from .errors import RowMappingFailure

# SQLite INTEGER is a signed 64-bit value
SQLITE_INT_MAX = 2**63 - 1

Cents = Annotated[int, Field(ge=-SQLITE_INT_MAX - 1, le=SQLITE_INT_MAX)]
Quantity = Annotated[int, Field(le=SQLITE_INT_MAX)]


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"

    @classmethod
    def from_db(cls, raw: str) -> "PaymentMethod":
        try:
            return cls(raw)
        except ValueError:
            raise RowMappingFailure(f"Unknown payment method: {raw}") from None

    def as_db(self) -> str:
        return self.value


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# -------------------
# Catalog
# -------------------
class CategoryIn(BaseModel):
    id: str
    label: str
    color: str


class CategoryOut(_Out):
    id: str
    label: str
    color: str


class ProductIn(BaseModel):
    name: str
    price: Cents
    category_id: str


class ProductUpdate(BaseModel):
    id: str
    name: str
    price: Cents
    category_id: str
    available: bool


class ProductOut(_Out):
    id: str
    name: str
    price: int
    category_id: str
    available: bool


# -------------------
# Orders
# -------------------
class OrderItemIn(BaseModel):
    product_id: str
    product_name: str
    unit_price: Cents
    quantity: Quantity


class OrderIn(BaseModel):
    items: List[OrderItemIn]
    payment_method: PaymentMethod


class OrderItemOut(_Out):
    id: str
    order_id: str
    product_id: str
    product_name: str
    unit_price: int
    quantity: int
    total: int


class OrderOut(BaseModel):
    id: str
    created_at: str
    total: int
    payment_method: PaymentMethod
    items: List[OrderItemOut] = []


# -------------------
# Dashboard
# -------------------
class ProductSales(BaseModel):
    product_id: str
    product_name: str
    total_quantity: int
    total_revenue: int


class PaymentMethodBreakdown(BaseModel):
    payment_method: PaymentMethod
    total_revenue: int
    transaction_count: int


class DashboardSummary(BaseModel):
    total_revenue: int
    total_transactions: int
    per_product: List[ProductSales]
    per_payment_method: List[PaymentMethodBreakdown]


class AppVersion(BaseModel):
    version: str
    os: str
    arch: str
