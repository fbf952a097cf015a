# caisse/models.py
from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, text

from .db import Base


class Category(Base):
    __tablename__ = "categories"
    id = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    color = Column(String, nullable=False)


class Product(Base):
    __tablename__ = "products"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)  # cents
    category_id = Column(String, ForeignKey("categories.id"), nullable=False)
    available = Column(Boolean, nullable=False, default=True, server_default=text("1"))


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("payment_method IN ('cash', 'card')", name="ck_orders_payment_method"),
    )
    id = Column(String, primary_key=True)
    created_at = Column(String, nullable=False)  # ISO-8601 UTC, e.g. 2024-05-01T18:30:00Z
    total = Column(Integer, nullable=False)  # cents
    payment_method = Column(String, nullable=False)


class OrderItem(Base):
    """Line of an order. Name and price are copied at sale time, never joined back."""

    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
        Index("idx_order_items_order_id", "order_id"),
    )
    id = Column(String, primary_key=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    product_name = Column(String, nullable=False)
    unit_price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
