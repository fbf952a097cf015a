# caisse/catalog.py
from __future__ import annotations

import logging
from typing import List
from uuid import uuid4

from sqlalchemy import delete, func, select

from .errors import Conflict, NotFound
from .models import Category, OrderItem, Product
from .schemas import CategoryIn, CategoryOut, ProductIn, ProductOut, ProductUpdate
from .store import Store

logger = logging.getLogger(__name__)


# -------------------
# Categories
# -------------------
def list_categories(store: Store) -> List[CategoryOut]:
    with store.session() as session:
        rows = session.scalars(select(Category).order_by(Category.label)).all()
        return [CategoryOut.model_validate(c) for c in rows]


def create_category(store: Store, payload: CategoryIn) -> CategoryOut:
    with store.session("Insert") as session:
        session.add(Category(id=payload.id, label=payload.label, color=payload.color))
    return CategoryOut(id=payload.id, label=payload.label, color=payload.color)


def update_category(store: Store, payload: CategoryIn) -> CategoryOut:
    with store.session("Update") as session:
        c = session.get(Category, payload.id)
        if c is None:
            raise NotFound(f"Category not found: {payload.id}")
        c.label = payload.label
        c.color = payload.color
    return CategoryOut(id=payload.id, label=payload.label, color=payload.color)


def delete_category(store: Store, category_id: str) -> None:
    with store.session("Delete") as session:
        product_count = session.scalar(
            select(func.count()).select_from(Product).where(Product.category_id == category_id)
        )
        if product_count:
            logger.warning("Refused to delete category %s (%d products)", category_id, product_count)
            raise Conflict(
                f"Cannot delete category '{category_id}': it is referenced by {product_count} product(s)"
            )

        res = session.execute(delete(Category).where(Category.id == category_id))
        if res.rowcount == 0:
            raise NotFound(f"Category not found: {category_id}")


# -------------------
# Products
# -------------------
def list_products(store: Store) -> List[ProductOut]:
    with store.session() as session:
        rows = session.scalars(select(Product).order_by(Product.name)).all()
        return [ProductOut.model_validate(p) for p in rows]


def create_product(store: Store, payload: ProductIn) -> ProductOut:
    product_id = str(uuid4())
    with store.session("Insert") as session:
        session.add(
            Product(
                id=product_id,
                name=payload.name,
                price=payload.price,
                category_id=payload.category_id,
                available=True,
            )
        )
    return ProductOut(
        id=product_id,
        name=payload.name,
        price=payload.price,
        category_id=payload.category_id,
        available=True,
    )


def update_product(store: Store, payload: ProductUpdate) -> ProductOut:
    with store.session("Update") as session:
        p = session.get(Product, payload.id)
        if p is None:
            raise NotFound(f"Product not found: {payload.id}")
        p.name = payload.name
        p.price = payload.price
        p.category_id = payload.category_id
        p.available = payload.available
    return ProductOut(**payload.model_dump())


def toggle_product_availability(store: Store, product_id: str) -> bool:
    """Flip the availability flag and return the new value."""
    with store.session("Update") as session:
        p = session.get(Product, product_id)
        if p is None:
            raise NotFound(f"Product not found: {product_id}")
        p.available = not p.available
        return bool(p.available)


def delete_product(store: Store, product_id: str) -> None:
    with store.session("Delete") as session:
        item_count = session.scalar(
            select(func.count()).select_from(OrderItem).where(OrderItem.product_id == product_id)
        )
        if item_count:
            logger.warning("Refused to delete product %s (%d order items)", product_id, item_count)
            raise Conflict(
                f"Cannot delete product '{product_id}': it is referenced by {item_count} order item(s)"
            )

        res = session.execute(delete(Product).where(Product.id == product_id))
        if res.rowcount == 0:
            raise NotFound(f"Product not found: {product_id}")
