# caisse/ordering/checkout.py
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List
from uuid import uuid4

from sqlalchemy import select

from ..errors import ValidationFailure
from ..models import Order, OrderItem
from ..schemas import SQLITE_INT_MAX, OrderIn, OrderItemOut, OrderOut, PaymentMethod
from ..store import Store
from .cart import build_summary, line_total, order_total

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _fits_integer(value: int) -> bool:
    return -SQLITE_INT_MAX - 1 <= value <= SQLITE_INT_MAX


def create_order(store: Store, payload: OrderIn) -> OrderOut:
    """
    Record a sale: one order row plus one row per line, in a single transaction.

    Names and unit prices are taken as supplied by the caller; they are the
    historical snapshot and are not checked against the current catalog.
    """
    if not payload.items:
        raise ValidationFailure("Cannot create an order with no items")

    order_id = str(uuid4())
    lines: List[OrderItemOut] = []
    for item in payload.items:
        if item.quantity <= 0:
            raise ValidationFailure(
                f"Invalid quantity {item.quantity} for product {item.product_id}"
            )
        total = line_total(item.unit_price, item.quantity)
        if not _fits_integer(total):
            raise ValidationFailure(f"Line total out of range for product {item.product_id}")
        lines.append(
            OrderItemOut(
                id=str(uuid4()),
                order_id=order_id,
                product_id=item.product_id,
                product_name=item.product_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                total=total,
            )
        )

    total = order_total(lines)
    if not _fits_integer(total):
        raise ValidationFailure("Order total out of range")

    order = OrderOut(
        id=order_id,
        created_at=utc_timestamp(),
        total=total,
        payment_method=payload.payment_method,
        items=lines,
    )

    with store.session("Insert order") as session:
        session.add(
            Order(
                id=order.id,
                created_at=order.created_at,
                total=order.total,
                payment_method=order.payment_method.as_db(),
            )
        )
        # parent row first so the item foreign keys resolve
        session.flush()
        session.add_all(OrderItem(**line.model_dump()) for line in lines)
        session.flush()

    summary, _total = build_summary(lines)
    logger.info("Order %s recorded (%s)\n%s", order.id, order.payment_method.value, summary)
    return order


def list_orders(store: Store) -> List[OrderOut]:
    with store.session() as session:
        orders = session.scalars(select(Order).order_by(Order.created_at.desc())).all()
        items = session.scalars(select(OrderItem).order_by(OrderItem.order_id)).all()

        by_order: Dict[str, List[OrderItemOut]] = defaultdict(list)
        for it in items:
            by_order[it.order_id].append(OrderItemOut.model_validate(it))

        return [
            OrderOut(
                id=o.id,
                created_at=o.created_at,
                total=o.total,
                payment_method=PaymentMethod.from_db(o.payment_method),
                items=by_order.get(o.id, []),
            )
            for o in orders
        ]
