"""
Pytest fixtures for the POS store.

Every test gets its own in-memory database seeded with the default French catalog.
"""

import pytest

from caisse import catalog
from caisse.ordering import checkout
from caisse.schemas import OrderIn, OrderItemIn, PaymentMethod, ProductIn
from caisse.store import Store


@pytest.fixture
def store():
    s = Store.in_memory()
    yield s
    s.close()


@pytest.fixture
def make_product(store):
    def _make(name, price, category_id="snack"):
        return catalog.create_product(
            store, ProductIn(name=name, price=price, category_id=category_id)
        )

    return _make


@pytest.fixture
def place_order(store):
    """Create an order from (product, quantity) pairs, snapshotting the product's current price."""

    def _place(lines, payment_method=PaymentMethod.CASH):
        return checkout.create_order(
            store,
            OrderIn(
                items=[
                    OrderItemIn(
                        product_id=p.id,
                        product_name=p.name,
                        unit_price=p.price,
                        quantity=qty,
                    )
                    for p, qty in lines
                ],
                payment_method=payment_method,
            ),
        )

    return _place
