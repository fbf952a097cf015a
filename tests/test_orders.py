"""
Tests for order creation and listing.
"""

import pytest
from sqlalchemy import func, select

from caisse import catalog
from caisse.errors import QueryFailure, ValidationFailure
from caisse.models import Order, OrderItem
from caisse.ordering import checkout
from caisse.schemas import OrderIn, OrderItemIn, PaymentMethod, ProductUpdate


def _row_counts(store):
    with store.session() as session:
        return (
            session.scalar(select(func.count()).select_from(Order)),
            session.scalar(select(func.count()).select_from(OrderItem)),
        )


class TestCreateOrder:
    def test_create_order(self, make_product, place_order):
        p = make_product("Candy", 50, "sucreries")

        order = place_order([(p, 3)])

        assert order.total == 150
        assert order.payment_method == PaymentMethod.CASH
        assert len(order.items) == 1
        assert order.items[0].product_id == p.id
        assert order.items[0].order_id == order.id
        assert order.items[0].quantity == 3
        assert order.items[0].total == 150

    def test_created_at_is_utc_iso8601(self, make_product, place_order):
        p = make_product("Candy", 50)

        order = place_order([(p, 1)])

        assert order.created_at.endswith("Z")
        assert order.created_at[10] == "T"

    def test_total_is_sum_of_lines(self, make_product, place_order):
        a = make_product("Soda", 200)
        b = make_product("Bar", 100)

        order = place_order([(a, 1), (b, 3)], PaymentMethod.CARD)

        assert order.total == 500
        assert [it.total for it in order.items] == [200, 300]
        assert len({it.id for it in order.items}) == 2

    def test_empty_items_rejected(self, store):
        with pytest.raises(ValidationFailure) as exc:
            checkout.create_order(store, OrderIn(items=[], payment_method=PaymentMethod.CARD))

        assert "no items" in str(exc.value)
        assert _row_counts(store) == (0, 0)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, make_product, store, quantity):
        p = make_product("Candy", 50)

        with pytest.raises(ValidationFailure) as exc:
            checkout.create_order(
                store,
                OrderIn(
                    items=[
                        OrderItemIn(product_id=p.id, product_name=p.name, unit_price=50, quantity=1),
                        OrderItemIn(product_id=p.id, product_name=p.name, unit_price=50, quantity=quantity),
                    ],
                    payment_method=PaymentMethod.CASH,
                ),
            )

        assert f"Invalid quantity {quantity}" in str(exc.value)
        assert _row_counts(store) == (0, 0)

    def test_failed_item_insert_rolls_back_whole_order(self, make_product, store):
        p = make_product("Candy", 50)

        with pytest.raises(QueryFailure) as exc:
            checkout.create_order(
                store,
                OrderIn(
                    items=[
                        OrderItemIn(product_id=p.id, product_name=p.name, unit_price=50, quantity=1),
                        OrderItemIn(product_id="ghost", product_name="Ghost", unit_price=10, quantity=1),
                    ],
                    payment_method=PaymentMethod.CASH,
                ),
            )

        assert "Insert order error" in str(exc.value)
        assert _row_counts(store) == (0, 0)
        assert checkout.list_orders(store) == []

    def test_prices_are_caller_snapshots(self, make_product, store):
        p = make_product("Candy", 50)

        order = checkout.create_order(
            store,
            OrderIn(
                items=[OrderItemIn(product_id=p.id, product_name="Promo candy", unit_price=30, quantity=2)],
                payment_method=PaymentMethod.CASH,
            ),
        )

        assert order.total == 60
        assert order.items[0].product_name == "Promo candy"

    def test_catalog_edit_does_not_change_history(self, make_product, place_order, store):
        p = make_product("Candy", 50)
        place_order([(p, 2)])

        catalog.update_product(
            store,
            ProductUpdate(id=p.id, name="Candy XL", price=90, category_id="snack", available=True),
        )

        [order] = checkout.list_orders(store)
        assert order.total == 100
        assert order.items[0].product_name == "Candy"
        assert order.items[0].unit_price == 50


class TestListOrders:
    def test_no_orders(self, store):
        assert checkout.list_orders(store) == []

    def test_round_trip(self, make_product, place_order, store):
        a = make_product("Soda", 200)
        b = make_product("Bar", 100)
        created = [
            place_order([(a, 2)]),
            place_order([(a, 1), (b, 3)], PaymentMethod.CARD),
            place_order([(b, 5)]),
        ]

        listed = {o.id: o for o in checkout.list_orders(store)}

        assert len(listed) == 3
        for order in created:
            got = listed[order.id]
            assert got.total == order.total
            assert got.payment_method == order.payment_method
            assert got.created_at == order.created_at
            assert sorted(got.items, key=lambda it: it.id) == sorted(order.items, key=lambda it: it.id)

    def test_ordered_newest_first(self, make_product, place_order, store, monkeypatch):
        p = make_product("Soda", 200)
        stamps = iter(["2024-05-01T10:00:00Z", "2024-05-02T10:00:00Z", "2024-04-30T10:00:00Z"])
        monkeypatch.setattr(checkout, "utc_timestamp", lambda: next(stamps))

        first = place_order([(p, 1)])
        second = place_order([(p, 2)])
        third = place_order([(p, 3)])

        assert [o.id for o in checkout.list_orders(store)] == [second.id, first.id, third.id]
