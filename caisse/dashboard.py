# caisse/dashboard.py
from __future__ import annotations

from sqlalchemy import func, select

from .models import Order, OrderItem
from .schemas import DashboardSummary, PaymentMethod, PaymentMethodBreakdown, ProductSales
from .store import Store


def get_dashboard_summary(store: Store) -> DashboardSummary:
    with store.session() as session:
        total_revenue, total_transactions = session.execute(
            select(func.coalesce(func.sum(Order.total), 0), func.count(Order.id))
        ).one()

        # name is a per-line snapshot; MAX picks one deterministically if it changed over time
        product_revenue = func.sum(OrderItem.total).label("total_revenue")
        product_rows = session.execute(
            select(
                OrderItem.product_id,
                func.max(OrderItem.product_name).label("product_name"),
                func.sum(OrderItem.quantity).label("total_quantity"),
                product_revenue,
            )
            .group_by(OrderItem.product_id)
            .order_by(product_revenue.desc())
        ).all()

        method_rows = session.execute(
            select(
                Order.payment_method,
                func.sum(Order.total).label("total_revenue"),
                func.count(Order.id).label("transaction_count"),
            )
            .group_by(Order.payment_method)
            .order_by(Order.payment_method)
        ).all()

    return DashboardSummary(
        total_revenue=total_revenue,
        total_transactions=total_transactions,
        per_product=[
            ProductSales(
                product_id=r.product_id,
                product_name=r.product_name,
                total_quantity=r.total_quantity,
                total_revenue=r.total_revenue,
            )
            for r in product_rows
        ],
        per_payment_method=[
            PaymentMethodBreakdown(
                payment_method=PaymentMethod.from_db(r.payment_method),
                total_revenue=r.total_revenue,
                transaction_count=r.transaction_count,
            )
            for r in method_rows
        ],
    )
