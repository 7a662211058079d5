"""
Order activity reports.

Covers orders whose delivery date falls in [date_from, date_to], cancelled
orders excluded:
- headline totals (orders, amount, average order value, restaurants)
- per-product quantity and value, highest value first
- per-restaurant order count and value, highest value first
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.models.order import Order, OrderItem
from beverage_portal.models.restaurant import Restaurant
from beverage_portal.schemas.order import OrderStatus
from beverage_portal.schemas.report import ProductStats, ReportSummary, RestaurantStats

TWO_PLACES = Decimal("0.01")


class ReportService:
    """Service for order reporting."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def summary(
        self,
        date_from: date,
        date_to: date,
        restaurant_id: Optional[UUID] = None,
    ) -> ReportSummary:
        order_stmt = (
            select(Order.id, Order.restaurant_id, Order.total_amount, Restaurant.name)
            .join(Restaurant, Restaurant.id == Order.restaurant_id)
            .where(Order.delivery_date >= date_from)
            .where(Order.delivery_date <= date_to)
            .where(Order.status != OrderStatus.CANCELLED.value)
        )
        if restaurant_id is not None:
            order_stmt = order_stmt.where(Order.restaurant_id == restaurant_id)

        order_rows = (await self.session.execute(order_stmt)).all()

        total_amount = Decimal("0")
        by_restaurant: Dict[UUID, RestaurantStats] = {}
        for _, rest_id, amount, name in order_rows:
            amount = _to_decimal(amount)
            total_amount += amount
            stats = by_restaurant.get(rest_id)
            if stats is None:
                stats = RestaurantStats(
                    restaurant_id=rest_id,
                    name=name,
                    order_count=0,
                    total_amount=Decimal("0"),
                )
                by_restaurant[rest_id] = stats
            stats.order_count += 1
            stats.total_amount += amount

        by_product: Dict[str, ProductStats] = {}
        order_ids = [row[0] for row in order_rows]
        if order_ids:
            item_rows = await self.session.execute(
                select(OrderItem).where(OrderItem.order_id.in_(order_ids))
            )
            for item in item_rows.scalars().all():
                stats = by_product.get(item.product_code)
                if stats is None:
                    stats = ProductStats(
                        code=item.product_code,
                        name=item.product_name,
                        total_quantity=0,
                        total_amount=Decimal("0"),
                    )
                    by_product[item.product_code] = stats
                stats.total_quantity += item.quantity
                stats.total_amount += _to_decimal(item.total_price)

        total_orders = len(order_rows)
        avg = total_amount / total_orders if total_orders else Decimal("0")

        return ReportSummary(
            date_from=date_from,
            date_to=date_to,
            restaurant_id=restaurant_id,
            total_orders=total_orders,
            total_amount=total_amount.quantize(TWO_PLACES),
            avg_order_value=avg.quantize(TWO_PLACES),
            unique_restaurants=len(by_restaurant),
            products=sorted(by_product.values(), key=lambda s: s.total_amount, reverse=True),
            restaurants=sorted(by_restaurant.values(), key=lambda s: s.total_amount, reverse=True),
        )


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))
