"""
Order intake and fulfilment.

Orders are accepted only for a delivery date inside the restaurant's
eligible set, recomputed here at submit time so stale client state cannot
slip an ineligible date through. Status moves along:

    pending -> confirmed | cancelled
    confirmed -> processing | delivered | cancelled
    processing -> delivered | cancelled

delivered and cancelled are terminal.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from beverage_portal.models.order import Order, OrderItem
from beverage_portal.models.product import Product
from beverage_portal.models.restaurant import Restaurant
from beverage_portal.schemas.order import (
    DashboardStats,
    OrderCreate,
    OrderFilters,
    OrderStatus,
    OrderSummary,
)
from beverage_portal.services.delivery_eligibility import (
    compute_eligible_dates,
    is_eligible_delivery_date,
)
from beverage_portal.services.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    OrderStatus.PENDING.value: frozenset({OrderStatus.CONFIRMED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.CONFIRMED.value: frozenset({
        OrderStatus.PROCESSING.value,
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
    }),
    OrderStatus.PROCESSING.value: frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.DELIVERED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
}

RECENT_ORDERS_LIMIT = 5


class OrderError(Exception):
    """Base exception for order intake and status errors."""
    pass


class OrderNotFound(OrderError):
    pass


class RestaurantUnavailable(OrderError):
    """Restaurant does not exist or is deactivated."""
    pass


class ProductUnavailable(OrderError):
    """One or more products do not exist or are deactivated."""

    def __init__(self, product_ids: List[UUID]):
        super().__init__(
            "Products not available: " + ", ".join(str(p) for p in product_ids)
        )
        self.product_ids = product_ids


class EmptyOrder(OrderError):
    pass


class DeliveryDateUnavailable(OrderError):
    """Requested delivery date is not in the restaurant's eligible set."""

    def __init__(self, delivery_date: date, eligible_dates: List[str]):
        super().__init__(
            f"Delivery on {delivery_date.isoformat()} is not available for this restaurant"
        )
        self.delivery_date = delivery_date
        self.eligible_dates = eligible_dates


class InvalidStatusTransition(OrderError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move order from {current} to {requested}")
        self.current = current
        self.requested = requested


class OrderService:
    """Service for placing, listing and progressing orders."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_order(self, data: OrderCreate, reference_date: date) -> Order:
        """
        Validate and persist a new pending order.

        Args:
            data: Submitted order
            reference_date: "Today" for the delivery window, supplied by the caller

        Raises:
            RestaurantUnavailable, EmptyOrder, DeliveryDateUnavailable,
            ProductUnavailable
        """
        restaurant = await self.session.get(Restaurant, data.restaurant_id)
        if restaurant is None or not restaurant.is_active:
            raise RestaurantUnavailable(f"Restaurant {data.restaurant_id} is not available")

        # Repeated lines for the same product are merged, like the cart does
        quantities: Dict[UUID, int] = {}
        for line in data.items:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
        if not quantities:
            raise EmptyOrder("Order must contain at least one product")

        schedule = await ScheduleStore(self.session).get_effective_schedule(restaurant.id)
        if not is_eligible_delivery_date(schedule, reference_date, data.delivery_date):
            raise DeliveryDateUnavailable(
                data.delivery_date, compute_eligible_dates(schedule, reference_date)
            )

        result = await self.session.execute(
            select(Product).where(Product.id.in_(list(quantities)))
        )
        products = {p.id: p for p in result.scalars().all()}
        unavailable = [
            pid for pid in quantities
            if pid not in products or not products[pid].is_active
        ]
        if unavailable:
            raise ProductUnavailable(unavailable)

        items = []
        total = Decimal("0.00")
        for product_id, quantity in quantities.items():
            product = products[product_id]
            price = Decimal(str(product.price_per_stack))
            line_total = price * quantity
            total += line_total
            items.append(OrderItem(
                product_id=product.id,
                product_code=product.code,
                product_name=product.name,
                quantity=quantity,
                price_per_stack=price,
                total_price=line_total,
            ))

        order = Order(
            restaurant_id=restaurant.id,
            delivery_date=data.delivery_date,
            status=OrderStatus.PENDING.value,
            total_amount=total,
            notes=data.notes or None,
            created_by=data.created_by,
            items=items,
        )
        self.session.add(order)
        await self.session.flush()

        logger.info(
            "Order %s created for %s, delivery %s, %d lines, total %s",
            order.id,
            restaurant.name,
            order.delivery_date,
            len(items),
            total,
        )
        return order

    async def get_order(self, order_id: UUID) -> Order:
        result = await self.session.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items), selectinload(Order.restaurant))
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order

    async def update_status(
        self,
        order_id: UUID,
        new_status: OrderStatus,
        actor: str,
        now: Optional[datetime] = None,
    ) -> Order:
        """Move an order along its lifecycle; confirming records who and when."""
        order = await self.get_order(order_id)
        requested = OrderStatus(new_status).value

        if requested not in ALLOWED_TRANSITIONS.get(order.status, frozenset()):
            raise InvalidStatusTransition(order.status, requested)

        now = now or datetime.utcnow()
        order.status = requested
        order.updated_at = now
        if requested == OrderStatus.CONFIRMED.value:
            order.confirmed_by = actor
            order.confirmed_at = now

        await self.session.flush()
        logger.info("Order %s moved to %s by %s", order.id, requested, actor)
        return order

    async def list_orders(self, filters: Optional[OrderFilters] = None) -> List[OrderSummary]:
        """Orders matching the filters, newest first."""
        filters = filters or OrderFilters()
        stmt = (
            select(Order, Restaurant.name)
            .join(Restaurant, Restaurant.id == Order.restaurant_id)
            .order_by(Order.created_at.desc())
        )

        if filters.status is not None:
            stmt = stmt.where(Order.status == filters.status.value)
        if filters.restaurant_id is not None:
            stmt = stmt.where(Order.restaurant_id == filters.restaurant_id)
        if filters.from_date is not None:
            stmt = stmt.where(Order.delivery_date >= filters.from_date)
        if filters.to_date is not None:
            stmt = stmt.where(Order.delivery_date <= filters.to_date)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            stmt = stmt.where(or_(
                Order.notes.ilike(pattern),
                Order.created_by.ilike(pattern),
                Restaurant.name.ilike(pattern),
            ))

        result = await self.session.execute(stmt)
        return [_summary(order, name) for order, name in result.all()]

    async def dashboard_stats(
        self,
        restaurant_id: Optional[UUID] = None,
        today: Optional[date] = None,
    ) -> DashboardStats:
        """Totals across all orders (or one restaurant's) plus the latest few."""
        today = today or date.today()
        day_start = datetime.combine(today, time.min)
        day_end = day_start + timedelta(days=1)

        def scoped(stmt):
            if restaurant_id is not None:
                return stmt.where(Order.restaurant_id == restaurant_id)
            return stmt

        totals = await self.session.execute(scoped(
            select(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0))
        ))
        total_orders, total_amount = totals.one()

        pending = await self.session.execute(scoped(
            select(func.count(Order.id)).where(Order.status == OrderStatus.PENDING.value)
        ))
        created_today = await self.session.execute(scoped(
            select(func.count(Order.id))
            .where(Order.created_at >= day_start)
            .where(Order.created_at < day_end)
        ))

        recent = await self.session.execute(scoped(
            select(Order, Restaurant.name)
            .join(Restaurant, Restaurant.id == Order.restaurant_id)
            .order_by(Order.created_at.desc())
            .limit(RECENT_ORDERS_LIMIT)
        ))

        return DashboardStats(
            total_orders=total_orders or 0,
            pending_orders=pending.scalar() or 0,
            today_orders=created_today.scalar() or 0,
            total_amount=Decimal(str(total_amount or 0)),
            recent_orders=[_summary(order, name) for order, name in recent.all()],
        )


def _summary(order: Order, restaurant_name: Optional[str]) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        restaurant_id=order.restaurant_id,
        restaurant_name=restaurant_name,
        delivery_date=order.delivery_date,
        status=order.status,
        total_amount=order.total_amount,
        created_by=order.created_by,
        created_at=order.created_at,
    )
