"""
REST API endpoints for placing and managing orders.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.api.dependencies import get_email_dispatcher, get_today
from beverage_portal.database import get_session
from beverage_portal.models.restaurant import Restaurant
from beverage_portal.schemas.order import (
    DashboardStats,
    OrderCreate,
    OrderFilters,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderSummary,
)
from beverage_portal.services.delivery_eligibility import InvalidScheduleConfig
from beverage_portal.services.email_settings_service import EmailSettingsService
from beverage_portal.services.order_notifications import EmailDispatcher, OrderNotifier
from beverage_portal.services.order_service import (
    DeliveryDateUnavailable,
    EmptyOrder,
    InvalidStatusTransition,
    OrderNotFound,
    OrderService,
    ProductUnavailable,
    RestaurantUnavailable,
)

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("", response_model=OrderRead, status_code=201)
async def create_order(
    data: OrderCreate,
    today: date = Depends(get_today),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    """
    Submit an order.

    The delivery date is re-checked against the restaurant's eligible dates;
    notification emails are sent after the order is stored.
    """
    service = OrderService(session)
    try:
        order = await service.create_order(data, reference_date=today)
    except RestaurantUnavailable as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (EmptyOrder, ProductUnavailable) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DeliveryDateUnavailable as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "eligible_dates": e.eligible_dates},
        )
    except InvalidScheduleConfig as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "field": e.field})
    await session.commit()

    order = await service.get_order(order.id)
    restaurant = await session.get(Restaurant, order.restaurant_id)
    recipients = await EmailSettingsService(session).get_recipients()
    outcome = await OrderNotifier(dispatcher).notify_order_created(
        order, restaurant.name, recipients
    )
    if outcome.order_email_sent:
        await session.commit()

    return OrderRead.model_validate(order)


@router.get("", response_model=List[OrderSummary])
async def list_orders(
    status: Optional[OrderStatus] = None,
    restaurant_id: Optional[UUID] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> List[OrderSummary]:
    """List orders, newest first."""
    filters = OrderFilters(
        status=status,
        restaurant_id=restaurant_id,
        from_date=from_date,
        to_date=to_date,
        search=search,
    )
    return await OrderService(session).list_orders(filters)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    restaurant_id: Optional[UUID] = None,
    today: date = Depends(get_today),
    session: AsyncSession = Depends(get_session),
) -> DashboardStats:
    """Order counts and the latest orders, optionally for one restaurant."""
    return await OrderService(session).dashboard_stats(restaurant_id=restaurant_id, today=today)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    """Get an order with its lines."""
    try:
        order = await OrderService(session).get_order(order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OrderRead.model_validate(order)


@router.post("/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    """Confirm, process, deliver or cancel an order."""
    service = OrderService(session)
    try:
        order = await service.update_status(order_id, data.status, data.actor)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    await session.commit()

    return OrderRead.model_validate(order)
