"""
REST API endpoints for restaurant management.
"""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.database import get_session
from beverage_portal.models.order import Order
from beverage_portal.models.restaurant import Restaurant
from beverage_portal.schemas.restaurant import RestaurantCreate, RestaurantRead, RestaurantUpdate

router = APIRouter(prefix="/api/v1", tags=["restaurants"])


async def _get_or_404(session: AsyncSession, restaurant_id: UUID) -> Restaurant:
    restaurant = await session.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


async def _code_taken(session: AsyncSession, code: str, exclude_id: Optional[UUID] = None) -> bool:
    stmt = select(Restaurant.id).where(Restaurant.code == code)
    if exclude_id is not None:
        stmt = stmt.where(Restaurant.id != exclude_id)
    result = await session.execute(stmt)
    return result.first() is not None


@router.get("/restaurants", response_model=List[RestaurantRead])
async def list_restaurants(
    active_only: bool = False,
    session: AsyncSession = Depends(get_session),
) -> List[RestaurantRead]:
    """Get all restaurants."""
    stmt = select(Restaurant).order_by(Restaurant.name)
    if active_only:
        stmt = stmt.where(Restaurant.is_active.is_(True))
    result = await session.execute(stmt)
    return [RestaurantRead.model_validate(r) for r in result.scalars().all()]


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantRead)
async def get_restaurant(
    restaurant_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """Get a restaurant by ID."""
    restaurant = await _get_or_404(session, restaurant_id)
    return RestaurantRead.model_validate(restaurant)


@router.post("/restaurants", response_model=RestaurantRead, status_code=201)
async def create_restaurant(
    data: RestaurantCreate,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """Create a new restaurant."""
    if await _code_taken(session, data.code):
        raise HTTPException(status_code=409, detail=f"Restaurant code {data.code} already exists")

    restaurant = Restaurant(**data.model_dump())
    session.add(restaurant)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail=f"Restaurant code {data.code} already exists")
    await session.refresh(restaurant)

    return RestaurantRead.model_validate(restaurant)


@router.patch("/restaurants/{restaurant_id}", response_model=RestaurantRead)
async def update_restaurant(
    restaurant_id: UUID,
    data: RestaurantUpdate,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """Update a restaurant."""
    restaurant = await _get_or_404(session, restaurant_id)

    # Update only provided fields
    update_data = data.model_dump(exclude_unset=True)
    if "code" in update_data and await _code_taken(session, update_data["code"], restaurant_id):
        raise HTTPException(status_code=409, detail=f"Restaurant code {update_data['code']} already exists")

    for field, value in update_data.items():
        setattr(restaurant, field, value)

    await session.commit()
    await session.refresh(restaurant)

    return RestaurantRead.model_validate(restaurant)


@router.post("/restaurants/{restaurant_id}/toggle-active", response_model=RestaurantRead)
async def toggle_restaurant_active(
    restaurant_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> RestaurantRead:
    """Activate or deactivate a restaurant."""
    restaurant = await _get_or_404(session, restaurant_id)
    restaurant.is_active = not restaurant.is_active

    await session.commit()
    await session.refresh(restaurant)

    return RestaurantRead.model_validate(restaurant)


@router.delete("/restaurants/{restaurant_id}", status_code=204)
async def delete_restaurant(
    restaurant_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> None:
    """
    Delete a restaurant that has never ordered.

    Its delivery schedule goes with it. Restaurants with orders are kept for
    order history and reports; deactivate them instead.
    """
    restaurant = await _get_or_404(session, restaurant_id)

    result = await session.execute(
        select(Order.id).where(Order.restaurant_id == restaurant_id).limit(1)
    )
    if result.first() is not None:
        raise HTTPException(
            status_code=409,
            detail="Restaurant has orders; deactivate it instead",
        )

    await session.delete(restaurant)
    await session.commit()
