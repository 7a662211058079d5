"""
Pytest configuration and fixtures.

This module provides fixtures that simulate a small beverage ordering setup:
- Three restaurants, one of them deactivated
- A catalog of products, one of them discontinued
- A stored delivery schedule for the first restaurant
"""
from __future__ import annotations

from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from beverage_portal.database import Base
from beverage_portal.models import (
    DeliverySchedule,
    Product,
    Restaurant,
)


# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def sample_restaurants(db_session: AsyncSession) -> list[Restaurant]:
    """
    Create restaurants:
    - Central Station Grill and Harbour View: active
    - Old Town Bistro: deactivated (closed for renovation)
    """
    restaurants = [
        Restaurant(id=uuid4(), name="Central Station Grill", code="R001", address="1 Station Square"),
        Restaurant(id=uuid4(), name="Harbour View", code="R002", address="14 Quay Street"),
        Restaurant(id=uuid4(), name="Old Town Bistro", code="R003", address="7 Market Lane", is_active=False),
    ]
    db_session.add_all(restaurants)
    await db_session.commit()
    for restaurant in restaurants:
        await db_session.refresh(restaurant)
    return restaurants


@pytest_asyncio.fixture
async def sample_restaurant(sample_restaurants: list[Restaurant]) -> Restaurant:
    return sample_restaurants[0]


@pytest_asyncio.fixture
async def sample_products(db_session: AsyncSession) -> list[Product]:
    """
    Create a small catalog:
    - Cola and still water: active
    - Energy drink: discontinued
    """
    products = [
        Product(
            id=uuid4(), code="CARB-001", name="Cola 0.33 l can", category="Carbonated",
            price_per_stack=Decimal("14.40"), items_per_stack=24, sort_order=0,
        ),
        Product(
            id=uuid4(), code="WATR-001", name="Still water 0.5 l", category="Water",
            price_per_stack=Decimal("6.00"), items_per_stack=12, sort_order=1,
        ),
        Product(
            id=uuid4(), code="ENRG-001", name="Energy drink 0.25 l can", category="Energy",
            price_per_stack=Decimal("21.60"), items_per_stack=24, sort_order=2, is_active=False,
        ),
    ]
    db_session.add_all(products)
    await db_session.commit()
    for product in products:
        await db_session.refresh(product)
    return products


@pytest_asyncio.fixture
async def sample_schedule(
    db_session: AsyncSession, sample_restaurant: Restaurant
) -> DeliverySchedule:
    """
    Central Station Grill takes deliveries on Tuesday and Thursday,
    2-10 days ahead, with 2024-06-06 blocked (public holiday).
    """
    schedule = DeliverySchedule(
        id=uuid4(),
        restaurant_id=sample_restaurant.id,
        allowed_weekdays=[2, 4],
        min_lead_days=2,
        max_lead_days=10,
        blocked_dates=["2024-06-06"],
        notes="Back door delivery before 10:00",
    )
    db_session.add(schedule)
    await db_session.commit()
    await db_session.refresh(schedule)
    return schedule
