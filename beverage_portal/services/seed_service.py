"""Service for seeding default data to handle cold start scenarios."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.models.product import Product
from beverage_portal.models.restaurant import Restaurant

logger = logging.getLogger(__name__)


# Demo restaurants for cold start
DEFAULT_RESTAURANTS = [
    {"name": "Central Station Grill", "code": "R001", "address": "1 Station Square"},
    {"name": "Harbour View", "code": "R002", "address": "14 Quay Street"},
    {"name": "Old Town Bistro", "code": "R003", "address": "7 Market Lane"},
]

# Default beverage catalog
DEFAULT_PRODUCTS = [
    {"code": "CARB-001", "name": "Cola 0.33 l can", "category": "Carbonated", "price_per_stack": "14.40", "items_per_stack": 24},
    {"code": "CARB-002", "name": "Cola Zero 0.33 l can", "category": "Carbonated", "price_per_stack": "14.40", "items_per_stack": 24},
    {"code": "CARB-003", "name": "Lemon soda 0.33 l can", "category": "Carbonated", "price_per_stack": "13.20", "items_per_stack": 24},
    {"code": "CARB-004", "name": "Orange soda 0.5 l bottle", "category": "Carbonated", "price_per_stack": "15.60", "items_per_stack": 12},
    {"code": "WATR-001", "name": "Still water 0.5 l", "category": "Water", "price_per_stack": "6.00", "items_per_stack": 12},
    {"code": "WATR-002", "name": "Sparkling water 0.5 l", "category": "Water", "price_per_stack": "6.60", "items_per_stack": 12},
    {"code": "ICET-001", "name": "Peach iced tea 0.5 l", "category": "Iced tea", "price_per_stack": "12.00", "items_per_stack": 12},
    {"code": "ICET-002", "name": "Lemon iced tea 0.5 l", "category": "Iced tea", "price_per_stack": "12.00", "items_per_stack": 12},
    {"code": "ENRG-001", "name": "Energy drink 0.25 l can", "category": "Energy", "price_per_stack": "21.60", "items_per_stack": 24},
    {"code": "JUIC-001", "name": "Orange juice 1 l", "category": "Juice", "price_per_stack": "18.00", "items_per_stack": 6},
]


class SeedService:
    """
    Service for seeding default data.

    Handles cold start scenarios by creating demo restaurants and the
    beverage catalog when the database is empty.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def ensure_default_data(self) -> dict:
        """
        Ensure default data exists for cold start.

        Returns:
            Dict with created/existing counts
        """
        result = {
            "restaurants_created": 0,
            "products_created": 0,
            "already_seeded": False,
        }

        if await self._count(Restaurant) > 0:
            result["already_seeded"] = True
            logger.info("Database already has data, skipping seed")
            return result

        logger.info("Cold start detected, seeding default data...")

        restaurants = self._create_default_restaurants()
        result["restaurants_created"] = len(restaurants)

        if await self._count(Product) == 0:
            products = self._create_default_products()
            result["products_created"] = len(products)

        await self.session.commit()

        logger.info(
            "Seed complete: %d restaurants, %d products",
            result["restaurants_created"],
            result["products_created"],
        )
        return result

    def _create_default_restaurants(self) -> List[Restaurant]:
        restaurants = [Restaurant(**data) for data in DEFAULT_RESTAURANTS]
        self.session.add_all(restaurants)
        return restaurants

    def _create_default_products(self) -> List[Product]:
        products = []
        for position, data in enumerate(DEFAULT_PRODUCTS):
            products.append(Product(
                code=data["code"],
                name=data["name"],
                category=data["category"],
                price_per_stack=Decimal(data["price_per_stack"]),
                items_per_stack=data["items_per_stack"],
                sort_order=position,
            ))
        self.session.add_all(products)
        return products

    async def _count(self, model) -> int:
        result = await self.session.execute(select(func.count()).select_from(model))
        return result.scalar() or 0
