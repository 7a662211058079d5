from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from beverage_portal.config import get_settings
from beverage_portal.database import close_db, get_session_context, init_db
from beverage_portal.services.seed_service import SeedService

# Import all models to register them with Base BEFORE init_db
# This ensures create_all() sees all tables
from beverage_portal.models import (  # noqa: F401
    Restaurant,
    Product,
    DeliverySchedule,
    Order,
    OrderItem,
    EmailSettings,
)

settings = get_settings()
LOGGER = logging.getLogger("beverage-portal")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    # Startup - create tables if they don't exist (create_all is idempotent)
    try:
        await init_db()
        LOGGER.info("Database initialized")
    except Exception as e:
        LOGGER.error("Database initialization failed: %s", e)
        raise

    # Auto-seed demo data in development if DB is empty
    if settings.is_development:
        try:
            async with get_session_context() as session:
                seed_service = SeedService(session)
                result = await seed_service.ensure_default_data()
                if result.get("restaurants_created", 0) > 0:
                    LOGGER.info("Seeded default data: %s", result)
                else:
                    LOGGER.info("Default data already present; skipping seeding")
        except Exception as e:
            LOGGER.warning("Default data seeding failed: %s", e)

    yield

    # Shutdown
    await close_db()


app = FastAPI(
    title="Beverage Ordering Portal",
    description="Delivery scheduling, order intake and reporting for restaurant beverage orders",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS (needed for browser preflight requests)
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "service": "beverage-portal"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Beverage Ordering Portal",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/healthz",
    }


# Include API routers
from beverage_portal.api import (  # noqa: E402
    restaurants_router,
    products_router,
    delivery_schedules_router,
    orders_router,
    reports_router,
    email_settings_router,
)

app.include_router(restaurants_router)
app.include_router(products_router)
app.include_router(delivery_schedules_router)
app.include_router(orders_router)
app.include_router(reports_router)
app.include_router(email_settings_router)
