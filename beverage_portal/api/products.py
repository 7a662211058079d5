"""
REST API endpoints for the product catalog.
"""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from beverage_portal.database import get_session
from beverage_portal.models.order import OrderItem
from beverage_portal.models.product import Product
from beverage_portal.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(prefix="/api/v1/products", tags=["products"])


async def _get_or_404(session: AsyncSession, product_id: UUID) -> Product:
    product = await session.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def _code_taken(session: AsyncSession, code: str, exclude_id: Optional[UUID] = None) -> bool:
    stmt = select(Product.id).where(Product.code == code)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    result = await session.execute(stmt)
    return result.first() is not None


@router.get("", response_model=List[ProductRead])
async def list_products(
    active_only: bool = True,
    category: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> List[ProductRead]:
    """List catalog products in display order."""
    stmt = select(Product).order_by(Product.sort_order, Product.name)
    if active_only:
        stmt = stmt.where(Product.is_active.is_(True))
    if category:
        stmt = stmt.where(Product.category == category)
    result = await session.execute(stmt)
    return [ProductRead.model_validate(p) for p in result.scalars().all()]


@router.get("/categories", response_model=List[str])
async def list_categories(
    session: AsyncSession = Depends(get_session),
) -> List[str]:
    """Distinct categories of active products."""
    result = await session.execute(
        select(Product.category)
        .where(Product.is_active.is_(True))
        .distinct()
        .order_by(Product.category)
    )
    return list(result.scalars().all())


@router.post("", response_model=ProductRead, status_code=201)
async def create_product(
    data: ProductCreate,
    session: AsyncSession = Depends(get_session),
) -> ProductRead:
    """Add a product to the catalog."""
    if await _code_taken(session, data.code):
        raise HTTPException(status_code=409, detail=f"Product code {data.code} already exists")

    product = Product(**data.model_dump())
    session.add(product)
    await session.commit()
    await session.refresh(product)

    return ProductRead.model_validate(product)


@router.patch("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    data: ProductUpdate,
    session: AsyncSession = Depends(get_session),
) -> ProductRead:
    """Update a product."""
    product = await _get_or_404(session, product_id)

    update_data = data.model_dump(exclude_unset=True)
    if "code" in update_data and await _code_taken(session, update_data["code"], product_id):
        raise HTTPException(status_code=409, detail=f"Product code {update_data['code']} already exists")

    for field, value in update_data.items():
        setattr(product, field, value)

    await session.commit()
    await session.refresh(product)

    return ProductRead.model_validate(product)


@router.post("/{product_id}/toggle-active", response_model=ProductRead)
async def toggle_product_active(
    product_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> ProductRead:
    """Show or hide a product on the order form."""
    product = await _get_or_404(session, product_id)
    product.is_active = not product.is_active

    await session.commit()
    await session.refresh(product)

    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> None:
    """Delete a product that no order line refers to."""
    product = await _get_or_404(session, product_id)

    result = await session.execute(
        select(OrderItem.id).where(OrderItem.product_id == product_id).limit(1)
    )
    if result.first() is not None:
        raise HTTPException(
            status_code=409,
            detail="Product appears on orders; deactivate it instead",
        )

    await session.delete(product)
    await session.commit()
