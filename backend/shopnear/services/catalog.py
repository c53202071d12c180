"""Catalog Service — shared product definitions and keyword suggestions.

Invariants:
    - suggest() matches case-insensitively across name, brand, category, description
    - suggestions are ordered by name and capped at limit
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.models.catalog_product import CatalogProduct

logger = logging.getLogger(__name__)


def _like_pattern(keyword: str) -> str:
    escaped = (
        keyword.lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


class CatalogService:
    """Create and search catalog products."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, *, name: str, category: str, description: str,
        brand: str = "", image_url: str = "",
    ) -> CatalogProduct:
        product = CatalogProduct(
            name=name, brand=brand, category=category,
            description=description, image_url=image_url,
        )
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(f"Catalog product {product.id} created")
        return product

    async def get(self, catalog_id: int) -> CatalogProduct | None:
        return await self.db.get(CatalogProduct, catalog_id)

    async def suggest(self, keyword: str, limit: int) -> list[CatalogProduct]:
        pattern = _like_pattern(keyword)
        query = (
            select(CatalogProduct)
            .where(or_(
                func.lower(CatalogProduct.name).like(pattern, escape="\\"),
                func.lower(CatalogProduct.brand).like(pattern, escape="\\"),
                func.lower(CatalogProduct.category).like(pattern, escape="\\"),
                func.lower(CatalogProduct.description).like(pattern, escape="\\"),
            ))
            .order_by(CatalogProduct.name.asc(), CatalogProduct.id.asc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
