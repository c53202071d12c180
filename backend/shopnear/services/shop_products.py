"""Shop Product Service — a shop's catalog-backed listings.

Invariants:
    - Every listing references an existing catalog product (else ResourceNotFoundError)
    - A shop only reads or changes its own listings; another shop's product
      id is ResourceNotFoundError
    - Returned products have catalog_product loaded
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.core.errors import ResourceNotFoundError
from shopnear.models.catalog_product import CatalogProduct
from shopnear.models.shop_product import ShopProduct

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("price", "stock", "discount", "is_available")


class ShopProductService:
    """CRUD over shop_products scoped to one shop at a time."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self, shop_id: int, *, catalog_id: int, price: float, stock: int,
        discount: float = 0.0, is_available: bool = True,
    ) -> ShopProduct:
        if await self.db.get(CatalogProduct, catalog_id) is None:
            raise ResourceNotFoundError("Catalog product", catalog_id)
        product = ShopProduct(
            shop_id=shop_id, catalog_id=catalog_id, price=price,
            stock=stock, discount=discount, is_available=is_available,
        )
        self.db.add(product)
        await self.db.commit()
        logger.info(f"Product {product.id} added", extra={"shop_id": shop_id})
        return await self.get(shop_id, product.id)

    async def list_for_shop(self, shop_id: int) -> list[ShopProduct]:
        result = await self.db.execute(
            select(ShopProduct)
            .where(ShopProduct.shop_id == shop_id)
            .order_by(ShopProduct.id),
        )
        return list(result.scalars().all())

    async def get(self, shop_id: int, product_id: int) -> ShopProduct:
        result = await self.db.execute(
            select(ShopProduct)
            .where(ShopProduct.id == product_id)
            .where(ShopProduct.shop_id == shop_id)
            .execution_options(populate_existing=True),
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise ResourceNotFoundError("Product", product_id)
        return product

    async def update(self, shop_id: int, product_id: int, **fields) -> ShopProduct:
        """Apply the given UPDATABLE_FIELDS; None values are left unchanged."""
        product = await self.get(shop_id, product_id)
        for name in UPDATABLE_FIELDS:
            value = fields.get(name)
            if value is not None:
                setattr(product, name, value)
        await self.db.commit()
        return await self.get(shop_id, product_id)

    async def delete(self, shop_id: int, product_id: int) -> None:
        product = await self.get(shop_id, product_id)
        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"Product {product_id} deleted", extra={"shop_id": shop_id})
