"""Shop Product Routes — a shop owner's management of its own listings.

Invariants:
    - Every route is scoped to the authenticated shop; other shops' product
      ids answer 404
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.api.dependencies import require_shop_owner
from shopnear.infrastructure.database import get_db
from shopnear.schemas.envelope import envelope
from shopnear.schemas.product import (
    ShopProductCreate, ShopProductOut, ShopProductUpdate,
)
from shopnear.services.auth_guard import Principal
from shopnear.services.shop_products import ShopProductService

router = APIRouter(prefix="/shop/products", tags=["shop-products"])


def _out(product) -> dict:
    return ShopProductOut.model_validate(product).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_product(
    body: ShopProductCreate,
    principal: Principal = Depends(require_shop_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await ShopProductService(db).add(principal.id, **body.model_dump())
    return envelope("Product added successfully", _out(product))


@router.get("")
async def list_products(
    principal: Principal = Depends(require_shop_owner),
    db: AsyncSession = Depends(get_db),
):
    products = await ShopProductService(db).list_for_shop(principal.id)
    return envelope("Shop products", [_out(p) for p in products])


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    principal: Principal = Depends(require_shop_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await ShopProductService(db).get(principal.id, product_id)
    return envelope("Shop product", _out(product))


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    body: ShopProductUpdate,
    principal: Principal = Depends(require_shop_owner),
    db: AsyncSession = Depends(get_db),
):
    product = await ShopProductService(db).update(
        principal.id, product_id, **body.model_dump(exclude_none=True),
    )
    return envelope("Product updated successfully", _out(product))


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    principal: Principal = Depends(require_shop_owner),
    db: AsyncSession = Depends(get_db),
):
    await ShopProductService(db).delete(principal.id, product_id)
    return envelope("Product deleted successfully")
