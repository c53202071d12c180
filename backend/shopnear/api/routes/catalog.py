"""Catalog Routes — admin-managed product catalog and public keyword suggestions."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.api.dependencies import require_admin
from shopnear.infrastructure.database import get_db
from shopnear.schemas.envelope import envelope
from shopnear.schemas.product import CatalogProductCreate, CatalogProductOut
from shopnear.services.auth_guard import Principal
from shopnear.services.catalog import CatalogService

router = APIRouter(prefix="/api/catalog-products", tags=["catalog"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_catalog_product(
    body: CatalogProductCreate,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    product = await CatalogService(db).create(**body.model_dump())
    return envelope(
        "Catalog product created",
        CatalogProductOut.model_validate(product).model_dump(),
    )


@router.get("/suggest")
async def suggest(
    keyword: str = Query(min_length=1, max_length=100),
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    products = await CatalogService(db).suggest(keyword, limit)
    return envelope(
        "Suggestions",
        [CatalogProductOut.model_validate(p).model_dump() for p in products],
    )
