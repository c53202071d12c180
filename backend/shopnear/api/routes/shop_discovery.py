"""Shop Discovery Routes — nearby search, shop details, subscriptions for customers.

Invariants:
    - All routes require a USER principal
    - Query parameters are range-checked here; out-of-range or non-numeric
      values answer 400 INVALID_PARAMETER before any query runs
    - Subscribe/unsubscribe return the recomputed subscriber_count
"""

import logging
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.api.dependencies import get_ledger, require_user
from shopnear.core.errors import InvalidParameterError
from shopnear.infrastructure.database import get_db
from shopnear.schemas.envelope import envelope
from shopnear.schemas.product import ShopProductOut
from shopnear.schemas.shop import (
    NearbyShopOut, ShopDetails, SubscribedShop, SubscriptionResult,
)
from shopnear.services.auth_guard import Principal
from shopnear.services.proximity_search import find_nearby
from shopnear.services.shop_products import ShopProductService
from shopnear.services.subscription_ledger import SubscriptionLedger

logger = logging.getLogger(__name__)
router = APIRouter(tags=["discovery"])

DEFAULT_RADIUS_M = 5000.0
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@router.get("/shops")
async def nearby_shops(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
    radius: float = Query(DEFAULT_RADIUS_M, gt=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    if not math.isfinite(radius):
        raise InvalidParameterError("radius must be a finite number of meters", "radius")
    shops = await find_nearby(db, lat, lon, radius, limit)
    return envelope(
        "Nearby shops",
        [NearbyShopOut.model_validate(s).model_dump() for s in shops],
    )


@router.get("/shops/{shop_id}")
async def shop_details(
    shop_id: int,
    principal: Principal = Depends(require_user),
    ledger: SubscriptionLedger = Depends(get_ledger),
):
    shop, subscribed = await ledger.get_shop_details(shop_id, principal.id)
    details = ShopDetails(
        id=shop.id, name=shop.name,
        subscriber_count=shop.subscriber_count, is_subscribed=subscribed,
    )
    return envelope("Shop details", details.model_dump())


@router.post("/shops/{shop_id}/subscribe")
async def subscribe(
    shop_id: int,
    principal: Principal = Depends(require_user),
    ledger: SubscriptionLedger = Depends(get_ledger),
):
    count = await ledger.subscribe(shop_id, principal.id)
    result = SubscriptionResult(
        message="Subscribed successfully", subscriber_count=count,
    )
    return envelope(result.message, result.model_dump())


@router.post("/shops/{shop_id}/unsubscribe")
async def unsubscribe(
    shop_id: int,
    principal: Principal = Depends(require_user),
    ledger: SubscriptionLedger = Depends(get_ledger),
):
    count = await ledger.unsubscribe(shop_id, principal.id)
    result = SubscriptionResult(
        message="Unsubscribed successfully", subscriber_count=count,
    )
    return envelope(result.message, result.model_dump())


@router.get("/shops/{shop_id}/products")
async def shop_catalogue(
    shop_id: int,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    products = await ShopProductService(db).list_for_shop(shop_id)
    return envelope(
        "Shop products",
        [ShopProductOut.model_validate(p).model_dump(mode="json") for p in products],
    )


@router.get("/user/subscriptions")
async def my_subscriptions(
    principal: Principal = Depends(require_user),
    ledger: SubscriptionLedger = Depends(get_ledger),
):
    shops = await ledger.list_subscriptions(principal.id)
    return envelope(
        "Subscribed shops",
        [SubscribedShop.model_validate(s).model_dump() for s in shops],
    )
