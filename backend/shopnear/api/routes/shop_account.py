"""Shop Account Routes — shop registration, login, profile and open/closed status.

Invariants:
    - Shop tokens always carry the shop_owner role
    - The profile exposes subscriber_count but no route here writes it
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from shopnear.api.dependencies import (
    get_shop_directory, get_token_codec, require_shop_owner, set_auth_cookie,
)
from shopnear.config import Settings, get_settings
from shopnear.core.domain_types import PrincipalKind
from shopnear.core.token_codec import TokenCodec
from shopnear.schemas.account import (
    Credentials, ShopProfile, ShopRegister, ShopStatusUpdate,
)
from shopnear.schemas.envelope import envelope
from shopnear.services.auth_guard import Principal
from shopnear.services.directory import ShopDirectory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/shop", tags=["shop"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_shop(
    body: ShopRegister,
    response: Response,
    shops: ShopDirectory = Depends(get_shop_directory),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    shop = await shops.create_shop(**body.model_dump())
    token = codec.issue(shop.id, PrincipalKind.SHOP_OWNER)
    set_auth_cookie(response, token, settings)
    return envelope("Shop registered successfully", {
        "shop": ShopProfile.model_validate(shop).model_dump(),
        "token": token,
    })


@router.post("/login")
async def login_shop(
    body: Credentials,
    response: Response,
    shops: ShopDirectory = Depends(get_shop_directory),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    shop = await shops.authenticate(body.email, body.password)
    token = codec.issue(shop.id, PrincipalKind.SHOP_OWNER)
    set_auth_cookie(response, token, settings)
    logger.info("Shop logged in", extra={"shop_id": shop.id})
    return envelope("Login successful", {
        "shop": ShopProfile.model_validate(shop).model_dump(),
        "token": token,
    })


@router.get("/profile")
async def profile(principal: Principal = Depends(require_shop_owner)):
    return envelope(
        "Shop profile", ShopProfile.model_validate(principal.shop).model_dump(),
    )


@router.patch("/status")
async def update_status(
    body: ShopStatusUpdate,
    principal: Principal = Depends(require_shop_owner),
    shops: ShopDirectory = Depends(get_shop_directory),
):
    shop = await shops.set_open(principal.shop, body.is_open)
    return envelope(
        "Shop status updated", {"id": shop.id, "is_open": shop.is_open},
    )
