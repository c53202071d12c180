"""User Auth Routes — registration, login, profile and account lifecycle for customers.

Invariants:
    - Register and login set the Authorization cookie and also return the token
    - Login issues an ADMIN token for users flagged is_admin, USER otherwise
    - Logout only clears the cookie; tokens are never revoked server side
    - Account deletion goes through the subscription ledger so every
      affected shop's subscriber_count stays exact
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from shopnear.api.dependencies import (
    clear_auth_cookie, get_ledger, get_token_codec, get_user_directory,
    require_user, set_auth_cookie,
)
from shopnear.config import Settings, get_settings
from shopnear.core.domain_types import PrincipalKind
from shopnear.core.token_codec import TokenCodec
from shopnear.schemas.account import (
    ChangePassword, Credentials, UserProfile, UserRegister,
)
from shopnear.schemas.envelope import envelope
from shopnear.services.auth_guard import Principal
from shopnear.services.directory import UserDirectory
from shopnear.services.subscription_ledger import SubscriptionLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: UserRegister,
    response: Response,
    users: UserDirectory = Depends(get_user_directory),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    user = await users.create_user(
        name=body.name, email=body.email, password=body.password,
        latitude=body.latitude, longitude=body.longitude,
    )
    token = codec.issue(user.id, PrincipalKind.USER)
    set_auth_cookie(response, token, settings)
    return envelope("User registered successfully", {
        "user": UserProfile.model_validate(user).model_dump(),
        "token": token,
    })


@router.post("/login")
async def login(
    body: Credentials,
    response: Response,
    users: UserDirectory = Depends(get_user_directory),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    user = await users.authenticate(body.email, body.password)
    kind = PrincipalKind.ADMIN if user.is_admin else PrincipalKind.USER
    token = codec.issue(user.id, kind)
    set_auth_cookie(response, token, settings)
    logger.info("User logged in", extra={"user_id": user.id, "principal_kind": kind.value})
    return envelope("Login successful", {
        "user": UserProfile.model_validate(user).model_dump(),
        "token": token,
        "role": kind.value,
    })


@router.get("/me")
async def me(principal: Principal = Depends(require_user)):
    return envelope(
        "User profile", UserProfile.model_validate(principal.user).model_dump(),
    )


@router.post("/logout")
async def logout(
    response: Response,
    principal: Principal = Depends(require_user),
    settings: Settings = Depends(get_settings),
):
    clear_auth_cookie(response, settings)
    return envelope("Logged out successfully")


@router.post("/change-password")
async def change_password(
    body: ChangePassword,
    principal: Principal = Depends(require_user),
    users: UserDirectory = Depends(get_user_directory),
):
    await users.change_password(principal.user, body.old_password, body.new_password)
    return envelope("Password changed successfully")


@router.delete("/delete-account")
async def delete_account(
    response: Response,
    principal: Principal = Depends(require_user),
    ledger: SubscriptionLedger = Depends(get_ledger),
    settings: Settings = Depends(get_settings),
):
    removed = await ledger.purge_subscriber(principal.id)
    clear_auth_cookie(response, settings)
    return envelope("Account deleted successfully", {"subscriptions_removed": removed})
