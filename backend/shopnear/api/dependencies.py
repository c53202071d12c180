"""API Dependencies — auth gates, token codec, ledger and cookie helpers for routes.

Invariants:
    - The token is read only from the cookie named "Authorization"
    - require_user / require_shop_owner / require_admin are one generic gate
      (require_principal) parameterized by PrincipalKind
    - The verified principal is returned to the route and also placed on
      request.state.principal
"""

from typing import Callable, Coroutine, Any

from fastapi import Cookie, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.config import Settings, build_token_codec, get_settings
from shopnear.core.domain_types import PrincipalKind
from shopnear.core.token_codec import TokenCodec
from shopnear.infrastructure.database import get_db, get_db_manager
from shopnear.services.auth_guard import Principal, authenticate
from shopnear.services.directory import ShopDirectory, UserDirectory
from shopnear.services.subscription_ledger import SubscriptionLedger

AUTH_COOKIE = "Authorization"

_codec: TokenCodec | None = None


def get_token_codec() -> TokenCodec:
    """Process-wide codec, built once from settings."""
    global _codec
    if _codec is None:
        _codec = build_token_codec(get_settings())
    return _codec


def get_ledger() -> SubscriptionLedger:
    return SubscriptionLedger(get_db_manager())


def get_user_directory(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserDirectory:
    return UserDirectory(db, settings.bcrypt_rounds)


def get_shop_directory(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ShopDirectory:
    return ShopDirectory(db, settings.bcrypt_rounds)


def require_principal(
    kind: PrincipalKind,
) -> Callable[..., Coroutine[Any, Any, Principal]]:
    """Build the FastAPI dependency gating a route on `kind`."""

    async def _gate(
        request: Request,
        token: str | None = Cookie(None, alias=AUTH_COOKIE),
        db: AsyncSession = Depends(get_db),
        codec: TokenCodec = Depends(get_token_codec),
    ) -> Principal:
        principal = await authenticate(token, kind, codec, db)
        request.state.principal = principal
        return principal

    _gate.__name__ = f"require_{kind.value}"
    return _gate


require_user = require_principal(PrincipalKind.USER)
require_shop_owner = require_principal(PrincipalKind.SHOP_OWNER)
require_admin = require_principal(PrincipalKind.ADMIN)


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        max_age=settings.cookie_max_age_seconds,
        path="/",
        domain=settings.cookie_domain,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=AUTH_COOKIE,
        path="/",
        domain=settings.cookie_domain,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )
