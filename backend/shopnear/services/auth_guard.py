"""Auth Guard — resolves a request token to a verified principal of a required kind.

Invariants:
    - One code path for every gate, parameterized by PrincipalKind
    - USER and ADMIN resolve against the users table, SHOP_OWNER against shops
    - Every rejection is UnauthorizedError; the specific reason is only logged
    - A principal is returned only when the token verifies, the account row
      exists, the token role equals the required kind, and the row still
      holds that role (an ADMIN token needs users.is_admin)
    - No writes, no token refresh
"""

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.core.domain_types import PrincipalKind
from shopnear.core.errors import (
    ExpiredTokenError, InvalidTokenError, UnauthorizedError,
)
from shopnear.core.token_codec import TokenCodec
from shopnear.models.shop import Shop
from shopnear.models.user import User

logger = logging.getLogger(__name__)

# Primary keys are 32-bit integers; larger subject ids cannot match a row.
MAX_ACCOUNT_ID = 2**31 - 1

ACCOUNT_MODELS: dict[PrincipalKind, type[User] | type[Shop]] = {
    PrincipalKind.USER: User,
    PrincipalKind.SHOP_OWNER: Shop,
    PrincipalKind.ADMIN: User,
}

# Row-level condition the loaded account must also satisfy for the kind.
ACCOUNT_PREDICATES: dict[PrincipalKind, Callable[[User | Shop], bool]] = {
    PrincipalKind.ADMIN: lambda account: bool(account.is_admin),
}


@dataclass(frozen=True)
class Principal:
    """The verified identity attached to a request."""
    kind: PrincipalKind
    account: User | Shop

    @property
    def id(self) -> int:
        return self.account.id

    @property
    def user(self) -> User:
        if not isinstance(self.account, User):
            raise UnauthorizedError()
        return self.account

    @property
    def shop(self) -> Shop:
        if not isinstance(self.account, Shop):
            raise UnauthorizedError()
        return self.account


def _reject(kind: PrincipalKind, reason: str, **extra) -> UnauthorizedError:
    logger.info(
        f"Rejected {kind.value} request: {reason}",
        extra={"principal_kind": kind.value, "reason": reason, **extra},
    )
    return UnauthorizedError()


async def authenticate(
    token: str | None,
    kind: PrincipalKind,
    codec: TokenCodec,
    db: AsyncSession,
) -> Principal:
    """Verify token and load the matching account for the required kind."""
    if not token:
        raise _reject(kind, "missing_token")

    try:
        claims = codec.verify(token)
    except ExpiredTokenError:
        raise _reject(kind, "expired_token")
    except InvalidTokenError as e:
        raise _reject(kind, f"invalid_token ({e.reason})")

    account = None
    if 0 < claims.subject_id <= MAX_ACCOUNT_ID:
        account = await db.get(ACCOUNT_MODELS[kind], claims.subject_id)
    if account is None:
        raise _reject(kind, "account_not_found", user_id=claims.subject_id)

    if claims.role != kind.value:
        raise _reject(kind, f"role_mismatch ({claims.role})", user_id=claims.subject_id)

    predicate = ACCOUNT_PREDICATES.get(kind)
    if predicate is not None and not predicate(account):
        raise _reject(kind, "role_mismatch (account lacks role)", user_id=claims.subject_id)

    return Principal(kind=kind, account=account)
