"""Shop/User Directory — account lookup, registration and credential checks.

Invariants:
    - Duplicate email on registration is ConflictError (pre-check, and
      IntegrityError translation for the concurrent case)
    - Unknown email and wrong password both raise InvalidCredentialsError
      after one bcrypt comparison each, so neither response nor timing
      reveals whether the account exists
    - bcrypt runs in a worker thread, never on the event loop
    - Directories never write subscriber_count
"""

import asyncio
import logging
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.core.errors import ConflictError, InvalidCredentialsError
from shopnear.core.passwords import check_password, dummy_hash, hash_password
from shopnear.models.shop import Shop
from shopnear.models.user import User

logger = logging.getLogger(__name__)

AccountT = TypeVar("AccountT", Shop, User)


class _AccountDirectory(Generic[AccountT]):
    """Lookup and credential logic shared by shops and users."""

    model: type[AccountT]
    label: str

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 12):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def find_by_email(self, email: str) -> AccountT | None:
        result = await self.db.execute(
            select(self.model).where(self.model.email == email),
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, account_id: int) -> AccountT | None:
        return await self.db.get(self.model, account_id)

    async def authenticate(self, email: str, password: str) -> AccountT:
        """Return the account for valid credentials, else InvalidCredentialsError."""
        account = await self.find_by_email(email)
        stored = account.password if account else dummy_hash(self.bcrypt_rounds)
        matches = await asyncio.to_thread(check_password, password, stored)
        if account is None or not matches:
            logger.info(f"{self.label} login rejected")
            raise InvalidCredentialsError()
        return account

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)

    async def _insert(self, account: AccountT) -> AccountT:
        if await self.find_by_email(account.email):
            raise ConflictError(f"{self.label} already exists")
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"{self.label} registration lost email race: {e.orig}")
            raise ConflictError(f"{self.label} already exists") from e
        await self.db.refresh(account)
        return account


class ShopDirectory(_AccountDirectory[Shop]):
    model = Shop
    label = "shop"

    async def create_shop(
        self, *, name: str, owner_name: str, email: str, mobile: str,
        type: str, password: str, address: str, latitude: float,
        longitude: float, supports_delivery: bool = False,
    ) -> Shop:
        shop = Shop(
            name=name, owner_name=owner_name, email=email, mobile=mobile,
            type=type, password=await self._hash(password), address=address,
            latitude=latitude, longitude=longitude,
            supports_delivery=supports_delivery,
            is_open=False, subscriber_count=0,
        )
        shop = await self._insert(shop)
        logger.info("Shop registered", extra={"shop_id": shop.id})
        return shop

    async def set_open(self, shop: Shop, is_open: bool) -> Shop:
        """Open or close the shop."""
        shop.is_open = is_open
        await self.db.commit()
        return shop


class UserDirectory(_AccountDirectory[User]):
    model = User
    label = "user"

    async def create_user(
        self, *, name: str, email: str, password: str,
        latitude: float | None = None, longitude: float | None = None,
    ) -> User:
        user = User(
            name=name, email=email, password=await self._hash(password),
            latitude=latitude, longitude=longitude, is_admin=False,
        )
        user = await self._insert(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def change_password(self, user: User, old_password: str, new_password: str) -> None:
        if not await asyncio.to_thread(check_password, old_password, user.password):
            raise InvalidCredentialsError()
        user.password = await self._hash(new_password)
        await self.db.commit()
        logger.info("Password changed", extra={"user_id": user.id})
