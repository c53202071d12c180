"""Subscription Ledger — transactional subscribe/unsubscribe with a derived subscriber count.

Invariants:
    - Each write runs in its own session and exactly one transaction:
      lock shop row -> check pair -> insert/delete -> COUNT(*) -> write counter -> commit
    - shops.subscriber_count is always recomputed from shop_subscriptions,
      never incremented or decremented
    - Writers on the same shop are serialized by the shop-row lock, so every
      existence check and recount sees all previously committed writes
    - Any failure rolls back both the subscription rows and the counter
    - At most one subscription row per (shop_id, user_id); a unique-constraint
      violation surfaces as AlreadySubscribedError
    - No automatic retries; callers retry

Design Decisions:
    - The shop-row lock is a no-op UPDATE (subscriber_count = subscriber_count):
      a row lock on PostgreSQL, the database write lock on SQLite
    - Read helpers take no lock and may observe read-committed staleness
"""

import logging
from typing import Awaitable, Callable

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.core.errors import (
    AlreadySubscribedError, NotSubscribedError, ResourceNotFoundError,
)
from shopnear.infrastructure.database import DatabaseSessionManager
from shopnear.models.shop import Shop
from shopnear.models.subscription import ShopSubscription
from shopnear.models.user import User

logger = logging.getLogger(__name__)

_NO_SYNC = {"synchronize_session": False}


async def _lock_shop(session: AsyncSession, shop_id: int) -> None:
    result = await session.execute(
        update(Shop)
        .where(Shop.id == shop_id)
        .values(subscriber_count=Shop.subscriber_count)
        .execution_options(**_NO_SYNC),
    )
    if result.rowcount == 0:
        raise ResourceNotFoundError("Shop", shop_id)


async def _pair_count(session: AsyncSession, shop_id: int, user_id: int) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(ShopSubscription)
        .where(ShopSubscription.shop_id == shop_id)
        .where(ShopSubscription.user_id == user_id),
    )
    return result.scalar_one()


async def _recount(session: AsyncSession, shop_id: int) -> int:
    """Recompute the shop's subscriber count from the ledger and store it."""
    result = await session.execute(
        select(func.count())
        .select_from(ShopSubscription)
        .where(ShopSubscription.shop_id == shop_id),
    )
    count = result.scalar_one()
    await session.execute(
        update(Shop)
        .where(Shop.id == shop_id)
        .values(subscriber_count=count)
        .execution_options(**_NO_SYNC),
    )
    return count


def _is_duplicate_pair(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "uq_shop_subscriptions_shop_user" in message


class SubscriptionLedger:
    """Owns shop_subscriptions rows and shops.subscriber_count."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def subscribe(self, shop_id: int, user_id: int) -> int:
        """Add the (shop, user) edge. Returns the new subscriber count."""
        async def insert_pair(session: AsyncSession, existing: int) -> None:
            if existing > 0:
                raise AlreadySubscribedError(shop_id, user_id)
            session.add(ShopSubscription(shop_id=shop_id, user_id=user_id))
            await session.flush()

        count = await self._mutate(shop_id, user_id, insert_pair)
        logger.info(
            "Subscribed",
            extra={"shop_id": shop_id, "user_id": user_id, "subscriber_count": count},
        )
        return count

    async def unsubscribe(self, shop_id: int, user_id: int) -> int:
        """Remove the (shop, user) edge. Returns the new subscriber count."""
        async def delete_pair(session: AsyncSession, existing: int) -> None:
            if existing == 0:
                raise NotSubscribedError(shop_id, user_id)
            await session.execute(
                delete(ShopSubscription)
                .where(ShopSubscription.shop_id == shop_id)
                .where(ShopSubscription.user_id == user_id)
                .execution_options(**_NO_SYNC),
            )

        count = await self._mutate(shop_id, user_id, delete_pair)
        logger.info(
            "Unsubscribed",
            extra={"shop_id": shop_id, "user_id": user_id, "subscriber_count": count},
        )
        return count

    async def _mutate(
        self,
        shop_id: int,
        user_id: int,
        apply: Callable[[AsyncSession, int], Awaitable[None]],
    ) -> int:
        async with self._db.session() as session:
            try:
                async with session.begin():
                    await _lock_shop(session, shop_id)
                    existing = await _pair_count(session, shop_id, user_id)
                    await apply(session, existing)
                    count = await _recount(session, shop_id)
            except IntegrityError as e:
                if not _is_duplicate_pair(e):
                    raise
                raise AlreadySubscribedError(shop_id, user_id) from e
        return count

    async def purge_subscriber(self, user_id: int) -> int:
        """Delete a user account with all its subscriptions, fixing every affected counter.

        Returns the number of subscriptions removed.
        """
        async with self._db.session() as session:
            async with session.begin():
                result = await session.execute(
                    select(ShopSubscription.shop_id)
                    .where(ShopSubscription.user_id == user_id)
                    .order_by(ShopSubscription.shop_id),
                )
                shop_ids = list(dict.fromkeys(result.scalars().all()))
                for shop_id in shop_ids:
                    await _lock_shop(session, shop_id)

                deleted = await session.execute(
                    delete(ShopSubscription)
                    .where(ShopSubscription.user_id == user_id)
                    .returning(ShopSubscription.shop_id)
                    .execution_options(**_NO_SYNC),
                )
                deleted_shop_ids = deleted.scalars().all()
                # Subscriptions added between the listing and the delete.
                for shop_id in sorted(set(deleted_shop_ids) - set(shop_ids)):
                    await _lock_shop(session, shop_id)

                for shop_id in sorted(set(shop_ids) | set(deleted_shop_ids)):
                    await _recount(session, shop_id)

                await session.execute(
                    delete(User).where(User.id == user_id).execution_options(**_NO_SYNC),
                )
        logger.info(
            f"Purged subscriber with {len(deleted_shop_ids)} subscriptions",
            extra={"user_id": user_id},
        )
        return len(deleted_shop_ids)

    # ─── Read-only queries (no lock) ────────────────────────────

    async def is_subscribed(self, shop_id: int, user_id: int) -> bool:
        async with self._db.session() as session:
            return await _pair_count(session, shop_id, user_id) > 0

    async def get_shop_details(self, shop_id: int, user_id: int) -> tuple[Shop, bool]:
        """Shop row plus whether user_id is subscribed to it."""
        async with self._db.session() as session:
            shop = await session.get(Shop, shop_id)
            if shop is None:
                raise ResourceNotFoundError("Shop", shop_id)
            return shop, await _pair_count(session, shop_id, user_id) > 0

    async def list_subscriptions(self, user_id: int) -> list[Shop]:
        """Shops the user is subscribed to, most recent subscription first."""
        async with self._db.session() as session:
            result = await session.execute(
                select(Shop)
                .join(ShopSubscription, ShopSubscription.shop_id == Shop.id)
                .where(ShopSubscription.user_id == user_id)
                .order_by(ShopSubscription.created_at.desc(), Shop.id),
            )
            return list(result.scalars().all())
