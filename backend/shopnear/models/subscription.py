"""Shop Subscription ORM — one edge of the subscription ledger.

Invariants:
    - At most one row per (shop_id, user_id); the ledger checks before
      inserting and the unique constraint is the storage backstop
    - Rows are created and deleted only by services/subscription_ledger.py
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shopnear.db.base import Base


class ShopSubscription(Base):
    __tablename__ = "shop_subscriptions"
    __table_args__ = (
        UniqueConstraint("shop_id", "user_id", name="uq_shop_subscriptions_shop_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shop_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
