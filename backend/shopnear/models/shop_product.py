"""Shop Product ORM — a shop's listing of a catalog product (price, stock).

Invariants:
    - shop_id and catalog_id reference existing rows
    - price > 0, stock >= 0, discount >= 0 (validated at the API boundary)
    - catalog_product is eager-loaded (selectin) so listings serialize
      without lazy loads after the session closes
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopnear.db.base import Base
from shopnear.models.catalog_product import CatalogProduct


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ShopProduct(Base):
    __tablename__ = "shop_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shop_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    catalog_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("catalog_products.id"), nullable=False, index=True,
    )
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    discount: Mapped[float] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )

    catalog_product: Mapped[CatalogProduct] = relationship(lazy="selectin")
