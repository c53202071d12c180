"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before
      create_all / alembic autogenerate run
"""

from shopnear.models.shop import Shop  # noqa: F401
from shopnear.models.user import User  # noqa: F401
from shopnear.models.subscription import ShopSubscription  # noqa: F401
from shopnear.models.catalog_product import CatalogProduct  # noqa: F401
from shopnear.models.shop_product import ShopProduct  # noqa: F401
