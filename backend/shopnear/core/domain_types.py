"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ShopId, UserId, CatalogId, ProductId wrap int primary keys
    - PrincipalKind is closed: user, shop_owner, admin (token role values)
    - Distances are meters, coordinates are decimal degrees
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ShopId = NewType("ShopId", int)
UserId = NewType("UserId", int)
CatalogId = NewType("CatalogId", int)
ProductId = NewType("ProductId", int)


# ─── Value Types ─────────────────────────────────────────────────

Meters = NewType("Meters", float)
Degrees = NewType("Degrees", float)


# ─── Enums ───────────────────────────────────────────────────────

class PrincipalKind(str, Enum):
    """Principal kinds a token can carry. Value is the `role` claim."""
    USER = "user"
    SHOP_OWNER = "shop_owner"
    ADMIN = "admin"
