"""Product Schemas — catalog entries and shop listings.

Invariants:
    - price > 0, stock >= 0, discount >= 0
    - Update payloads leave omitted fields unchanged
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CatalogProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    brand: str = Field("", max_length=100)
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    image_url: str = Field("", max_length=255)


class CatalogProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand: str
    category: str
    description: str
    image_url: str


class ShopProductCreate(BaseModel):
    catalog_id: int = Field(ge=1)
    price: float = Field(gt=0)
    stock: int = Field(ge=0)
    discount: float = Field(0.0, ge=0)
    is_available: bool = True


class ShopProductUpdate(BaseModel):
    price: float | None = Field(None, gt=0)
    stock: int | None = Field(None, ge=0)
    discount: float | None = Field(None, ge=0)
    is_available: bool | None = None


class ShopProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shop_id: int
    catalog_id: int
    price: float
    stock: int
    is_available: bool
    discount: float
    created_at: datetime
    updated_at: datetime
    catalog_product: CatalogProductOut
