"""Shop Discovery Schemas — nearby results, shop details, subscriptions.

Invariants:
    - distance is meters from the query point
    - Field names match the web client (snake_case)
"""

from pydantic import BaseModel, ConfigDict


class NearbyShopOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    latitude: float
    longitude: float
    distance: float


class ShopDetails(BaseModel):
    id: int
    name: str
    subscriber_count: int
    is_subscribed: bool


class SubscriptionResult(BaseModel):
    message: str
    subscriber_count: int


class SubscribedShop(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    owner_name: str
    type: str
    address: str
    latitude: float
    longitude: float
    subscriber_count: int
    is_open: bool
