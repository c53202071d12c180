"""Proximity Search — shops within a radius of a point, nearest first.

Invariants:
    - Read-only; no locks taken
    - SQL prefilter is the spherical bounding box (never drops a candidate);
      the exact great-circle distance decides membership
    - Results ordered by (distance, shop id) and capped at limit
    - Inputs arrive validated (numeric, in range) from the route layer
"""

import logging
from dataclasses import dataclass

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopnear.core.geodesy import GeoPoint, bounding_box, rank_by_distance
from shopnear.models.shop import Shop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NearbyShop:
    id: int
    name: str
    address: str
    latitude: float
    longitude: float
    distance: float


async def find_nearby(
    db: AsyncSession, lat: float, lon: float, radius_m: float, limit: int,
) -> list[NearbyShop]:
    """Shops within radius_m meters of (lat, lon), nearest first, at most limit."""
    box = bounding_box(lat, lon, radius_m)
    query = select(
        Shop.id, Shop.name, Shop.address, Shop.latitude, Shop.longitude,
    ).where(Shop.latitude.between(box.min_lat, box.max_lat))
    if not box.covers_all_longitudes:
        query = query.where(or_(*(
            and_(Shop.longitude >= low, Shop.longitude <= high)
            for low, high in box.lon_ranges
        )))

    rows = {row.id: row for row in (await db.execute(query)).all()}
    ranked = rank_by_distance(
        lat, lon, radius_m, limit,
        (GeoPoint(r.id, r.latitude, r.longitude) for r in rows.values()),
    )
    logger.debug(
        f"Nearby search ({lat}, {lon}) r={radius_m}m: "
        f"{len(rows)} candidates, {len(ranked)} results",
    )
    return [
        NearbyShop(
            id=r.id,
            name=rows[r.id].name,
            address=rows[r.id].address,
            latitude=rows[r.id].latitude,
            longitude=rows[r.id].longitude,
            distance=r.distance,
        )
        for r in ranked
    ]
