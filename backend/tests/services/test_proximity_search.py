"""Proximity Search — verifies the radius filter, ordering and limit against a real database.

Invariants:
    - Only shops within the radius are returned, nearest first
    - Equal distances are ordered by shop id
    - At most `limit` results
    - Shops just across the antimeridian are found
"""

from shopnear.core.geodesy import haversine_m
from shopnear.services.proximity_search import find_nearby

CHENNAI = (13.0827, 80.2707)


async def test_chennai_query_returns_in_radius_shops_nearest_first(test_db, make_shop):
    central = await make_shop(name="Central", latitude=13.0827, longitude=80.2707)
    egmore = await make_shop(name="Egmore", latitude=13.0732, longitude=80.2609)
    t_nagar = await make_shop(name="T Nagar", latitude=13.0418, longitude=80.2341)
    await make_shop(name="Tambaram", latitude=12.9249, longitude=80.1000)

    shops = await find_nearby(test_db, *CHENNAI, 5000, 10)

    assert [s.id for s in shops] == [central.id, egmore.id]
    assert shops[0].distance == 0.0
    assert shops[1].distance == haversine_m(*CHENNAI, 13.0732, 80.2609)
    assert all(s.distance <= 5000 for s in shops)
    assert t_nagar.id not in {s.id for s in shops}


async def test_result_carries_shop_fields(test_db, make_shop):
    shop = await make_shop(name="Fresh Mart", address="12 Mount Road")

    [found] = await find_nearby(test_db, *CHENNAI, 5000, 10)

    assert (found.id, found.name, found.address) == (shop.id, "Fresh Mart", "12 Mount Road")
    assert (found.latitude, found.longitude) == (shop.latitude, shop.longitude)


async def test_equal_distances_ordered_by_id(test_db, make_shop):
    ids = [(await make_shop(latitude=13.09, longitude=80.2707)).id for _ in range(3)]

    shops = await find_nearby(test_db, *CHENNAI, 5000, 10)

    assert [s.id for s in shops] == sorted(ids)


async def test_limit_caps_results(test_db, make_shop):
    for i in range(5):
        await make_shop(latitude=13.0827 + i * 0.001, longitude=80.2707)

    shops = await find_nearby(test_db, *CHENNAI, 5000, 3)

    assert len(shops) == 3
    assert [s.distance for s in shops] == sorted(s.distance for s in shops)


async def test_no_shops_in_radius(test_db, make_shop):
    await make_shop(latitude=28.6139, longitude=77.2090)
    assert await find_nearby(test_db, *CHENNAI, 5000, 10) == []


async def test_finds_shop_across_antimeridian(test_db, make_shop):
    shop = await make_shop(latitude=0.0, longitude=-179.99)

    shops = await find_nearby(test_db, 0.0, 179.99, 5000, 10)

    assert [s.id for s in shops] == [shop.id]
