"""Catalog & Shop Products — verifies suggestions and shop-scoped listing CRUD."""

import pytest

from shopnear.core.errors import ResourceNotFoundError
from shopnear.services.catalog import CatalogService
from shopnear.services.shop_products import ShopProductService


@pytest.fixture
async def catalog(test_db):
    service = CatalogService(test_db)
    items = [
        await service.create(name="Basmati Rice", brand="India Gate", category="Grains",
                             description="Long grain rice"),
        await service.create(name="Atta", brand="Aashirvaad", category="Flour",
                             description="Whole wheat flour"),
        await service.create(name="Brown Rice", brand="Daawat", category="Grains",
                             description="Unpolished 50%_off pack"),
    ]
    return items


async def test_suggest_matches_any_field_case_insensitively(test_db, catalog):
    names = [p.name for p in await CatalogService(test_db).suggest("RICE", 10)]
    assert names == ["Basmati Rice", "Brown Rice"]

    names = [p.name for p in await CatalogService(test_db).suggest("aashir", 10)]
    assert names == ["Atta"]

    names = [p.name for p in await CatalogService(test_db).suggest("grains", 10)]
    assert names == ["Basmati Rice", "Brown Rice"]


async def test_suggest_respects_limit(test_db, catalog):
    assert len(await CatalogService(test_db).suggest("i", 1)) == 1


async def test_suggest_treats_wildcards_literally(test_db, catalog):
    assert [p.name for p in await CatalogService(test_db).suggest("50%_", 10)] == ["Brown Rice"]
    assert await CatalogService(test_db).suggest("5_%", 10) == []


async def test_add_and_list_products(test_db, catalog, make_shop):
    shop = await make_shop()
    service = ShopProductService(test_db)

    product = await service.add(shop.id, catalog_id=catalog[0].id, price=120.5, stock=10)

    assert product.catalog_product.name == "Basmati Rice"
    assert product.discount == 0
    assert [p.id for p in await service.list_for_shop(shop.id)] == [product.id]


async def test_add_with_unknown_catalog_is_not_found(test_db, make_shop):
    shop = await make_shop()
    with pytest.raises(ResourceNotFoundError):
        await ShopProductService(test_db).add(shop.id, catalog_id=404, price=1.0, stock=1)


async def test_update_changes_only_given_fields(test_db, catalog, make_shop):
    shop = await make_shop()
    service = ShopProductService(test_db)
    product = await service.add(shop.id, catalog_id=catalog[1].id, price=55.0, stock=3)

    updated = await service.update(shop.id, product.id, stock=0, price=None)

    assert updated.stock == 0
    assert updated.price == 55.0


async def test_other_shops_products_are_not_found(test_db, catalog, make_shop):
    owner, other = await make_shop(), await make_shop()
    service = ShopProductService(test_db)
    product = await service.add(owner.id, catalog_id=catalog[0].id, price=10.0, stock=1)

    with pytest.raises(ResourceNotFoundError):
        await service.get(other.id, product.id)
    with pytest.raises(ResourceNotFoundError):
        await service.delete(other.id, product.id)
    assert await service.list_for_shop(other.id) == []


async def test_delete_product(test_db, catalog, make_shop):
    shop = await make_shop()
    service = ShopProductService(test_db)
    product = await service.add(shop.id, catalog_id=catalog[0].id, price=10.0, stock=1)

    await service.delete(shop.id, product.id)

    with pytest.raises(ResourceNotFoundError):
        await service.get(shop.id, product.id)
