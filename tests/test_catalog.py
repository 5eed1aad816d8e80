import uuid

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.models import BannerModel, ProductModel
from storefront.domain.errors import NotFound
from storefront.repos.product_repo import BannerRepo, ProductRepo
from storefront.services.catalog_service import CatalogService


def test_empty_catalog_is_seeded(db):
    products = CatalogService(db).list_products()

    assert {p.title for p in products} == {"Premium Smartphone", "Gaming Laptop"}
    assert db.query(ProductModel).count() == 2
    # seeded rows are real and can be added to a cart
    assert CatalogService(db).get_product(products[0].id).title == products[0].title


def test_only_in_stock_products_newest_first(db, make_product):
    make_product("Old")
    make_product("Sold out", in_stock=False)
    make_product("New")

    titles = [p.title for p in CatalogService(db).list_products()]
    assert titles == ["New", "Old"]


def test_read_failure_falls_back_to_defaults(db, monkeypatch):
    def broken(self):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(ProductRepo, "list_in_stock", broken)
    monkeypatch.setattr(BannerRepo, "list_active", broken)

    products = CatalogService(db).list_products()
    banners = CatalogService(db).list_banners()

    assert [p.id for p in products] == ["1", "2"]
    assert banners[0].title == "Durga Puja Special - 60% Off"
    assert db.query(ProductModel).count() == 0


def test_banners_by_display_order(db):
    db.add_all(
        [
            BannerModel(title="Second", image_url="/b.jpg", display_order=2),
            BannerModel(title="Hidden", image_url="/c.jpg", display_order=0, active=False),
            BannerModel(title="First", image_url="/a.jpg", display_order=1),
        ]
    )
    db.commit()

    assert [b.title for b in CatalogService(db).list_banners()] == ["First", "Second"]


def test_unknown_product(db):
    with pytest.raises(NotFound):
        CatalogService(db).get_product(uuid.uuid4())
    with pytest.raises(NotFound):
        CatalogService(db).get_product("42")
