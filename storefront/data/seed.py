# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import ProductModel, BannerModel

DEFAULT_PRODUCTS = [
    {
        "title": "Premium Smartphone",
        "description": "Latest flagship smartphone with advanced features and excellent camera quality.",
        "price": Decimal("29999"),
        "currency": "INR",
        "images": ["/assets/product-phone.jpg"],
        "in_stock": True,
        "stock_qty": 10,
    },
    {
        "title": "Gaming Laptop",
        "description": "High-performance laptop perfect for gaming and productivity tasks.",
        "price": Decimal("79999"),
        "currency": "INR",
        "images": ["/assets/product-laptop.jpg"],
        "in_stock": True,
        "stock_qty": 5,
    },
]

DEFAULT_BANNERS = [
    {
        "title": "Durga Puja Special - 60% Off",
        "image_url": "/assets/banner-durga-puja.jpg",
        "link_url": "#",
        "display_order": 1,
        "active": True,
    },
]


def seed_products(db) -> list[ProductModel]:
    rows = [ProductModel(**p) for p in DEFAULT_PRODUCTS]
    db.add_all(rows)
    db.commit()
    return rows


def seed_banners(db) -> list[BannerModel]:
    rows = [BannerModel(**b) for b in DEFAULT_BANNERS]
    db.add_all(rows)
    db.commit()
    return rows


def seed():
    db = SessionLocal()
    try:
        # only seed an empty catalog
        if not db.query(ProductModel).first():
            seed_products(db)
        if not db.query(BannerModel).first():
            seed_banners(db)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
