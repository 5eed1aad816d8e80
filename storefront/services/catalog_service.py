# storefront/services/catalog_service.py
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.banner import BannerModel
from storefront.data.models.product import ProductModel
from storefront.data.seed import DEFAULT_PRODUCTS, DEFAULT_BANNERS, seed_products, seed_banners
from storefront.domain.errors import NotFound
from storefront.domain.schemas import ProductOut, BannerOut
from storefront.repos.product_repo import ProductRepo, BannerRepo
from storefront.utils.validators import parse_uuid
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_out(p: ProductModel) -> ProductOut:
    return ProductOut(
        id=str(p.id),
        title=p.title,
        description=p.description,
        price=Decimal(str(p.price)),
        currency=p.currency,
        images=list(p.images or []),
        in_stock=p.in_stock,
        stock_qty=p.stock_qty,
    )


def banner_to_out(b: BannerModel) -> BannerOut:
    return BannerOut(
        id=str(b.id),
        title=b.title,
        image_url=b.image_url,
        link_url=b.link_url,
        display_order=b.display_order,
    )


# shown when the database cannot be read at all
FALLBACK_PRODUCTS = [
    ProductOut(id=str(i), **p) for i, p in enumerate(DEFAULT_PRODUCTS, start=1)
]
FALLBACK_BANNERS = [
    BannerOut(id=str(i), title=b["title"], image_url=b["image_url"], link_url=b["link_url"], display_order=b["display_order"])
    for i, b in enumerate(DEFAULT_BANNERS, start=1)
]


class CatalogService:
    """
    Products and banners for the storefront pages.

    An empty table is seeded with the default set; a failing read returns the
    default set without touching the database. The page never gets an error.
    """

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepo(db)
        self.banners = BannerRepo(db)

    def list_products(self) -> list[ProductOut]:
        try:
            rows = self.products.list_in_stock()
            if not rows:
                logger.info("Catalog is empty, creating default products")
                rows = seed_products(self.db)
            return [product_to_out(p) for p in rows]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error loading products, using defaults: {e}")
            return list(FALLBACK_PRODUCTS)

    def get_product(self, product_id) -> ProductOut:
        product = self.products.get_product(parse_uuid(product_id, "Product"))
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        return product_to_out(product)

    def list_banners(self) -> list[BannerOut]:
        try:
            rows = self.banners.list_active()
            if not rows:
                logger.info("No banners, creating default banner")
                rows = seed_banners(self.db)
            return [banner_to_out(b) for b in rows]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error loading banners, using defaults: {e}")
            return list(FALLBACK_BANNERS)
