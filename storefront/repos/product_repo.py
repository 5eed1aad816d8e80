# storefront/repos/product_repo.py
import uuid

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.banner import BannerModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: uuid.UUID) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_in_stock(self) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.in_stock.is_(True))
                .order_by(ProductModel.created_at.desc())
            ).scalars()
        )

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: ProductModel, values: dict) -> ProductModel:
        for key, value in values.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product


class BannerRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> list[BannerModel]:
        return list(
            self.db.execute(
                select(BannerModel)
                .where(BannerModel.active.is_(True))
                .order_by(BannerModel.display_order)
            ).scalars()
        )

    def count_active(self) -> int:
        return self.db.execute(
            select(func.count(BannerModel.id)).where(BannerModel.active.is_(True))
        ).scalar_one()

    def create_banner(self, banner: BannerModel) -> BannerModel:
        self.db.add(banner)
        self.db.commit()
        self.db.refresh(banner)
        return banner
