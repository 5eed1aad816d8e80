# storefront/repos/cart_repo.py
import uuid

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, user_id: uuid.UUID, product_id: uuid.UUID) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_items_with_products(self, user_id: uuid.UUID) -> list[tuple[CartItemModel, ProductModel]]:
        rows = self.db.execute(
            select(CartItemModel, ProductModel)
            .join(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at)
            # other sessions may have changed rows this session already holds
            .execution_options(populate_existing=True)
        ).all()
        return [(item, product) for item, product in rows]

    def insert_item(self, item: CartItemModel) -> CartItemModel:
        # IntegrityError on (user_id, product_id) is left to the caller
        self.db.add(item)
        self.db.flush()
        return item

    def set_qty(self, user_id: uuid.UUID, product_id: uuid.UUID, qty: int) -> int:
        res = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
            .values(qty=qty)
        )
        return res.rowcount

    def add_qty(self, user_id: uuid.UUID, product_id: uuid.UUID, qty: int) -> int:
        # increment in SQL so concurrent sessions do not lose each other's adds
        res = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
            .values(qty=CartItemModel.qty + qty)
        )
        return res.rowcount

    def delete_item(self, user_id: uuid.UUID, product_id: uuid.UUID) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        )
        return res.rowcount

    def delete_items(self, user_id: uuid.UUID, product_ids: list[uuid.UUID]) -> int:
        if not product_ids:
            return 0
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id.in_(product_ids),
            )
        )
        return res.rowcount

    def delete_all(self, user_id: uuid.UUID) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
