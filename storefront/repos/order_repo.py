# storefront/repos/order_repo.py
import random
import time
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


def _candidate_order_id() -> str:
    # epoch millis padded to 10 + two random digits, last 12 kept
    millis = str(int(time.time() * 1000)).zfill(10)
    return (millis + str(random.randint(0, 99)).zfill(2))[-12:]


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def order_id_exists(self, code: str) -> bool:
        return self.db.execute(
            select(OrderModel.id).where(OrderModel.order_id == code)
        ).first() is not None

    def generate_order_id(self) -> str:
        while True:
            code = _candidate_order_id()
            if not self.order_id_exists(code):
                return code

    def add_order(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        # no commit: the caller owns the transaction
        order.items.extend(items)
        self.db.add(order)
        self.db.flush()
        return order

    def get_by_code(self, code: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.order_id == code)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: uuid.UUID) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def list_all(self, limit: int | None = None) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars())

    def count_orders(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def revenue(self) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(OrderModel.amount_total), 0)).where(
                OrderModel.status != "cancelled"
            )
        ).scalar_one()
        return Decimal(str(total))

    def update_fields(self, order: OrderModel, **values) -> OrderModel:
        for key, value in values.items():
            setattr(order, key, value)
        self.db.commit()
        self.db.refresh(order)
        return order

    def expire_pending_payments(self, now: datetime) -> list[OrderModel]:
        orders = list(
            self.db.execute(
                select(OrderModel).where(
                    OrderModel.payment_status == "pending",
                    OrderModel.payment_qr_expires_at < now,
                )
            ).scalars()
        )
        for order in orders:
            order.payment_status = "expired"
        self.db.commit()
        return orders

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
