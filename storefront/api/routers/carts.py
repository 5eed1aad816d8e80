# storefront/api/routers/carts.py
import uuid

import redis
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.cache import get_redis
from storefront.data.database import get_db
from storefront.domain.schemas import CartOut, ItemIn, QuantityIn
from storefront.services.cart_service import CartService
from storefront.services.local_cart_store import LocalCartStore
from storefront.services.remote_cart_store import RemoteCartStore
from storefront.services.realtime import ChangeFeed

router = APIRouter(prefix="/carts", tags=["carts"])

# cart commands never fail the request: problems come back as notices


def get_service(db: Session, r: redis.Redis, device_id: str, user_id: uuid.UUID | None = None) -> CartService:
    svc = CartService(
        db=db,
        local_store=LocalCartStore(r, device_id),
        remote_store=RemoteCartStore(db, ChangeFeed(r)),
    )
    return svc.start(user_id)


@router.get("/", response_model=CartOut)
def get_cart(
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID | None = Query(None),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    return get_service(db, r, device_id, user_id).snapshot()


@router.post("/sync", response_model=CartOut)
def sign_in(
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID = Query(...),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    """Sign-in event: merge the device cart into the user's cart."""
    svc = get_service(db, r, device_id)
    return svc.sign_in(user_id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID | None = Query(None),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    svc = get_service(db, r, device_id, user_id)
    svc.add_to_cart(payload.product_id, payload.qty)
    return svc.snapshot()


@router.put("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: QuantityIn,
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID | None = Query(None),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    svc = get_service(db, r, device_id, user_id)
    svc.update_quantity(product_id, payload.qty)
    return svc.snapshot()


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID | None = Query(None),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    svc = get_service(db, r, device_id, user_id)
    svc.remove_from_cart(product_id)
    return svc.snapshot()


@router.delete("/", response_model=CartOut)
def clear_cart(
    device_id: str = Query(..., min_length=1),
    user_id: uuid.UUID | None = Query(None),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    svc = get_service(db, r, device_id, user_id)
    svc.clear_cart()
    return svc.snapshot()
