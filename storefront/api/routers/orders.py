# storefront/api/routers/orders.py
import uuid
from typing import List

import redis
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.routers.carts import get_service as get_cart_service
from storefront.data.cache import get_redis
from storefront.data.database import get_db
from storefront.domain.errors import Conflict, NotFound, TransientIO
from storefront.domain.schemas import OrderCreate, OrderOut, PaymentIn
from storefront.services.order_service import OrderService
from storefront.services.order_status import OrderStatusView
from storefront.services.realtime import ChangeFeed
from storefront.utils.validators import parse_uuid

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, r: redis.Redis):
    return OrderService(db, ChangeFeed(r))


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    """
    Places an order from the user's current cart.
    The buyer is notified asynchronously.
    """
    svc = get_service(db, r)
    try:
        user_id = parse_uuid(payload.user_id, "user")
        cart = get_cart_service(db, r, payload.device_id or "checkout", user_id)
        return svc.place_order(cart, payload.address_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: uuid.UUID = Query(...),
    db: Session = Depends(get_db),
):
    """Order history, newest first."""
    return OrderStatusView(db, user_id).load()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: uuid.UUID = Query(...),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    svc = get_service(db, r)
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{order_id}/payment", response_model=OrderOut)
def submit_payment(
    order_id: str,
    payload: PaymentIn,
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
):
    """Buyer enters the UPI transaction reference of an off-band payment."""
    svc = get_service(db, r)
    try:
        return svc.submit_payment_reference(order_id, payload.user_id, payload.utr)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Conflict as e:
        raise HTTPException(status_code=409, detail=str(e))
