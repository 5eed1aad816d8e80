# storefront/api/routers/admin.py
import uuid
from typing import List

import redis
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.cache import get_redis
from storefront.data.database import get_db
from storefront.domain.errors import NotFound
from storefront.domain.schemas import (
    AdminOverview,
    AdminSettings,
    BannerIn,
    BannerOut,
    OrderOut,
    ProductIn,
    ProductOut,
    ProductPatch,
    StatusIn,
)
from storefront.services.admin_service import AdminService
from storefront.services.realtime import ChangeFeed

router = APIRouter(prefix="/admin", tags=["admin"])


def get_service(
    user_id: uuid.UUID = Query(...),
    db: Session = Depends(get_db),
    r: redis.Redis = Depends(get_redis),
) -> AdminService:
    return AdminService(db, user_id, ChangeFeed(r))


def _run(call, *args):
    try:
        return call(*args)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/overview", response_model=AdminOverview)
def overview(svc: AdminService = Depends(get_service)):
    return _run(svc.overview)


@router.get("/orders", response_model=List[OrderOut])
def list_orders(svc: AdminService = Depends(get_service)):
    return _run(svc.list_orders)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: str, payload: StatusIn, svc: AdminService = Depends(get_service)):
    return _run(svc.update_order_status, order_id, payload.status)


@router.patch("/orders/{order_id}/payment", response_model=OrderOut)
def update_payment_status(order_id: str, payload: StatusIn, svc: AdminService = Depends(get_service)):
    return _run(svc.update_payment_status, order_id, payload.status)


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, svc: AdminService = Depends(get_service)):
    return _run(svc.create_product, payload)


@router.patch("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductPatch, svc: AdminService = Depends(get_service)):
    return _run(svc.update_product, product_id, payload)


@router.post("/banners", response_model=BannerOut, status_code=201)
def create_banner(payload: BannerIn, svc: AdminService = Depends(get_service)):
    return _run(svc.create_banner, payload)


@router.get("/settings", response_model=AdminSettings)
def settings(svc: AdminService = Depends(get_service)):
    return _run(svc.settings)
