# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFound
from storefront.domain.schemas import BannerOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_products()


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(product_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/banners", response_model=List[BannerOut])
def list_banners(db: Session = Depends(get_db)):
    return CatalogService(db).list_banners()
