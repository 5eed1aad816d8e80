# storefront/api/routers/profiles.py
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFound
from storefront.domain.schemas import AddressIn, AddressOut, ProfileIn, ProfileOut
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/", response_model=ProfileOut)
def create_profile(payload: ProfileIn, db: Session = Depends(get_db)):
    service = ProfileService(db)
    try:
        return service.ensure_profile(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{user_id}", response_model=ProfileOut)
def get_profile(user_id: uuid.UUID, db: Session = Depends(get_db)):
    service = ProfileService(db)
    try:
        return service.get_profile(user_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{user_id}/addresses", response_model=AddressOut, status_code=201)
def add_address(user_id: uuid.UUID, payload: AddressIn, db: Session = Depends(get_db)):
    return ProfileService(db).add_address(user_id, payload)


@router.get("/{user_id}/addresses", response_model=List[AddressOut])
def list_addresses(user_id: uuid.UUID, db: Session = Depends(get_db)):
    return ProfileService(db).list_addresses(user_id)
