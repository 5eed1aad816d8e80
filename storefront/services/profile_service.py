# storefront/services/profile_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.profile import ProfileModel
from storefront.domain.errors import NotFound
from storefront.domain.schemas import AddressIn, AddressOut, ProfileIn, ProfileOut
from storefront.repos.profile_repo import ProfileRepo
from storefront.utils.validators import parse_uuid


def profile_to_out(p: ProfileModel) -> ProfileOut:
    return ProfileOut(
        user_id=str(p.user_id),
        email=p.email,
        full_name=p.full_name,
        phone=p.phone,
        is_admin=p.is_admin,
    )


def address_to_out(a: AddressModel) -> AddressOut:
    return AddressOut(
        id=str(a.id),
        full_name=a.full_name,
        phone=a.phone,
        alt_phone=a.alt_phone,
        email=a.email,
        house_flat=a.house_flat,
        road_area_colony=a.road_area_colony,
        landmark=a.landmark,
        city=a.city,
        state=a.state,
        pincode=a.pincode,
        is_default=a.is_default,
    )


class ProfileService:
    def __init__(self, db: Session):
        self.repo = ProfileRepo(db)

    def ensure_profile(self, payload: ProfileIn) -> ProfileOut:
        """Called on sign-up; a second call returns the existing profile."""
        uid = parse_uuid(payload.user_id, "user")
        existing = self.repo.get_profile(uid)
        if existing:
            return profile_to_out(existing)

        profile = ProfileModel(
            user_id=uid,
            email=payload.email,
            full_name=payload.full_name or "User",
        )
        return profile_to_out(self.repo.create_profile(profile))

    def get_profile(self, user_id) -> ProfileOut:
        profile = self.repo.get_profile(parse_uuid(user_id, "user"))
        if not profile:
            raise NotFound("Profile not found")
        return profile_to_out(profile)

    def is_admin(self, user_id) -> bool:
        try:
            profile = self.repo.get_profile(parse_uuid(user_id, "user"))
        except NotFound:
            return False
        return bool(profile and profile.is_admin)

    def add_address(self, user_id, payload: AddressIn) -> AddressOut:
        address = AddressModel(user_id=parse_uuid(user_id, "user"), **payload.model_dump())
        return address_to_out(self.repo.create_address(address))

    def list_addresses(self, user_id) -> list[AddressOut]:
        return [address_to_out(a) for a in self.repo.list_addresses(parse_uuid(user_id, "user"))]
