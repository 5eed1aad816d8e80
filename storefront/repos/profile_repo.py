# storefront/repos/profile_repo.py
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.profile import ProfileModel
from storefront.data.models.address import AddressModel


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: uuid.UUID) -> ProfileModel | None:
        return self.db.execute(
            select(ProfileModel).where(ProfileModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def get_address(self, address_id: uuid.UUID) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def list_addresses(self, user_id: uuid.UUID) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(AddressModel.is_default.desc(), AddressModel.created_at)
            ).scalars()
        )

    def create_address(self, address: AddressModel) -> AddressModel:
        if address.is_default:
            for other in self.list_addresses(address.user_id):
                other.is_default = False
        self.db.add(address)
        self.db.commit()
        self.db.refresh(address)
        return address
