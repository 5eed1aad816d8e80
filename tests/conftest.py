import os
import uuid
from decimal import Decimal

# must be set before storefront settings are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.data.cache import get_redis
from storefront.data.database import Base, get_db
from storefront.data.models import AddressModel, ProductModel, ProfileModel
from storefront.services.cart_service import CartService
from storefront.services.local_cart_store import LocalCartStore
from storefront.services.realtime import ChangeFeed
from storefront.services.remote_cart_store import RemoteCartStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def r():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def feed(r):
    return ChangeFeed(r)


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


@pytest.fixture
def make_product(db):
    def _make(title="Premium Smartphone", price="100", **kwargs):
        product = ProductModel(title=title, price=Decimal(price), currency="INR", images=[f"/img/{title}.jpg"], **kwargs)
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_cart(db, r, feed):
    def _make(device_id="device-1", user_id=None):
        svc = CartService(db, LocalCartStore(r, device_id), RemoteCartStore(db, feed))
        return svc.start(user_id)

    return _make


@pytest.fixture
def make_address(db):
    def _make(user_id):
        address = AddressModel(
            user_id=uuid.UUID(str(user_id)),
            full_name="Asha Rao",
            phone="9876543210",
            house_flat="12B",
            road_area_colony="MG Road",
            city="Kolkata",
            state="West Bengal",
            pincode="700001",
            is_default=True,
        )
        db.add(address)
        db.commit()
        return address

    return _make


@pytest.fixture
def admin_id(db):
    uid = uuid.uuid4()
    db.add(ProfileModel(user_id=uid, email="admin@example.com", full_name="Admin", is_admin=True))
    db.commit()
    return str(uid)


@pytest.fixture
def client(session_factory, r):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: r

    with TestClient(app) as c:
        yield c
