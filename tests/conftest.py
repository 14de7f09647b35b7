import os

os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import fakeredis
import pytest
from fastapi import Header
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_auth_client, get_redis_client
from storefront.data.database import Base, get_db
from storefront.data.local_storage import LocalStorage
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.user_profile import UserProfileModel
from storefront.domain.errors import AuthError
from storefront.main import create_app
from storefront.repos.profile_repo import ProfileRepo
from storefront.services.auth_client import AuthClient, AuthSession, AuthUser, SIGNED_IN, SIGNED_OUT

DEVICE_ID = "device-1"
CUSTOMER_PHONE = "9876543210"
CUSTOMER_CODE = "424242"
CUSTOMER_TOKEN = "token-customer"
CUSTOMER_ID = "user-customer"


class StubAuthClient(AuthClient):
    """Auth provider that knows one customer, no HTTP."""

    users = {CUSTOMER_TOKEN: AuthUser(id=CUSTOMER_ID, phone=f"+91{CUSTOMER_PHONE}")}
    codes = {f"+91{CUSTOMER_PHONE}": (CUSTOMER_CODE, CUSTOMER_TOKEN)}

    def __init__(self, access_token=None):
        super().__init__(access_token=access_token, base_url="http://auth.test", api_key="test")
        self.sent = []
        self.session_lookups = 0

    def send_otp(self, phone):
        self.sent.append(phone)

    def verify_otp(self, phone, token):
        expected = self.codes.get(phone)
        if not expected or expected[0] != token:
            raise AuthError("Token has expired or is invalid")
        self.access_token = expected[1]
        session = AuthSession(access_token=self.access_token, user=self.users[self.access_token])
        self._notify(SIGNED_IN, session)
        return session

    def get_user(self):
        return self.users.get(self.access_token)

    def get_session(self):
        self.session_lookups += 1
        return super().get_session()

    def sign_out(self):
        self.access_token = None
        self._notify(SIGNED_OUT, None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def storage(redis_client):
    return LocalStorage(redis_client, DEVICE_ID)


@pytest.fixture
def profiles(db):
    return ProfileRepo(db)


@pytest.fixture
def category(db):
    c = CategoryModel(name="Kurtis", slug="kurtis", description="Hand-embroidered kurtis")
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def make_product(db, category):
    counter = {"n": 0}

    def _make(
        name="White Kurti",
        price="500",
        discount_price=None,
        sizes=(("M", 5),),
        is_available=True,
        category_id=None,
        created_at=None,
        images=("https://img.test/1.jpg",),
    ):
        counter["n"] += 1
        size_options = [{"size": s, "stock": n} for s, n in sizes]
        p = ProductModel(
            name=name,
            category_id=category_id or category.id,
            price=Decimal(price),
            discount_price=Decimal(discount_price) if discount_price else None,
            images=list(images),
            sizes=size_options,
            stock_quantity=sum(n for _, n in sizes),
            is_available=is_available,
            sku=f"SKU-{counter['n']:03d}",
        )
        if created_at:
            p.created_at = created_at
        db.add(p)
        db.commit()
        return p

    return _make


@pytest.fixture
def customer_profile(db):
    p = UserProfileModel(
        id=CUSTOMER_ID,
        phone_number=f"+91{CUSTOMER_PHONE}",
        full_name="Meera Rao",
        email="meera@example.com",
        is_admin=False,
    )
    db.add(p)
    db.commit()
    return p


@pytest.fixture
def admin_profile(db):
    p = UserProfileModel(
        id="user-admin",
        phone_number="+919000000001",
        full_name="Shop Admin",
        is_admin=True,
    )
    db.add(p)
    db.commit()
    StubAuthClient.users["token-admin"] = AuthUser(id="user-admin", phone="+919000000001")
    yield p
    StubAuthClient.users.pop("token-admin", None)


@pytest.fixture
def client(db, redis_client):
    app = create_app()

    def _get_db():
        yield db

    def _get_auth_client(authorization: str | None = Header(None)):
        token = authorization[7:] if authorization and authorization.startswith("Bearer ") else None
        return StubAuthClient(access_token=token)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis_client] = lambda: redis_client
    app.dependency_overrides[get_auth_client] = _get_auth_client

    return TestClient(app, headers={"X-Device-Id": DEVICE_ID})
