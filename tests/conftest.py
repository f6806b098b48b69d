import os
import time
import uuid

# Settings are read (and cached) at import time, so the environment must be
# in place before anything from storefront is imported.
TEST_JWT_SECRET = "test-jwt-secret-for-storefront"

os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["CATALOG_BACKEND"] = "database"
os.environ["ALLOW_ANY_STATUS_TRANSITION"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from storefront.database import get_session
from storefront.main import app
from storefront.models.catalog import Category, Product
from storefront.models.profile import Profile

API = "/api/v1"


def make_token(user_id: uuid.UUID, email: str, expires_in: int = 3600, **claims) -> str:
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(profile.id, profile.email)}"}


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def _profile(session: Session, role: str, email: str) -> Profile:
    profile = Profile(id=uuid.uuid4(), email=email, role=role)
    session.add(profile)
    session.commit()
    session.refresh(profile)
    return profile


@pytest.fixture
def customer(session: Session) -> Profile:
    return _profile(session, "customer", "rahim@example.com")


@pytest.fixture
def other_customer(session: Session) -> Profile:
    return _profile(session, "customer", "karim@example.com")


@pytest.fixture
def admin(session: Session) -> Profile:
    return _profile(session, "admin", "ops@example.com")


@pytest.fixture
def customer_headers(customer: Profile) -> dict[str, str]:
    return auth_headers(customer)


@pytest.fixture
def other_headers(other_customer: Profile) -> dict[str, str]:
    return auth_headers(other_customer)


@pytest.fixture
def admin_headers(admin: Profile) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def category(session: Session) -> Category:
    cat = Category(name="Gadgets")
    session.add(cat)
    session.commit()
    session.refresh(cat)
    return cat


@pytest.fixture
def make_product(session: Session):
    def _make(name: str = "Widget", price: float = 500, stock: int = 10, **kwargs) -> Product:
        product = Product(name=name, price=price, stock=stock, **kwargs)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def add_to_cart(client: TestClient, customer_headers):
    def _add(product: Product, quantity: int = 1, headers=None):
        res = client.post(
            f"{API}/cart",
            json={"product_id": str(product.id), "quantity": quantity},
            headers=headers or customer_headers,
        )
        assert res.status_code == 200, res.text
        return res.json()

    return _add


SHIPPING = {
    "customer_name": "Rahim Uddin",
    "customer_address": "House 12, Road 5, Dhanmondi",
    "customer_phone": "01711000000",
}
