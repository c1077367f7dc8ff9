import datetime as dt

import httpx
import jwt
import pytest

from campcart.adapters import DurableCartAdapter, EphemeralCartAdapter
from campcart.catalog import CatalogClient
from campcart.credentials import CredentialStore
from campcart.models import CatalogItem, RatePeriod
from campcart.storage import LocalStorage
from cart_backend.database.carts import cart_db
from cart_backend.main import app
from cart_backend.security.auth import get_jwt_secret

BACKEND_URL = "http://cart.test"

CATALOG = {
    "/api/camping-sites/site-1": {"data": {"_id": "site-1", "name": "Lakeside Pitch", "price": 40, "maxGuests": 6}},
    "/api/activities/tour-1": {"id": "tour-1", "name": "Canyon Tour", "price": "25.00", "maxParticipants": 10},
    "/api/equipment/kayak-1": {
        "data": {"id": "kayak-1", "name": "Sea Kayak", "price": 70, "period": "week", "quantity": 4},
    },
}


def catalog_handler(request: httpx.Request) -> httpx.Response:
    payload = CATALOG.get(request.url.path)
    if payload is None:
        return httpx.Response(404, json={"message": "Not found"})
    return httpx.Response(200, json=payload)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_cart_db():
    """Every test starts with empty account carts"""
    cart_db.carts.clear()
    yield
    cart_db.carts.clear()


@pytest.fixture
def make_token():
    def _make(user_id: str = "user-1", secret: str = None) -> str:
        return jwt.encode({"sub": user_id}, secret or get_jwt_secret(), algorithm="HS256")
    return _make


@pytest.fixture
def site():
    return CatalogItem(id="site-1", name="Lakeside Pitch", base_rate=40.0, capacity=6, location="North Shore")


@pytest.fixture
def tour():
    return CatalogItem(id="tour-1", name="Canyon Tour", base_rate=25.0, capacity=10)


@pytest.fixture
def kayak():
    return CatalogItem(id="kayak-1", name="Sea Kayak", base_rate=70.0, rate_period=RatePeriod.WEEK, capacity=4)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def credentials(storage):
    return CredentialStore(storage)


@pytest.fixture
def ephemeral(storage):
    return EphemeralCartAdapter(storage)


@pytest.fixture
def backend_client():
    """HTTP client routed straight into the cart service app"""
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BACKEND_URL)


@pytest.fixture
def durable(credentials, backend_client):
    return DurableCartAdapter(BACKEND_URL, credentials, retry_delay=0, http_client=backend_client)


@pytest.fixture
def catalog():
    return CatalogClient(
        "http://catalog.test",
        retry_delay=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(catalog_handler)),
    )


@pytest.fixture
def stay_dates():
    return dt.date(2024, 8, 1), dt.date(2024, 8, 5)
