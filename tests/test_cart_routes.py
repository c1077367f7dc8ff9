import pytest
from fastapi.testclient import TestClient

from cart_backend.main import app

client = TestClient(app)

LODGING = {
    "itemType": "lodging",
    "catalogItemId": "site-1",
    "name": "Lakeside Pitch",
    "baseRate": 40,
    "capacity": 6,
    "checkIn": "2024-08-01",
    "checkOut": "2024-08-05",
    "guests": 2,
    "totalPrice": 1,
}

KAYAK = {
    "itemType": "equipment",
    "catalogItemId": "kayak-1",
    "name": "Sea Kayak",
    "baseRate": 70,
    "ratePeriod": "week",
    "capacity": 4,
    "rentalStart": "2024-08-01",
    "rentalEnd": "2024-08-04",
    "quantity": 1,
}

LODGING_ID = "lodging-site-1-2024-08-01-2024-08-05"
KAYAK_ID = "equipment-kayak-1-2024-08-01-2024-08-04"


@pytest.fixture
def auth(make_token):
    return {"Authorization": f"Bearer {make_token('user-1')}"}


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requires_token():
    response = client.get("/api/cart")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_rejects_badly_signed_token(make_token):
    token = make_token("user-1", secret="someone-else")
    response = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_empty_cart(auth):
    response = client.get("/api/cart", headers=auth)
    assert response.status_code == 200
    data = response.json()["cart"]
    assert data["userId"] == "user-1"
    assert data["items"] == []


def test_add_reprices_item(auth):
    response = client.post("/api/cart", json=LODGING, headers=auth)
    assert response.status_code == 200
    cart = response.json()["cart"]
    assert cart["items"][0]["id"] == LODGING_ID
    assert cart["items"][0]["totalPrice"] == 160.0
    assert cart["subtotal"] == 160.0
    assert response.json()["message"] == "Lakeside Pitch (4 nights) added to cart"


def test_add_same_item_replaces(auth):
    client.post("/api/cart", json=KAYAK, headers=auth)
    response = client.post("/api/cart", json={**KAYAK, "quantity": 3}, headers=auth)

    items = response.json()["cart"]["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 3
    assert response.json()["cart"]["itemCount"] == 3


def test_overlap_conflicts(auth):
    client.post("/api/cart", json=LODGING, headers=auth)
    response = client.post(
        "/api/cart",
        json={**LODGING, "checkIn": "2024-08-03", "checkOut": "2024-08-07"},
        headers=auth,
    )
    assert response.status_code == 409


def test_invalid_dates_rejected(auth):
    response = client.post("/api/cart", json={**LODGING, "checkOut": "2024-07-30"}, headers=auth)
    assert response.status_code == 400


def test_carts_are_per_user(auth, make_token):
    client.post("/api/cart", json=LODGING, headers=auth)
    other = {"Authorization": f"Bearer {make_token('user-2')}"}
    assert client.get("/api/cart", headers=other).json()["cart"]["items"] == []


def test_update_quantity(auth):
    client.post("/api/cart", json=KAYAK, headers=auth)
    response = client.put(
        "/api/cart/item",
        json={"id": KAYAK_ID, "catalogItemId": "kayak-1", "itemType": "equipment", "quantity": 2},
        headers=auth,
    )
    assert response.status_code == 200
    item = response.json()["cart"]["items"][0]
    assert item["quantity"] == 2
    assert item["totalPrice"] == pytest.approx(60.0)


def test_update_quantity_over_capacity(auth):
    client.post("/api/cart", json=KAYAK, headers=auth)
    response = client.put(
        "/api/cart/item",
        json={"id": KAYAK_ID, "catalogItemId": "kayak-1", "itemType": "equipment", "quantity": 5},
        headers=auth,
    )
    assert response.status_code == 400

    items = client.get("/api/cart", headers=auth).json()["cart"]["items"]
    assert items[0]["quantity"] == 1


def test_update_missing_item(auth):
    response = client.put(
        "/api/cart/item",
        json={"catalogItemId": "kayak-1", "itemType": "equipment", "quantity": 2},
        headers=auth,
    )
    assert response.status_code == 404


def test_remove_item(auth):
    client.post("/api/cart", json=LODGING, headers=auth)
    client.post("/api/cart", json=KAYAK, headers=auth)

    response = client.delete(f"/api/cart/item/site-1/lodging?id={LODGING_ID}", headers=auth)
    assert [item["id"] for item in response.json()["cart"]["items"]] == [KAYAK_ID]


def test_clear(auth):
    client.post("/api/cart", json=LODGING, headers=auth)
    response = client.delete("/api/cart/clear", headers=auth)
    assert response.json()["cart"]["items"] == []
    assert response.json()["cart"]["subtotal"] == 0.0


def test_migrate_twice_does_not_duplicate(auth):
    body = {"items": [LODGING, KAYAK]}
    client.post("/api/cart/migrate", json=body, headers=auth)
    response = client.post("/api/cart/migrate", json=body, headers=auth)

    assert response.status_code == 200
    assert len(response.json()["cart"]["items"]) == 2
    assert response.json()["skipped"] == []


def test_migrate_skips_conflicting_items(auth):
    client.post("/api/cart", json=LODGING, headers=auth)
    overlapping = {**LODGING, "checkIn": "2024-08-03", "checkOut": "2024-08-07"}

    response = client.post("/api/cart/migrate", json={"items": [overlapping, KAYAK]}, headers=auth)
    data = response.json()
    assert data["skipped"] == ["lodging-site-1-2024-08-03-2024-08-07"]
    assert len(data["cart"]["items"]) == 2
