from decimal import Decimal


def test_cart_requires_token(client):
    res = client.get("/api/cart")
    assert res.status_code == 401
    assert res.json()["error"] == "Unauthenticated"


def test_cart_rejects_bad_token(client):
    res = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_get_cart_starts_empty(client, auth_headers):
    res = client.get("/api/cart", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["items"] == []
    assert Decimal(body["total"]) == Decimal("0.00")
    assert "cart_id" in body


def test_add_increment_and_exhaust(client, auth_headers, products):
    P = products["P"]
    res = client.post("/api/cart", json={"product_id": P, "quantity": 2}, headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["outcome"] == "created"
    assert [(it["product_id"], it["quantity"]) for it in body["items"]] == [(P, 2)]
    assert Decimal(body["total"]) == Decimal("20.00")

    res = client.post("/api/cart", json={"product_id": P, "quantity": 1}, headers=auth_headers)
    body = res.json()
    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 3
    assert Decimal(body["total"]) == Decimal("30.00")

    res = client.post("/api/cart", json={"product_id": P, "quantity": -5}, headers=auth_headers)
    body = res.json()
    assert body["outcome"] == "deleted"
    assert body["items"] == []
    assert Decimal(body["total"]) == Decimal("0.00")


def test_add_unknown_product(client, auth_headers, products):
    res = client.post("/api/cart", json={"product_id": "nope", "quantity": 1}, headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"] == "ProductNotFound"


def test_decrement_absent_line(client, auth_headers, products):
    res = client.post(
        "/api/cart", json={"product_id": products["P"], "quantity": -1}, headers=auth_headers
    )
    assert res.status_code == 404
    assert res.json()["error"] == "LineNotFound"


def test_add_validates_body(client, auth_headers, products):
    res = client.post("/api/cart", json={"product_id": products["P"], "quantity": "lots"}, headers=auth_headers)
    assert res.status_code == 422


def test_remove_item(client, auth_headers, products):
    client.post("/api/cart", json={"product_id": products["P"], "quantity": 2}, headers=auth_headers)
    client.post("/api/cart", json={"product_id": products["P2"], "quantity": 1}, headers=auth_headers)

    res = client.delete(f"/api/cart/items/{products['P']}", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert [it["product_id"] for it in body["items"]] == [products["P2"]]
    assert Decimal(body["total"]) == Decimal("5.00")


def test_remove_absent_item(client, auth_headers, products):
    res = client.delete(f"/api/cart/items/{products['P']}", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["error"] == "LineNotFound"


def test_set_quantity(client, auth_headers, products):
    url = f"/api/cart/items/{products['P2']}"
    res = client.put(url, json={"quantity": 4}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["items"][0]["quantity"] == 4
    assert Decimal(res.json()["total"]) == Decimal("20.00")

    res = client.put(url, json={"quantity": 0}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["items"] == []

    res = client.put(url, json={"quantity": -1}, headers=auth_headers)
    assert res.status_code == 422


def test_storage_failure_maps_to_503(client, auth_headers, products, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from storefront.repositories.cart_repo import CartRepository

    def broken(self, user_id, lock=False):
        raise OperationalError("SELECT", {}, Exception("unable to open database file"))

    monkeypatch.setattr(CartRepository, "get_by_user", broken)
    res = client.get("/api/cart", headers=auth_headers)
    assert res.status_code == 503
    assert res.json()["error"] == "StorageUnavailable"


def test_oversized_quantity_is_422(client, auth_headers, products):
    res = client.post(
        "/api/cart", json={"product_id": products["P"], "quantity": 2**63}, headers=auth_headers
    )
    assert res.status_code == 422
    res = client.post(
        "/api/cart", json={"product_id": products["P"], "quantity": -(2**63)}, headers=auth_headers
    )
    assert res.status_code == 422
    res = client.put(
        f"/api/cart/items/{products['P']}", json={"quantity": 10**6 + 1}, headers=auth_headers
    )
    assert res.status_code == 422
    assert client.get("/api/cart", headers=auth_headers).json()["items"] == []


def test_line_cap_is_422(client, auth_headers, products):
    url = f"/api/cart/items/{products['P']}"
    assert client.put(url, json={"quantity": 10**6}, headers=auth_headers).status_code == 200

    res = client.post("/api/cart", json={"product_id": products["P"], "quantity": 1}, headers=auth_headers)
    assert res.status_code == 422
    assert res.json()["error"] == "InvalidQuantity"
    assert client.get("/api/cart", headers=auth_headers).json()["items"][0]["quantity"] == 10**6
