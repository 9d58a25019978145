from decimal import Decimal


def test_checkout_requires_token(client):
    res = client.post("/api/orders")
    assert res.status_code == 401


def test_checkout_empty_cart(client, auth_headers):
    res = client.post("/api/orders", headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"] == "EmptyCart"


def test_checkout_success_clears_cart(client, auth_headers, products):
    client.post("/api/cart", json={"product_id": products["P1"], "quantity": 1}, headers=auth_headers)
    client.post("/api/cart", json={"product_id": products["P2"], "quantity": 3}, headers=auth_headers)
    before = client.get("/api/cart", headers=auth_headers).json()

    res = client.post("/api/orders", headers=auth_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert Decimal(body["total"]) == Decimal("25.00")
    assert Decimal(body["total"]) == Decimal(before["total"])

    after = client.get("/api/cart", headers=auth_headers).json()
    assert after["items"] == []
    assert after["cart_id"] == before["cart_id"]

    # a second checkout has nothing to bill
    res = client.post("/api/orders", headers=auth_headers)
    assert res.status_code == 400
