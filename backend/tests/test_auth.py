from storefront.models.cart import Cart
from storefront.models.user import User
from storefront.utils.auth import create_access_token


def test_signin_creates_user_once(client, count_rows):
    res = client.post("/api/auth/signin", json={"email": "New@Example.com", "password": "pw"})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["name"] == "new"

    again = client.post("/api/auth/signin", json={"email": "new@example.com", "password": "other"})
    assert again.json()["user"]["id"] == body["user"]["id"]
    assert count_rows(User) == 1


def test_signin_validates(client):
    assert client.post("/api/auth/signin", json={"email": "not-an-email", "password": "pw"}).status_code == 422
    assert client.post("/api/auth/signin", json={"email": "a@b.co", "password": ""}).status_code == 422


def test_token_gives_access_to_cart(client, count_rows):
    token = client.post("/api/auth/signin", json={"email": "a@b.co", "password": "pw"}).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "a@b.co"

    assert client.get("/api/cart", headers=headers).status_code == 200
    assert count_rows(Cart) == 1


def test_expired_token(client, shopper):
    token = create_access_token(shopper.user_id, shopper.email, expires_minutes=-1)
    res = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Token expired"


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
