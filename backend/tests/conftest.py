import pytest
from fastapi.testclient import TestClient

from storefront.db import Database
from storefront.main import app
from storefront.models.product import Product
from storefront.models.user import User
from storefront.utils.auth import Identity, create_access_token


@pytest.fixture
def database(tmp_path):
    # fresh file-backed DB per test; separate sessions must see each other's commits
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.init(reset=True)
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    s = database.session()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(database):
    app.state.database = database
    yield TestClient(app)
    app.state.database = None


@pytest.fixture
def products(database):
    with database.session() as s:
        s.add_all(
            [
                Product(id="prod-p", name="Product P", description="Ten", price_cents=1000),
                Product(id="prod-p1", name="Product P1", description="Ten again", price_cents=1000),
                Product(id="prod-p2", name="Product P2", description="Five", price_cents=500),
                Product(id="prod-odd", name="Odd Cents", description="Rounding", price_cents=333),
            ]
        )
        s.commit()
    return {"P": "prod-p", "P1": "prod-p1", "P2": "prod-p2", "ODD": "prod-odd"}


def make_user(database, user_id, email):
    with database.session() as s:
        s.add(User(id=user_id, email=email, name=email.split("@")[0]))
        s.commit()
    return Identity(user_id=user_id, email=email)


@pytest.fixture
def shopper(database):
    return make_user(database, "user-1", "shopper@example.com")


@pytest.fixture
def other_shopper(database):
    return make_user(database, "user-2", "other@example.com")


@pytest.fixture
def auth_headers(shopper):
    return {"Authorization": f"Bearer {create_access_token(shopper.user_id, shopper.email)}"}


@pytest.fixture
def count_rows(database):
    def _count(model, **filters):
        with database.session() as s:
            return s.query(model).filter_by(**filters).count()

    return _count
