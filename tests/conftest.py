import pytest

from src.config import TestConfig
from src.extensions import db
from src.main import create_app
from products.product_service import ProductService
from user.jwt_utils import generate_access_token


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner_id():
    return "owner-1"


@pytest.fixture
def auth_headers(app, owner_id):
    return {"Authorization": f"Bearer {generate_access_token(owner_id)}"}


@pytest.fixture
def other_auth_headers(app):
    return {"Authorization": f"Bearer {generate_access_token('owner-2')}"}


@pytest.fixture
def make_product(app, owner_id):
    def _make(owner=None, **overrides):
        data = {
            "product_code": "P-001",
            "product_name": "Green Tea",
            "buying_price": "10000",
            "selling_price": "15000",
            "stock_quantity": 10,
            "supplier": "Tea House",
        }
        data.update(overrides)
        return ProductService.create_product(owner or owner_id, data)
    return _make
