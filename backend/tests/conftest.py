"""
Pytest fixtures for the winehouse backend tests.

Provides an in-memory database, the test client, admin/staff accounts and a
stocked product.
"""

from datetime import date

import pytest
from winehouse import create_app
from winehouse.extensions import db
from winehouse.services import auth_service, inventory_service, products_service, supplier_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        # Fast hashes; the cost factor is not under test
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin(db_session):
    """The first registered account, therefore the admin."""
    return auth_service.register_user("owner", "owner-pass", email="owner@winehouse.test")


@pytest.fixture(scope='function')
def staff(db_session, admin):
    return auth_service.register_user("clerk", "clerk-pass", email="clerk@winehouse.test")


@pytest.fixture(scope='function')
def other_staff(db_session, admin):
    return auth_service.register_user("clerk2", "clerk2-pass")


@pytest.fixture(scope='function')
def product(db_session, admin):
    return products_service.create_product(actor=admin, name="Cabernet Sauvignon 2019")


@pytest.fixture(scope='function')
def supplier(db_session, admin):
    return supplier_service.create_supplier(actor=admin, name="Valley Vineyards", contact_number="09171234567")


@pytest.fixture(scope='function')
def make_stock(db_session, admin, product, supplier):
    """Receive a lot of `product` from `supplier`."""
    def _make(quantity: int, unit_price_cents: int = 1500, target=None):
        return inventory_service.add_stock(
            actor=admin,
            product_id=(target or product).id,
            supplier_id=supplier.id,
            quantity=quantity,
            unit_price_cents=unit_price_cents,
            date_added=date(2026, 1, 1),
            expiry_date=date(2030, 1, 1),
        )
    return _make


@pytest.fixture(scope='function')
def stock(make_stock):
    """A lot of 10 units at 15.00."""
    return make_stock(10)


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin):
    return auth_headers(get_auth_token(client, "owner", "owner-pass"))


@pytest.fixture(scope='function')
def staff_headers(client, staff):
    return auth_headers(get_auth_token(client, "clerk", "clerk-pass"))
