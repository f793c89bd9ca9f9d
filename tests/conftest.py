import pytest
import uuid

from app import create_app
from app.database import get_session, create_all, drop_all
from app.models import AppUser, Category, MenuItem
from app.services.cart_service import encode_cart, CartLine


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing (SQLite in memory, no Redis)."""
    app = create_app('config.TestConfig')
    with app.app_context():
        create_all()
    yield app
    with app.app_context():
        drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = get_session()
    yield session
    session.rollback()
    session.query(MenuItem).delete()
    session.query(Category).delete()
    session.query(AppUser).delete()
    session.commit()
    session.remove()


@pytest.fixture(scope='function')
def app_ctx(app):
    with app.test_request_context():
        yield


def _make_user(session, email, full_name):
    user = AppUser(email=email, full_name=full_name, active=True)
    user.set_password('password123')
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def customer(session):
    """Ordinary customer account."""
    suffix = str(uuid.uuid4())[:8]
    return _make_user(session, f'customer-{suffix}@test.com', 'Customer One')


@pytest.fixture(scope='function')
def admin_user(session, app):
    return _make_user(session, app.config['ADMIN_EMAIL'], 'Admin')


@pytest.fixture(scope='function')
def worker_user(session, app):
    return _make_user(session, app.config['WORKER_EMAIL'], 'Worker')


def _login(client, user):
    with client.session_transaction() as sess:
        sess['user_id'] = user.id
    return client


@pytest.fixture(scope='function')
def authenticated_client(client, customer):
    """Client signed in as a customer."""
    return _login(client, customer)


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    """Client signed in as the admin."""
    return _login(client, admin_user)


@pytest.fixture(scope='function')
def worker_client(client, worker_user):
    return _login(client, worker_user)


@pytest.fixture(scope='function')
def category(session):
    category = Category(id='cat-appetizers', category='Appetizers')
    session.add(category)
    session.commit()
    return category


@pytest.fixture(scope='function')
def menu_item(session, category):
    item = MenuItem(
        id='item-bread',
        name='Garlic Bread',
        price='4.50',
        discount=10,
        order_count=3,
        category=category.id
    )
    session.add(item)
    session.commit()
    return item


@pytest.fixture(scope='function')
def set_client_cart():
    """Put a cart into a test client's session cookie."""
    def _set(client, lines, key='cart'):
        with client.session_transaction() as sess:
            sess[key] = encode_cart([CartLine(item, qty) for item, qty in lines])
    return _set
