import pytest
from protean.integrations.pytest import DomainFixture
from storefront.cart.engine import CartEngine
from storefront.catalog.memory import InMemoryCatalog
from storefront.catalog.port import BookRef
from storefront.config import Settings
from storefront.identity import CurrentUser
from storefront.notifications.dispatch import NotificationDispatcher
from storefront.notifications.fake_sink import FakeNotificationSink
from storefront.order.engine import OrderEngine
from storefront.persistence.memory import InMemoryKeyValueStore


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
@pytest.fixture()
def book_a():
    return BookRef(book_id="1", title="The Quiet Library", author="Ada Page", unit_price=12.99, stock=40)


@pytest.fixture()
def book_b():
    return BookRef(
        book_id="2",
        title="Letters in Winter",
        author="Ben Quill",
        unit_price=19.99,
        variation_id="hardcover",
        stock=25,
    )


@pytest.fixture()
def book_c():
    return BookRef(book_id="3", title="Maps of Nowhere", author="Cy Atlas", unit_price=8.50, stock=12)


@pytest.fixture()
def catalog(book_a, book_b, book_c):
    return InMemoryCatalog([book_a, book_b, book_c])


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    return CurrentUser(id="cust-001", name="Alice Reader", email="alice@example.com")


@pytest.fixture()
def other_customer():
    return CurrentUser(id="cust-002", name="Bob Browser")


@pytest.fixture()
def staff_user():
    return CurrentUser(id="staff-001", name="Sam Clerk", role="admin")


# ---------------------------------------------------------------------------
# Adapters and engines
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    return Settings(environment="test")


@pytest.fixture()
def store():
    return InMemoryKeyValueStore()


@pytest.fixture()
def sink():
    return FakeNotificationSink()


@pytest.fixture()
def dispatcher(sink):
    return NotificationDispatcher(sink)


@pytest.fixture()
def cart_engine(store, customer):
    return CartEngine(store, user=customer)


@pytest.fixture()
def order_engine(store, cart_engine, dispatcher, catalog, customer, settings):
    return OrderEngine(store, cart_engine, dispatcher, catalog=catalog, user=customer, settings=settings)


@pytest.fixture()
def address():
    return {
        "name": "Alice Reader",
        "address": "12 Elm Street",
        "city": "Springfield",
        "phone": "555-0100",
        "email": "alice@example.com",
    }
