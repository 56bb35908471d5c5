"""Tests for StorefrontSession wiring and user switching."""

import pytest
from storefront.catalog import set_catalog
from storefront.errors import BookNotFound
from storefront.identity import StaticIdentityProvider
from storefront.notifications.port import NotificationType
from storefront.persistence import get_store, set_store
from storefront.session import StorefrontSession


@pytest.fixture()
def session(store, sink, catalog, customer, settings):
    return StorefrontSession(
        store=store,
        sink=sink,
        catalog=catalog,
        identity=StaticIdentityProvider(customer),
        settings=settings,
    )


class TestWiring:
    def test_engines_share_the_user(self, session):
        assert session.user.id == "cust-001"
        assert session.cart.storage_key == "cart:cust-001"
        assert session.orders.user.id == "cust-001"

    def test_defaults_come_from_registries(self, store, catalog):
        set_store(store)
        set_catalog(catalog)

        session = StorefrontSession()

        assert session.store is get_store()
        assert session.catalog is catalog
        assert session.user is None
        assert session.cart.storage_key == "cart:guest"


class TestShopping:
    def test_add_book_uses_catalog_record(self, session):
        session.add_book("2", quantity=2, variation_id="hardcover")

        (item,) = session.cart.items
        assert item.title == "Letters in Winter"
        assert item.unit_price == pytest.approx(19.99)
        assert item.quantity == 2

    def test_add_unknown_book(self, session):
        with pytest.raises(BookNotFound):
            session.add_book("999")
        assert session.cart.items == []

    def test_checkout(self, session, address, sink):
        session.add_book("1", quantity=2)
        session.add_book("2", variation_id="hardcover")

        order = session.checkout(address)

        assert order.total == pytest.approx(45.97)
        assert session.cart.items == []
        assert len(sink.of_type(NotificationType.ORDER_PLACED)) == 1


class TestSwitchUser:
    def test_carts_are_kept_per_user(self, session, other_customer):
        session.add_book("1")
        session.switch_user(other_customer)

        assert session.cart.items == []
        session.add_book("3")

        session.switch_user(None)
        assert session.cart.storage_key == "cart:guest"
        assert session.cart.items == []

    def test_switching_back_restores_cart(self, session, customer, other_customer):
        session.add_book("1", quantity=3)
        session.switch_user(other_customer)
        session.switch_user(customer)

        assert session.cart.get_item_count() == 3

    def test_orders_follow_the_user(self, session, address, other_customer):
        session.add_book("1")
        session.checkout(address)

        session.switch_user(other_customer)

        assert session.orders.get_user_orders() == []
        assert len(session.orders.get_user_orders("cust-001")) == 1
