"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from pytest_bdd import given, parsers, then
from storefront.errors import StorefrontError
from storefront.identity import CurrentUser, StaticIdentityProvider
from storefront.session import StorefrontSession


@pytest.fixture()
def error():
    """Container for the rejection a When step captured."""
    return {"exc": None}


@pytest.fixture()
def placed():
    """Container for the order a step placed."""
    return {"order": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the customer "{name}" is signed in'), target_fixture="session")
def signed_in_customer(name, store, sink, catalog, settings):
    user = CurrentUser(id="cust-001", name=name)
    return StorefrontSession(
        store=store,
        sink=sink,
        catalog=catalog,
        identity=StaticIdentityProvider(user),
        settings=settings,
    )


@given(parsers.cfparse('the cart holds {quantity:d} of book "{book_id}"'))
def cart_holds_book(session, quantity, book_id):
    session.add_book(book_id, quantity=quantity)


@given(parsers.cfparse('the cart holds {quantity:d} of the "{variation_id}" edition of book "{book_id}"'))
def cart_holds_variation(session, quantity, book_id, variation_id):
    session.add_book(book_id, quantity=quantity, variation_id=variation_id)


@given(parsers.cfparse('storage fails for "{key}"'))
def storage_fails(store, key):
    store.configure(should_fail=True, fail_on={key})


@given(parsers.cfparse('a pending order for {quantity:d} of book "{book_id}"'))
def pending_order(session, sink, placed, address, quantity, book_id):
    session.add_book(book_id, quantity=quantity)
    placed["order"] = session.checkout(address)
    sink.reset()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request is rejected with "{code}"'))
def request_rejected(error, code):
    assert isinstance(error["exc"], StorefrontError)
    assert error["exc"].code == code


@then("no notice was sent")
def no_notice(sink):
    assert sink.sent == []


@then(parsers.cfparse('{count:d} "{notification_type}" notice was sent'))
def notices_of_type(sink, count, notification_type):
    assert len([n for n in sink.sent if n.notification_type.value == notification_type]) == count
