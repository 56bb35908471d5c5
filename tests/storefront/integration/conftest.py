import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from storefront.api import cart_router, order_router, register_exception_handlers
from storefront.catalog import set_catalog
from storefront.domain import storefront
from storefront.notifications import set_sink
from storefront.persistence import set_store


@pytest.fixture()
def client(store, sink, catalog):
    set_store(store)
    set_sink(sink)
    set_catalog(catalog)

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(cart_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def alice():
    return {"X-User-Id": "cust-001", "X-User-Name": "Alice Reader", "X-User-Email": "alice@example.com"}


@pytest.fixture()
def bob():
    return {"X-User-Id": "cust-002", "X-User-Name": "Bob Browser"}


@pytest.fixture()
def clerk():
    return {"X-User-Id": "staff-001", "X-User-Name": "Sam Clerk", "X-User-Role": "admin"}
