"""Bookstore storefront FastAPI application.

Serves the cart and order API. Every request runs inside the storefront
domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.api import cart_router, order_router, register_exception_handlers
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context, configure_logging

configure_logging()
storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Bookstore Storefront API",
    description="Shopping cart, checkout and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and tag log lines with the caller."""
    add_context(path=request.url.path, user_id=request.headers.get("x-user-id"))
    try:
        with storefront.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(cart_router)
app.include_router(order_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
            },
        }
    )
