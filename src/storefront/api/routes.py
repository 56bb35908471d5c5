"""FastAPI routes for the Storefront: cart and orders.

Each request gets its own StorefrontSession for the user forwarded in the
X-User-* headers; the cart and order list are loaded from the key-value
store, so nothing is shared between requests except storage.
"""

from fastapi import APIRouter, Depends, Request

from storefront.api.schemas import (
    AddToCartRequest,
    AllowedStatusesResponse,
    CancelOrderRequest,
    CartItemSchema,
    CartResponse,
    CheckoutRequest,
    LineItemSchema,
    OrderListResponse,
    OrderResponse,
    OrderStatsResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
)
from storefront.identity import HeaderIdentityProvider
from storefront.session import StorefrontSession


async def get_session(request: Request) -> StorefrontSession:
    return StorefrontSession(identity=HeaderIdentityProvider(request.headers))


def _cart_response(session: StorefrontSession) -> CartResponse:
    cart = session.cart
    return CartResponse(
        items=[
            CartItemSchema(
                book_id=item.book_id,
                variation_id=item.variation_id,
                title=item.title,
                author=item.author,
                unit_price=item.unit_price,
                quantity=item.quantity,
                subtotal=item.subtotal,
                selected=item.selected,
            )
            for item in cart.items
        ],
        item_count=cart.get_item_count(),
        selected_count=cart.get_selected_items_count(),
        cart_total=cart.get_cart_total(),
        selected_total=cart.get_selected_total(),
    )


def _order_response(order) -> OrderResponse:
    snapshot = order.to_snapshot()
    snapshot["items"] = [LineItemSchema(**item.snapshot(), subtotal=item.subtotal) for item in order.items]
    return OrderResponse(**snapshot)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(session: StorefrontSession = Depends(get_session)) -> CartResponse:
    return _cart_response(session)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(session: StorefrontSession = Depends(get_session)) -> CartResponse:
    session.cart.clear_cart()
    return _cart_response(session)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, session: StorefrontSession = Depends(get_session)) -> CartResponse:
    session.add_book(body.book_id, quantity=body.quantity, variation_id=body.variation_id)
    return _cart_response(session)


@cart_router.put("/items/{book_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    book_id: str,
    body: UpdateCartQuantityRequest,
    variation_id: str | None = None,
    session: StorefrontSession = Depends(get_session),
) -> CartResponse:
    session.cart.update_quantity(book_id, variation_id, body.quantity)
    return _cart_response(session)


@cart_router.delete("/items/{book_id}", response_model=CartResponse)
async def remove_cart_item(
    book_id: str,
    variation_id: str | None = None,
    session: StorefrontSession = Depends(get_session),
) -> CartResponse:
    session.cart.remove_item(book_id, variation_id)
    return _cart_response(session)


@cart_router.post("/items/{book_id}/toggle", response_model=CartResponse)
async def toggle_cart_item(
    book_id: str,
    variation_id: str | None = None,
    session: StorefrontSession = Depends(get_session),
) -> CartResponse:
    session.cart.toggle_item_selection(book_id, variation_id)
    return _cart_response(session)


@cart_router.post("/select-all", response_model=CartResponse)
async def select_all(session: StorefrontSession = Depends(get_session)) -> CartResponse:
    session.cart.select_all_items()
    return _cart_response(session)


@cart_router.post("/deselect-all", response_model=CartResponse)
async def deselect_all(session: StorefrontSession = Depends(get_session)) -> CartResponse:
    session.cart.deselect_all_items()
    return _cart_response(session)


@cart_router.delete("/selected", response_model=CartResponse)
async def remove_selected(session: StorefrontSession = Depends(get_session)) -> CartResponse:
    session.cart.clear_selected_items()
    return _cart_response(session)


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest, session: StorefrontSession = Depends(get_session)) -> OrderResponse:
    order = session.checkout(
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
        notes=body.notes,
        shipping_cost=body.shipping_cost,
        discount_total=body.discount_total,
    )
    return _order_response(order)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = 1,
    per_page: int = 15,
    status: str | None = None,
    payment_status: str | None = None,
    search: str | None = None,
    session: StorefrontSession = Depends(get_session),
) -> OrderListResponse:
    result = session.orders.list_orders(
        page=page,
        per_page=per_page,
        status=status,
        payment_status=payment_status,
        search=search,
    )
    return OrderListResponse(
        orders=[_order_response(order) for order in result.orders],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        pages=result.pages,
    )


@order_router.get("/mine", response_model=list[OrderResponse])
async def my_orders(session: StorefrontSession = Depends(get_session)) -> list[OrderResponse]:
    return [_order_response(order) for order in session.orders.get_user_orders()]


@order_router.get("/stats", response_model=OrderStatsResponse)
async def order_stats(session: StorefrontSession = Depends(get_session)) -> OrderStatsResponse:
    return OrderStatsResponse(**session.orders.get_order_stats())


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, session: StorefrontSession = Depends(get_session)) -> OrderResponse:
    return _order_response(session.orders.get_order_by_id(order_id))


@order_router.get("/{order_id}/allowed-statuses", response_model=AllowedStatusesResponse)
async def allowed_statuses(order_id: str, session: StorefrontSession = Depends(get_session)) -> AllowedStatusesResponse:
    order = session.orders.get_order_by_id(order_id)
    return AllowedStatusesResponse(
        order_id=str(order.id),
        current_status=order.status,
        allowed_statuses=order.allowed_next_statuses(),
    )


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    session: StorefrontSession = Depends(get_session),
) -> OrderResponse:
    return _order_response(session.orders.update_order_status(order_id, body.status))


@order_router.put("/{order_id}/payment", response_model=OrderResponse)
async def update_payment_status(
    order_id: str,
    body: UpdatePaymentStatusRequest,
    session: StorefrontSession = Depends(get_session),
) -> OrderResponse:
    return _order_response(session.orders.update_payment_status(order_id, body.payment_status))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    session: StorefrontSession = Depends(get_session),
) -> OrderResponse:
    return _order_response(session.orders.cancel_order(order_id, body.reason))
