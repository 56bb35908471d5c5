"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer), kept separate from
the Protean aggregates they are built from.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str
    address: str
    city: str
    phone: str
    email: str | None = None


class LineItemSchema(BaseModel):
    book_id: str
    variation_id: str | None = None
    title: str
    author: str | None = None
    unit_price: float
    quantity: int
    subtotal: float


class CartItemSchema(LineItemSchema):
    selected: bool


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    book_id: str
    variation_id: str | None = None
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "book_id": "1",
                    "variation_id": None,
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    # Zero or less removes the line
    quantity: int


class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema
    payment_method: str = "cod"
    notes: str | None = None
    shipping_cost: float = Field(ge=0, default=0.0)
    discount_total: float = Field(ge=0, default=0.0)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str


class CancelOrderRequest(BaseModel):
    reason: str = ""


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartResponse(BaseModel):
    items: list[CartItemSchema]
    item_count: int
    selected_count: int
    cart_total: float
    selected_total: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    customer_name: str | None = None
    items: list[LineItemSchema]
    status: str
    payment_status: str
    payment_method: str
    shipping_address: AddressSchema | None = None
    notes: str | None = None
    subtotal: float
    shipping_cost: float
    discount_total: float
    total: float
    cancellation_reason: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    per_page: int
    pages: int


class AllowedStatusesResponse(BaseModel):
    order_id: str
    current_status: str
    allowed_statuses: list[str]


class OrderStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    processing_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    pending_payments: int
    completed_payments: int
    failed_payments: int
    refunded_payments: int
    total_revenue: float


class ErrorResponse(BaseModel):
    error: str
    detail: dict | str
