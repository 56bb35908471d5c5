"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A book was added to the cart, or its quantity was increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    book_id = String(required=True)
    variation_id = String()
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was set to a new value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    book_id = String(required=True)
    variation_id = String()
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart (explicitly, or by dropping its quantity to zero)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    book_id = String(required=True)
    variation_id = String()


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartSelectionChanged:
    """The set of lines selected for checkout changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    selected_count = Integer(required=True)
