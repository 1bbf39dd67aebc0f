"""Cart operations for the authenticated user.

Every function loads the caller's cart by user_id, mutates it in memory and
saves it back. There is no concurrency control: two concurrent writes to the
same cart can lose an update.
"""
import logging
import math

from mongoengine import ValidationError as DocumentValidationError

from app.models.cart import Cart, CartItem
from app.models.user import User
from app.utils.base import NotFoundError, ValidationError


logger = logging.getLogger(__name__)


def _get_cart(user: User) -> Cart | None:
    return Cart.objects(user_id=user.user_id).first()


def _save(cart: Cart, user: User) -> dict:
    cart.snapshot_owner(user)
    try:
        cart.save()
    except DocumentValidationError as exc:
        raise ValidationError("Invalid cart item", error=str(exc))
    return cart.to_output()


def _require_item(user: User, book_name: str) -> tuple[Cart, int]:
    cart = _get_cart(user)
    if not cart:
        raise NotFoundError("Cart not found")
    idx = cart.find_item(book_name)
    if idx == -1:
        raise NotFoundError("Item not found in cart")
    return cart, idx


def add_item(user: User, book_name: str, quantity: int, price: float) -> dict:
    """Add `quantity` of a book; an existing line keeps its price and accumulates quantity."""
    if not book_name:
        raise ValidationError("bookName is required")
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    if not math.isfinite(price) or price < 0:
        raise ValidationError("Price must be a non-negative amount")

    cart = _get_cart(user)
    if cart is None:
        cart = Cart(items=[])

    idx = cart.find_item(book_name)
    if idx > -1:
        cart.items[idx].quantity += quantity
    else:
        cart.items.append(CartItem(book_name=book_name, quantity=quantity, price=price))
    return _save(cart, user)


def get_cart(user: User) -> dict:
    cart = _get_cart(user)
    if not cart:
        return {"items": []}
    return cart.to_output()


def update_item(user: User, book_name: str, quantity: int) -> dict:
    """Overwrite a line's quantity; zero or less removes the line."""
    cart, idx = _require_item(user, book_name)
    if quantity <= 0:
        cart.items.pop(idx)
    else:
        cart.items[idx].quantity = quantity
    return _save(cart, user)


def remove_item(user: User, book_name: str) -> dict:
    cart, idx = _require_item(user, book_name)
    cart.items.pop(idx)
    return _save(cart, user)


def clear_cart(user: User) -> None:
    deleted = Cart.objects(user_id=user.user_id).delete()
    logger.debug("Cleared cart for %s (%d document(s))", user.user_id, deleted)
