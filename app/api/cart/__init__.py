from fastapi import APIRouter, Depends
from pydantic import Field

from app.api.schemas import CamelBody
from app.models.user import User
from app.services import cart as cart_service
from app.services.auth import get_current_user
from app.utils.base import envelope


# All cart routes are protected
router = APIRouter(dependencies=[Depends(get_current_user)])


class AddItemBody(CamelBody):
    book_name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0, allow_inf_nan=False)


class UpdateItemBody(CamelBody):
    quantity: int


@router.get("")
def get_cart(current_user: User = Depends(get_current_user)) -> dict:
    return envelope(cart_service.get_cart(current_user))


@router.post("")
def add_item(body: AddItemBody, current_user: User = Depends(get_current_user)) -> dict:
    return envelope(cart_service.add_item(current_user, body.book_name, body.quantity, body.price))


@router.delete("")
def clear_cart(current_user: User = Depends(get_current_user)) -> dict:
    cart_service.clear_cart(current_user)
    return envelope(message="Cart cleared successfully")


@router.put("/{book_name}")
def update_item(book_name: str, body: UpdateItemBody, current_user: User = Depends(get_current_user)) -> dict:
    return envelope(cart_service.update_item(current_user, book_name, body.quantity))


@router.delete("/{book_name}")
def remove_item(book_name: str, current_user: User = Depends(get_current_user)) -> dict:
    return envelope(cart_service.remove_item(current_user, book_name))
