from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.connections.mongo import init_mongo, close_mongo
from app.models.cart import Cart
from app.models.user import User
from app.models.voucher import Voucher
from app.services import cart as cart_service
from app.services import voucher as voucher_service
from app.services.auth import register_user


FIXTURES = [
    ("Alice", "Example", "alice@example.com", "Secret123!", "0123456789", "1 Library Lane"),
    ("Bob", "Example", "bob@example.com", "Secret123!", "0123456780", "2 Library Lane"),
]

# Catalog volume ids with a unit price
CART_FIXTURES = [("zyTCAlFPjgYC", 2, 14.99), ("wrOQLV6xB-wC", 1, 22.5)]


def _ensure_users() -> list[User]:
    users: list[User] = []
    for first, last, email, pwd, contact, address in FIXTURES:
        user = User.objects(email=email).first()
        if not user:
            register_user(first, last, email, pwd, contact, address)
            user = User.objects(email=email).first()
        users.append(user)
    return users


def _ensure_cart(user: User) -> None:
    for book_name, quantity, price in CART_FIXTURES:
        cart_service.add_item(user, book_name, quantity, price)


def _ensure_vouchers(user: User) -> None:
    voucher_service.create_voucher(user, 25.0)
    lapsed = voucher_service.create_voucher(user, 10.0)
    # Backdate one voucher so the expired listing has something to promote
    Voucher.objects(voucher_code=lapsed["voucherCode"]).update_one(
        set__expiry_date=datetime.now(timezone.utc) - timedelta(days=1),
    )


def seed() -> None:
    init_mongo()
    try:
        Voucher.drop_collection()
        Cart.drop_collection()
        User.drop_collection()

        users = _ensure_users()
        _ensure_cart(users[0])
        _ensure_vouchers(users[0])
        print("Seed completed.")
    finally:
        close_mongo()


if __name__ == "__main__":
    seed()
