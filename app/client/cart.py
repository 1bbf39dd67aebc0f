"""Client-side cart state.

Mutations apply to the in-memory list right away. When a session token is
present the matching server call is then dispatched to a background worker
and, on success, the local list is rebuilt from the server's copy. Sync
failures are logged and never roll the local change back; a 401 or 404 from
the server drops the session token. Without a token the cart is local only.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from threading import RLock
from typing import Callable

from app.client.api import ApiError, BookshopApi
from app.client.books import BooksClient, BookVolume, CatalogError
from app.client.pricing import unit_price


logger = logging.getLogger(__name__)

SESSION_DROPPING_STATUSES = (401, 404)


@dataclass
class CartLine:
    book: BookVolume
    quantity: int


class CartState:
    def __init__(self, api: BookshopApi, books: BooksClient, executor: Executor | None = None):
        self._api = api
        self._books = books
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="cart-sync")
        self._lock = RLock()
        self._items: list[CartLine] = []
        self._pending: list[Future] = []

    @property
    def is_authenticated(self) -> bool:
        return self._api.session.is_authenticated

    @property
    def items(self) -> list[CartLine]:
        with self._lock:
            return [CartLine(line.book, line.quantity) for line in self._items]

    def _index(self, book_id: str) -> int:
        for idx, line in enumerate(self._items):
            if line.book.id == book_id:
                return idx
        return -1

    def _resolve(self, book_name: str) -> BookVolume:
        try:
            return self._books.details(book_name)
        except CatalogError:
            return BookVolume.stub(book_name)

    def _reconcile(self, payload: dict) -> None:
        data = payload.get("data") if payload.get("success") else None
        if not data or "items" not in data:
            return
        lines = [CartLine(self._resolve(item["bookName"]), item["quantity"]) for item in data["items"]]
        with self._lock:
            self._items = lines

    def _sync(self, call: Callable[[], dict], action: str, reconcile: bool = True) -> None:
        try:
            payload = call()
        except ApiError as exc:
            logger.warning("Error %s on server: %s", action, exc.message)
            if exc.status_code in SESSION_DROPPING_STATUSES:
                self._api.session.clear_token()
            return
        if reconcile:
            self._reconcile(payload)

    def _dispatch(self, call: Callable[[], dict], action: str, reconcile: bool = True) -> Future | None:
        if not self.is_authenticated:
            return None
        future = self._executor.submit(self._sync, call, action, reconcile)
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def load(self) -> Future | None:
        """Replace local state with the server cart."""
        return self._dispatch(self._api.get_cart, "fetching cart")

    def add(self, book: BookVolume, quantity: int = 1) -> Future | None:
        with self._lock:
            idx = self._index(book.id)
            if idx != -1:
                self._items[idx].quantity += quantity
            else:
                self._items.append(CartLine(book, quantity))
        return self._dispatch(
            lambda: self._api.add_to_cart(book.id, quantity, unit_price(book)),
            "adding to cart",
        )

    def remove(self, book_id: str) -> Future | None:
        with self._lock:
            self._items = [line for line in self._items if line.book.id != book_id]
        return self._dispatch(lambda: self._api.remove_from_cart(book_id), "removing from cart")

    def update_quantity(self, book_id: str, quantity: int) -> Future | None:
        if quantity <= 0:
            return self.remove(book_id)
        with self._lock:
            idx = self._index(book_id)
            if idx != -1:
                self._items[idx].quantity = quantity
        return self._dispatch(lambda: self._api.update_cart_item(book_id, quantity), "updating cart item")

    def clear(self) -> Future | None:
        with self._lock:
            self._items = []
        return self._dispatch(self._api.clear_cart, "clearing cart", reconcile=False)

    def item_count(self) -> int:
        with self._lock:
            return sum(line.quantity for line in self._items)

    def total_price(self) -> float:
        with self._lock:
            return round(sum(unit_price(line.book) * line.quantity for line in self._items), 2)

    def wait(self, timeout: float | None = None) -> None:
        """Block until dispatched server calls have finished."""
        with self._lock:
            pending = list(self._pending)
        for future in pending:
            future.result(timeout=timeout)

    def close(self) -> None:
        """Finish pending syncs and stop the worker this cart started."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
