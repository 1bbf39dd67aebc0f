from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.client.config import client_settings
from app.client.session import SessionStore


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the bookshop API, or no answer at all (status_code None)."""

    def __init__(self, status_code: int | None, message: str, payload: dict | None = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(f"{status_code}: {message}" if status_code else message)


class BookshopApi:
    """Client for the bookshop REST API.

    Attaches the session's bearer token to every request and drops the
    session when the server answers 401.
    """

    def __init__(self, session: SessionStore, http: httpx.Client | None = None):
        self.session = session
        self._http = http or httpx.Client(
            base_url=client_settings.api_base_url,
            timeout=client_settings.timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = self._http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Connection error on %s %s: %s", method, path, exc)
            raise ApiError(None, "Connection error or timeout. Server might be down.") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code == 401:
            self.session.clear()
        if response.is_error:
            message = payload.get("message") or payload.get("error") or response.reason_phrase
            logger.warning("API error on %s %s: %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message, payload)
        return payload

    def _remember(self, payload: dict) -> dict:
        data = payload.get("data") or {}
        token = data.get("token")
        if token:
            self.session.save(token, data)
        else:
            logger.warning("No token found in auth response")
        return payload

    # Auth
    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        contact_number: str,
        address: str,
    ) -> dict:
        payload = self._request("POST", "/users/register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
            "contactNumber": contact_number,
            "address": address,
        })
        return self._remember(payload)

    def login(self, email: str, password: str) -> dict:
        return self._remember(self._request("POST", "/users/login", json={"email": email, "password": password}))

    def logout(self) -> None:
        self.session.clear()

    def current_user(self) -> dict[str, Any] | None:
        return self.session.user

    def get_profile(self) -> dict:
        return self._request("GET", "/users/profile")

    def update_profile(self, **fields: str) -> dict:
        """Fields are camelCase API names, e.g. firstName, contactNumber."""
        return self._remember(self._request("PUT", "/users/profile", json=fields))

    # Cart
    def get_cart(self) -> dict:
        return self._request("GET", "/cart")

    def add_to_cart(self, book_name: str, quantity: int, price: float) -> dict:
        return self._request("POST", "/cart", json={"bookName": book_name, "quantity": quantity, "price": price})

    def update_cart_item(self, book_name: str, quantity: int) -> dict:
        return self._request("PUT", f"/cart/{quote(book_name, safe='')}", json={"quantity": quantity})

    def remove_from_cart(self, book_name: str) -> dict:
        return self._request("DELETE", f"/cart/{quote(book_name, safe='')}")

    def clear_cart(self) -> dict:
        return self._request("DELETE", "/cart")

    # Vouchers
    def create_voucher(self, voucher_price: float) -> dict:
        return self._request("POST", "/vouchers", json={"voucherPrice": voucher_price})

    def active_vouchers(self) -> dict:
        return self._request("GET", "/vouchers/active")

    def expired_vouchers(self) -> dict:
        return self._request("GET", "/vouchers/expired")

    def validate_voucher(self, voucher_code: str) -> dict:
        return self._request("POST", "/vouchers/validate", json={"voucherCode": voucher_code})

    def apply_voucher(self, voucher_code: str) -> dict:
        return self._request("POST", "/vouchers/apply", json={"voucherCode": voucher_code})
