"""Price and display helpers for catalog volumes.

Volumes without vendor price data get a synthesized price derived from a
hash of their id, so the same volume is always shown at the same price.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from app.client.books import BookVolume, ImageLinks


BOOK_PLACEHOLDER_IMAGE = "/image/book-placeholder.jpg"

MIN_PRICE = 9.99
PRICE_SPREAD_CENTS = 2000
OFFER_DISCOUNT = 0.8


@dataclass
class DisplayPrice:
    price: str
    is_discounted: bool = False
    original_price: str | None = None
    discount_percentage: int | None = None


def _string_hash(value: str) -> int:
    """32-bit signed `hash * 31 + code_unit` over the UTF-16 code units of `value`."""
    h = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def consistent_price(book_id: str) -> float:
    """Deterministic price in [9.99, 29.98] for a volume id."""
    return round(abs(_string_hash(book_id)) % PRICE_SPREAD_CENTS / 100 + MIN_PRICE, 2)


def unit_price(book: BookVolume) -> float:
    """Retail price, else list price, else the synthesized price."""
    return book.retail_amount or book.list_amount or consistent_price(book.id)


def _money(amount: float) -> str:
    return f"${amount:.2f}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def display_price(book: BookVolume, apply_discount: bool = False) -> DisplayPrice:
    """Price label for a volume; `apply_discount` shows an offer price where the vendor has none."""
    retail = book.retail_amount
    listed = book.list_amount

    if not retail and not listed:
        generated = consistent_price(book.id)
        if apply_discount:
            discounted = round(generated * OFFER_DISCOUNT, 2)
            return DisplayPrice(_money(discounted), True, _money(generated), 20)
        return DisplayPrice(_money(generated))

    if retail and listed and retail < listed:
        return DisplayPrice(_money(retail), True, _money(listed), _round_half_up((1 - retail / listed) * 100))
    if retail:
        if apply_discount and not listed:
            return DisplayPrice(_money(retail), True, _money(round(retail * 1.25, 2)), 20)
        return DisplayPrice(_money(retail))
    return DisplayPrice(_money(listed))


def optimal_image_url(image_links: ImageLinks | None) -> str:
    """Largest available image, falling back to the placeholder."""
    if not image_links:
        return BOOK_PLACEHOLDER_IMAGE
    return (
        image_links.large
        or image_links.medium
        or image_links.small
        or image_links.thumbnail
        or image_links.small_thumbnail
        or BOOK_PLACEHOLDER_IMAGE
    )


def secure_image_url(url: str | None) -> str:
    if not url:
        return BOOK_PLACEHOLDER_IMAGE
    if url.startswith("http:"):
        return "https:" + url[len("http:"):]
    return url


def author_text(authors: list[str] | None) -> str:
    if not authors:
        return "Unknown Author"
    if len(authors) == 1:
        return authors[0]
    if len(authors) == 2:
        return f"{authors[0]} and {authors[1]}"
    return f"{authors[0]} and others"
