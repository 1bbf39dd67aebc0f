"""Typed access to the public book-search API.

Vendor records are loosely shaped: every field other than the volume id may
be missing, so all of them are optional here and absent price or image data
is handled by the pricing helpers.
"""
from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.client.config import client_settings
from app.utils.base import OrderBy, PrintType


logger = logging.getLogger(__name__)


class VendorModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ImageLinks(VendorModel):
    thumbnail: str | None = None
    small_thumbnail: str | None = None
    small: str | None = None
    medium: str | None = None
    large: str | None = None
    extra_large: str | None = None


class VolumeInfo(VendorModel):
    title: str = "Untitled"
    authors: list[str] = Field(default_factory=list)
    publisher: str | None = None
    published_date: str | None = None
    description: str | None = None
    page_count: int | None = None
    categories: list[str] = Field(default_factory=list)
    image_links: ImageLinks | None = None
    preview_link: str | None = None
    info_link: str | None = None
    language: str | None = None
    maturity_rating: str | None = None


class Money(VendorModel):
    amount: float | None = None
    currency_code: str | None = None


class SaleInfo(VendorModel):
    list_price: Money | None = None
    retail_price: Money | None = None
    buy_link: str | None = None
    is_ebook: bool | None = None
    saleability: str | None = None


class AccessInfo(VendorModel):
    web_reader_link: str | None = None
    public_domain: bool | None = None
    embeddable: bool | None = None
    text_to_speech_permission: str | None = None


class BookVolume(VendorModel):
    id: str
    volume_info: VolumeInfo = Field(default_factory=VolumeInfo)
    sale_info: SaleInfo | None = None
    access_info: AccessInfo | None = None

    @classmethod
    def stub(cls, volume_id: str) -> BookVolume:
        """Minimal record for an id that could not be looked up."""
        return cls(id=volume_id, volume_info=VolumeInfo(title=volume_id))

    @property
    def retail_amount(self) -> float | None:
        if self.sale_info and self.sale_info.retail_price:
            return self.sale_info.retail_price.amount or None
        return None

    @property
    def list_amount(self) -> float | None:
        if self.sale_info and self.sale_info.list_price:
            return self.sale_info.list_price.amount or None
        return None


class BookSearchResponse(VendorModel):
    kind: str | None = None
    total_items: int = 0
    items: list[BookVolume] = Field(default_factory=list)


class CatalogError(Exception):
    pass


class BooksClient:
    """Read-only client for the external volumes endpoint."""

    def __init__(self, http: httpx.Client | None = None, api_key: str | None = None):
        self._http = http or httpx.Client(base_url=client_settings.books_api_url, timeout=client_settings.timeout_seconds)
        self._api_key = api_key if api_key is not None else client_settings.books_api_key

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: dict, failure: str, model: type[VendorModel]):
        if self._api_key:
            params = {**params, "key": self._api_key}
        try:
            response = self._http.get(path, params=params)
            response.raise_for_status()
            return model.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("%s: %s", failure, exc)
            raise CatalogError(failure) from exc

    def search(
        self,
        query: str,
        start_index: int = 0,
        max_results: int = 12,
        order_by: OrderBy = OrderBy.RELEVANCE,
        print_type: PrintType = PrintType.ALL,
    ) -> BookSearchResponse:
        params = {
            "q": query,
            "startIndex": start_index,
            "maxResults": max_results,
            "orderBy": order_by.value,
            "printType": print_type.value,
        }
        return self._get("/volumes", params, "Failed to fetch books", BookSearchResponse)

    def by_category(
        self,
        category: str,
        start_index: int = 0,
        max_results: int = 12,
        print_type: PrintType = PrintType.BOOKS,
    ) -> BookSearchResponse:
        return self.search(f"subject:{category}", start_index, max_results, OrderBy.RELEVANCE, print_type)

    def quick_search(self, query: str, max_results: int = 10, print_type: PrintType = PrintType.BOOKS) -> BookSearchResponse:
        params = {"q": query, "maxResults": max_results, "printType": print_type.value}
        return self._get("/volumes", params, "Failed to search books", BookSearchResponse)

    def details(self, volume_id: str) -> BookVolume:
        return self._get(f"/volumes/{quote(volume_id, safe='')}", {}, "Failed to fetch book details", BookVolume)
