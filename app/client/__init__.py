from app.client.api import ApiError, BookshopApi
from app.client.books import BookSearchResponse, BooksClient, BookVolume, CatalogError
from app.client.cart import CartLine, CartState
from app.client.pricing import consistent_price, display_price, unit_price
from app.client.session import SessionStore
