from mongoengine import StringField, IntField, FloatField, ListField, EmbeddedDocumentField

from app.models.base import BaseEmbeddedDocument
from app.models.owner import OwnedDocument


class CartItem(BaseEmbeddedDocument):
    """Embedded: one line of a cart.

    Fields:
    - book_name (str): catalog volume identifier, the line's identity key
    - quantity (int, >= 1)
    - price (float): unit price at the time the line was added
    """
    book_name = StringField(required=True, null=False)
    quantity = IntField(required=True, null=False, min_value=1)
    price = FloatField(required=True, null=False, min_value=0)


class Cart(OwnedDocument):
    """A user's persisted shopping cart. At most one per user_id."""
    items = ListField(EmbeddedDocumentField(CartItem), null=False, default=list)

    meta = {
        "collection": "carts",
        "indexes": [
            {"fields": ["user_id"], "unique": True},
        ],
    }

    def find_item(self, book_name: str) -> int:
        """Index of the line for `book_name`, or -1."""
        for idx, item in enumerate(self.items):
            if item.book_name == book_name:
                return idx
        return -1
