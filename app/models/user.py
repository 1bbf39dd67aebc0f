from mongoengine import EmailField, StringField
from app.models.base import BaseDocument


PUBLIC_FIELDS = ("user_id", "first_name", "last_name", "email", "contact_number", "address")


class User(BaseDocument):
    """User document.

    Fields:
    - user_id (str, unique): 8-digit application identifier, the join key
      for carts and vouchers
    - first_name/last_name (str)
    - email (str, unique): Login identifier
    - password (str, hashed): Bcrypt-hashed password, never returned
    - contact_number/address (str)
    """
    user_id = StringField(required=True, null=False, unique=True, regex=r"^\d{8}$")
    first_name = StringField(required=True, null=False)
    last_name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    contact_number = StringField(required=True, null=False)
    address = StringField(required=True, null=False)

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["user_id"], "unique": True},
        ],
    }

    def to_profile(self) -> dict:
        return self.to_output(fields=PUBLIC_FIELDS)
