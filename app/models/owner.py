from mongoengine import StringField

from app.models.base import BaseDocument
from app.models.user import User


class OwnedDocument(BaseDocument):
    """Abstract: a record keyed by the owner's user_id, carrying a copy of
    the owner's contact fields as they were at the last write."""
    user_id = StringField(required=True, null=False)
    first_name = StringField(required=True, null=False)
    last_name = StringField(required=True, null=False)
    email = StringField(required=True, null=False)
    contact_number = StringField(required=True, null=False)
    address = StringField(required=True, null=False)

    meta = {
        "abstract": True,
    }

    def snapshot_owner(self, user: User) -> None:
        self.user_id = user.user_id
        self.first_name = user.first_name
        self.last_name = user.last_name
        self.email = user.email
        self.contact_number = user.contact_number
        self.address = user.address
