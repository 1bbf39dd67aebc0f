from datetime import datetime, timedelta, timezone
from mongoengine import StringField, FloatField, DateTimeField, BooleanField

from app.models.base import as_utc
from app.models.owner import OwnedDocument
from app.utils.config import settings


def expiry_from(issued: datetime) -> datetime:
    """Expiry for a voucher issued at `issued`: one calendar year later by default."""
    if settings.voucher_validity_days is not None:
        return issued + timedelta(days=settings.voucher_validity_days)
    try:
        return issued.replace(year=issued.year + 1)
    except ValueError:
        # Feb 29 rolls over to Mar 1
        return issued.replace(year=issued.year + 1, month=3, day=1)


class Voucher(OwnedDocument):
    """Gift voucher.

    Fields:
    - voucher_code (str, unique): 8 uppercase hex characters
    - voucher_price (float): face value
    - purchase_date/expiry_date (datetime)
    - is_expired (bool): set on use, or once a read notices expiry_date passed
    """
    voucher_code = StringField(required=True, null=False, unique=True)
    voucher_price = FloatField(required=True, null=False, min_value=0)
    purchase_date = DateTimeField(default=lambda: datetime.now(timezone.utc), null=False)
    expiry_date = DateTimeField(required=True, null=False, default=lambda: expiry_from(datetime.now(timezone.utc)))
    is_expired = BooleanField(required=True, null=False, default=False)

    meta = {
        "collection": "vouchers",
        "indexes": [
            {"fields": ["voucher_code"], "unique": True},
            {"fields": ["user_id", "is_expired"]},
            {"fields": ["expiry_date"]},
        ],
    }

    def is_past_expiry(self, now: datetime) -> bool:
        return as_utc(self.expiry_date) <= now

    def is_expired_at(self, now: datetime) -> bool:
        """Pure check: used, or past its expiry date. Does not touch the flag."""
        return bool(self.is_expired) or self.is_past_expiry(now)

    def reconcile_expiry(self, now: datetime) -> bool:
        """Persist is_expired when the expiry date has passed. Returns True if it wrote."""
        if not self.is_expired and self.is_past_expiry(now):
            self.is_expired = True
            self.save()
            return True
        return False
