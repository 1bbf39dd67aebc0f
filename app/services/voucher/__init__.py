"""Gift voucher lifecycle: issue, list, validate and redeem.

A voucher is expired when it has been applied (is_expired set) or once its
expiry_date has passed. The flag is not swept in the background: the
side-effecting reads below (`list_expired`, `validate_voucher` and
`apply_voucher`) persist it via `Voucher.reconcile_expiry` when they notice
a passed expiry date. `list_active` is a pure read.
"""
import logging
import math
import secrets
from datetime import datetime, timezone

from mongoengine import NotUniqueError, Q

from app.models.user import User
from app.models.voucher import Voucher, expiry_from
from app.utils.base import ExpiredError, InternalError, NotFoundError, ValidationError
from app.utils.config import settings


logger = logging.getLogger(__name__)


def generate_voucher_code() -> str:
    return secrets.token_hex(settings.voucher_code_bytes).upper()


def _unique_voucher_code() -> str:
    for attempt in range(1, settings.voucher_code_max_attempts + 1):
        code = generate_voucher_code()
        if not Voucher.objects(voucher_code=code).first():
            return code
        logger.info("Voucher code collision on attempt %d", attempt)
    raise InternalError("Could not generate a unique voucher code")


def create_voucher(user: User, voucher_price: float | None) -> dict:
    if voucher_price is None or not math.isfinite(voucher_price) or voucher_price <= 0:
        raise ValidationError("voucherPrice must be a positive amount")

    now = datetime.now(timezone.utc)
    voucher = Voucher(
        voucher_code=_unique_voucher_code(),
        voucher_price=voucher_price,
        purchase_date=now,
        expiry_date=expiry_from(now),
        is_expired=False,
    )
    voucher.snapshot_owner(user)
    try:
        voucher.save()
    except NotUniqueError:
        # Another request inserted the same code between the check and the save
        raise InternalError("Could not generate a unique voucher code")
    logger.info("Issued voucher %s for user %s", voucher.voucher_code, user.user_id)
    return voucher.to_output()


def list_active(user: User, now: datetime | None = None) -> list[dict]:
    now = now or datetime.now(timezone.utc)
    vouchers: list[Voucher] = Voucher.objects(user_id=user.user_id, is_expired=False, expiry_date__gt=now)
    return [v.to_output() for v in vouchers if not v.is_expired_at(now)]


def list_expired(user: User, now: datetime | None = None) -> list[dict]:
    """Return expired vouchers, persisting the flag on any not yet marked."""
    now = now or datetime.now(timezone.utc)
    vouchers: list[Voucher] = Voucher.objects(
        Q(user_id=user.user_id) & (Q(is_expired=True) | Q(expiry_date__lte=now))
    )
    result = []
    for voucher in vouchers:
        if voucher.reconcile_expiry(now):
            logger.info("Voucher %s marked expired", voucher.voucher_code)
        result.append(voucher.to_output())
    return result


def _find_usable(voucher_code: str | None, now: datetime) -> Voucher:
    if not voucher_code:
        raise ValidationError("voucherCode is required")
    voucher: Voucher | None = Voucher.objects(voucher_code=voucher_code).first()
    if not voucher:
        raise NotFoundError("Voucher not found")
    if voucher.is_expired_at(now):
        voucher.reconcile_expiry(now)
        raise ExpiredError("Voucher has expired")
    return voucher


def validate_voucher(voucher_code: str | None, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    voucher = _find_usable(voucher_code, now)
    return voucher.to_output(fields=("voucher_code", "voucher_price", "expiry_date"))


def apply_voucher(voucher_code: str | None, now: datetime | None = None) -> dict:
    """Redeem a voucher. One-time use: a successful apply marks it expired."""
    now = now or datetime.now(timezone.utc)
    voucher = _find_usable(voucher_code, now)
    voucher.is_expired = True
    voucher.save()
    logger.info("Voucher %s applied", voucher.voucher_code)
    return voucher.to_output(fields=("voucher_code", "voucher_price"))
