from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import Field

from app.api.schemas import CamelBody
from app.models.user import User
from app.services import voucher as voucher_service
from app.services.auth import get_current_user
from app.utils.base import envelope


router = APIRouter(dependencies=[Depends(get_current_user)])


class CreateVoucherBody(CamelBody):
    voucher_price: Annotated[float, Field(allow_inf_nan=False)] | None = None


class VoucherCodeBody(CamelBody):
    voucher_code: str | None = None


@router.post("", status_code=201)
def create_voucher(body: CreateVoucherBody, current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Buy a voucher worth `voucherPrice`, valid for one year."""
    return envelope(voucher_service.create_voucher(current_user, body.voucher_price))


@router.get("/active")
def list_active(current_user: User = Depends(get_current_user)) -> dict:
    vouchers = voucher_service.list_active(current_user)
    return envelope(vouchers, count=len(vouchers))


@router.get("/expired")
def list_expired(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Used or lapsed vouchers. Persists the expired flag on lapsed ones."""
    vouchers = voucher_service.list_expired(current_user)
    return envelope(vouchers, count=len(vouchers))


@router.post("/validate")
def validate_voucher(body: VoucherCodeBody) -> dict:
    """PROTECTED: Check a code without redeeming it."""
    return envelope(voucher_service.validate_voucher(body.voucher_code))


@router.post("/apply")
def apply_voucher(body: VoucherCodeBody) -> dict:
    """PROTECTED: Redeem a code; it cannot be applied again."""
    return envelope(voucher_service.apply_voucher(body.voucher_code), message="Voucher applied successfully")
