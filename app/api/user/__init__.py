from fastapi import APIRouter, Depends
from pydantic import EmailStr

from app.api.schemas import CamelBody
from app.models.user import User
from app.utils.base import envelope
from app.services.auth import (
    get_current_user,
    login_user,
    register_user,
    update_profile,
)


router = APIRouter()


class RegisterBody(CamelBody):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    contact_number: str | None = None
    address: str | None = None


@router.post("/register", status_code=201)
def register(body: RegisterBody) -> dict:
    """PUBLIC: Create an account and return the profile with a session token."""
    return envelope(register_user(**body.model_dump()))


class LoginBody(CamelBody):
    email: str | None = None
    password: str | None = None


@router.post("/login")
def login(body: LoginBody) -> dict:
    """PUBLIC: Exchange email and password for a session token."""
    return envelope(login_user(body.email, body.password))


@router.get("/profile")
def get_profile(current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Profile of the token's user."""
    return envelope(current_user.to_profile())


class ProfileBody(CamelBody):
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    contact_number: str | None = None
    address: str | None = None


@router.put("/profile")
def put_profile(body: ProfileBody, current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED: Update the provided fields; returns a fresh token."""
    return envelope(update_profile(current_user, **body.model_dump(exclude_none=True)))
