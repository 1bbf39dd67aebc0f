import logging
import random
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from mongoengine import NotUniqueError, ValidationError as DocumentValidationError
from passlib.context import CryptContext
from jose import jwt, JWTError

from app.models.user import User
from app.utils.base import AuthError, ConflictError, InternalError, TokenType, ValidationError
from app.utils.config import settings


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.password_hash_rounds)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login", auto_error=False)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def create_token(subject: str, expires_delta: timedelta, token_type: str) -> str:
    """Create a signed JWT with subject, expiration and type."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "typ": token_type,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user: User) -> str:
    return create_token(
        subject=user.user_id,
        expires_delta=timedelta(days=settings.access_token_expires_days),
        token_type=TokenType.ACCESS.value,
    )


def decode_access_token(token: str) -> str:
    """Return the user_id embedded in a valid access token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthError("Not authorized, token failed")
    user_id = payload.get("sub")
    if not user_id or payload.get("typ") != TokenType.ACCESS.value:
        raise AuthError("Not authorized, token failed")
    return user_id


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> User:
    """Auth dependency that validates a bearer token and returns the user.

    Rejects a missing or malformed header, a bad signature, an expired token
    and tokens whose user no longer exists.
    """
    if not token:
        raise AuthError("Not authorized, no token")
    user_id = decode_access_token(token)
    user = User.objects(user_id=user_id).first()
    if not user:
        raise AuthError("Not authorized, token failed")
    return user


def generate_user_id() -> str:
    return str(random.randint(10_000_000, 99_999_999))


def _unique_user_id() -> str:
    for attempt in range(1, settings.user_id_max_attempts + 1):
        candidate = generate_user_id()
        if not User.objects(user_id=candidate).first():
            return candidate
        logger.info("userId collision on attempt %d", attempt)
    logger.error("Failed to generate a unique userId after %d attempts", settings.user_id_max_attempts)
    raise InternalError("Could not generate a unique user ID")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _save_user(user: User) -> None:
    try:
        user.save()
    except NotUniqueError as exc:
        # A user_id clash means two signups drew the same id concurrently
        if "user_id" in str(exc):
            logger.error("userId %s collided on insert", user.user_id)
            raise InternalError("Could not generate a unique user ID")
        raise ConflictError("User with this email already exists")
    except DocumentValidationError as exc:
        raise ValidationError("Invalid user data", error=str(exc))


def session_payload(user: User) -> dict:
    """Public profile plus a freshly signed token."""
    return {**user.to_profile(), "token": create_access_token(user)}


def register_user(
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    password: str | None,
    contact_number: str | None,
    address: str | None,
) -> dict:
    if not all([first_name, last_name, email, password, contact_number, address]):
        raise ValidationError("All fields are required")
    _check_password(password)

    # Reject duplicate email signups early
    if User.objects(email=email).first():
        raise ConflictError("User with this email already exists")

    user = User(
        user_id=_unique_user_id(),
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=hash_password(password),
        contact_number=contact_number,
        address=address,
    )
    _save_user(user)
    logger.info("Registered user %s", user.user_id)
    return session_payload(user)


def login_user(email: str | None, password: str | None) -> dict:
    user = User.objects(email=email).first() if email else None
    # Same message whether or not the email exists
    if not user or not password or not verify_password(password, user.password):
        logger.info("Rejected login attempt")
        raise AuthError("Invalid credentials")
    return session_payload(user)


def update_profile(user: User, **fields) -> dict:
    """Apply the provided (truthy) profile fields and return profile + new token."""
    email = fields.get("email")
    if email and email != user.email:
        if User.objects(email=email, user_id__ne=user.user_id).first():
            raise ConflictError("User with this email already exists")
        user.email = email

    for name in ("first_name", "last_name", "contact_number", "address"):
        if fields.get(name):
            setattr(user, name, fields[name])

    password = fields.get("password")
    if password:
        _check_password(password)
        user.password = hash_password(password)

    _save_user(user)
    return session_payload(user)
