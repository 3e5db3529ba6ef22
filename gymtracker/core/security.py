"""Security utilities: password hashing (passlib) and signed credentials (JWT)."""

from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from gymtracker.core.clock import utc_now
from gymtracker.core.config import get_settings
from gymtracker.core.errors import Unauthorized
from gymtracker.schemas.user import CurrentUser

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return password_context.verify(plain, hashed)
    except ValueError:
        # Not a recognisable hash (e.g. legacy plaintext row)
        return False


def create_access_token(identity: CurrentUser, expires_delta: timedelta | None = None) -> str:
    """Sign a credential carrying ``{id, username, email}``; defaults to the configured lifetime."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)
    now = utc_now()
    claims = {
        "id": identity.id,
        "username": identity.username,
        "email": identity.email,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> CurrentUser:
    """Verify signature and expiry; raises Unauthorized on any defect."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise Unauthorized("Invalid or expired token") from exc
    try:
        return CurrentUser(
            id=payload["id"],
            username=payload["username"],
            email=payload["email"],
        )
    except (KeyError, ValueError) as exc:
        raise Unauthorized("Invalid or expired token") from exc
