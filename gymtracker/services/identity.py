"""Registration and login."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.clock import utc_today
from gymtracker.core.errors import Conflict, Unauthorized
from gymtracker.core.security import create_access_token, hash_password, verify_password
from gymtracker.models.user import User
from gymtracker.schemas.user import CurrentUser, UserRegister

logger = logging.getLogger(__name__)

INVALID_LOGIN = "Invalid username or password"


def identity_of(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, username=user.username, email=user.email)


def issue_token(user: User) -> str:
    return create_access_token(identity_of(user))


async def get_by_username_or_email(db: AsyncSession, login: str) -> User | None:
    result = await db.execute(
        select(User).where(or_(User.username == login, User.email == login)).limit(1)
    )
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, payload: UserRegister) -> User:
    """Create an account. Conflict when the username or email is already taken."""
    existing = await db.execute(
        select(User.id).where(
            or_(User.username == payload.username, User.email == payload.email)
        ).limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        raise Conflict("Username or email is already in use")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name,
        height=payload.height,
        weight=payload.weight,
        join_date=utc_today(),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        # Lost the race against a concurrent registration for the same name/email
        await db.rollback()
        raise Conflict("Username or email is already in use") from exc
    await db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


async def authenticate_user(db: AsyncSession, login: str, password: str) -> User:
    """Same Unauthorized error for an unknown account and a wrong password."""
    user = await get_by_username_or_email(db, login)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %r", login)
        raise Unauthorized(INVALID_LOGIN)
    return user
