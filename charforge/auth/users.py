"""
FastAPI Users configuration for CharForge.

This module configures FastAPI Users with the SQLAlchemy backend, Argon2
password hashing and a bearer JWT strategy whose secret and lifetime come
from SecurityConfig.
"""

import secrets
import uuid
from typing import Any

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.exceptions import InvalidID
from fastapi_users.password import PasswordHelperProtocol
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_config
from ..database import get_async_session
from ..models.user import User
from ..structured_logging.enhanced_logging_config import get_logger
from .argon2_utils import hash_password, needs_rehash, verify_password

logger = get_logger(__name__)

TOKEN_AUDIENCE = ["fastapi-users:auth"]


class Argon2PasswordHelper(PasswordHelperProtocol):
    """Password helper routing fastapi-users hashing through argon2_utils."""

    def verify_and_update(self, plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
        verified = verify_password(plain_password, hashed_password)
        if verified and needs_rehash(hashed_password):
            return True, hash_password(plain_password)
        return verified, None

    def hash(self, password: str) -> str:
        return hash_password(password)

    def generate(self) -> str:
        return secrets.token_urlsafe()


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    """
    Custom user manager for CharForge.

    Extends FastAPI Users BaseUserManager with Argon2 password hashing.
    Token secrets fall back to the JWT secret when not configured separately.
    """

    def __init__(self, user_db: SQLAlchemyUserDatabase) -> None:
        super().__init__(user_db, password_helper=Argon2PasswordHelper())
        security = get_config().security
        self.reset_password_token_secret = security.reset_token_secret or security.jwt_secret
        self.verification_token_secret = security.verification_token_secret or security.jwt_secret

    async def on_after_register(self, user: User, request: Request | None = None) -> None:
        """Handle post-registration logic."""
        logger.info("User has registered", user_id=str(user.id))

    def parse_id(self, value: Any) -> uuid.UUID:
        """Parse a value into a UUID instance."""
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(value)
        except (ValueError, TypeError) as err:
            raise InvalidID() from err


async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    """Get user database dependency."""
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    """Get user manager dependency."""
    yield UserManager(user_db)


def get_jwt_strategy() -> JWTStrategy:
    """Build the JWT strategy from the current security configuration."""
    security = get_config().security
    return JWTStrategy(
        secret=security.jwt_secret,
        lifetime_seconds=security.jwt_lifetime_seconds,
        token_audience=TOKEN_AUDIENCE,
    )


def get_auth_backend() -> AuthenticationBackend:
    """Get authentication backend configuration."""
    bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")

    return AuthenticationBackend(
        name="jwt",
        transport=bearer_transport,
        get_strategy=get_jwt_strategy,
    )


auth_backend = get_auth_backend()

fastapi_users = FastAPIUsers[User, uuid.UUID](
    get_user_manager,
    [auth_backend],
)

get_current_user = fastapi_users.current_user(optional=True)
get_current_active_user = fastapi_users.current_user(active=True)
