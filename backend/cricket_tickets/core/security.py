"""
Password hashing, JWT tokens, and the per-request auth context.

The AuthContext is resolved once per request from the bearer token and
passed explicitly to services. Nothing here is module-level mutable state.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.config import get_settings
from cricket_tickets.core.exceptions import ForbiddenError, NotAuthenticatedError
from cricket_tickets.db.session import get_db
from cricket_tickets.models.user import User

settings = get_settings()
bearer_scheme = HTTPBearer(auto_error=False)

SIGN_IN_MESSAGE = "Please sign in to book tickets"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    payload = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload["exp"] = expire
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the subject (user id) of a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
    return payload.get("sub")


@dataclass(frozen=True)
class AuthContext:
    """Who is calling: an optional user identity and the admin flag."""

    user_id: Optional[str] = None
    is_admin: bool = False

    def require_user(self) -> str:
        if self.user_id is None:
            raise NotAuthenticatedError(SIGN_IN_MESSAGE)
        return self.user_id

    def require_admin(self) -> None:
        self.require_user()
        if not self.is_admin:
            raise ForbiddenError("Admin access required")


ANONYMOUS = AuthContext()


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
):
    """
    Resolve the caller for this request.

    Unknown, expired or inactive tokens resolve to the anonymous context;
    the operations that need a user reject it themselves. The context is
    bound to the log context for the lifetime of the request and unbound
    when the request finishes.
    """
    ctx = ANONYMOUS
    if credentials is not None:
        user_id = decode_access_token(credentials.credentials)
        if user_id is not None:
            user = await db.get(User, user_id)
            if user is not None and user.is_active:
                ctx = AuthContext(user_id=user.id, is_admin=user.is_admin)

    structlog.contextvars.bind_contextvars(user_id=ctx.user_id)
    try:
        yield ctx
    finally:
        structlog.contextvars.unbind_contextvars("user_id")


async def require_user(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    ctx.require_user()
    return ctx


async def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    ctx.require_admin()
    return ctx
