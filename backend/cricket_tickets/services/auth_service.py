"""
Authentication service handling user registration and login.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.config import get_settings
from cricket_tickets.core.exceptions import ConflictError, ForbiddenError, NotAuthenticatedError
from cricket_tickets.core.logging import get_logger
from cricket_tickets.core.security import create_access_token, hash_password, verify_password
from cricket_tickets.models.user import User
from cricket_tickets.repositories import UserRepository
from cricket_tickets.schemas.user import UserCreate, UserLogin

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Emails listed in ADMIN_EMAILS are registered as administrators.
    Raises 409 if email or username already exists.
    """
    users = UserRepository(db)

    if await users.get_by_email(user_data.email):
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise ConflictError("Email already registered")

    if await users.get_by_username(user_data.username):
        logger.warning("registration_failed", reason="username_exists", username=user_data.username)
        raise ConflictError("Username already taken")

    admin_emails = {email.lower() for email in get_settings().ADMIN_EMAILS}
    user = await users.add(
        User(
            email=user_data.email,
            username=user_data.username,
            hashed_password=hash_password(user_data.password),
            is_admin=user_data.email.lower() in admin_emails,
        )
    )

    logger.info("user_registered", user_id=user.id, email=user.email, is_admin=user.is_admin)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """
    Authenticate user and return JWT access token.
    Raises 401 if credentials are invalid.
    """
    user = await UserRepository(db).get_by_email(login_data.email)

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise NotAuthenticatedError("Invalid email or password")

    if not user.is_active:
        raise ForbiddenError("Account is deactivated")

    token = create_access_token(data={"sub": str(user.id)})
    logger.info("user_logged_in", user_id=user.id)
    return token
