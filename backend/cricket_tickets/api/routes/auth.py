"""
Authentication endpoints: register, login and the current user.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.security import AuthContext, require_user
from cricket_tickets.db.session import get_db
from cricket_tickets.repositories import UserRepository
from cricket_tickets.schemas.user import UserCreate, UserResponse, UserLogin, Token
from cricket_tickets.services.auth_service import register_user, authenticate_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user account."""
    user = await register_user(db, user_data)
    return user


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_user(db, login_data)
    return Token(access_token=token)


@router.get("/me", response_model=UserResponse)
async def me(
    ctx: AuthContext = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await UserRepository(db).get(ctx.user_id)
