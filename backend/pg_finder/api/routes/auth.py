"""
Authentication endpoints: register, login and the current caller.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.db.session import get_db
from pg_finder.core.security import get_current_caller
from pg_finder.schemas.user import UserCreate, UserResponse, UserLogin, Token, CallerSession
from pg_finder.services.auth_service import register_user, authenticate_user, get_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a tenant or owner account."""
    user = await register_user(db, user_data)
    return user


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token, user = await authenticate_user(db, login_data)
    return Token(access_token=token, role=user.role)


@router.get("/me", response_model=UserResponse)
async def me(
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    return await get_user(db, caller.id)
