"""Authentication endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.database import get_db
from groundbook.core.exceptions import GroundBookError
from groundbook.core.security import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from groundbook.models.user import User
from groundbook.schemas.user import AuthResponse, UserLogin, UserPublic, UserRegister
from groundbook.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserPublic, status_code=201)
async def register(
    user: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new account.

    Args:
        user: Name, email and password
        db: Database session

    Returns:
        Created user
    """
    try:
        if await user_service.get_user_by_email(db, user.email):
            raise HTTPException(status_code=400, detail="User already exists")

        return await user_service.create_user(
            db, user.name, user.email, hash_password(user.password)
        )
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    """
    Exchange email and password for a bearer token.

    Args:
        credentials: Email and password
        db: Database session

    Returns:
        User details with the token
    """
    try:
        user = await user_service.get_user_by_email(db, credentials.email)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return AuthResponse(
        **UserPublic.model_validate(user).model_dump(),
        token=create_access_token(user.id),
    )


@router.get("/check", response_model=UserPublic)
async def check(current_user: User = Depends(get_current_user)):
    """Return the user the bearer token belongs to."""
    return current_user
