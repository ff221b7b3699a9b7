"""User account lookups and registration."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.exceptions import StoreUnavailable
from groundbook.models.user import User

logger = logging.getLogger(__name__)


async def _first(db: AsyncSession, query, operation: str) -> Optional[User]:
    try:
        result = await db.execute(query)
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Failed {operation}: {e}", exc_info=True)
        raise StoreUnavailable(operation) from e


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await _first(db, select(User).where(User.id == user_id), "user lookup")


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Find a user by email, case-insensitively."""
    return await _first(db, select(User).where(User.email == email.lower()), "user lookup")


async def create_user(db: AsyncSession, name: str, email: str, password_hash: str) -> User:
    """
    Store a new account with the default role.

    Raises:
        StoreUnavailable: If the insert fails
    """
    user = User(name=name.strip(), email=email.lower(), password_hash=password_hash)
    db.add(user)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to register user: {e}", exc_info=True)
        raise StoreUnavailable("user insert") from e

    await db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user
