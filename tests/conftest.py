"""Shared test fixtures and helpers."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from groundbook.core.database import get_db, init_db
from groundbook.core.security import create_access_token, hash_password
from groundbook.main import app
from groundbook.models import Booking, BookingStatus, Ground, User

BOOKING_DATE = date(2030, 5, 17)

DESCRIPTION = (
    "Full size turf ground with floodlights, changing rooms and parking for forty cars."
)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'groundbook.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def user(db):
    return await make_user(db)


@pytest.fixture
async def admin(db):
    return await make_user(db, name="Admin", email="admin@example.com", role="admin")


@pytest.fixture
async def ground(db, admin):
    return await make_ground(db, created_by=admin.id)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


async def make_user(
    db: AsyncSession,
    name: str = "Asha Rao",
    email: str = "asha@example.com",
    role: str = "user",
    password: str = "secret123",
) -> User:
    """Helper to create a User."""
    user = User(name=name, email=email, role=role, password_hash=hash_password(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_ground(db: AsyncSession, **overrides) -> Ground:
    """Helper to create a Ground with sensible defaults."""
    fields = dict(
        name="City Turf",
        description=DESCRIPTION,
        price=Decimal("500.00"),
        opening_time="06:00",
        closing_time="22:00",
        is_24x7=False,
        address="12 MG Road",
        city="Pune",
        state="Maharashtra",
        pincode="411001",
        gallery=["https://img.example.com/turf.jpg"],
        cover="https://img.example.com/turf.jpg",
        is_active=True,
    )
    fields.update(overrides)
    ground = Ground(**fields)
    db.add(ground)
    await db.commit()
    await db.refresh(ground)
    return ground


async def make_booking(
    db: AsyncSession,
    ground: Ground,
    user: User,
    slots: List[str],
    booking_date: date = BOOKING_DATE,
    status: BookingStatus = BookingStatus.CONFIRMED,
    total_amount: Optional[Decimal] = None,
) -> Booking:
    """Helper to insert a Booking directly, bypassing validation."""
    booking = Booking(
        ground_id=ground.id,
        user_id=user.id,
        date=booking_date,
        time_slots=slots,
        status=status.value,
        total_amount=total_amount if total_amount is not None else Decimal("1000.00") * len(slots),
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking
