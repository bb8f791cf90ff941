"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database (aiosqlite), so tests are
isolated without needing a PostgreSQL server.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")

from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from pg_finder.main import app
from pg_finder.db.base import Base
from pg_finder.db.session import get_db
from pg_finder.core.security import create_access_token, hash_password
from pg_finder.models import User, Listing, Room, Bed, Booking, BookingStatus
from pg_finder.schemas.user import CallerSession
from pg_finder.services.strategy_factory import set_selection_policy

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh schema, yield a session, then dispose the engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        # Mirrors get_db: services commit their own writes
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_selection_policy():
    yield
    set_selection_policy(None)


async def _make_user(db: AsyncSession, email: str, role: str, name: str) -> User:
    user = User(
        email=email,
        full_name=name,
        role=role,
        hashed_password=hash_password("testpassword123"),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "owner@example.com", "owner", "Olivia Owner")


@pytest_asyncio.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "owner2@example.com", "owner", "Oscar Owner")


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "tenant@example.com", "tenant", "Tara Tenant")


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "tenant2@example.com", "tenant", "Theo Tenant")


@pytest.fixture
def owner_headers(owner: User) -> dict:
    return _headers_for(owner)


@pytest.fixture
def other_owner_headers(other_owner: User) -> dict:
    return _headers_for(other_owner)


@pytest.fixture
def tenant_headers(tenant: User) -> dict:
    return _headers_for(tenant)


@pytest.fixture
def other_tenant_headers(other_tenant: User) -> dict:
    return _headers_for(other_tenant)


@pytest.fixture
def owner_caller(owner: User) -> CallerSession:
    return CallerSession(id=owner.id, role="owner")


@pytest.fixture
def tenant_caller(tenant: User) -> CallerSession:
    return CallerSession(id=tenant.id, role="tenant")


@pytest.fixture
def other_tenant_caller(other_tenant: User) -> CallerSession:
    return CallerSession(id=other_tenant.id, role="tenant")


@pytest_asyncio.fixture
async def listing(db_session: AsyncSession, owner: User) -> Listing:
    """A listing open to any gender with WiFi and Food."""
    listing = Listing(
        owner_id=owner.id,
        name="Sunrise PG",
        address="12 MG Road, Bengaluru",
        description="Close to the metro",
        price=8000,
        gender_preference="any",
        amenities=["WiFi", "Food"],
        availability=True,
    )
    db_session.add(listing)
    await db_session.commit()
    await db_session.refresh(listing)
    return listing


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, listing: Listing) -> Room:
    """Room 101 with three beds: 1 and 2 vacant, 3 occupied."""
    room = Room(listing_id=listing.id, room_number="101", total_beds=3, capacity_per_bed=1)
    room.beds = [
        Bed(bed_number=1, is_occupied=False),
        Bed(bed_number=2, is_occupied=False),
        Bed(bed_number=3, is_occupied=True),
    ]
    db_session.add(room)
    await db_session.commit()
    await db_session.refresh(room)
    return room


@pytest.fixture
def beds(room: Room) -> list[Bed]:
    return sorted(room.beds, key=lambda bed: bed.bed_number)


@pytest_asyncio.fixture
async def pending_booking(db_session: AsyncSession, tenant: User, listing: Listing, room: Room, beds) -> Booking:
    booking = Booking(
        tenant_id=tenant.id,
        listing_id=listing.id,
        room_id=room.id,
        bed_id=beds[0].id,
        status=BookingStatus.PENDING.value,
        booking_date=date(2026, 11, 1),
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking
