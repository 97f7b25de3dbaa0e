"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh schema on its own Database handle, installed on
`app.state` exactly as the application lifespan would do it. Defaults to an
in-memory SQLite database; set TEST_DATABASE_URL to run against PostgreSQL.
"""

import os

# Must be set before the app (and its cached settings) is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["REDIS_ENABLED"] = "false"

from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from app.main import app
from app.core.config import get_settings
from app.core.security import hash_password
from app.db.session import Database
from app.models.company import Company
from app.models.user import User
from app.models.event import Event
from app.models.ticket import Ticket
from app.schemas.event import EventCreate
from app.schemas.ticket import TicketCreate
from app.services import event_service, session_service, ticket_service

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
TEST_PASSWORD = "senha-segura-123"

settings = get_settings()


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """Create tables, install the handle on the app, then drop tables for isolation."""
    db = Database.from_url(TEST_DATABASE_URL, settings)
    await db.create_schema()
    app.state.database = db

    yield db

    await db.drop_schema()
    await db.close()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.sessionmaker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _add(database: Database, instance):
    async with database.sessionmaker() as session:
        session.add(instance)
        await session.commit()
    return instance


async def create_company(database: Database, **overrides) -> Company:
    values = {
        "name": "Acme Eventos",
        "slug": "acme",
        "cnpj": "11222333000181",
        "subscription_plan": "premium",
        "subscription_status": "active",
        "settings": {},
        "is_active": True,
    }
    values.update(overrides)
    return await _add(database, Company(**values))


async def create_user(database: Database, company: Company, role: str = "admin", **overrides) -> User:
    username = overrides.pop("username", f"{role}{company.slug.replace('-', '')}")
    values = {
        "company_id": company.id,
        "username": username,
        "email": f"{username}@example.com",
        "password": hash_password(overrides.pop("password", TEST_PASSWORD)),
        "role": role,
        "status": True,
    }
    values.update(overrides)
    return await _add(database, User(**values))


async def session_headers(database: Database, user: User) -> dict:
    """Open a login session for `user` and return the matching Cookie header."""
    async with database.sessionmaker() as session:
        login_session = await session_service.create(session, user.id, user.company_id)
        await session.commit()
    return {"Cookie": f"{settings.SESSION_COOKIE_NAME}={login_session.token}"}


@pytest.fixture
def password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def login(database: Database):
    """Factory: open a session for a user and get its Cookie header."""

    async def _login(user: User) -> dict:
        return await session_headers(database, user)

    return _login


@pytest_asyncio.fixture
async def company(database: Database) -> Company:
    return await create_company(database)


@pytest_asyncio.fixture
async def other_company(database: Database) -> Company:
    return await create_company(
        database,
        name="Outra Produtora",
        slug="outra",
        cnpj="99888777000166",
        subscription_plan="free",
    )


@pytest_asyncio.fixture
async def admin_user(database: Database, company: Company) -> User:
    return await create_user(database, company, role="admin")


@pytest_asyncio.fixture
async def manager_user(database: Database, company: Company) -> User:
    return await create_user(database, company, role="manager")


@pytest_asyncio.fixture
async def operator_user(database: Database, company: Company) -> User:
    return await create_user(database, company, role="operator")


@pytest_asyncio.fixture
async def viewer_user(database: Database, company: Company) -> User:
    return await create_user(database, company, role="viewer")


@pytest_asyncio.fixture
async def other_admin(database: Database, other_company: Company) -> User:
    return await create_user(database, other_company, role="admin")


@pytest_asyncio.fixture
async def admin_headers(database: Database, admin_user: User) -> dict:
    return await session_headers(database, admin_user)


@pytest_asyncio.fixture
async def manager_headers(database: Database, manager_user: User) -> dict:
    return await session_headers(database, manager_user)


@pytest_asyncio.fixture
async def operator_headers(database: Database, operator_user: User) -> dict:
    return await session_headers(database, operator_user)


@pytest_asyncio.fixture
async def viewer_headers(database: Database, viewer_user: User) -> dict:
    return await session_headers(database, viewer_user)


@pytest_asyncio.fixture
async def other_admin_headers(database: Database, other_admin: User) -> dict:
    return await session_headers(database, other_admin)


@pytest_asyncio.fixture
async def test_event(database: Database, company: Company, admin_user: User) -> Event:
    """An active event of `company` with no tickets yet."""
    async with database.sessionmaker() as session:
        event = await event_service.create(
            session,
            EventCreate(event_name="Festival de Verão", category="music"),
            admin_user.id,
            company.id,
        )
        await session.commit()
    return event


@pytest_asyncio.fixture
async def test_ticket(database: Database, company: Company, admin_user: User, test_event: Event) -> Ticket:
    """A 100-unit ticket type priced at 100.00 BRL."""
    async with database.sessionmaker() as session:
        ticket = await ticket_service.create(
            session,
            TicketCreate(
                event_id=test_event.id,
                code="PISTA",
                name="Pista",
                unit_value=Decimal("90.00"),
                price=Decimal("100.00"),
                quantity=1,
                stock_total=100,
                type="inteira",
                category="pista",
                sales_start_at=datetime.now(timezone.utc) - timedelta(days=1),
                sales_end_at=datetime.now(timezone.utc) + timedelta(days=30),
            ),
            admin_user.id,
            company.id,
        )
        await session.commit()
    return ticket
