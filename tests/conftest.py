"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Every test gets a fresh schema, a fresh app built by create_app() with test
settings (so rate-limit counters start at zero), and a client on an https
base URL so Secure cookies round-trip.
"""

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from budget_overflow.config import Settings
from budget_overflow.database import Base, get_db
from budget_overflow.main import create_app
from budget_overflow.models import *  # noqa: F401,F403 — register all models with metadata
from budget_overflow.models.category import Category
from budget_overflow.models.transaction import Transaction
from budget_overflow.models.user import User
from budget_overflow.seed import seed_global_categories

# ---------------------------------------------------------------------------
# 테스트 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite://"
ORIGIN = "http://localhost:5173"
PASSWORD = "Secret#123"
REFRESH_PATH = "/api/auth/refresh"


def make_settings(**overrides) -> Settings:
    """테스트용 설정 — .env 파일은 읽지 않습니다 (Test settings, ignoring any .env file)."""
    values = {
        "DATABASE_URL": TEST_DATABASE_URL,
        "JWT_SECRET_KEY": "test-secret-key",
        "BCRYPT_ROUNDS": 4,
        "CORS_ORIGIN": ORIGIN,
        "LOG_FORMAT": "text",
        "LOG_LEVEL": "WARNING",
        "AXIOM_API_TOKEN": "",
        "AXIOM_DATASET": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(request: pytest.FixtureRequest) -> Settings:
    """기본 테스트 설정 — indirect 파라미터로 항목을 덮어쓸 수 있음.

    Usage:
        @pytest.mark.parametrize("settings", [{"RATE_LIMIT_LOGIN_IP": "2/minute"}], indirect=True)
    """
    return make_settings(**getattr(request, "param", {}))


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 앱, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 단일 커넥션을 공유하는 인메모리 DB."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def app(settings: Settings, db: AsyncSession) -> FastAPI:
    """테스트 설정으로 생성한 앱 — DB 세션을 오버라이드합니다."""
    application = create_app(settings)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = _override_get_db
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(
    db: AsyncSession,
    app: FastAPI,
    email: str = "jane@example.com",
    password: str = PASSWORD,
    first_name: str = "Jane",
    last_name: str = "Doe",
) -> User:
    """비밀번호가 해시된 사용자를 생성하고 커밋합니다."""
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=app.state.password_hasher.hash_password(password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(db: AsyncSession, app: FastAPI) -> User:
    return await create_user(db, app)


@pytest_asyncio.fixture
async def other_user(db: AsyncSession, app: FastAPI) -> User:
    return await create_user(db, app, email="john@example.com", first_name="John", last_name="Smith")


@pytest.fixture
def token(app: FastAPI, user: User) -> str:
    return app.state.token_issuer.create_access_token(user.id)


@pytest.fixture
def other_token(app: FastAPI, other_user: User) -> str:
    return app.state.token_issuer.create_access_token(other_user.id)


@pytest_asyncio.fixture
async def global_categories(db: AsyncSession) -> dict[str, Category]:
    """전역 카테고리 시드."""
    await seed_global_categories(db)
    await db.commit()

    result = await db.execute(select(Category).where(Category.user_id.is_(None)))
    return {c.name: c for c in result.scalars().all()}


async def create_transaction(
    db: AsyncSession,
    owner: User,
    title: str = "Paycheck",
    amount: str = "100.00",
    txn_type: str = "income",
    on: date = date(2025, 1, 15),
    category: Category | None = None,
) -> Transaction:
    txn = Transaction(
        user_id=owner.id,
        category_id=category.id if category else None,
        title=title,
        amount=Decimal(amount),
        type=txn_type,
        date=on,
    )
    db.add(txn)
    await db.commit()
    await db.refresh(txn)
    return txn


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def refresh_headers(raw_token: str, origin: str = ORIGIN) -> dict[str, str]:
    """리프레시 쿠키와 출처 헤더 (Refresh cookie plus a matching Origin header)."""
    return {"Cookie": f"refreshToken={raw_token}", "Origin": origin}


def cleared_cookie(res: Response, name: str) -> bool:
    """응답이 해당 쿠키를 삭제하는지 확인합니다 (Whether the response expires the cookie)."""
    return any(
        header.startswith(f"{name}=") and "Max-Age=0" in header
        for header in res.headers.get_list("set-cookie")
    )


async def login(client: AsyncClient, email: str = "jane@example.com", password: str = PASSWORD) -> Response:
    return await client.post("/api/auth/login", json={"email": email, "password": password})
