import os
import sys
from pathlib import Path
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# Test settings (applied before the app package is imported)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("CORS_ORIGINS", "*")

# Put backend/ on sys.path so the 'app' package resolves
repo_root = Path(__file__).resolve().parents[2]
backend_path = repo_root / "backend"
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from app.main import app
from app.database import Base
from app.database import get_db as real_get_db
from app.auth.service import create_access_token
from app.users.models import User, UserRole


@pytest.fixture()
async def test_engine():
    # In-memory SQLite; StaticPool keeps every session on the same connection.
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db(test_engine):
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(db):
    async def _get_db():
        yield db
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(db):
    """Insert a user directly (no password) and return it."""
    async def _make(email: str, role: UserRole = UserRole.USER, name: str | None = None) -> User:
        user = User(email=email, name=name or email.split("@")[0], role=role.value)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _make


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture()
async def regular_user(make_user):
    return await make_user("reader@example.com", UserRole.USER)


@pytest.fixture()
async def admin_user(make_user):
    return await make_user("admin@example.com", UserRole.ADMIN)


@pytest.fixture()
async def superadmin_user(make_user):
    return await make_user("root@example.com", UserRole.SUPERADMIN)
