"""
Pytest configuration and fixtures for the RBAC service tests.
"""
import os
import pytest
import pytest_asyncio

# Set test environment before importing samudra modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-only"
os.environ["WRITE_RATE_LIMIT"] = "1000/minute"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from samudra.core.database.base import Base  # noqa: E402
from samudra.features.permissions.models import Permission  # noqa: E402,F401
from samudra.features.roles.models import Role  # noqa: E402,F401
from samudra.features.permissions.service import PermissionService  # noqa: E402
from samudra.features.roles.service import RoleService  # noqa: E402
from tests.fakes import FakePermissionRepository, FakeRoleRepository  # noqa: E402


@pytest.fixture
def permission_repo() -> FakePermissionRepository:
    return FakePermissionRepository()


@pytest.fixture
def role_repo(permission_repo) -> FakeRoleRepository:
    return FakeRoleRepository(permission_repo)


@pytest.fixture
def permission_service(permission_repo, role_repo) -> PermissionService:
    return PermissionService(permission_repo, role_repo)


@pytest.fixture
def role_service(permission_repo, role_repo) -> RoleService:
    return RoleService(role_repo, permission_repo)


@pytest_asyncio.fixture
async def db_session():
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def sample_permission_data() -> dict:
    return {"name": "Read User", "module": "user", "action": "read"}
