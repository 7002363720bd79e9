"""
Shared pytest fixtures for the RegIntel test suite.

Database fixtures use a temporary-file SQLite database through aiosqlite so
that several sessions (the briefing repository opens one per read) see the
same data.
"""
import pytest
from fastapi.testclient import TestClient

from regintel.auth.service import create_user
from regintel.core.config import Settings
from regintel.core.database import create_all, create_engine_from_url, create_session_factory
from regintel.web.app import create_app

ADMIN_EMAIL = "admin@regintel.test"
ADMIN_PASSWORD = "test-password"


# --- Database Fixtures ---

@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'regintel.db'}"


@pytest.fixture
async def engine(database_url):
    engine = create_engine_from_url(database_url)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db_session):
    user = await create_user(db_session, "analyst@regintel.test", "analyst-password", "Analyst")
    await db_session.commit()
    return user


@pytest.fixture
async def other_user(db_session):
    user = await create_user(db_session, "other@regintel.test", "other-password", "Other")
    await db_session.commit()
    return user


# --- API Fixtures ---

@pytest.fixture
def test_settings(database_url):
    return Settings(
        _env_file=None,
        database_url=database_url,
        scheduler_enabled=False,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        log_level="WARNING",
    )


@pytest.fixture
def test_client(test_settings):
    """FastAPI TestClient without credentials. Entering it runs the app lifespan."""
    with TestClient(create_app(test_settings)) as client:
        yield client


@pytest.fixture
def api_client(test_client):
    """TestClient authenticated as the bootstrap admin."""
    test_client.auth = (ADMIN_EMAIL, ADMIN_PASSWORD)
    return test_client
