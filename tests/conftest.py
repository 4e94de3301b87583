import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resource_tracker.database import Base
from resource_tracker.main import create_app
from resource_tracker.state import build_state

from tests.fakes import FakeDataService

EMAIL = "owner@example.com"
PASSWORD = "s3cret-pass"


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def service():
    service = FakeDataService()
    service.add_user(EMAIL, PASSWORD, name="Ada Lovelace")
    return service


@pytest.fixture
def state(service, session_factory):
    return build_state(service, session_factory)


@pytest_asyncio.fixture
async def signed_in_state(state):
    result = await state.session.login(EMAIL, PASSWORD)
    assert result.success
    return state


@pytest.fixture
def app(service, session_factory, db_engine):
    return create_app(service=service, session_factory=session_factory, db_engine=db_engine)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def signed_in_client(app, client):
    tracker = app.state.tracker
    await tracker.session.check_session()
    response = await client.post("/api/auth/login", json={"email": EMAIL, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return client
