"""Shared test fixtures and configuration."""
import pytest
import os
from pathlib import Path
from unittest.mock import AsyncMock, Mock
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("TEXT_GENERATOR", "canned")
os.environ.setdefault("ORDER_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from quickorder.main import app
from quickorder.core.config import Settings
from quickorder.core.dependencies import Services, get_services
from quickorder.core.exceptions import GenerationError
from quickorder.db.models import Base
from quickorder.services.agents.roster import AgentRoster
from quickorder.services.chat.flow import IntakeFlow
from quickorder.services.chat.generator import CannedTextGenerator, TextGenerator
from quickorder.services.chat.state import IntakeState
from quickorder.services.chat.transcript import TranscriptRegistry
from quickorder.services.menu.in_memory_menu import InMemoryMenuProvider
from quickorder.services.menu.repository import MenuRepository
from quickorder.services.notifications.relay import NotificationRelay
from quickorder.services.notifications.toasts import ToastNotifier
from quickorder.services.orders.in_memory import InMemoryOrderRepository
from quickorder.services.orders.models import OrderDraft
from quickorder.services.orders.store import OrderStore


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PAYMENT_METHODS = ["Cash on Delivery", "Online Payment"]


class FakeClock:
    """Manually advanced clock for toast expiry."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        openai_api_key="test-key",
        text_generator="canned",
        bot_name="Test Bot",
        order_backend="memory",
        database_url=TEST_DATABASE_URL,
        dashboard_password="testpass123",
        toast_timeout_seconds=6.0,
        generation_timeout_seconds=1.0,
    )


@pytest.fixture
def roster():
    """Roster with the bundled agents (John Doe, Jane Smith, Mike Ross, Rachel Zane)."""
    return AgentRoster()


@pytest.fixture
def order_store(roster):
    """Order store over an in-memory repository."""
    return OrderStore(InMemoryOrderRepository(), roster)


@pytest.fixture
def complete_draft():
    """A draft ready to become an order."""
    return OrderDraft(
        name="Alice",
        item="Margherita Pizza",
        address="12 Baker Street",
        payment_method="Cash on Delivery",
    )


@pytest.fixture
def transcripts():
    return TranscriptRegistry()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def toasts(clock):
    return ToastNotifier(timeout_seconds=6.0, clock=clock)


@pytest.fixture
def relay(order_store, transcripts, toasts):
    """Relay attached to the order store."""
    relay = NotificationRelay(transcripts, toasts)
    relay.attach(order_store)
    yield relay
    relay.detach()


@pytest.fixture
def canned_generator():
    return CannedTextGenerator(bot_name="Test Bot")


@pytest.fixture
def failing_generator():
    """Generator whose every call fails."""
    generator = Mock(spec=TextGenerator)
    generator.generate = AsyncMock(side_effect=GenerationError("quota exceeded"))
    return generator


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
def test_menu_repository(test_menu_path):
    """Create menu repository with test data."""
    provider = InMemoryMenuProvider(menu_file=str(test_menu_path))
    return MenuRepository(provider)


@pytest.fixture
def make_flow(order_store, transcripts, canned_generator):
    """Factory for intake flows sharing the test store."""
    counter = {"n": 0}

    def _make_flow(generator: TextGenerator = None, menu_repository: MenuRepository = None) -> IntakeFlow:
        counter["n"] += 1
        session_id = f"session-{counter['n']}"
        return IntakeFlow(
            state=IntakeState(session_id=session_id),
            transcript=transcripts.get_or_create(session_id),
            store=order_store,
            generator=generator or canned_generator,
            payment_methods=PAYMENT_METHODS,
            bot_name="Test Bot",
            menu_repository=menu_repository,
            generation_timeout=1.0,
        )

    return _make_flow


@pytest.fixture
def test_services(test_settings, test_menu_repository, roster):
    """Service graph used by the API tests."""
    services = Services(
        test_settings,
        repository=InMemoryOrderRepository(),
        generator=CannedTextGenerator(bot_name=test_settings.bot_name),
        roster=roster,
        menu_repository=test_menu_repository,
    )
    yield services
    services.relay.detach()


@pytest.fixture
def test_client(test_services, test_settings, monkeypatch):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_services] = lambda: test_services

    # Override settings in modules that use it
    monkeypatch.setattr("quickorder.api.auth.settings", test_settings)

    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client(test_client, test_settings, clean_auth_sessions):
    """Create test client with valid session cookie."""
    response = test_client.post(
        "/api/auth/login",
        json={"password": test_settings.dashboard_password}
    )
    assert response.status_code == 200

    # Session cookie is automatically stored in test_client
    return test_client


@pytest.fixture
def clean_auth_sessions():
    """Clean up authentication sessions before and after tests."""
    from quickorder.api import auth
    auth._sessions.clear()
    yield
    auth._sessions.clear()


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
