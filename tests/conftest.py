"""Shared test fixtures."""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import app
from src.sw_client.infrastructure.credential_store import InMemoryCredentialStore
from src.sw_gateway.session import WalletSession
from tests.fakes import VALID_TOKEN, FakeRemote

REMOTE_BASE_URL = "http://remote.test/api"


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def remote_settings() -> Settings:
    return Settings(API_BASE_URL=REMOTE_BASE_URL, CACHE_DURATION_SECONDS=300)


@pytest.fixture
async def session(remote: FakeRemote, remote_settings: Settings) -> WalletSession:
    """Isolated WalletSession wired to FakeRemote, already logged in."""
    wallet_session = WalletSession(
        remote_settings,
        transport=httpx.MockTransport(remote.handler),
        credentials=InMemoryCredentialStore(VALID_TOKEN),
    )
    yield wallet_session
    await wallet_session.aclose()


@pytest.fixture
async def client(session: WalletSession) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    app.state.session = session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
