"""Pytest configuration and fixtures."""

import os

# Settings are read once at import time, so the test environment goes first.
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["SEED_MODES_ON_STARTUP"] = "false"
os.environ["ENVIRONMENT"] = "development"

import pytest
from collections.abc import AsyncGenerator
from httpx import ASGITransport, AsyncClient

from adaptive_chat.db.base import Base
from adaptive_chat.db.session import AsyncSessionLocal, engine
from adaptive_chat.main import app
from adaptive_chat.services.model_gateway import ModelGateway, get_model_gateway
from adaptive_chat.services.personas import replace_all_modes
from adaptive_chat.services.prompt_composer import PromptPayload


class FakeGateway(ModelGateway):
    """Deterministic gateway that records every prompt it is given."""

    def __init__(self) -> None:
        super().__init__()
        self.payloads: list[PromptPayload] = []
        self.title_requests: list[str] = []
        self.reply: str | None = None

    async def generate(self, payload: PromptPayload) -> str:
        self.payloads.append(payload)
        if self.reply is not None:
            return self.reply
        return f"Reply #{len(self.payloads)} to: {payload.user_message}"

    async def generate_title(self, first_message: str) -> str:
        self.title_requests.append(first_message)
        return f"About {first_message.split()[0]}"


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory schema with the persona catalog for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        await replace_all_modes(db)
    yield
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Replace the model gateway for the duration of a test."""
    gateway = FakeGateway()
    app.dependency_overrides[get_model_gateway] = lambda: gateway
    return gateway


async def register_and_login(
    client: AsyncClient,
    email: str = "ada@example.com",
    password: str = "s3cret-pass",
    name: str = "Ada",
) -> dict[str, str]:
    """Create an account and return the Authorization header for it."""
    response = await client.post(
        "/api/users/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/api/users/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def login_as(client: AsyncClient):
    """Factory: `await login_as("bob@example.com")` returns auth headers for a new account."""

    async def _login(email: str, password: str = "s3cret-pass", name: str = "User") -> dict[str, str]:
        return await register_and_login(client, email=email, password=password, name=name)

    return _login


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    return await register_and_login(client)
