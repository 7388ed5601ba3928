"""Shared test fixtures for Logo Forge."""

import asyncio
import base64

import pytest
from httpx import ASGITransport, AsyncClient

from logo_forge.common.exceptions import GenerationUpstreamError
from logo_forge.common.security import sign_user_id
from logo_forge.generation.provider import GeneratedImage


API_KEY = "test-admin-api-key"
SECRET_KEY = "test-secret-key"
PNG_B64 = base64.b64encode(b"\x89PNG\r\n\x1a\nfake-logo").decode()


class FakeImageClient:
    """Stands in for GeminiImageClient.

    Prompts containing FAIL raise an upstream error, prompts containing SLOW
    sleep for ``delay`` seconds first.
    """

    def __init__(self, configured: bool = True, delay: float = 0.05):
        self.configured = configured
        self.delay = delay
        self.calls: list[str] = []
        self.completed: list[str] = []

    async def generate(self, prompt, reference_images=None):
        self.calls.append(prompt)
        if "SLOW" in prompt:
            await asyncio.sleep(self.delay)
        if "FAIL" in prompt:
            raise GenerationUpstreamError("provider exploded", status=500)
        self.completed.append(prompt)
        return GeneratedImage(data=PNG_B64, mime_type="image/png")

    async def aclose(self):
        pass


@pytest.fixture
def fake_gemini():
    return FakeImageClient()


@pytest.fixture
def app(monkeypatch, fake_gemini):
    """Create a test app with in-memory DB and a fake image provider."""
    monkeypatch.setenv("LOGOFORGE_DB_URL", "sqlite+aiosqlite://")
    monkeypatch.setenv("LOGOFORGE_API_KEY", API_KEY)
    monkeypatch.setenv("LOGOFORGE_SECRET_KEY", SECRET_KEY)
    monkeypatch.setenv("LOGOFORGE_INLINE_IMAGES", "true")
    monkeypatch.setenv("LOGOFORGE_STRIPE_SECRET_KEY", "")
    monkeypatch.setenv("LOGOFORGE_STRIPE_WEBHOOK_SECRET", "")
    monkeypatch.setenv("LOGOFORGE_REPLICATE_API_TOKEN", "")

    # Clear caches and singletons so new env vars take effect
    from logo_forge.common.config import get_settings
    get_settings.cache_clear()

    from logo_forge import deps
    deps.reset_singletons()
    deps._gemini = fake_gemini

    from logo_forge.app import create_app
    yield create_app()

    deps.reset_singletons()
    get_settings.cache_clear()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from logo_forge.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


@pytest.fixture
def admin_headers():
    return {"X-Logo-Forge-Api-Key": API_KEY}


def _signed_headers(user_id: str) -> dict:
    return {"X-User-Id": user_id, "X-User-Signature": sign_user_id(user_id, SECRET_KEY)}


@pytest.fixture
def signed_headers():
    """Factory for the headers the session layer attaches for a signed-in user."""
    return _signed_headers


@pytest.fixture
def user_headers():
    return _signed_headers("user_alice")


@pytest.fixture
def behind_proxy(monkeypatch):
    """Trust X-Forwarded-For, as when deployed behind a reverse proxy."""
    from logo_forge.common.config import get_settings
    monkeypatch.setenv("LOGOFORGE_TRUST_FORWARDED_FOR", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
