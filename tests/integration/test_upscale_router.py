"""Integration tests for premium logo upscaling."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from logo_forge.generation.upscale import ReplicateUpscaler

UPSCALED = "https://replicate.delivery/upscaled.png"


@pytest.fixture
def replicate_client(app):
    from logo_forge import deps
    client = MagicMock()
    client.async_run = AsyncMock(return_value=UPSCALED)
    deps._upscaler = ReplicateUpscaler(api_token="r8_test", model="real-esrgan", client=client)
    return client


@pytest.fixture
async def premium_user(client, admin_headers, user_headers):
    resp = await client.put(
        "/users/user_alice/entitlement", json={"unlimited": True}, headers=admin_headers,
    )
    assert resp.status_code == 200
    return user_headers


class TestUpscale:
    async def test_requires_sign_in(self, client, replicate_client):
        resp = await client.post("/upscale", json={"imageUrl": "https://cdn/a.png"})
        assert resp.status_code == 401
        replicate_client.async_run.assert_not_awaited()

    async def test_free_account_rejected(self, client, replicate_client, user_headers):
        resp = await client.post(
            "/upscale", json={"imageUrl": "https://cdn/a.png"}, headers=user_headers,
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "PREMIUM_REQUIRED"
        replicate_client.async_run.assert_not_awaited()

    async def test_premium_upscale(self, client, replicate_client, premium_user):
        resp = await client.post(
            "/upscale", json={"imageUrl": "https://cdn/a.png", "scale": 2}, headers=premium_user,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["originalUrl"] == "https://cdn/a.png"
        assert data["upscaledUrl"] == UPSCALED
        assert data["scale"] == 2
        assert data["processingTime"] >= 0

    async def test_default_scale(self, client, replicate_client, premium_user):
        resp = await client.post(
            "/upscale", json={"imageUrl": "data:image/png;base64,AAAA"}, headers=premium_user,
        )
        assert resp.json()["scale"] == 4

    @pytest.mark.parametrize("body", [{}, {"imageUrl": "  "}, {"imageUrl": "file:///etc/passwd"}])
    async def test_bad_image_url_is_400(self, client, replicate_client, premium_user, body):
        resp = await client.post("/upscale", json=body, headers=premium_user)
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_REQUEST"

    async def test_scale_out_of_range(self, client, replicate_client, premium_user):
        resp = await client.post(
            "/upscale", json={"imageUrl": "https://cdn/a.png", "scale": 11}, headers=premium_user,
        )
        assert resp.status_code == 422

    async def test_unconfigured_provider_is_503(self, client, premium_user):
        resp = await client.post(
            "/upscale", json={"imageUrl": "https://cdn/a.png"}, headers=premium_user,
        )
        assert resp.status_code == 503
        assert resp.json()["code"] == "UPSCALE_PROVIDER"
