"""Integration tests for the /users endpoints."""


class TestSync:
    async def test_requires_sign_in(self, client):
        resp = await client.post("/users/sync", json={})
        assert resp.status_code == 401

    async def test_sync_creates_user(self, client, user_headers):
        resp = await client.post(
            "/users/sync", json={"email": "alice@example.com"}, headers=user_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["external_id"] == "user_alice"
        assert data["email"] == "alice@example.com"
        assert data["has_unlimited"] is False


class TestProfile:
    async def test_unknown_user(self, client, user_headers):
        resp = await client.get("/users/profile", headers=user_headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    async def test_profile(self, client, user_headers):
        await client.post("/users/sync", json={}, headers=user_headers)
        await client.post("/logos/save", json={"url": "https://cdn/a.png"}, headers=user_headers)
        await client.post("/generate-batch", json={"prompts": ["x"]}, headers=user_headers)

        resp = await client.get("/users/profile", headers=user_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"]["external_id"] == "user_alice"
        assert data["saved_logos"] == 1
        assert data["usage"]["used"] == 1
        assert data["usage"]["tier"] == "free"


class TestMigrate:
    async def test_migrates_logos_and_usage(self, client, user_headers):
        resp = await client.post(
            "/users/migrate",
            json={
                "email": "alice@example.com",
                "localStorageData": {
                    "savedLogos": [{"url": "data:image/png;base64,AAA", "prompt": "fox"}],
                    "generationsUsed": 2,
                },
            },
            headers=user_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["logos_imported"] == 1
        assert data["usage"]["used"] == 2
        assert data["usage"]["remaining"] == 1

    async def test_credits_used_takes_precedence(self, client, user_headers):
        resp = await client.post(
            "/users/migrate",
            json={"localStorageData": {"generationsUsed": 0, "creditsUsed": 9}},
            headers=user_headers,
        )
        assert resp.json()["usage"]["used"] == 3

    async def test_negative_count_rejected(self, client, user_headers):
        resp = await client.post(
            "/users/migrate",
            json={"localStorageData": {"generationsUsed": -1}},
            headers=user_headers,
        )
        assert resp.status_code == 422


class TestEntitlement:
    async def test_requires_api_key(self, client):
        resp = await client.put(
            "/users/user_alice/entitlement",
            json={"unlimited": True},
            headers={"X-Logo-Forge-Api-Key": "wrong"},
        )
        assert resp.status_code == 403

    async def test_grant_and_revoke(self, client, admin_headers, user_headers):
        resp = await client.put(
            "/users/user_alice/entitlement",
            json={"unlimited": True, "payment_reference": "manual"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["has_unlimited"] is True
        assert (await client.get("/usage", headers=user_headers)).json()["tier"] == "premium"

        resp = await client.put(
            "/users/user_alice/entitlement", json={"unlimited": False}, headers=admin_headers,
        )
        assert resp.json()["has_unlimited"] is False
        assert (await client.get("/usage", headers=user_headers)).json()["tier"] == "free"
