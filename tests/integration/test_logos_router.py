"""Integration tests for the saved-logo collection."""


class TestSavedLogos:
    async def test_anonymous_rejected(self, client):
        resp = await client.get("/logos/saved")
        assert resp.status_code == 401

    async def test_empty_for_new_user(self, client, user_headers):
        resp = await client.get("/logos/saved", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json() == {"logos": []}

    async def test_save_list_delete(self, client, user_headers):
        resp = await client.post(
            "/logos/save",
            json={"url": "https://cdn/a.png", "prompt": "fox", "file_format": "png"},
            headers=user_headers,
        )
        assert resp.status_code == 201
        logo_id = resp.json()["logo"]["id"]

        await client.post("/logos/save", json={"url": "https://cdn/b.svg", "file_format": "svg"},
                          headers=user_headers)

        resp = await client.get("/logos/saved", headers=user_headers)
        assert len(resp.json()["logos"]) == 2

        resp = await client.delete(f"/logos/{logo_id}", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "removed": 1}

        resp = await client.delete(f"/logos/{logo_id}", headers=user_headers)
        assert resp.status_code == 404

        resp = await client.delete("/logos/clear", headers=user_headers)
        assert resp.json()["removed"] == 1
        assert (await client.get("/logos/saved", headers=user_headers)).json()["logos"] == []

    async def test_bad_format_rejected(self, client, user_headers):
        resp = await client.post(
            "/logos/save", json={"url": "https://cdn/a.gif", "file_format": "gif"},
            headers=user_headers,
        )
        assert resp.status_code == 422

    async def test_logos_are_private(self, client, user_headers, signed_headers):
        resp = await client.post("/logos/save", json={"url": "https://cdn/a.png"},
                                 headers=user_headers)
        logo_id = resp.json()["logo"]["id"]

        bob = signed_headers("user_bob")
        assert (await client.get("/logos/saved", headers=bob)).json()["logos"] == []
        resp = await client.delete(f"/logos/{logo_id}", headers=bob)
        assert resp.status_code == 404
