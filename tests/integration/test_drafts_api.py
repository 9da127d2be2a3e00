"""
Integration tests for draft API endpoints.

Tests the draft creation, editing, review workflow and comments through
the HTTP layer.
"""

import pytest
from httpx import AsyncClient


async def create_draft(client: AsyncClient, headers=None, **overrides):
    payload = {"doc_path": "guide.md", "title": "Guide", "content": "# Hello"} | overrides
    response = await client.post("/api/drafts", json=payload, headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateDraft:
    """Integration tests for POST /drafts."""

    @pytest.mark.asyncio
    async def test_anonymous_editor_allowed_in_public_mode(self, async_client: AsyncClient):
        draft = await create_draft(async_client)

        assert draft["status"] == "pending"
        assert draft["author_id"] == "anonymous"
        assert draft["branch_name"].startswith("draft/")

    @pytest.mark.asyncio
    async def test_author_recorded(self, async_client: AsyncClient, editor_headers):
        draft = await create_draft(async_client, editor_headers)
        assert draft["author_email"] == "writer@example.com"

    @pytest.mark.asyncio
    async def test_invalid_path(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/drafts", json={"doc_path": "notes.txt", "title": "Notes"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["status_code"] == 422
        assert body["path"] == "/api/drafts"

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/drafts",
            json={"doc_path": "guide.md", "title": "Guide"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401


class TestReadDrafts:
    """Integration tests for GET /drafts and GET /drafts/{id}."""

    @pytest.mark.asyncio
    async def test_list_and_filter(self, async_client: AsyncClient, admin_headers):
        first = await create_draft(async_client)
        second = await create_draft(async_client, doc_path="other.md")
        await async_client.post(f"/api/drafts/{second['id']}/reject", headers=admin_headers)

        all_drafts = (await async_client.get("/api/drafts")).json()["drafts"]
        pending = (await async_client.get("/api/drafts?status=pending")).json()["drafts"]

        assert {d["id"] for d in all_drafts} == {first["id"], second["id"]}
        assert [d["id"] for d in pending] == [first["id"]]

    @pytest.mark.asyncio
    async def test_detail_includes_content_and_fingerprint(self, async_client: AsyncClient):
        draft = await create_draft(async_client)

        response = await async_client.get(f"/api/drafts/{draft['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["draft"]["id"] == draft["id"]
        assert data["content"] == "# Hello"
        assert data["fingerprint"]
        assert data["comments"] == []

    @pytest.mark.asyncio
    async def test_missing_draft(self, async_client: AsyncClient):
        response = await async_client.get("/api/drafts/does-not-exist")

        assert response.status_code == 404
        assert "not found" in response.json()["error"]


class TestUpdateDraft:
    """Integration tests for PUT /drafts/{id}."""

    @pytest.mark.asyncio
    async def test_edit_cycle(self, async_client: AsyncClient):
        draft = await create_draft(async_client)
        fingerprint = (await async_client.get(f"/api/drafts/{draft['id']}")).json()["fingerprint"]

        response = await async_client.put(
            f"/api/drafts/{draft['id']}",
            json={
                "content": "# Hello world",
                "expected_fingerprint": fingerprint,
                "title": "Hello guide",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["fingerprint"] != fingerprint
        assert data["draft"]["title"] == "Hello guide"

    @pytest.mark.asyncio
    async def test_conflict_returns_current_content(self, async_client: AsyncClient):
        draft = await create_draft(async_client)
        stale = (await async_client.get(f"/api/drafts/{draft['id']}")).json()["fingerprint"]
        first = await async_client.put(
            f"/api/drafts/{draft['id']}",
            json={"content": "# Theirs", "expected_fingerprint": stale},
        )

        response = await async_client.put(
            f"/api/drafts/{draft['id']}",
            json={"content": "# Mine", "expected_fingerprint": stale, "title": "Mine"},
        )

        assert response.status_code == 409
        details = response.json()["details"]
        assert details["current_content"] == "# Theirs"
        assert details["current_fingerprint"] == first.json()["fingerprint"]

        # Title is left alone when the content commit is refused
        detail = (await async_client.get(f"/api/drafts/{draft['id']}")).json()
        assert detail["draft"]["title"] == "Guide"

    @pytest.mark.asyncio
    async def test_blank_content_rejected(self, async_client: AsyncClient):
        draft = await create_draft(async_client)

        response = await async_client.put(f"/api/drafts/{draft['id']}", json={"content": "  "})

        assert response.status_code == 422


class TestReview:
    """Integration tests for approve and reject."""

    @pytest.mark.asyncio
    async def test_editor_cannot_approve(self, async_client: AsyncClient, editor_headers):
        draft = await create_draft(async_client)

        response = await async_client.post(
            f"/api/drafts/{draft['id']}/approve", headers=editor_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_approve_publishes(self, async_client: AsyncClient, admin_headers):
        draft = await create_draft(async_client)

        response = await async_client.post(
            f"/api/drafts/{draft['id']}/approve", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["draft"]["status"] == "approved"
        assert data["pr_number"] >= 1

        published = await async_client.get("/api/docs/guide.md")
        assert published.json()["content"] == "# Hello"

    @pytest.mark.asyncio
    async def test_second_approval_is_invalid_state(self, async_client: AsyncClient, admin_headers):
        draft = await create_draft(async_client)
        await async_client.post(f"/api/drafts/{draft['id']}/approve", headers=admin_headers)

        response = await async_client.post(
            f"/api/drafts/{draft['id']}/approve", headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["details"]["status"] == "approved"

    @pytest.mark.asyncio
    async def test_reject_with_reason(self, async_client: AsyncClient, admin_headers):
        draft = await create_draft(async_client)

        response = await async_client.post(
            f"/api/drafts/{draft['id']}/reject",
            json={"reason": "Duplicate page"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        comments = (await async_client.get(f"/api/drafts/{draft['id']}/comments")).json()
        assert comments["comments"][0]["content"] == "Rejected: Duplicate page"

    @pytest.mark.asyncio
    async def test_admin_via_password_token(self, async_client: AsyncClient, settings):
        password = settings.AUTH.admin_password
        token = (
            await async_client.post("/api/auth/token", json={"password": password})
        ).json()["access_token"]
        draft = await create_draft(async_client)

        response = await async_client.post(
            f"/api/drafts/{draft['id']}/reject",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200


class TestDeleteAndComments:
    """Integration tests for DELETE /drafts/{id} and comments."""

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient):
        draft = await create_draft(async_client)

        response = await async_client.delete(f"/api/drafts/{draft['id']}")

        assert response.status_code == 200
        assert (await async_client.get(f"/api/drafts/{draft['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_comment_thread(self, async_client: AsyncClient, editor_headers):
        draft = await create_draft(async_client)

        created = await async_client.post(
            f"/api/drafts/{draft['id']}/comments",
            json={"content": "Can we add an example?"},
            headers=editor_headers,
        )
        listed = await async_client.get(f"/api/drafts/{draft['id']}/comments")

        assert created.status_code == 201
        assert created.json()["user_name"] == "Writer"
        assert [c["content"] for c in listed.json()["comments"]] == ["Can we add an example?"]
