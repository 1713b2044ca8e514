"""
Tests for poll API endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select


@pytest.fixture
def poll_body() -> dict:
    return {
        "question": "Where should the next assembly be held?",
        "description": "Pick one venue",
        "options": ["City hall", "Gymnasium", "Online"],
    }


@pytest.mark.integration
class TestCreatePollEndpoint:
    """POST /api/polls."""

    async def test_requires_session(self, client: AsyncClient, db_session, poll_body) -> None:
        from models.poll import Poll

        response = await client.post("/api/polls", json=poll_body)

        assert response.status_code == 401
        assert (await db_session.execute(select(func.count(Poll.id)))).scalar() == 0

    async def test_tampered_cookie_is_unauthenticated(
        self, client: AsyncClient, user_factory, login_as, poll_body
    ) -> None:
        user = await user_factory()
        login_as(user)
        token = client.cookies["auth-session"]
        client.cookies.set("auth-session", token[:-2] + ("AA" if not token.endswith("AA") else "BB"))

        response = await client.post("/api/polls", json=poll_body)

        assert response.status_code == 401

    async def test_create_poll(self, client: AsyncClient, user_factory, login_as, poll_body) -> None:
        user = await user_factory(name="Maria Santos")
        login_as(user)

        response = await client.post("/api/polls", json=poll_body)

        assert response.status_code == 201
        data = response.json()
        assert data["question"] == poll_body["question"]
        assert data["isActive"] is True
        assert data["totalVotes"] == 0
        assert [o["text"] for o in data["options"]] == poll_body["options"]
        assert all(o["votes"] == 0 for o in data["options"])
        assert data["createdBy"] == {"id": str(user.id), "name": "Maria Santos", "image": "/most-logo.png"}
        assert "createdAt" in data

    async def test_one_option_rejected(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory())

        response = await client.post("/api/polls", json={"question": "Q?", "options": ["Only"]})

        assert response.status_code == 400
        assert response.json()["detail"] == "Question and at least 2 options are required"

    async def test_missing_question_rejected(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory())

        response = await client.post("/api/polls", json={"options": ["Yes", "No"]})

        assert response.status_code == 400

    async def test_wrong_body_type_reports_field(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory())

        response = await client.post("/api/polls", json={"question": "Q?", "options": "Yes,No"})

        assert response.status_code == 400
        assert "options" in [e["field"] for e in response.json()["errors"]]


@pytest.mark.integration
class TestReadPollEndpoints:
    """GET /api/polls and GET /api/polls/{id} are public."""

    async def test_list_polls(self, client: AsyncClient, user_factory, poll_factory) -> None:
        creator = await user_factory()
        await poll_factory(creator, question="First?")
        await poll_factory(creator, question="Second?")

        response = await client.get("/api/polls")

        assert response.status_code == 200
        assert {p["question"] for p in response.json()} == {"First?", "Second?"}

    async def test_list_polls_empty(self, client: AsyncClient) -> None:
        response = await client.get("/api/polls")

        assert response.status_code == 200
        assert response.json() == []

    async def test_get_poll(self, client: AsyncClient, user_factory, poll_factory) -> None:
        poll = await poll_factory(await user_factory())

        response = await client.get(f"/api/polls/{poll.id}")

        assert response.status_code == 200
        assert response.json()["id"] == poll.id

    async def test_get_unknown_poll(self, client: AsyncClient) -> None:
        response = await client.get("/api/polls/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "Poll not found"


@pytest.mark.integration
class TestUpdateDeletePollEndpoints:
    """PUT and DELETE /api/polls/{id} are owner-only."""

    async def test_owner_closes_poll(self, client: AsyncClient, user_factory, login_as, poll_factory) -> None:
        owner = await user_factory()
        poll = await poll_factory(owner)
        login_as(owner)

        response = await client.put(f"/api/polls/{poll.id}", json={"isActive": False})

        assert response.status_code == 200
        assert response.json()["isActive"] is False

    async def test_non_owner_update_forbidden(
        self, client: AsyncClient, user_factory, login_as, poll_factory
    ) -> None:
        poll = await poll_factory(await user_factory())
        login_as(await user_factory())

        response = await client.put(f"/api/polls/{poll.id}", json={"question": "Hijacked?"})

        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden - You can only update your own polls"

    async def test_update_requires_session(self, client: AsyncClient, user_factory, poll_factory) -> None:
        poll = await poll_factory(await user_factory())

        response = await client.put(f"/api/polls/{poll.id}", json={"isActive": False})

        assert response.status_code == 401

    async def test_update_unknown_poll(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory())

        response = await client.put("/api/polls/missing", json={"isActive": False})

        assert response.status_code == 404

    async def test_owner_deletes_poll(self, client: AsyncClient, user_factory, login_as, poll_factory) -> None:
        owner = await user_factory()
        poll = await poll_factory(owner)
        login_as(owner)

        response = await client.delete(f"/api/polls/{poll.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Poll deleted successfully"}
        assert (await client.get(f"/api/polls/{poll.id}")).status_code == 404

    async def test_non_owner_delete_forbidden(
        self, client: AsyncClient, user_factory, login_as, poll_factory
    ) -> None:
        poll = await poll_factory(await user_factory())
        login_as(await user_factory(role="admin"))

        response = await client.delete(f"/api/polls/{poll.id}")

        assert response.status_code == 403
