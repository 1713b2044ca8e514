"""
Tests for admin API endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.fixture
def mp_factory(db_session):
    from models.mp import MP

    async def create(name: str = "Hon. Jose Rizal", district: str = "District 1", party: str = "Independent"):
        mp = MP(name=name, district=district, party=party)
        db_session.add(mp)
        await db_session.commit()
        return mp

    return create


async def _seed_submissions(db_session, user) -> None:
    from models.certificate import CertificateSubmission

    rows = [
        ("ENROLLMENT", "FIRST", "pending"),
        ("ENROLLMENT", "SECOND", "approved"),
        ("GRADES", "FIRST", "pending"),
    ]
    for title, semester, status in rows:
        db_session.add(
            CertificateSubmission(user_id=str(user.id), title=title, semester=semester, status=status)
        )
    await db_session.commit()


@pytest.mark.integration
class TestAdminOverview:
    """GET /api/admin/overview."""

    async def test_requires_session(self, client: AsyncClient) -> None:
        response = await client.get("/api/admin/overview")

        assert response.status_code == 401

    async def test_plain_user_forbidden(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory(role="user"))

        response = await client.get("/api/admin/overview")

        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden"

    @pytest.mark.parametrize("role", ["admin", "personnel"])
    async def test_staff_get_metrics(
        self, client: AsyncClient, db_session, user_factory, login_as, poll_factory, role
    ) -> None:
        from services.poll_service import PollService

        staff = await user_factory(role=role)
        grantee = await user_factory()
        await _seed_submissions(db_session, grantee)
        poll = await poll_factory(staff, options=["Yes", "No"])
        await poll_factory(staff, question="Second?")
        await PollService(db_session).cast_vote(poll.id, str(grantee.id), poll.options[0].id)
        login_as(staff)

        response = await client.get("/api/admin/overview")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["metrics"]["users"] == {"total": 2}
        assert data["metrics"]["submissions"] == {
            "total": 3,
            "pending": 2,
            "byTitle": {"enrollment": 2, "grades": 1},
            "bySemester": {"first": 2, "second": 1},
        }
        assert data["metrics"]["polls"] == {"total": 2, "active": 2, "votes": 1}
        assert len(data["recent"]["users"]) == 2
        assert len(data["recent"]["submissions"]) == 3
        assert data["recent"]["submissions"][0]["user"]["id"] == str(grantee.id)


@pytest.mark.integration
class TestMPAssignments:
    """POST and DELETE /api/admin/mp-assignments."""

    async def test_assign_mp(self, client: AsyncClient, user_factory, login_as, mp_factory) -> None:
        grantee = await user_factory(name="Juan Cruz", phone_number="0917", address="Manila")
        mp = await mp_factory()
        login_as(await user_factory(role="personnel"))

        response = await client.post(
            "/api/admin/mp-assignments",
            json={"granteeId": str(grantee.id), "mpId": str(mp.id)},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(grantee.id)
        assert data["phoneNumber"] == "0917"
        assert data["mp"] == {
            "id": str(mp.id),
            "name": "Hon. Jose Rizal",
            "district": "District 1",
            "party": "Independent",
        }
        assert "passwordHash" not in data

    async def test_unassign_mp(self, client: AsyncClient, user_factory, login_as, mp_factory) -> None:
        grantee = await user_factory()
        mp = await mp_factory()
        login_as(await user_factory(role="admin"))
        await client.post(
            "/api/admin/mp-assignments",
            json={"granteeId": str(grantee.id), "mpId": str(mp.id)},
        )

        response = await client.request(
            "DELETE",
            "/api/admin/mp-assignments",
            json={"granteeId": str(grantee.id)},
        )

        assert response.status_code == 200
        assert response.json()["mp"] is None

    async def test_missing_ids(self, client: AsyncClient, user_factory, login_as) -> None:
        login_as(await user_factory(role="admin"))

        response = await client.post("/api/admin/mp-assignments", json={"granteeId": "x"})

        assert response.status_code == 400

    async def test_unknown_grantee(self, client: AsyncClient, user_factory, login_as, mp_factory) -> None:
        mp = await mp_factory()
        login_as(await user_factory(role="admin"))

        response = await client.post(
            "/api/admin/mp-assignments",
            json={"granteeId": "missing", "mpId": str(mp.id)},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Grantee not found"

    async def test_unknown_mp(self, client: AsyncClient, user_factory, login_as) -> None:
        grantee = await user_factory()
        login_as(await user_factory(role="admin"))

        response = await client.post(
            "/api/admin/mp-assignments",
            json={"granteeId": str(grantee.id), "mpId": "missing"},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "MP not found"

    async def test_plain_user_forbidden(self, client: AsyncClient, user_factory, login_as, mp_factory) -> None:
        grantee = await user_factory()
        mp = await mp_factory()
        login_as(await user_factory(role="user"))

        response = await client.post(
            "/api/admin/mp-assignments",
            json={"granteeId": str(grantee.id), "mpId": str(mp.id)},
        )

        assert response.status_code == 403
