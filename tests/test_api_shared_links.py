"""Integration tests for the /api/v1/share endpoints."""

import re
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from motorskills.models.shared_link import SharedLink
from motorskills.services.token_service import as_utc


async def _share(client, coach, assessment, **body):
    resp = await client.post(
        "/api/v1/share/",
        headers=coach["headers"],
        json={"assessment_id": str(assessment.id), **body},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateSharedLink:
    async def test_defaults(self, client, coach, assessment):
        data = await _share(client, coach, assessment)
        assert re.fullmatch(r"[0-9a-f]{32}", data["token"])
        assert data["one_time"] is False
        assert data["accessed_at"] is None
        assert data["share_url"].endswith(f"/share/{data['token']}")

    @pytest.mark.parametrize("days", [10**7, -(10**7), 3651])
    async def test_horizon_out_of_range(self, client, coach, assessment, days):
        resp = await client.post(
            "/api/v1/share/",
            headers=coach["headers"],
            json={"assessment_id": str(assessment.id), "expires_in_days": days},
        )
        assert resp.status_code == 422

    async def test_custom_horizon(self, client, coach, assessment):
        data = await _share(client, coach, assessment, expires_in_days=30)
        expires_at = as_utc(datetime.fromisoformat(data["expires_at"]))
        delta = expires_at - datetime.now(timezone.utc)
        assert timedelta(days=29, hours=23) < delta <= timedelta(days=30)

    async def test_unknown_assessment(self, client, coach):
        resp = await client.post(
            "/api/v1/share/",
            headers=coach["headers"],
            json={"assessment_id": str(uuid.uuid4())},
        )
        assert resp.status_code == 404

    async def test_parent_forbidden(self, client, assessment, make_profile, auth_headers):
        parent = await make_profile("parent")
        resp = await client.post(
            "/api/v1/share/",
            headers=auth_headers(parent.id, parent.email),
            json={"assessment_id": str(assessment.id)},
        )
        assert resp.status_code == 403


class TestViewSharedReport:
    async def test_reusable_link(self, client, coach, assessment):
        link = await _share(client, coach, assessment)

        first = await client.get(f"/api/v1/share/{link['token']}")
        second = await client.get(f"/api/v1/share/{link['token']}")
        assert first.status_code == 200, first.text
        assert second.status_code == 200
        assert first.json() == second.json()
        assert first.json()["assessment_id"] == str(assessment.id)
        assert first.json()["child"]["first_name"] == "Taro"

    async def test_one_time_link(self, client, coach, assessment):
        link = await _share(client, coach, assessment, one_time=True)

        first = await client.get(f"/api/v1/share/{link['token']}")
        assert first.status_code == 200
        second = await client.get(f"/api/v1/share/{link['token']}")
        assert second.status_code == 400

        listed = await client.get(
            "/api/v1/share/",
            headers=coach["headers"],
            params={"assessment_id": str(assessment.id)},
        )
        assert listed.json()[0]["accessed_at"] is not None

    async def test_expired_link(self, client, coach, assessment):
        link = await _share(client, coach, assessment, expires_in_days=-1)
        resp = await client.get(f"/api/v1/share/{link['token']}")
        assert resp.status_code == 410

    async def test_unknown_token(self, client):
        resp = await client.get(f"/api/v1/share/{uuid.uuid4().hex}")
        assert resp.status_code == 404


class TestListSharedLinks:
    async def test_newest_first(self, client, db_session, coach, assessment):
        old = await _share(client, coach, assessment)
        new = await _share(client, coach, assessment, one_time=True)

        now = datetime.now(timezone.utc)
        (await db_session.get(SharedLink, uuid.UUID(old["id"]))).created_at = now - timedelta(hours=2)
        (await db_session.get(SharedLink, uuid.UUID(new["id"]))).created_at = now - timedelta(hours=1)
        await db_session.flush()

        resp = await client.get(
            "/api/v1/share/",
            headers=coach["headers"],
            params={"assessment_id": str(assessment.id)},
        )
        assert resp.status_code == 200
        assert [link["id"] for link in resp.json()] == [new["id"], old["id"]]

    async def test_requires_staff(self, client, assessment, parent_identity):
        resp = await client.get(
            "/api/v1/share/",
            headers=parent_identity["headers"],
            params={"assessment_id": str(assessment.id)},
        )
        assert resp.status_code == 403


class TestAnonymousRateLimit:
    async def test_token_guessing_throttled(self, client):
        for _ in range(30):
            resp = await client.get(f"/api/v1/share/{uuid.uuid4().hex}")
            assert resp.status_code == 404
        resp = await client.get(f"/api/v1/share/{uuid.uuid4().hex}")
        assert resp.status_code == 429
