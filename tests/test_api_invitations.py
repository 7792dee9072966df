"""Integration tests for the /api/v1/invitations endpoints."""

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from motorskills.models.invitation import ParentInvitation
from motorskills.services.token_service import as_utc


async def _invite(client, coach, child, email):
    resp = await client.post(
        "/api/v1/invitations/",
        headers=coach["headers"],
        json={"email": email, "child_id": str(child.id)},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _expire(db_session, invitation_id):
    invitation = await db_session.get(ParentInvitation, uuid.UUID(invitation_id))
    invitation.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await db_session.flush()


class TestCreateInvitation:
    async def test_create(self, client, coach, child):
        data = await _invite(client, coach, child, "Mother@Example.com")
        assert data["email"] == "mother@example.com"
        assert len(data["token"]) == 32
        assert data["invitation_url"].endswith(f"/invitations/accept/{data['token']}")

        expires_at = as_utc(datetime.fromisoformat(data["expires_at"]))
        delta = expires_at - datetime.now(timezone.utc)
        assert timedelta(days=6, hours=23) < delta <= timedelta(days=7)

    async def test_parent_forbidden(self, client, child, make_profile, auth_headers):
        parent = await make_profile("parent")
        resp = await client.post(
            "/api/v1/invitations/",
            headers=auth_headers(parent.id, parent.email),
            json={"email": "someone@example.com", "child_id": str(child.id)},
        )
        assert resp.status_code == 403

    async def test_no_profile_forbidden(self, client, child, parent_identity):
        resp = await client.post(
            "/api/v1/invitations/",
            headers=parent_identity["headers"],
            json={"email": "someone@example.com", "child_id": str(child.id)},
        )
        assert resp.status_code == 403

    async def test_bad_email(self, client, coach, child):
        resp = await client.post(
            "/api/v1/invitations/",
            headers=coach["headers"],
            json={"email": "not-an-email", "child_id": str(child.id)},
        )
        assert resp.status_code == 422

    async def test_unknown_child(self, client, coach):
        resp = await client.post(
            "/api/v1/invitations/",
            headers=coach["headers"],
            json={"email": "mother@example.com", "child_id": str(uuid.uuid4())},
        )
        assert resp.status_code == 404

    async def test_duplicate_pending(self, client, coach, child):
        await _invite(client, coach, child, "mother@example.com")
        resp = await client.post(
            "/api/v1/invitations/",
            headers=coach["headers"],
            json={"email": "MOTHER@example.com", "child_id": str(child.id)},
        )
        assert resp.status_code == 409

    async def test_unauthenticated(self, client, child):
        resp = await client.post(
            "/api/v1/invitations/",
            json={"email": "mother@example.com", "child_id": str(child.id)},
        )
        assert resp.status_code == 401


class TestValidateInvitation:
    async def test_valid(self, client, coach, child):
        created = await _invite(client, coach, child, "mother@example.com")
        resp = await client.get(
            "/api/v1/invitations/validate", params={"token": created["token"]},
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["email"] == "mother@example.com"
        assert data["child_name"] == "Yamada Taro"
        assert data["invited_by"] == "Test Coach"
        assert data["status"] == "pending"
        assert "token" not in data

    async def test_unknown_token(self, client):
        resp = await client.get("/api/v1/invitations/validate", params={"token": "nope"})
        assert resp.status_code == 404

    async def test_expired_is_persisted(self, client, db_session, coach, child):
        created = await _invite(client, coach, child, "mother@example.com")
        await _expire(db_session, created["invitation_id"])

        resp = await client.get(
            "/api/v1/invitations/validate", params={"token": created["token"]},
        )
        assert resp.status_code == 410

        result = await db_session.execute(
            select(ParentInvitation.status).where(
                ParentInvitation.id == uuid.UUID(created["invitation_id"])
            )
        )
        assert result.scalar_one() == "expired"


class TestAcceptInvitation:
    async def test_accept_links_parent(self, client, coach, child, parent_identity):
        created = await _invite(client, coach, child, parent_identity["email"])

        resp = await client.post(
            "/api/v1/invitations/accept",
            headers=parent_identity["headers"],
            json={"token": created["token"], "full_name": "Yamada Hanako"},
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["success"] is True
        assert data["child_id"] == str(child.id)

        me = await client.get("/api/v1/auth/me", headers=parent_identity["headers"])
        assert me.status_code == 200
        assert me.json()["role"] == "parent"
        assert me.json()["full_name"] == "Yamada Hanako"

        children = await client.get("/api/v1/children/", headers=parent_identity["headers"])
        assert [c["id"] for c in children.json()] == [str(child.id)]

        # Accepted invitations can no longer be validated or accepted
        again = await client.post(
            "/api/v1/invitations/accept",
            headers=parent_identity["headers"],
            json={"token": created["token"]},
        )
        assert again.status_code == 400
        validate = await client.get(
            "/api/v1/invitations/validate", params={"token": created["token"]},
        )
        assert validate.status_code == 400

    async def test_email_mismatch(self, client, coach, child, parent_identity):
        created = await _invite(client, coach, child, "someone-else@example.com")
        resp = await client.post(
            "/api/v1/invitations/accept",
            headers=parent_identity["headers"],
            json={"token": created["token"]},
        )
        assert resp.status_code == 403

    async def test_staff_account_conflicts(self, client, coach, child):
        created = await _invite(client, coach, child, coach["email"])
        resp = await client.post(
            "/api/v1/invitations/accept",
            headers=coach["headers"],
            json={"token": created["token"]},
        )
        assert resp.status_code == 409

    async def test_expired(self, client, db_session, coach, child, parent_identity):
        created = await _invite(client, coach, child, parent_identity["email"])
        await _expire(db_session, created["invitation_id"])
        resp = await client.post(
            "/api/v1/invitations/accept",
            headers=parent_identity["headers"],
            json={"token": created["token"]},
        )
        assert resp.status_code == 410

    async def test_requires_sign_in(self, client, coach, child):
        created = await _invite(client, coach, child, "mother@example.com")
        resp = await client.post(
            "/api/v1/invitations/accept", json={"token": created["token"]},
        )
        assert resp.status_code == 401


class TestListAndRevoke:
    async def test_list(self, client, coach, child):
        created = await _invite(client, coach, child, "mother@example.com")
        resp = await client.get("/api/v1/invitations/", headers=coach["headers"])
        assert resp.status_code == 200
        items = resp.json()
        assert len(items) == 1
        assert items[0]["id"] == created["invitation_id"]
        assert items[0]["child_name"] == "Yamada Taro"
        assert items[0]["status"] == "pending"

    async def test_revoke_then_reinvite(self, client, coach, child):
        created = await _invite(client, coach, child, "mother@example.com")
        resp = await client.delete(
            f"/api/v1/invitations/{created['invitation_id']}", headers=coach["headers"],
        )
        assert resp.status_code == 204

        validate = await client.get(
            "/api/v1/invitations/validate", params={"token": created["token"]},
        )
        assert validate.status_code == 410

        second = await _invite(client, coach, child, "mother@example.com")
        assert second["token"] != created["token"]

    async def test_revoke_unknown(self, client, coach):
        resp = await client.delete(
            f"/api/v1/invitations/{uuid.uuid4()}", headers=coach["headers"],
        )
        assert resp.status_code == 404
