import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.deps import get_notifier
from main import app


@pytest.fixture
def client(db_session, notifier):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def _as(user_id):
    return {"X-User-Id": user_id}


def _create(client, user_id="owner", **overrides):
    payload = {"name": "Office Party", "description": "Team gifts", "occasion": "Christmas"}
    payload.update(overrides)
    response = client.post("/api/v1/groups", json=payload, headers=_as(user_id))
    assert response.status_code == 201, response.text
    return response.json()


class TestGroupsApi:
    def test_requires_user_identity(self, client):
        response = client.get("/api/v1/groups")
        assert response.status_code == 401

    def test_create_group(self, client):
        group = _create(client)

        assert group["created_by"] == "owner"
        assert group["members"] == ["owner"]
        assert group["member_count"] == 1
        assert group["max_members"] == 20
        assert group["display_code"] == f"{group['code'][:3]}-{group['code'][3:]}"
        assert group["has_matches"] is False

    def test_create_group_validation(self, client):
        response = client.post(
            "/api/v1/groups", json={"name": "", "occasion": "Christmas"}, headers=_as("owner")
        )
        assert response.status_code == 422

        response = client.post(
            "/api/v1/groups", json={"name": "Party", "occasion": "Halloween"}, headers=_as("owner")
        )
        assert response.status_code == 422

    def test_owned_group_limit(self, client):
        for _ in range(3):
            _create(client)

        response = client.post(
            "/api/v1/groups", json={"name": "Fourth", "occasion": "Other"}, headers=_as("owner")
        )

        assert response.status_code == 400
        assert response.json()["code"] == "owned_group_limit"

    def test_join_and_list(self, client):
        group = _create(client)

        response = client.post(
            "/api/v1/groups/join", json={"code": group["display_code"].lower()}, headers=_as("alice")
        )
        assert response.status_code == 200
        assert response.json()["members"] == ["owner", "alice"]

        listed = client.get("/api/v1/groups", headers=_as("alice")).json()
        assert [g["id"] for g in listed] == [group["id"]]

    def test_join_errors(self, client):
        group = _create(client)

        response = client.post("/api/v1/groups/join", json={"code": "bad"}, headers=_as("alice"))
        assert response.status_code == 404
        assert response.json()["code"] == "invalid_group_code"

        response = client.post("/api/v1/groups/join", json={"code": group["code"]}, headers=_as("owner"))
        assert response.status_code == 409
        assert response.json()["code"] == "already_member"

    def test_get_group_access(self, client):
        group = _create(client)

        assert client.get(f"/api/v1/groups/{group['id']}", headers=_as("owner")).status_code == 200
        assert client.get(f"/api/v1/groups/{group['id']}", headers=_as("stranger")).status_code == 403
        assert client.get("/api/v1/groups/missing", headers=_as("owner")).status_code == 404

    def test_leave_group(self, client):
        group = _create(client)
        client.post("/api/v1/groups/join", json={"code": group["code"]}, headers=_as("alice"))

        response = client.post(f"/api/v1/groups/{group['id']}/leave", headers=_as("alice"))
        assert response.status_code == 204

        response = client.post(f"/api/v1/groups/{group['id']}/leave", headers=_as("owner"))
        assert response.status_code == 400
        assert response.json()["code"] == "owner_cannot_leave"

    def test_matching_flow(self, client, queue):
        group = _create(client)
        for user_id in ("alice", "bob"):
            client.post("/api/v1/groups/join", json={"code": group["code"]}, headers=_as(user_id))

        response = client.post(f"/api/v1/groups/{group['id']}/matches", headers=_as("alice"))
        assert response.status_code == 403
        assert response.json()["code"] == "not_group_owner"

        response = client.post(f"/api/v1/groups/{group['id']}/matches", headers=_as("owner"))
        assert response.status_code == 201
        summary = response.json()
        assert summary["matched_count"] == 3
        assert "matches" not in summary
        assert queue.count == 3

        recipients = {}
        for user_id in ("owner", "alice", "bob"):
            response = client.get(f"/api/v1/groups/{group['id']}/matches/me", headers=_as(user_id))
            assert response.status_code == 200
            recipients[user_id] = response.json()["recipient_id"]

        assert all(giver != recipient for giver, recipient in recipients.items())
        assert sorted(recipients.values()) == ["alice", "bob", "owner"]

        response = client.post(f"/api/v1/groups/{group['id']}/matches", headers=_as("owner"))
        assert response.status_code == 409
        assert response.json()["code"] == "matches_already_generated"

        group_view = client.get(f"/api/v1/groups/{group['id']}", headers=_as("bob")).json()
        assert group_view["has_matches"] is True

    def test_matching_needs_two_members(self, client):
        group = _create(client)

        response = client.post(f"/api/v1/groups/{group['id']}/matches", headers=_as("owner"))

        assert response.status_code == 400
        assert response.json()["code"] == "insufficient_members"

    def test_recipient_before_matching(self, client):
        group = _create(client)

        response = client.get(f"/api/v1/groups/{group['id']}/matches/me", headers=_as("owner"))

        assert response.status_code == 404
        assert response.json()["code"] == "matches_not_generated"


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Gift Exchange API"
