"""End-to-end integration test for the complete voting flow."""
import pytest


def _create_ballot(client, headers, **overrides):
    payload = {
        "name": "Team Lunch",
        "description": "Where should we eat?",
        "candidates": [{"name": "Tacos"}, {"name": "Sushi"}],
    }
    payload.update(overrides)
    response = client.post("/api/v1/ballots", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _candidate_ids(client, ballot_id, headers):
    response = client.get(f"/api/v1/ballots/{ballot_id}", headers=headers)
    assert response.status_code == 200
    return [c["id"] for c in response.json()["candidates"]]


@pytest.mark.integration
class TestCompleteVotingFlow:
    """Test the complete voting workflow."""

    def test_complete_voting_flow(self, client, voter, owner_headers, voter_headers):
        """Create ballot → invite → both vote → results → close → late vote rejected."""
        ballot = _create_ballot(client, owner_headers)
        ballot_id = ballot["id"]
        assert ballot["status"] == "Open"
        assert ballot["is_open"] is True
        a, b = _candidate_ids(client, ballot_id, owner_headers)

        invite = client.post(
            f"/api/v1/ballots/{ballot_id}/invitations",
            json={"email": voter.email, "permission": "Voter"},
            headers=owner_headers,
        )
        assert invite.status_code == 201
        assert invite.json()["user_id"] == voter.id

        first = client.post(
            f"/api/v1/ballots/{ballot_id}/votes",
            json={"scores": {a: 90, b: 45}},
            headers=owner_headers,
        )
        assert first.status_code == 200
        assert first.json()["vote_count"] == 1

        second = client.post(
            f"/api/v1/ballots/{ballot_id}/votes",
            json={"scores": {a: 50, b: 70}},
            headers=voter_headers,
        )
        assert second.status_code == 200
        assert second.json()["vote_count"] == 2

        results = client.get(f"/api/v1/ballots/{ballot_id}/results", headers=voter_headers)
        assert results.status_code == 200
        assert results.json()["results"] == {a: 70.0, b: 57.5}
        assert results.json()["vote_count"] == 2

        mine = client.get(f"/api/v1/ballots/{ballot_id}/votes/me", headers=voter_headers)
        assert {v["candidate_id"]: v["score"] for v in mine.json()["votes"]} == {a: 50, b: 70}

        closed = client.post(f"/api/v1/ballots/{ballot_id}/close", headers=owner_headers)
        assert closed.status_code == 200
        assert closed.json()["status"] == "Closed"
        assert closed.json()["is_open"] is False

        late = client.post(
            f"/api/v1/ballots/{ballot_id}/votes",
            json={"scores": {a: 10}},
            headers=voter_headers,
        )
        assert late.status_code == 409
        assert late.json() == {"detail": "Ballot is not open for voting"}

    def test_revote_replaces_scores(self, client, owner_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]
        a, _ = _candidate_ids(client, ballot_id, owner_headers)

        client.post(f"/api/v1/ballots/{ballot_id}/votes", json={"scores": {a: 20}}, headers=owner_headers)
        client.post(f"/api/v1/ballots/{ballot_id}/votes", json={"scores": {a: 80}}, headers=owner_headers)

        results = client.get(f"/api/v1/ballots/{ballot_id}/results", headers=owner_headers).json()
        assert results["results"] == {a: 80.0}
        assert results["vote_count"] == 1

    @pytest.mark.parametrize("score", [-1, 100])
    def test_out_of_range_score_rejected(self, client, owner_headers, score):
        ballot_id = _create_ballot(client, owner_headers)["id"]
        a, _ = _candidate_ids(client, ballot_id, owner_headers)

        response = client.post(
            f"/api/v1/ballots/{ballot_id}/votes",
            json={"scores": {a: score}},
            headers=owner_headers,
        )
        assert response.status_code == 422

    def test_unknown_candidate(self, client, owner_headers):
        from rangevote.core.utils import new_id

        ballot_id = _create_ballot(client, owner_headers)["id"]
        response = client.post(
            f"/api/v1/ballots/{ballot_id}/votes",
            json={"scores": {new_id(): 50}},
            headers=owner_headers,
        )
        assert response.status_code == 404

    def test_draft_ballot_opened_later(self, client, owner_headers):
        ballot = _create_ballot(client, owner_headers, status="Draft")
        assert ballot["is_open"] is False

        opened = client.post(f"/api/v1/ballots/{ballot['id']}/open", headers=owner_headers)
        assert opened.json()["status"] == "Open"
        assert opened.json()["open_date"] is not None


@pytest.mark.integration
class TestBallotAccess:
    """Access checks at the HTTP boundary."""

    def test_stranger_forbidden(self, client, owner_headers, voter_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]

        assert client.get(f"/api/v1/ballots/{ballot_id}", headers=voter_headers).status_code == 403
        assert client.get(f"/api/v1/ballots/{ballot_id}/results", headers=voter_headers).status_code == 403

    def test_anonymous_forbidden(self, client, owner_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]
        assert client.get(f"/api/v1/ballots/{ballot_id}").status_code == 403

    def test_unknown_ballot(self, client, owner_headers):
        response = client.get("/api/v1/ballots/does-not-exist", headers=owner_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "Ballot not found"}

    def test_create_requires_login(self, client):
        response = client.post("/api/v1/ballots", json={"name": "x", "candidates": [{"name": "a"}]})
        assert response.status_code == 401

    def test_cookie_authentication(self, client, owner):
        from rangevote.core.security import ACCESS_TOKEN_COOKIE, create_access_token

        client.cookies.set(ACCESS_TOKEN_COOKIE, create_access_token(owner.id))
        assert client.get("/api/v1/ballots").status_code == 200

    def test_viewer_cannot_vote_or_close(self, client, voter, owner_headers, voter_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]
        a, _ = _candidate_ids(client, ballot_id, owner_headers)
        client.post(
            f"/api/v1/ballots/{ballot_id}/invitations",
            json={"email": voter.email, "permission": "Viewer"},
            headers=owner_headers,
        )

        assert client.get(f"/api/v1/ballots/{ballot_id}", headers=voter_headers).status_code == 200
        vote = client.post(f"/api/v1/ballots/{ballot_id}/votes", json={"scores": {a: 5}}, headers=voter_headers)
        assert vote.status_code == 403
        assert client.post(f"/api/v1/ballots/{ballot_id}/close", headers=voter_headers).status_code == 403

    def test_access_endpoint(self, client, owner_headers, voter_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]

        owner_access = client.get(f"/api/v1/ballots/{ballot_id}/access", headers=owner_headers).json()
        assert owner_access["is_owner"] and owner_access["can_edit"]

        stranger_access = client.get(f"/api/v1/ballots/{ballot_id}/access", headers=voter_headers).json()
        assert not any(stranger_access.values())

    def test_my_ballots_listing(self, client, owner_headers):
        _create_ballot(client, owner_headers, name="One")
        _create_ballot(client, owner_headers, name="Two")

        listing = client.get("/api/v1/ballots", headers=owner_headers).json()
        assert sorted(b["name"] for b in listing) == ["One", "Two"]
        assert all(b["is_owner"] and b["permission"] == "Admin" for b in listing)

    def test_update_and_delete(self, client, owner_headers, voter_headers):
        ballot_id = _create_ballot(client, owner_headers)["id"]

        updated = client.patch(f"/api/v1/ballots/{ballot_id}", json={"is_public": True}, headers=owner_headers)
        assert updated.json()["is_public"] is True

        assert client.delete(f"/api/v1/ballots/{ballot_id}", headers=voter_headers).status_code == 403
        assert client.delete(f"/api/v1/ballots/{ballot_id}", headers=owner_headers).status_code == 200
        assert client.get(f"/api/v1/ballots/{ballot_id}", headers=owner_headers).status_code == 404


@pytest.mark.integration
class TestAppSurface:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["scheduler"]["enabled"] is False

    def test_version_and_request_id_headers(self, client):
        response = client.get("/health")
        assert "X-API-Version" in response.headers
        assert "X-Request-ID" in response.headers

    def test_lifespan_runs_scheduler(self, db_session):
        from unittest.mock import AsyncMock, MagicMock, patch
        from fastapi.testclient import TestClient
        from rangevote.core.config import settings
        from rangevote.main import app

        scheduler_cls = MagicMock()
        scheduler_cls.return_value.stop = AsyncMock()

        with patch("rangevote.main.AutoCloseScheduler", scheduler_cls), \
                patch.object(settings, "AUTO_CLOSE_ENABLED", True):
            with TestClient(app):
                scheduler_cls.return_value.start.assert_called_once()
            scheduler_cls.return_value.stop.assert_awaited_once()
