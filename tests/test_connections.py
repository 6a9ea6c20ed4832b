"""
Tests for connection requests
"""
import pytest


@pytest.fixture
def request_to_rita(seeker, recruiter):
    alice, _ = seeker
    _, rita = recruiter
    response = alice.post("/api/connections", json={"receiver_id": rita["id"]})
    assert response.status_code == 201
    return response.json()


class TestConnections:

    def test_request_is_pending(self, request_to_rita, seeker, recruiter):
        alice, me = seeker
        rita, _ = recruiter
        assert request_to_rita["status"] == "pending"
        assert request_to_rita["requester_id"] == me["id"]

        sent = alice.get("/api/connections/sent-pending").json()
        assert sent[0]["user"]["username"] == "rita"
        received = rita.get("/api/connections/pending").json()
        assert received[0]["user"]["username"] == "alice"

    def test_cannot_connect_to_self(self, seeker):
        alice, me = seeker
        assert alice.post("/api/connections", json={"receiver_id": me["id"]}).status_code == 400

    def test_unknown_receiver_is_404(self, seeker):
        alice, _ = seeker
        assert alice.post("/api/connections", json={"receiver_id": 999}).status_code == 404

    def test_duplicate_in_either_direction_is_400(self, request_to_rita, seeker, recruiter):
        rita, _ = recruiter
        _, alice = seeker
        assert rita.post("/api/connections", json={"receiver_id": alice["id"]}).status_code == 400

    def test_receiver_accepts(self, request_to_rita, seeker, recruiter):
        alice, _ = seeker
        rita, _ = recruiter
        url = f"/api/connections/{request_to_rita['id']}"
        assert alice.patch(url, json={"status": "accepted"}).status_code == 403

        response = rita.patch(url, json={"status": "accepted"})
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert alice.get("/api/connections").json()[0]["user"]["username"] == "rita"
        assert rita.patch(url, json={"status": "rejected"}).status_code == 400

    def test_invalid_status_is_400(self, request_to_rita, recruiter):
        rita, _ = recruiter
        response = rita.patch(f"/api/connections/{request_to_rita['id']}", json={"status": "maybe"})
        assert response.status_code == 400

    def test_rejected_allows_new_request(self, request_to_rita, seeker, recruiter):
        alice, _ = seeker
        rita, me = recruiter
        rita.patch(f"/api/connections/{request_to_rita['id']}", json={"status": "rejected"})
        assert alice.post("/api/connections", json={"receiver_id": me["id"]}).status_code == 201

    def test_remove(self, request_to_rita, seeker, make_user):
        outsider, _ = make_user("eve")
        url = f"/api/connections/{request_to_rita['id']}"
        assert outsider.delete(url).status_code == 403
        alice, _ = seeker
        assert alice.delete(url).status_code == 200
        assert alice.delete(url).status_code == 404
