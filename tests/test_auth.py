"""
Tests for registration, login and cookie sessions
"""
import pytest

from harmony.core.auth import authenticate, hash_password, verify_password
from tests.conftest import PASSWORD


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password(PASSWORD)
        assert hashed != PASSWORD
        assert verify_password(PASSWORD, hashed)

    def test_wrong_password_fails(self):
        assert not verify_password("nope", hash_password(PASSWORD))

    def test_malformed_hash_never_matches(self):
        assert not verify_password(PASSWORD, "not-a-bcrypt-hash")


class TestRegister:

    def test_register_returns_profile_without_password(self, make_user):
        _, user = make_user("alice")
        assert user["username"] == "alice"
        assert "password" not in user
        assert user["privacy_settings"] == {"profile_visibility": "all", "digital_cv_visibility": "all"}

    def test_register_stores_hashed_password(self, make_user, storage):
        _, user = make_user("alice")
        stored = storage.get_user(user["id"])
        assert stored.password != PASSWORD
        assert verify_password(PASSWORD, stored.password)

    def test_register_starts_session(self, make_user):
        client, user = make_user("alice")
        response = client.get("/api/user")
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_duplicate_username_rejected(self, make_user, client):
        make_user("alice")
        response = client.post("/api/register", json={
            "username": "alice", "password": PASSWORD,
            "email": "other@example.com", "name": "Other",
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    def test_duplicate_email_rejected_case_insensitively(self, make_user, client):
        make_user("alice")
        response = client.post("/api/register", json={
            "username": "alice2", "password": PASSWORD,
            "email": "ALICE@example.com", "name": "Other",
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already exists"

    def test_invalid_body_is_400(self, client):
        response = client.post("/api/register", json={"username": "al"})
        assert response.status_code == 400


class TestLogin:

    def test_login_with_username(self, make_user, client):
        make_user("alice")
        response = client.post("/api/login", json={"username": "alice", "password": PASSWORD})
        assert response.status_code == 200
        assert client.get("/api/user").json()["username"] == "alice"

    def test_login_with_email(self, make_user, client):
        make_user("alice")
        response = client.post("/api/login", json={"username": "alice@example.com", "password": PASSWORD})
        assert response.status_code == 200

    def test_bad_password_is_401(self, make_user, client):
        make_user("alice")
        response = client.post("/api/login", json={"username": "alice", "password": "wrong"})
        assert response.status_code == 401

    def test_unknown_user_is_401(self, client):
        response = client.post("/api/login", json={"username": "ghost", "password": PASSWORD})
        assert response.status_code == 401

    def test_logout_clears_session(self, make_user):
        client, _ = make_user("alice")
        assert client.post("/api/logout").status_code == 200
        assert client.get("/api/user").status_code == 401

    def test_anonymous_user_is_401(self, client):
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_session_for_deleted_user_is_401(self, make_user, storage):
        client, user = make_user("alice")
        storage.delete_user(user["id"])
        assert client.get("/api/user").status_code == 401


class TestAuthenticate:

    @pytest.fixture
    def stored_user(self, storage):
        return storage.create_user({
            "username": "bob", "password": hash_password(PASSWORD),
            "email": "bob@example.com", "name": "Bob",
        })

    def test_by_username(self, storage, stored_user):
        assert authenticate(storage, "bob", PASSWORD).id == stored_user.id

    def test_by_email(self, storage, stored_user):
        assert authenticate(storage, "BOB@example.com", PASSWORD).id == stored_user.id

    def test_wrong_password(self, storage, stored_user):
        assert authenticate(storage, "bob", "wrong") is None

