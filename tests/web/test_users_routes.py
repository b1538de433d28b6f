"""Tests for the admin-only user management endpoints."""

import pytest

from helpers import ADMIN_PASSWORD, login

NEW_USER = {
    "username": "mary",
    "email": "mary@example.com",
    "firstName": "Mary",
    "lastName": "Manager",
    "role": "manager",
    "password": "pw-mary",
}


@pytest.fixture
def admin(client):
    return login(client, "admin", ADMIN_PASSWORD)


class TestListUsers:
    def test_passwords_never_returned(self, client, admin):
        response = client.get("/api/users", headers=admin)

        assert response.status_code == 200
        users = response.json()
        assert [u["username"] for u in users] == ["admin"]
        assert all("password" not in u for u in users)


class TestCreateUser:
    def test_create(self, client, admin):
        response = client.post("/api/users", headers=admin, json=NEW_USER)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["role"] == "manager"
        assert "password" not in body["user"]

        login(client, "mary", "pw-mary")

    def test_invalid_role(self, client, admin):
        response = client.post("/api/users", headers=admin, json={**NEW_USER, "role": "superuser"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid role"

    def test_missing_field(self, client, admin):
        payload = {k: v for k, v in NEW_USER.items() if k != "email"}
        response = client.post("/api/users", headers=admin, json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"

    def test_missing_role(self, client, admin):
        response = client.post("/api/users", headers=admin, json={**NEW_USER, "role": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"


class TestUpdateUser:
    def test_update_role(self, client, admin):
        created = client.post("/api/users", headers=admin, json=NEW_USER).json()["user"]

        response = client.put(f"/api/users/{created['id']}", headers=admin, json={"role": "viewer", "lastName": "V"})

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "viewer"
        assert response.json()["user"]["lastName"] == "V"

    def test_session_snapshot_keeps_old_role(self, client, admin):
        """Test that a role change does not alter sessions opened before it."""
        created = client.post("/api/users", headers=admin, json=NEW_USER).json()["user"]
        mary = login(client, "mary", "pw-mary")

        client.put(f"/api/users/{created['id']}", headers=admin, json={"role": "viewer"})

        response = client.post(
            "/api/accounts",
            headers=mary,
            json={"account_number": "7", "password": "p", "server": "s", "provider": "xm"},
        )
        assert response.status_code == 201

    def test_cannot_deactivate_self(self, client, admin):
        me = client.get("/api/auth/verify", headers=admin).json()["user"]

        response = client.put(f"/api/users/{me['id']}", headers=admin, json={"status": "inactive"})

        assert response.status_code == 400
        assert response.json()["error"] == "You cannot deactivate your own account"

    def test_unknown_user(self, client, admin):
        response = client.put("/api/users/ffffffff-ffff-ffff-ffff-ffffffffffff", headers=admin, json={"role": "viewer"})
        assert response.status_code == 404


class TestDeleteUser:
    def test_delete(self, client, admin):
        created = client.post("/api/users", headers=admin, json=NEW_USER).json()["user"]

        response = client.delete(f"/api/users/{created['id']}", headers=admin)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert [u["username"] for u in client.get("/api/users", headers=admin).json()] == ["admin"]

    def test_cannot_delete_self(self, client, admin):
        me = client.get("/api/auth/verify", headers=admin).json()["user"]
        response = client.delete(f"/api/users/{me['id']}", headers=admin)
        assert response.status_code == 400
        assert response.json()["error"] == "You cannot delete your own account"

    def test_manager_cannot_manage_users(self, client, admin):
        client.post("/api/users", headers=admin, json=NEW_USER)
        mary = login(client, "mary", "pw-mary")

        response = client.delete("/api/users/ffffffff-ffff-ffff-ffff-ffffffffffff", headers=mary)

        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"
