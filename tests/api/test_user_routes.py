"""
API tests for /api/users, /api/admin and /api/items.
"""

from uuid import uuid4

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, STRONG_PASSWORD


def _user_id(client, headers, email):
    users = client.get("/api/admin/users", headers=headers).json()["users"]
    return next(user["id"] for user in users if user["email"] == email)


class TestUserRoutes:
    def test_list_requires_authentication(self, client):
        assert client.get("/api/users").status_code == 401

    def test_list_users(self, client, register_verified):
        headers = register_verified()
        response = client.get("/api/users", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert {user["email"] for user in body["users"]} == {"jane@example.com", ADMIN_EMAIL}
        assert "role" not in body["users"][0]

    def test_update_profile(self, client, register_verified):
        headers = register_verified()
        response = client.patch("/api/users/me", json={"name": "Janet"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Janet"

    def test_change_password(self, client, register_verified, login):
        headers = register_verified()
        response = client.post(
            "/api/users/me/password",
            json={"current_password": STRONG_PASSWORD, "new_password": "N3w!Password"},
            headers=headers,
        )
        assert response.status_code == 200
        assert login("jane@example.com", "N3w!Password")

    def test_change_password_with_wrong_current(self, client, register_verified):
        headers = register_verified()
        response = client.post(
            "/api/users/me/password",
            json={"current_password": "Wr0ng!Pass", "new_password": "N3w!Password"},
            headers=headers,
        )
        assert response.status_code == 401
        assert response.json() == {"detail": "Current password is incorrect"}

    def test_unlink_google_without_link_keeps_account(self, client, register_verified):
        headers = register_verified()
        response = client.delete("/api/users/me/google", headers=headers)

        assert response.status_code == 200
        assert response.json()["uses_google_sso"] is False


class TestAdminRoutes:
    def test_regular_user_is_forbidden(self, client, register_verified):
        headers = register_verified()
        response = client.get("/api/admin/users", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"detail": "Insufficient privileges"}

    def test_list_users(self, client, admin_headers):
        response = client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        (admin,) = response.json()["users"]
        assert admin["email"] == ADMIN_EMAIL
        assert admin["role"] == "ROLE_SUPERADMIN"

    def test_manual_verification_and_activation(self, client, admin_headers, login):
        response = client.post(
            "/api/auth/register",
            json={"email": "bob@example.com", "name": "Bob", "password": STRONG_PASSWORD},
        )
        user_id = response.json()["id"]

        response = client.post(f"/api/admin/users/{user_id}/verify-email", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_email_verified"] is True
        assert login("bob@example.com", STRONG_PASSWORD)

        response = client.post(f"/api/admin/users/{user_id}/deactivate", headers=admin_headers)
        assert response.json()["is_active"] is False
        refused = client.post("/api/auth/login", json={"email": "bob@example.com", "password": STRONG_PASSWORD})
        assert refused.status_code == 401

        response = client.post(f"/api/admin/users/{user_id}/activate", headers=admin_headers)
        assert response.json()["is_active"] is True

    def test_change_role_requires_superadmin(self, client, admin_headers, register_verified, login):
        register_verified("bob@example.com", "Bob")
        bob_id = _user_id(client, admin_headers, "bob@example.com")

        response = client.put(f"/api/admin/users/{bob_id}/role", json={"role": "ROLE_ADMIN"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "ROLE_ADMIN"

        bob_headers = login("bob@example.com", STRONG_PASSWORD)
        assert client.get("/api/admin/users", headers=bob_headers).status_code == 200
        forbidden = client.put(f"/api/admin/users/{bob_id}/role", json={"role": "ROLE_USER"}, headers=bob_headers)
        assert forbidden.status_code == 403

    def test_admin_cannot_touch_superadmin(self, client, admin_headers, register_verified, login):
        register_verified("bob@example.com", "Bob")
        bob_id = _user_id(client, admin_headers, "bob@example.com")
        root_id = _user_id(client, admin_headers, ADMIN_EMAIL)
        client.put(f"/api/admin/users/{bob_id}/role", json={"role": "ROLE_ADMIN"}, headers=admin_headers)
        bob_headers = login("bob@example.com", STRONG_PASSWORD)

        deactivate = client.post(f"/api/admin/users/{root_id}/deactivate", headers=bob_headers)
        delete = client.delete(f"/api/admin/users/{root_id}", headers=bob_headers)

        assert deactivate.status_code == 403
        assert deactivate.json() == {"detail": "Insufficient privileges"}
        assert delete.status_code == 403
        assert login(ADMIN_EMAIL, ADMIN_PASSWORD)

    def test_unknown_role(self, client, admin_headers, register_verified):
        register_verified("bob@example.com", "Bob")
        bob_id = _user_id(client, admin_headers, "bob@example.com")

        response = client.put(f"/api/admin/users/{bob_id}/role", json={"role": "ROLE_GOD"}, headers=admin_headers)
        assert response.status_code == 422

    def test_unknown_user(self, client, admin_headers):
        response = client.post(f"/api/admin/users/{uuid4()}/activate", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "User not found"}

    def test_delete_user(self, client, admin_headers, register_verified):
        register_verified("bob@example.com", "Bob")
        bob_id = _user_id(client, admin_headers, "bob@example.com")

        assert client.delete(f"/api/admin/users/{bob_id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/admin/users/{bob_id}", headers=admin_headers).status_code == 404


class TestItemRoutes:
    def test_create_list_update(self, client):
        response = client.post("/api/items", json={"name": "Widget", "description": "small"})
        assert response.status_code == 201
        item_id = response.json()["id"]

        response = client.patch(f"/api/items/{item_id}", json={"name": "Gadget"})
        assert response.status_code == 200
        assert response.json()["name"] == "Gadget"

        items = client.get("/api/items").json()
        assert [item["name"] for item in items] == ["Gadget"]

    def test_invalid_name(self, client):
        response = client.post("/api/items", json={"name": "ab"})
        assert response.status_code == 422

    def test_unknown_item(self, client):
        response = client.patch(f"/api/items/{uuid4()}", json={"name": "Gadget"})
        assert response.status_code == 404
