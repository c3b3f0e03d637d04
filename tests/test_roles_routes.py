# tests/test_roles_routes.py

"""
Tests for role catalog and role assignment endpoints.
"""

from fastapi.testclient import TestClient

from conftest import approved


def test_catalog_requires_sign_in(client: TestClient):
    response = client.get("/roles/catalog")

    assert response.status_code == 401


def test_catalog(client: TestClient, sign_in):
    sign_in("u1")

    response = client.get("/roles/catalog")

    assert response.status_code == 200
    data = response.json()
    assert data[0]["role"] == "super_admin"
    assert data[-1]["role"] == "member"
    assert data[-1]["admin_class"] is False


def test_general_admin_assigns_role(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["general_admin"]
    sign_in("admin-1")

    response = client.post("/roles/assign", json={"user_id": "u2", "role": "events_admin"})

    assert response.status_code == 200
    assert response.json()["status"] == "assigned"
    assert backend.roles["u2"] == ["events_admin"]


def test_only_super_admin_grants_super_admin(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["general_admin"]
    sign_in("admin-1")

    response = client.post("/roles/assign", json={"user_id": "u2", "role": "super_admin"})

    assert response.status_code == 403
    assert "u2" not in backend.roles


def test_super_admin_grants_super_admin(client: TestClient, backend, sign_in):
    backend.roles["root"] = ["super_admin"]
    sign_in("root")

    response = client.post("/roles/assign", json={"user_id": "u2", "role": "super_admin"})

    assert response.status_code == 200


def test_duplicate_assignment(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["general_admin"]
    backend.roles["u2"] = ["events_admin"]
    sign_in("admin-1")

    response = client.post("/roles/assign", json={"user_id": "u2", "role": "events_admin"})

    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_unknown_role_rejected(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["general_admin"]
    sign_in("admin-1")

    response = client.post("/roles/assign", json={"user_id": "u2", "role": "treasurer"})

    assert response.status_code == 422


def test_member_cannot_assign(client: TestClient, backend, sign_in):
    backend.records["u1"] = approved("u1")
    sign_in("u1")

    response = client.post("/roles/assign", json={"user_id": "u1", "role": "chairman"})

    assert response.status_code == 403


def test_remove_role(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["chairman"]
    backend.roles["u2"] = ["events_admin", "member"]
    sign_in("admin-1")

    response = client.delete("/roles/u2/events_admin")

    assert response.status_code == 200
    assert backend.roles["u2"] == ["member"]


def test_remove_role_not_held(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["chairman"]
    sign_in("admin-1")

    response = client.delete("/roles/u2/events_admin")

    assert response.status_code == 404


# -----------------------------------------------------
# Role holders
# -----------------------------------------------------
def test_list_role_assignments(client: TestClient, backend, sign_in):
    """Admins can see who holds which role before revoking anything."""
    backend.roles["admin-1"] = ["general_admin"]
    backend.roles["u2"] = ["member", "events_admin"]
    sign_in("admin-1")

    response = client.get("/roles/assignments")

    assert response.status_code == 200
    holders = {h["user_id"]: h for h in response.json()}
    assert holders["u2"]["roles"] == ["events_admin", "member"]
    assert holders["u2"]["primary_role"] == "events_admin"
    assert holders["admin-1"]["primary_role"] == "general_admin"


def test_list_role_assignments_for_one_role(client: TestClient, backend, sign_in):
    backend.roles["admin-1"] = ["general_admin"]
    backend.roles["u2"] = ["events_admin"]
    sign_in("admin-1")

    response = client.get("/roles/assignments", params={"role": "events_admin"})

    assert [h["user_id"] for h in response.json()] == ["u2"]


def test_member_cannot_list_role_assignments(client: TestClient, backend, sign_in):
    backend.records["u1"] = approved("u1")
    sign_in("u1")

    response = client.get("/roles/assignments")

    assert response.status_code == 403


# -----------------------------------------------------
# Last super_admin
# -----------------------------------------------------
def test_last_super_admin_cannot_be_removed(client: TestClient, backend, sign_in):
    backend.roles["root"] = ["super_admin"]
    sign_in("root")

    response = client.delete("/roles/root/super_admin")

    assert response.status_code == 400
    assert "last remaining super_admin" in response.json()["detail"]
    assert backend.roles["root"] == ["super_admin"]


def test_super_admin_removable_when_another_remains(client: TestClient, backend, sign_in):
    backend.roles["root"] = ["super_admin"]
    backend.roles["root-2"] = ["super_admin"]
    sign_in("root")

    response = client.delete("/roles/root-2/super_admin")

    assert response.status_code == 200
    assert backend.roles["root-2"] == []
