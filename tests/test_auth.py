# tests/test_auth.py

"""
Tests for authentication endpoints and bearer token resolution.
"""

from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, Mock, patch

from core.session import Principal, Session
from dependencies.auth import get_session


def test_magic_link_sent(client: TestClient):
    """Test a magic link request is passed to Supabase OTP."""
    with patch("routers.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_client = Mock()
        mock_client.auth.sign_in_with_otp = AsyncMock(return_value=None)
        mock_supabase.return_value = mock_client

        response = client.post("/auth/magic-link", json={"email": "Member@Example.com"})

        assert response.status_code == 200
        assert response.json() == {"status": "sent", "email": "member@example.com"}
        credentials = mock_client.auth.sign_in_with_otp.call_args.args[0]
        assert credentials["email"] == "member@example.com"


def test_magic_link_failure(client: TestClient):
    """Test Supabase errors are not exposed to the caller."""
    with patch("routers.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_client = Mock()
        mock_client.auth.sign_in_with_otp = AsyncMock(side_effect=Exception("smtp down"))
        mock_supabase.return_value = mock_client

        response = client.post("/auth/magic-link", json={"email": "member@example.com"})

        assert response.status_code == 400
        assert "smtp" not in response.json()["detail"]


def test_magic_link_invalid_email(client: TestClient):
    response = client.post("/auth/magic-link", json={"email": "not-an-email"})

    assert response.status_code == 422


def test_magic_link_without_supabase(client: TestClient):
    with patch("routers.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_supabase.return_value = None

        response = client.post("/auth/magic-link", json={"email": "member@example.com"})

        assert response.status_code == 500


def test_me_without_token(client: TestClient):
    response = client.get("/auth/me")

    assert response.status_code == 401


def test_me_with_valid_token(client: TestClient):
    """Test a bearer token is validated through Supabase auth."""
    with patch("dependencies.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_client = Mock()
        mock_user = Mock(id="u1", email="u1@example.com")
        mock_client.auth.get_user = AsyncMock(return_value=Mock(user=mock_user))
        mock_supabase.return_value = mock_client

        response = client.get("/auth/me", headers={"Authorization": "Bearer good-token"})

        assert response.status_code == 200
        assert response.json() == {"id": "u1", "email": "u1@example.com"}
        mock_client.auth.get_user.assert_awaited_once_with("good-token")


def test_me_with_rejected_token(client: TestClient):
    with patch("dependencies.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_client = Mock()
        mock_client.auth.get_user = AsyncMock(side_effect=Exception("jwt expired"))
        mock_supabase.return_value = mock_client

        response = client.get("/auth/me", headers={"Authorization": "Bearer stale-token"})

        assert response.status_code == 401


def test_session_built_from_bearer_token(app, client: TestClient, backend):
    """Without the test override, the session comes from the bearer token."""
    del app.dependency_overrides[get_session]
    backend.roles["u1"] = ["chairman"]

    with patch("dependencies.auth.get_supabase_client", new_callable=AsyncMock) as mock_supabase:
        mock_client = Mock()
        mock_client.auth.get_user = AsyncMock(return_value=Mock(user=Mock(id="u1", email=None)))
        mock_supabase.return_value = mock_client

        response = client.get("/access/me", headers={"Authorization": "Bearer good-token"})

        assert response.status_code == 200
        assert response.json()["roles"]["assigned_role"] == "chairman"


# -----------------------------------------------------
# Session
# -----------------------------------------------------
def test_session_notifies_only_on_identity_change():
    session = Session()
    changes = []
    session.subscribe(lambda previous, current: changes.append((previous, current)))

    session.sign_in(Principal(id="a"))
    session.sign_in(Principal(id="a", email="a@example.com"))
    session.sign_in(Principal(id="b"))
    session.sign_out()
    session.sign_out()

    assert changes == [(None, "a"), ("a", "b"), ("b", None)]


def test_session_handles_supabase_auth_events():
    session = Session()

    session.handle_auth_event("SIGNED_IN", Mock(user=Mock(id="u1", email="u1@example.com")))
    assert session.principal_id == "u1"
    assert session.status.value == "authenticated"

    session.handle_auth_event("SIGNED_OUT", None)
    assert session.principal is None
    assert session.status.value == "anonymous"


def test_unsubscribe_stops_notifications():
    session = Session()
    changes = []
    unsubscribe = session.subscribe(lambda previous, current: changes.append(current))

    unsubscribe()
    session.sign_in(Principal(id="a"))

    assert changes == []
