# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import asyncio
from typing import Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from main import create_app
from core.backend import get_membership_backend
from core.errors import ApprovalFetchFailed, BackendError, RoleFetchFailed
from core.session import Principal, Session
from dependencies.auth import get_session


class FakeBackend:
    """In-memory stand-in for SupabaseMembershipBackend."""

    def __init__(self, roles: Optional[Dict[str, List[str]]] = None, records: Optional[Dict[str, dict]] = None):
        self.roles = roles or {}
        self.records = records or {}
        self.members: Dict[str, dict] = {}
        self.fail_roles = False
        self.fail_records = False
        self.fail_writes = False
        # principal_id -> asyncio.Event; reads for that principal wait on it
        self.holds: Dict[str, asyncio.Event] = {}
        self.calls: List[tuple] = []

    async def _hold(self, principal_id: str):
        event = self.holds.get(principal_id)
        if event is not None:
            await event.wait()

    async def fetch_roles(self, principal_id: str) -> List[str]:
        self.calls.append(("fetch_roles", principal_id))
        await self._hold(principal_id)
        if self.fail_roles:
            raise RoleFetchFailed("Failed to fetch roles", "connection refused")
        return list(self.roles.get(principal_id, []))

    async def fetch_approval_record(self, principal_id: str) -> Optional[dict]:
        self.calls.append(("fetch_approval_record", principal_id))
        await self._hold(principal_id)
        if self.fail_records:
            raise ApprovalFetchFailed("Failed to fetch member record", "connection refused")
        return self.records.get(principal_id)

    async def fetch_member(self, member_id: str) -> Optional[dict]:
        return self.members.get(member_id)

    async def list_members(self, status: Optional[str] = None) -> List[dict]:
        return [
            m for m in self.members.values()
            if status is None or m.get("registration_status") == status
        ]

    async def approve_member(self, member_id: str, approver_id: str) -> None:
        if self.fail_writes:
            raise BackendError("Failed to approve member", "rpc approve_member failed")
        self.calls.append(("approve_member", member_id, approver_id))
        self.members[member_id]["registration_status"] = "approved"

    async def reject_member(self, member_id: str, approver_id: str) -> Optional[dict]:
        if self.fail_writes:
            raise BackendError("Failed to reject member", "update failed")
        self.calls.append(("reject_member", member_id, approver_id))
        self.members[member_id]["registration_status"] = "rejected"
        return self.members[member_id]

    async def list_role_assignments(self, role: Optional[str] = None) -> List[dict]:
        if self.fail_writes:
            raise BackendError("Failed to list role assignments", "connection refused")
        return [
            {"user_id": user_id, "role": held}
            for user_id in sorted(self.roles)
            for held in self.roles[user_id]
            if role is None or held == role
        ]

    async def assign_role(self, user_id: str, role: str) -> dict:
        if role in self.roles.get(user_id, []):
            raise BackendError("Failed to assign role", "duplicate key value violates unique constraint")
        self.roles.setdefault(user_id, []).append(role)
        return {"user_id": user_id, "role": role}

    async def remove_role(self, user_id: str, role: str) -> int:
        held = self.roles.get(user_id, [])
        if role not in held:
            return 0
        held.remove(role)
        return 1


def approved(principal_id: str) -> dict:
    return {"id": f"m-{principal_id}", "registration_status": "approved"}


def pending(principal_id: str) -> dict:
    return {"id": f"m-{principal_id}", "registration_status": "pending"}


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(scope="function")
def app(backend):
    """Create a test FastAPI application wired to the fake backend."""
    application = create_app()
    application.dependency_overrides[get_membership_backend] = lambda: backend
    application.dependency_overrides[get_session] = lambda: Session()
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign_in(app):
    """Make every request in the test come from the given principal."""
    def _sign_in(principal_id: str, email: Optional[str] = None) -> Principal:
        principal = Principal(id=principal_id, email=email or f"{principal_id}@example.com")
        app.dependency_overrides[get_session] = lambda: Session(principal)
        return principal
    return _sign_in


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client
