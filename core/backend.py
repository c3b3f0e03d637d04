# core/backend.py

"""
Backend boundary for the access core.

Everything the resolvers and admin routes need from Supabase goes
through MembershipBackend. Transport/query failures are raised as
BackendError subclasses; "no rows" is an ordinary return value.
"""

from datetime import datetime, timezone
from typing import List, Optional, Protocol

from fastapi import HTTPException
from supabase import AsyncClient

from core.config import settings
from core.errors import ApprovalFetchFailed, BackendError, RoleFetchFailed, extract_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client


class MembershipBackend(Protocol):
    async def fetch_roles(self, principal_id: str) -> List[str]: ...

    async def fetch_approval_record(self, principal_id: str) -> Optional[dict]: ...

    async def fetch_member(self, member_id: str) -> Optional[dict]: ...

    async def list_members(self, status: Optional[str] = None) -> List[dict]: ...

    async def approve_member(self, member_id: str, approver_id: str) -> None: ...

    async def reject_member(self, member_id: str, approver_id: str) -> Optional[dict]: ...

    async def list_role_assignments(self, role: Optional[str] = None) -> List[dict]: ...

    async def assign_role(self, user_id: str, role: str) -> dict: ...

    async def remove_role(self, user_id: str, role: str) -> int: ...


def _rows(result) -> list:
    """maybe_single() yields None on zero rows in newer postgrest clients."""
    if result is None or result.data is None:
        return []
    if isinstance(result.data, dict):
        return [result.data]
    return result.data


# ============================================================
# Supabase implementation
# ============================================================
class SupabaseMembershipBackend:
    def __init__(
        self,
        client: AsyncClient,
        roles_table: str = settings.ROLES_TABLE,
        members_table: str = settings.MEMBERS_TABLE,
    ):
        self.client = client
        self.roles_table = roles_table
        self.members_table = members_table

    # ---------------------------------------------------------
    # Reads used by the resolvers
    # ---------------------------------------------------------
    async def fetch_roles(self, principal_id: str) -> List[str]:
        try:
            result = await (
                self.client.table(self.roles_table)
                .select("role")
                .eq("user_id", principal_id)
                .execute()
            )
        except Exception as e:
            raise RoleFetchFailed("Failed to fetch roles", extract_supabase_error(e))

        return [row["role"] for row in _rows(result) if row.get("role")]

    async def fetch_approval_record(self, principal_id: str) -> Optional[dict]:
        # Newest row wins; duplicate registrations must not turn into a fetch failure
        try:
            result = await (
                self.client.table(self.members_table)
                .select("id, registration_status, created_at")
                .eq("user_id", principal_id)
                .order("created_at", desc=True)
                .limit(2)
                .execute()
            )
        except Exception as e:
            raise ApprovalFetchFailed("Failed to fetch member record", extract_supabase_error(e))

        rows = _rows(result)
        if len(rows) > 1:
            logger.warning(
                f"Principal {principal_id} has more than one member record; using the newest ({rows[0].get('id')})"
            )
        return rows[0] if rows else None

    # ---------------------------------------------------------
    # Member registration administration
    # ---------------------------------------------------------
    async def fetch_member(self, member_id: str) -> Optional[dict]:
        try:
            result = await (
                self.client.table(self.members_table)
                .select("id, user_id, name, email, registration_status, approved_at, approved_by, created_at")
                .eq("id", member_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise BackendError("Failed to fetch member", extract_supabase_error(e))

        rows = _rows(result)
        return rows[0] if rows else None

    async def list_members(self, status: Optional[str] = None) -> List[dict]:
        try:
            query = (
                self.client.table(self.members_table)
                .select("id, user_id, name, email, registration_status, created_at")
            )
            if status:
                query = query.eq("registration_status", status)
            result = await query.order("created_at", desc=True).execute()
        except Exception as e:
            raise BackendError("Failed to list members", extract_supabase_error(e))

        return _rows(result)

    async def approve_member(self, member_id: str, approver_id: str) -> None:
        # approve_member RPC stamps approved_at / approved_by server-side
        try:
            await self.client.rpc(
                "approve_member",
                {"member_id": member_id, "approver_id": approver_id},
            ).execute()
        except Exception as e:
            raise BackendError("Failed to approve member", extract_supabase_error(e))

    async def reject_member(self, member_id: str, approver_id: str) -> Optional[dict]:
        try:
            result = await (
                self.client.table(self.members_table)
                .update({
                    "registration_status": "rejected",
                    "approved_by": approver_id,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })
                .eq("id", member_id)
                .execute()
            )
        except Exception as e:
            raise BackendError("Failed to reject member", extract_supabase_error(e))

        rows = _rows(result)
        return rows[0] if rows else None

    # ---------------------------------------------------------
    # Role assignment
    # ---------------------------------------------------------
    async def list_role_assignments(self, role: Optional[str] = None) -> List[dict]:
        """Every (user_id, role) row, optionally for a single role."""
        try:
            query = self.client.table(self.roles_table).select("user_id, role")
            if role:
                query = query.eq("role", role)
            result = await query.order("user_id").execute()
        except Exception as e:
            raise BackendError("Failed to list role assignments", extract_supabase_error(e))

        return _rows(result)

    async def assign_role(self, user_id: str, role: str) -> dict:
        try:
            result = await (
                self.client.table(self.roles_table)
                .insert({"user_id": user_id, "role": role})
                .execute()
            )
        except Exception as e:
            raise BackendError("Failed to assign role", extract_supabase_error(e))

        rows = _rows(result)
        return rows[0] if rows else {"user_id": user_id, "role": role}

    async def remove_role(self, user_id: str, role: str) -> int:
        try:
            result = await (
                self.client.table(self.roles_table)
                .delete()
                .eq("user_id", user_id)
                .eq("role", role)
                .execute()
            )
        except Exception as e:
            raise BackendError("Failed to remove role", extract_supabase_error(e))

        return len(_rows(result))


# ============================================================
# FastAPI dependency
# ============================================================
async def get_membership_backend() -> SupabaseMembershipBackend:
    client = await get_supabase_client()
    if not client:
        logger.error("Membership backend requested without a Supabase client")
        raise HTTPException(500, "Supabase client not configured")
    return SupabaseMembershipBackend(client)
