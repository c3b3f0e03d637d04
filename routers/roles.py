# routers/roles.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.backend import SupabaseMembershipBackend, get_membership_backend
from core.errors import BackendError, handle_supabase_error
from core.logging_config import logger
from core.roles import catalog_snapshot, primary_role, rank_of
from dependencies.access import AccessContext, protected_route, require_principal
from models.enums import Permission, Role
from models.role import CatalogEntry, RoleAssignment, RoleHolder


router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
)

can_manage_roles = protected_route(required_permission=Permission.manage_roles)


# -----------------------------------------------------
# GET /roles/catalog
# -----------------------------------------------------
@router.get(
    "/catalog",
    response_model=List[CatalogEntry],
    summary="Roles, ranks and permissions",
    dependencies=[Depends(require_principal)],
)
async def read_catalog():
    return catalog_snapshot()


# -----------------------------------------------------
# GET /roles/assignments
# Who holds which role, grouped per user
# permissions: manage_roles
# -----------------------------------------------------
@router.get(
    "/assignments",
    response_model=List[RoleHolder],
    summary="Admin: List role holders",
    dependencies=[Depends(can_manage_roles)],
)
async def list_role_assignments(
    role: Optional[Role] = None,
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    try:
        rows = await backend.list_role_assignments(role.value if role else None)
    except BackendError as e:
        raise handle_supabase_error(e, "List role assignments")

    held = {}
    for row in rows:
        held.setdefault(row["user_id"], set()).add(row["role"])

    return [
        RoleHolder(
            user_id=user_id,
            roles=sorted(roles, key=lambda r: (rank_of(r), r)),
            primary_role=primary_role(roles).value,
        )
        for user_id, roles in held.items()
    ]


# -----------------------------------------------------
# Helper — Secure Role Assignment
# -----------------------------------------------------
def validate_role_assignment(role: Role, context: AccessContext):
    """
    Prevent ANY admin from granting or revoking super_admin.
    Only super_admin may touch super_admin.
    """
    if role is Role.super_admin and not context.role_info.is_super_admin:
        raise HTTPException(
            403,
            "Only a super_admin can assign or remove the super_admin role.",
        )


# -----------------------------------------------------
# Helper — Prevent removing the last super_admin
# -----------------------------------------------------
async def ensure_not_last_super_admin(backend: SupabaseMembershipBackend, user_id: str):
    try:
        rows = await backend.list_role_assignments(Role.super_admin.value)
    except BackendError as e:
        raise handle_supabase_error(e, "Remove role")

    holders = {row["user_id"] for row in rows}
    if holders == {user_id}:
        raise HTTPException(400, "Cannot remove the last remaining super_admin.")


# -----------------------------------------------------
# POST /roles/assign
# permissions: manage_roles
# -----------------------------------------------------
@router.post("/assign", summary="Admin: Assign a role to a user")
async def assign_role(
    payload: RoleAssignment,
    context: AccessContext = Depends(can_manage_roles),
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    validate_role_assignment(payload.role, context)

    try:
        row = await backend.assign_role(payload.user_id, payload.role.value)
    except BackendError as e:
        raise handle_supabase_error(e, "Assign role")

    logger.info(f"Role {payload.role.value} assigned to {payload.user_id} by {context.principal.id}")
    return {"status": "assigned", "assignment": row}


# -----------------------------------------------------
# DELETE /roles/{user_id}/{role}
# permissions: manage_roles
# -----------------------------------------------------
@router.delete("/{user_id}/{role}", summary="Admin: Remove a role from a user")
async def remove_role(
    user_id: str,
    role: Role,
    context: AccessContext = Depends(can_manage_roles),
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    validate_role_assignment(role, context)

    if role is Role.super_admin:
        await ensure_not_last_super_admin(backend, user_id)

    try:
        removed = await backend.remove_role(user_id, role.value)
    except BackendError as e:
        raise handle_supabase_error(e, "Remove role")

    if not removed:
        raise HTTPException(404, f"User does not hold the {role.value} role")

    logger.info(f"Role {role.value} removed from {user_id} by {context.principal.id}")
    return {"status": "removed", "user_id": user_id, "role": role.value}
