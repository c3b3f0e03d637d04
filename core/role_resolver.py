# core/role_resolver.py

from typing import FrozenSet, Optional

from pydantic import BaseModel

from core.backend import MembershipBackend
from core.errors import BackendError, NotAuthenticated
from core.logging_config import logger
from core.roles import is_admin_class, parse_role, permissions_for, primary_role
from models.enums import Permission, Role


# ============================================================
# RoleInfo — derived, never persisted
# ============================================================
class RoleInfo(BaseModel):
    principal_id: str
    assigned_role: Role                   # display only, never authorize on it
    inherited_roles: FrozenSet[Role]
    permissions: FrozenSet[Permission]

    # Set when the role rows could not be read; roles are then {member}
    fetch_failed: bool = False
    error: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return Role.super_admin in self.inherited_roles

    @property
    def is_admin_class(self) -> bool:
        return is_admin_class(self.inherited_roles)

    def has_role(self, role: Role) -> bool:
        if self.is_super_admin:
            return True
        return role in self.inherited_roles

    def can(self, permission: Permission) -> bool:
        if self.is_super_admin:
            return True
        return permission in self.permissions


def build_role_info(principal_id: str, roles, *, error: Optional[str] = None) -> RoleInfo:
    """Normalize raw role values into a RoleInfo. Empty or unknown-only → {member}."""
    known = set()
    for value in roles:
        role = parse_role(value)
        if role is None:
            logger.warning(f"Ignoring unknown role '{value}' for principal {principal_id}")
            continue
        known.add(role)

    if not known:
        known = {Role.member}

    return RoleInfo(
        principal_id=principal_id,
        assigned_role=primary_role(known),
        inherited_roles=frozenset(known),
        permissions=permissions_for(known),
        fetch_failed=error is not None,
        error=error,
    )


def member_fallback(principal_id: str, error: str) -> RoleInfo:
    """Minimum-privilege RoleInfo reported after a failed role read."""
    return build_role_info(principal_id, [], error=error)


# ============================================================
# Resolver
# ============================================================
async def resolve_role_info(backend: MembershipBackend, principal_id: Optional[str]) -> RoleInfo:
    """
    Fetch the principal's role rows and derive RoleInfo.

    Raises NotAuthenticated when called without a principal. A backend
    failure never raises: it yields the member fallback with
    fetch_failed=True so callers can offer a retry.
    """
    if not principal_id:
        raise NotAuthenticated("Role resolution requires a signed-in principal")

    try:
        roles = await backend.fetch_roles(principal_id)
    except BackendError as e:
        logger.error(f"Role fetch failed for {principal_id}: {e.detail}")
        return member_fallback(principal_id, e.detail)

    info = build_role_info(principal_id, roles)
    logger.debug(
        f"Resolved roles for {principal_id}: "
        f"{sorted(r.value for r in info.inherited_roles)} (primary={info.assigned_role.value})"
    )
    return info
