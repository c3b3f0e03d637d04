# routers/access.py

from typing import Optional

from fastapi import APIRouter, Depends

from core.access_gate import GateDecision, GateRequirements
from core.roles import ROLE_HIERARCHY, is_admin_class, role_label
from dependencies.access import AccessContext, get_access_context, require_principal
from models.access import AccessSummary, ApprovalRead, RoleInfoRead
from models.enums import Permission, Role


router = APIRouter(
    prefix="/access",
    tags=["Access"],
)


def summarize(context: AccessContext) -> AccessSummary:
    role_info = context.role_info
    approval = context.approval

    return AccessSummary(
        principal_id=context.principal.id,
        email=context.principal.email,
        roles=RoleInfoRead(
            assigned_role=role_info.assigned_role.value,
            assigned_role_label=role_label(role_info.assigned_role),
            inherited_roles=[r.value for r in ROLE_HIERARCHY if r in role_info.inherited_roles],
            permissions=sorted(p.value for p in role_info.permissions),
            fetch_failed=role_info.fetch_failed,
        ),
        approval=ApprovalRead(
            is_approved=approval.is_approved,
            registration_status=approval.registration_status,
            outcome=approval.outcome,
            fetch_failed=approval.fetch_failed,
        ),
        has_admin_access=not role_info.fetch_failed and is_admin_class(role_info.inherited_roles),
        is_super_admin=role_info.is_super_admin,
    )


# -----------------------------------------------------
# GET /access/me
# Resolved roles, permissions and approval for the caller
# -----------------------------------------------------
@router.get("/me", response_model=AccessSummary, summary="Resolved access for the current principal")
async def read_my_access(context: AccessContext = Depends(require_principal)):
    return summarize(context)


# -----------------------------------------------------
# GET /access/check
# Evaluates the gate without enforcing it; UIs use this to
# decide what to render (loading / redirect / denial / content)
# -----------------------------------------------------
@router.get("/check", response_model=GateDecision, summary="Evaluate the access gate")
async def check_access(
    required_role: Optional[Role] = None,
    required_permission: Optional[Permission] = None,
    require_approval: bool = True,
    next: Optional[str] = None,
    context: AccessContext = Depends(get_access_context),
):
    if next:
        context.requested_location = next
    return context.check(
        GateRequirements(
            required_role=required_role,
            required_permission=required_permission,
            require_approval=require_approval,
        )
    )
