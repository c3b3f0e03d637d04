from typing import List, Optional
from pydantic import BaseModel

from models.enums import ApprovalOutcome, RegistrationStatus


# -----------------------------------------------------
# ROLE INFO (as returned to the UI)
# -----------------------------------------------------
class RoleInfoRead(BaseModel):
    assigned_role: str
    assigned_role_label: str
    inherited_roles: List[str]       # hierarchy order
    permissions: List[str]           # alphabetical
    fetch_failed: bool = False


# -----------------------------------------------------
# APPROVAL
# -----------------------------------------------------
class ApprovalRead(BaseModel):
    is_approved: bool
    registration_status: Optional[RegistrationStatus] = None
    outcome: ApprovalOutcome
    fetch_failed: bool = False


# -----------------------------------------------------
# EVERYTHING THE UI NEEDS TO GATE ITSELF
# -----------------------------------------------------
class AccessSummary(BaseModel):
    principal_id: str
    email: Optional[str] = None
    roles: RoleInfoRead
    approval: ApprovalRead
    has_admin_access: bool
    is_super_admin: bool
