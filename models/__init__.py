# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Permission,
    RegistrationStatus,
    ApprovalOutcome,
    AuthStatus,
    GateState,
    DenialReason,
    DashboardView,
)

# -------------------------
# Auth Models
# -------------------------
from .auth import MagicLinkRequest, PrincipalRead

# -------------------------
# Access Models
# -------------------------
from .access import RoleInfoRead, ApprovalRead, AccessSummary

# -------------------------
# Member Models
# -------------------------
from .member import MemberRead, MemberDecision

# -------------------------
# Role Models
# -------------------------
from .role import RoleAssignment, CatalogEntry, RoleHolder

# -------------------------
# Dashboard Models
# -------------------------
from .dashboard import DashboardViewRequest, DashboardRead, DashboardToggleResult

__all__ = [
    # enums
    "Role",
    "Permission",
    "RegistrationStatus",
    "ApprovalOutcome",
    "AuthStatus",
    "GateState",
    "DenialReason",
    "DashboardView",

    # auth
    "MagicLinkRequest",
    "PrincipalRead",

    # access
    "RoleInfoRead",
    "ApprovalRead",
    "AccessSummary",

    # members
    "MemberRead",
    "MemberDecision",

    # roles
    "RoleAssignment",
    "CatalogEntry",
    "RoleHolder",

    # dashboard
    "DashboardViewRequest",
    "DashboardRead",
    "DashboardToggleResult",
]
