from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """
    Roles assigned to a principal through the user_roles table.
    Declaration order is the tie-break order for primary role selection.
    """

    super_admin = "super_admin"
    chairman = "chairman"
    vice_chairman = "vice_chairman"
    general_admin = "general_admin"
    admin = "admin"  # legacy value still present in older user_roles rows
    community_admin = "community_admin"
    events_admin = "events_admin"
    projects_admin = "projects_admin"
    finance_admin = "finance_admin"
    content_admin = "content_admin"
    technical_admin = "technical_admin"
    marketing_admin = "marketing_admin"
    member = "member"


# -----------------------------------------------------
# PERMISSION
# -----------------------------------------------------
class Permission(BaseStrEnum):
    """Single named capability granted through a role."""

    # Everyone
    view_dashboard = "view_dashboard"
    view_profile = "view_profile"
    view_announcements = "view_announcements"
    register_events = "register_events"

    # Membership administration
    manage_users = "manage_users"
    approve_registrations = "approve_registrations"
    manage_roles = "manage_roles"

    # Events & communities
    manage_events = "manage_events"
    create_community_events = "create_community_events"
    manage_communities = "manage_communities"
    manage_projects = "manage_projects"

    # Finance
    manage_payments = "manage_payments"
    manage_financial_records = "manage_financial_records"
    audit_financial_records = "audit_financial_records"

    # Content
    post_announcements = "post_announcements"
    manage_content = "manage_content"
    manage_certificates = "manage_certificates"
    manage_elections = "manage_elections"
    manage_marketing = "manage_marketing"

    # System
    view_analytics = "view_analytics"
    manage_system_settings = "manage_system_settings"
    full_system_access = "full_system_access"


# -----------------------------------------------------
# REGISTRATION STATUS
# -----------------------------------------------------
class RegistrationStatus(BaseStrEnum):
    """Workflow state of a member registration record."""

    not_registered = "not_registered"  # no members row at all
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# -----------------------------------------------------
# APPROVAL OUTCOME
# -----------------------------------------------------
class ApprovalOutcome(BaseStrEnum):
    """What the approval lookup concluded, with backend failure kept apart from pending."""

    approved = "approved"
    pending = "pending"
    not_registered = "not_registered"
    rejected = "rejected"
    fetch_error = "fetch_error"


# -----------------------------------------------------
# AUTH STATUS
# -----------------------------------------------------
class AuthStatus(BaseStrEnum):
    anonymous = "anonymous"
    authenticating = "authenticating"
    authenticated = "authenticated"


# -----------------------------------------------------
# GATE STATE
# -----------------------------------------------------
class GateState(BaseStrEnum):
    resolving = "resolving"
    allowed = "allowed"
    denied = "denied"


class DenialReason(BaseStrEnum):
    not_authenticated = "not_authenticated"
    not_approved = "not_approved"
    insufficient_role = "insufficient_role"
    fetch_failed = "fetch_failed"


# -----------------------------------------------------
# DASHBOARD VIEW
# -----------------------------------------------------
class DashboardView(BaseStrEnum):
    member = "member"
    admin = "admin"
    community = "community"
