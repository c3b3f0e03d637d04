from typing import Optional

from fastapi import Depends, HTTPException, Request

from core.access_gate import AccessTracker, GateDecision, GateRequirements
from core.approval_resolver import ApprovalInfo
from core.backend import SupabaseMembershipBackend, get_membership_backend
from core.config import settings
from core.errors import SignInRequired
from core.role_resolver import RoleInfo
from core.session import Principal, Session
from dependencies.auth import get_session
from models.enums import DenialReason, GateState, Permission, Role


# ============================================================
# Resolved access for one request
# ============================================================
class AccessContext:
    def __init__(self, tracker: AccessTracker, requested_location: Optional[str] = None):
        self.tracker = tracker
        self.requested_location = requested_location

    @property
    def session(self) -> Session:
        return self.tracker.session

    @property
    def principal(self) -> Optional[Principal]:
        return self.tracker.session.principal

    @property
    def role_info(self) -> Optional[RoleInfo]:
        return self.tracker.role_info

    @property
    def approval(self) -> Optional[ApprovalInfo]:
        return self.tracker.approval

    def check(self, requirements: GateRequirements) -> GateDecision:
        return self.tracker.decide(
            requirements,
            sign_in_path=settings.SIGN_IN_PATH,
            requested_location=self.requested_location,
        )


def requested_location(request: Request) -> str:
    location = request.url.path
    if request.url.query:
        location = f"{location}?{request.url.query}"
    return location


async def get_access_context(
    request: Request,
    session: Session = Depends(get_session),
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
) -> AccessContext:
    tracker = AccessTracker(session, backend)
    await tracker.ensure_resolved()
    return AccessContext(tracker, requested_location(request))


# ============================================================
# Decision → HTTP
# ============================================================
def raise_for_decision(decision: GateDecision, requested: Optional[str] = None):
    if decision.state is GateState.allowed:
        return

    if decision.state is GateState.resolving:
        # Only reachable if the identity changed mid-request
        raise HTTPException(
            status_code=503,
            detail={"reason": "resolving", "message": "Access is still being verified", "retryable": True},
        )

    if decision.reason is DenialReason.not_authenticated:
        raise SignInRequired(decision.redirect_to, requested)

    if decision.reason is DenialReason.fetch_failed:
        raise HTTPException(
            status_code=503,
            detail={"reason": decision.reason.value, "message": decision.message, "retryable": True},
        )

    raise HTTPException(
        status_code=403,
        detail={
            "reason": decision.reason.value,
            "message": decision.message,
            "registration_status": decision.registration_status.value if decision.registration_status else None,
        },
    )


# ============================================================
# Route-level gate
# ============================================================
def protected_route(
    required_role: Optional[Role] = None,
    required_permission: Optional[Permission] = None,
    require_approval: bool = True,
):
    """
    Usage:
        @router.get("/", dependencies=[Depends(protected_route(required_permission=Permission.manage_events))])
    or take the returned AccessContext as a parameter.

    Anonymous → redirect to sign-in (with ?next=), denied → 403,
    backend failure → 503 retryable.
    """
    requirements = GateRequirements(
        required_role=required_role,
        required_permission=required_permission,
        require_approval=require_approval,
    )

    async def dependency(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        raise_for_decision(context.check(requirements), context.requested_location)
        return context

    return dependency


async def require_principal(context: AccessContext = Depends(get_access_context)) -> AccessContext:
    """Authenticated callers only (401, no redirect); no role or approval checks."""
    if context.principal is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


# ============================================================
# Subtree-level gate
# ============================================================
class RoleGuard:
    """
    Guards one part of a response. Never raises or redirects; callers
    include or omit the guarded part based on the decision.
    """

    def __init__(
        self,
        required_role: Optional[Role] = None,
        required_permission: Optional[Permission] = None,
        require_approval: bool = False,
    ):
        self.requirements = GateRequirements(
            required_role=required_role,
            required_permission=required_permission,
            require_approval=require_approval,
        )

    def check(self, context: AccessContext) -> GateDecision:
        return context.check(self.requirements)

    def allows(self, context: AccessContext) -> bool:
        return self.check(context).allowed
