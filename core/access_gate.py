# core/access_gate.py

"""
Access gate.

evaluate_gate() is the decision table: given the resolved role and
approval state for a principal and what the caller requires, it says
resolving / allowed / denied(reason).

AccessTracker keeps that resolved state for one Session. It resets on
every identity change and applies a resolution only if the principal
it was started for is still the session's principal.
"""

import asyncio
from typing import Optional
from urllib.parse import urlencode

from pydantic import BaseModel

from core.approval_resolver import ApprovalInfo, combine_approval, fetch_registration
from core.backend import MembershipBackend
from core.config import settings
from core.logging_config import logger
from core.role_resolver import RoleInfo, resolve_role_info
from core.roles import role_label
from core.session import Principal, Session
from models.enums import AuthStatus, DenialReason, GateState, Permission, RegistrationStatus, Role


class GateRequirements(BaseModel):
    required_role: Optional[Role] = None
    required_permission: Optional[Permission] = None
    require_approval: bool = True

    @property
    def requires_role_check(self) -> bool:
        return self.required_role is not None or self.required_permission is not None

    @property
    def is_gated(self) -> bool:
        return self.requires_role_check or self.require_approval


class GateDecision(BaseModel):
    state: GateState
    reason: Optional[DenialReason] = None
    message: Optional[str] = None
    registration_status: Optional[RegistrationStatus] = None
    redirect_to: Optional[str] = None
    retryable: bool = False

    @property
    def allowed(self) -> bool:
        return self.state is GateState.allowed

    @property
    def resolving(self) -> bool:
        return self.state is GateState.resolving


# ============================================================
# Messages
# ============================================================
FETCH_FAILED_MESSAGE = "We couldn't verify your access right now. Please try again."

NOT_APPROVED_MESSAGES = {
    RegistrationStatus.not_registered: (
        "You have not registered as a member yet. "
        "Complete your member registration to continue."
    ),
    RegistrationStatus.pending: (
        "Your membership is pending approval. "
        "Please wait for an administrator to approve your account."
    ),
    RegistrationStatus.rejected: (
        "Your membership registration was not approved. "
        "Contact an administrator if you believe this is an error."
    ),
}


def sign_in_redirect(sign_in_path: str, requested_location: Optional[str]) -> str:
    if not requested_location:
        return sign_in_path
    separator = "&" if "?" in sign_in_path else "?"
    return f"{sign_in_path}{separator}{urlencode({'next': requested_location})}"


def _insufficient_role_message(requirements: GateRequirements) -> str:
    if requirements.required_role is not None:
        return f"You need {role_label(requirements.required_role)} privileges to access this page."
    return "You don't have the required permissions to access this page."


def _denied(reason: DenialReason, message: str, **extra) -> GateDecision:
    return GateDecision(state=GateState.denied, reason=reason, message=message, **extra)


# ============================================================
# Decision table
# ============================================================
def evaluate_gate(
    requirements: GateRequirements,
    principal: Optional[Principal],
    role_info: Optional[RoleInfo],
    approval: Optional[ApprovalInfo],
    *,
    sign_in_path: str = settings.SIGN_IN_PATH,
    requested_location: Optional[str] = None,
    authenticating: bool = False,
) -> GateDecision:
    # 1. Anonymous: wait while sign-in is in progress, otherwise redirect
    if principal is None:
        if authenticating:
            return GateDecision(state=GateState.resolving)
        return _denied(
            DenialReason.not_authenticated,
            "Please sign in to continue.",
            redirect_to=sign_in_redirect(sign_in_path, requested_location),
        )

    # 2. Both resolutions must be in, and for this principal
    if (
        role_info is None
        or approval is None
        or role_info.principal_id != principal.id
        or approval.principal_id != principal.id
    ):
        return GateDecision(state=GateState.resolving)

    # 3. Backend failures deny whatever they could have affected
    role_failure = role_info.fetch_failed and requirements.is_gated
    approval_failure = approval.fetch_failed and requirements.require_approval
    if role_failure or approval_failure:
        return _denied(DenialReason.fetch_failed, FETCH_FAILED_MESSAGE, retryable=True)

    # 4. super_admin overrides every role and permission check
    if role_info.is_super_admin:
        return GateDecision(state=GateState.allowed)

    # 5. Role / permission requirement
    if requirements.required_role is not None and requirements.required_role not in role_info.inherited_roles:
        return _denied(DenialReason.insufficient_role, _insufficient_role_message(requirements))
    if requirements.required_permission is not None and requirements.required_permission not in role_info.permissions:
        return _denied(DenialReason.insufficient_role, _insufficient_role_message(requirements))

    # 6. Approval, bypassed by admin-class roles
    if requirements.require_approval and not approval.is_approved and not role_info.is_admin_class:
        status = approval.registration_status or RegistrationStatus.pending
        return _denied(
            DenialReason.not_approved,
            NOT_APPROVED_MESSAGES[status],
            registration_status=status,
        )

    return GateDecision(state=GateState.allowed)


# ============================================================
# Session-bound resolution state
# ============================================================
class AccessTracker:
    def __init__(self, session: Session, backend: MembershipBackend):
        self.session = session
        self.backend = backend
        self.role_info: Optional[RoleInfo] = None
        self.approval: Optional[ApprovalInfo] = None
        self._unsubscribe = session.subscribe(self._on_identity_change)

    @property
    def settled(self) -> bool:
        return self.role_info is not None and self.approval is not None

    def _on_identity_change(self, previous: Optional[str], current: Optional[str]):
        # Whatever was resolved belonged to the previous principal
        self.role_info = None
        self.approval = None

    async def refresh(self) -> bool:
        """
        Resolve roles and registration for the current principal.
        Returns False when there is no principal or the result went stale.
        """
        principal_id = self.session.principal_id
        if principal_id is None:
            return False

        lookup, role_info = await asyncio.gather(
            fetch_registration(self.backend, principal_id),
            resolve_role_info(self.backend, principal_id),
        )

        if self.session.principal_id != principal_id:
            logger.info(
                f"Discarding stale access resolution for {principal_id}; "
                f"session now belongs to {self.session.principal_id}"
            )
            return False

        self.role_info = role_info
        self.approval = combine_approval(principal_id, lookup, role_info.inherited_roles)
        return True

    async def ensure_resolved(self):
        if self.session.principal_id is not None and not self.settled:
            await self.refresh()

    def decide(
        self,
        requirements: GateRequirements,
        *,
        sign_in_path: str = settings.SIGN_IN_PATH,
        requested_location: Optional[str] = None,
    ) -> GateDecision:
        return evaluate_gate(
            requirements,
            self.session.principal,
            self.role_info,
            self.approval,
            sign_in_path=sign_in_path,
            requested_location=requested_location,
            authenticating=self.session.status is AuthStatus.authenticating,
        )

    def close(self):
        self._unsubscribe()


class AccessGate:
    """A tracker paired with fixed requirements."""

    def __init__(
        self,
        tracker: AccessTracker,
        requirements: Optional[GateRequirements] = None,
        sign_in_path: str = settings.SIGN_IN_PATH,
    ):
        self.tracker = tracker
        self.requirements = requirements or GateRequirements()
        self.sign_in_path = sign_in_path

    def current(self, requested_location: Optional[str] = None) -> GateDecision:
        return self.tracker.decide(
            self.requirements,
            sign_in_path=self.sign_in_path,
            requested_location=requested_location,
        )

    async def resolve(self, requested_location: Optional[str] = None) -> GateDecision:
        await self.tracker.ensure_resolved()
        return self.current(requested_location)
