# core/approval_resolver.py

import asyncio
from typing import Iterable, Optional

from pydantic import BaseModel

from core.backend import MembershipBackend
from core.errors import BackendError, NotAuthenticated
from core.logging_config import logger
from core.role_resolver import resolve_role_info
from core.roles import is_admin_class
from models.enums import ApprovalOutcome, RegistrationStatus


class RegistrationLookup(BaseModel):
    """Raw result of reading the members row: a status, or the failure."""

    status: Optional[RegistrationStatus] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ApprovalInfo(BaseModel):
    principal_id: str
    is_approved: bool
    # None only when the record could not be read
    registration_status: Optional[RegistrationStatus] = None
    fetch_failed: bool = False
    error: Optional[str] = None

    @property
    def outcome(self) -> ApprovalOutcome:
        if self.fetch_failed:
            return ApprovalOutcome.fetch_error
        if self.is_approved:
            return ApprovalOutcome.approved
        return ApprovalOutcome(self.registration_status.value)


def _parse_status(principal_id: str, raw) -> RegistrationStatus:
    # A row without a status has not been reviewed yet
    if raw is None:
        return RegistrationStatus.pending
    try:
        status = RegistrationStatus(str(raw).lower())
    except ValueError:
        logger.warning(f"Unknown registration_status '{raw}' for {principal_id}; treating as pending")
        return RegistrationStatus.pending
    if status is RegistrationStatus.not_registered:
        # Reserved for "no row"; a row can't claim it
        return RegistrationStatus.pending
    return status


async def fetch_registration(backend: MembershipBackend, principal_id: str) -> RegistrationLookup:
    try:
        record = await backend.fetch_approval_record(principal_id)
    except BackendError as e:
        logger.error(f"Member record fetch failed for {principal_id}: {e.detail}")
        return RegistrationLookup(error=e.detail)

    if record is None:
        return RegistrationLookup(status=RegistrationStatus.not_registered)
    return RegistrationLookup(status=_parse_status(principal_id, record.get("registration_status")))


def combine_approval(principal_id: str, lookup: RegistrationLookup, roles: Iterable) -> ApprovalInfo:
    """
    Approved when the registration says so, or when the principal holds an
    admin-class role. A failed lookup is never approved.
    """
    if lookup.failed:
        return ApprovalInfo(
            principal_id=principal_id,
            is_approved=False,
            fetch_failed=True,
            error=lookup.error,
        )

    approved = lookup.status is RegistrationStatus.approved or is_admin_class(roles)
    return ApprovalInfo(
        principal_id=principal_id,
        is_approved=approved,
        registration_status=lookup.status,
    )


async def resolve_approval(
    backend: MembershipBackend,
    principal_id: Optional[str],
    roles: Optional[Iterable] = None,
) -> ApprovalInfo:
    """
    Decide whether the principal may use approval-gated features.

    When roles are not supplied they are resolved alongside the member
    record. A failed role read leaves only {member}, so no admin bypass.
    """
    if not principal_id:
        raise NotAuthenticated("Approval resolution requires a signed-in principal")

    if roles is None:
        lookup, role_info = await asyncio.gather(
            fetch_registration(backend, principal_id),
            resolve_role_info(backend, principal_id),
        )
        roles = role_info.inherited_roles
    else:
        lookup = await fetch_registration(backend, principal_id)

    return combine_approval(principal_id, lookup, roles)
