# routers/members.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.backend import SupabaseMembershipBackend, get_membership_backend
from core.errors import BackendError, handle_supabase_error
from core.logging_config import logger
from dependencies.access import AccessContext, protected_route
from models.enums import Permission, RegistrationStatus
from models.member import MemberDecision, MemberRead


router = APIRouter(
    prefix="/members",
    tags=["Members"],
)

can_review_registrations = protected_route(required_permission=Permission.approve_registrations)


# -----------------------------------------------------
# Helper — Load a member or 404
# -----------------------------------------------------
async def get_member_or_404(backend: SupabaseMembershipBackend, member_id: str) -> dict:
    try:
        member = await backend.fetch_member(member_id)
    except BackendError as e:
        raise handle_supabase_error(e, "Load member")

    if not member:
        raise HTTPException(404, "Member not found")
    return member


# -----------------------------------------------------
# GET /members?status=pending
# permissions: approve_registrations
# -----------------------------------------------------
@router.get(
    "",
    response_model=List[MemberRead],
    summary="Admin: List member registrations",
    dependencies=[Depends(can_review_registrations)],
)
async def list_members(
    status: RegistrationStatus = RegistrationStatus.pending,
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    if status is RegistrationStatus.not_registered:
        raise HTTPException(400, "not_registered principals have no member record to list")

    try:
        return await backend.list_members(status.value)
    except BackendError as e:
        raise handle_supabase_error(e, "List members")


# -----------------------------------------------------
# POST /members/{member_id}/approve
# permissions: approve_registrations
# -----------------------------------------------------
@router.post(
    "/{member_id}/approve",
    response_model=MemberDecision,
    summary="Admin: Approve member registration",
)
async def approve_member(
    member_id: str,
    context: AccessContext = Depends(can_review_registrations),
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    member = await get_member_or_404(backend, member_id)

    if member.get("registration_status") == RegistrationStatus.approved.value:
        raise HTTPException(400, "Member is already approved")

    try:
        await backend.approve_member(member_id, context.principal.id)
    except BackendError as e:
        raise handle_supabase_error(e, "Approve member")

    logger.info(f"Member {member_id} approved by {context.principal.id}")

    return MemberDecision(
        member_id=member_id,
        registration_status=RegistrationStatus.approved.value,
        decided_by=context.principal.id,
    )


# -----------------------------------------------------
# POST /members/{member_id}/reject
# permissions: approve_registrations
# -----------------------------------------------------
@router.post(
    "/{member_id}/reject",
    response_model=MemberDecision,
    summary="Admin: Reject member registration",
)
async def reject_member(
    member_id: str,
    context: AccessContext = Depends(can_review_registrations),
    backend: SupabaseMembershipBackend = Depends(get_membership_backend),
):
    member = await get_member_or_404(backend, member_id)

    if member.get("registration_status") == RegistrationStatus.rejected.value:
        raise HTTPException(400, "Member is already rejected")

    try:
        await backend.reject_member(member_id, context.principal.id)
    except BackendError as e:
        raise handle_supabase_error(e, "Reject member")

    logger.info(f"Member {member_id} rejected by {context.principal.id}")

    return MemberDecision(
        member_id=member_id,
        registration_status=RegistrationStatus.rejected.value,
        decided_by=context.principal.id,
    )
