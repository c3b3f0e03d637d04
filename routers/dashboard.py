# routers/dashboard.py

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from core.config import settings
from core.dashboard_selector import DashboardSelector
from dependencies.access import AccessContext, RoleGuard, protected_route
from models.dashboard import DashboardRead, DashboardToggleResult, DashboardViewRequest
from models.enums import DashboardView, Permission as P, Role


router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


# -----------------------------------------------------
# Sections per dashboard, each behind its own guard
# -----------------------------------------------------
DASHBOARD_SECTIONS = {
    DashboardView.member: [
        ("profile", RoleGuard(required_permission=P.view_profile)),
        ("announcements", RoleGuard(required_permission=P.view_announcements)),
        ("events", RoleGuard(required_permission=P.register_events)),
    ],
    DashboardView.admin: [
        ("members", RoleGuard(required_permission=P.approve_registrations)),
        ("roles", RoleGuard(required_permission=P.manage_roles)),
        ("events", RoleGuard(required_permission=P.manage_events)),
        ("communities", RoleGuard(required_permission=P.manage_communities)),
        ("projects", RoleGuard(required_permission=P.manage_projects)),
        ("payments", RoleGuard(required_permission=P.manage_payments)),
        ("content", RoleGuard(required_permission=P.manage_content)),
        ("certificates", RoleGuard(required_permission=P.manage_certificates)),
        ("elections", RoleGuard(required_permission=P.manage_elections)),
        ("analytics", RoleGuard(required_permission=P.view_analytics)),
        ("system", RoleGuard(required_role=Role.super_admin)),
    ],
    DashboardView.community: [
        ("communities", RoleGuard(required_permission=P.manage_communities)),
        ("community_events", RoleGuard(required_permission=P.create_community_events)),
        ("projects", RoleGuard(required_permission=P.manage_projects)),
    ],
}


def _stored_preference(request: Request) -> Optional[DashboardView]:
    raw = request.cookies.get(settings.DASHBOARD_VIEW_COOKIE)
    if not raw:
        return None
    try:
        return DashboardView(raw)
    except ValueError:
        return None


def _selector(context: AccessContext, request: Request) -> DashboardSelector:
    return DashboardSelector(
        role_info=context.role_info,
        approval=context.approval,
        preferred=_stored_preference(request),
    )


# -----------------------------------------------------
# GET /dashboard
# Approved members (and admin-class roles) only
# -----------------------------------------------------
@router.get("", response_model=DashboardRead, summary="Select the dashboard to mount")
async def read_dashboard(
    request: Request,
    context: AccessContext = Depends(protected_route(require_approval=True)),
):
    selector = _selector(context, request)
    view = selector.current_view

    sections = [
        name for name, guard in DASHBOARD_SECTIONS[view]
        if guard.allows(context)
    ]

    return DashboardRead(
        view=view,
        available_views=selector.available_views(),
        admin_badge=selector.admin_badge,
        sections=sections,
    )


# -----------------------------------------------------
# POST /dashboard/view
# Switch views; refused switches change nothing
# -----------------------------------------------------
@router.post("/view", response_model=DashboardToggleResult, summary="Switch dashboard view")
async def switch_dashboard_view(
    payload: DashboardViewRequest,
    request: Request,
    response: Response,
    context: AccessContext = Depends(protected_route(require_approval=True)),
):
    selector = _selector(context, request)
    changed = selector.toggle(payload.view)

    if changed:
        response.set_cookie(
            settings.DASHBOARD_VIEW_COOKIE,
            selector.current_view.value,
            max_age=settings.DASHBOARD_VIEW_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )

    return DashboardToggleResult(view=selector.current_view, changed=changed)
