# tests/test_dashboard.py

"""
Tests for dashboard selection, both the selector itself and the routes.
"""

from fastapi.testclient import TestClient

from conftest import approved, pending
from core.approval_resolver import ApprovalInfo
from core.dashboard_selector import DashboardSelector
from core.role_resolver import build_role_info, member_fallback
from models.enums import DashboardView, RegistrationStatus


def roles(*values):
    return build_role_info("u1", list(values))


APPROVED = ApprovalInfo(principal_id="u1", is_approved=True, registration_status=RegistrationStatus.approved)


# -----------------------------------------------------
# Selector
# -----------------------------------------------------
def test_nothing_chosen_until_both_resolutions_settle():
    selector = DashboardSelector(role_info=roles("chairman"))

    assert selector.current_view is None
    assert selector.available_views() == []

    selector.update(approval=APPROVED)

    assert selector.current_view is DashboardView.admin


def test_admin_class_defaults_to_admin_view():
    selector = DashboardSelector(roles("vice_chairman"), APPROVED)

    assert selector.current_view is DashboardView.admin
    assert selector.admin_badge == "Admin"


def test_super_admin_badge():
    selector = DashboardSelector(roles("super_admin"), APPROVED)

    assert selector.admin_badge == "Super Admin"


def test_member_defaults_to_member_view():
    selector = DashboardSelector(roles("member"), APPROVED)

    assert selector.current_view is DashboardView.member
    assert selector.available_views() == [DashboardView.member]
    assert selector.admin_badge is None


def test_disallowed_toggle_is_a_no_op():
    selector = DashboardSelector(roles("finance_admin"), APPROVED)

    assert selector.toggle(DashboardView.admin) is False
    assert selector.current_view is DashboardView.member


def test_community_admin_can_open_community_view():
    selector = DashboardSelector(roles("community_admin"), APPROVED)

    assert selector.available_views() == [DashboardView.member, DashboardView.admin, DashboardView.community]
    assert selector.current_view is DashboardView.admin
    assert selector.toggle(DashboardView.community) is True
    assert selector.current_view is DashboardView.community


def test_preference_honoured_when_allowed():
    selector = DashboardSelector(roles("chairman"), APPROVED, preferred=DashboardView.member)

    assert selector.current_view is DashboardView.member


def test_preference_ignored_when_not_allowed():
    selector = DashboardSelector(roles("member"), APPROVED, preferred=DashboardView.admin)

    assert selector.current_view is DashboardView.member


def test_first_settled_view_is_kept():
    selector = DashboardSelector(roles("chairman"), APPROVED)
    selector.toggle(DashboardView.member)

    selector.update(role_info=roles("chairman"))

    assert selector.current_view is DashboardView.member


def test_failed_role_read_never_opens_admin():
    selector = DashboardSelector(member_fallback("u1", "timeout"), APPROVED)

    assert selector.has_admin_access is False
    assert selector.current_view is DashboardView.member


# -----------------------------------------------------
# Routes
# -----------------------------------------------------
def test_member_dashboard(client: TestClient, backend, sign_in):
    backend.records["u1"] = approved("u1")
    sign_in("u1")

    response = client.get("/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["view"] == "member"
    assert data["available_views"] == ["member"]
    assert data["admin_badge"] is None
    assert data["sections"] == ["profile", "announcements", "events"]


def test_chairman_dashboard_sections_follow_permissions(client: TestClient, backend, sign_in):
    """Pending chairman still gets in (admin-class); sections follow the catalog."""
    backend.roles["u1"] = ["chairman"]
    backend.records["u1"] = pending("u1")
    sign_in("u1")

    data = client.get("/dashboard").json()

    assert data["view"] == "admin"
    assert data["admin_badge"] == "Admin"
    assert "payments" in data["sections"]
    assert "members" in data["sections"]
    assert "certificates" not in data["sections"]
    assert "system" not in data["sections"]


def test_super_admin_sees_every_section(client: TestClient, backend, sign_in):
    backend.roles["u1"] = ["super_admin"]
    sign_in("u1")

    data = client.get("/dashboard").json()

    assert data["admin_badge"] == "Super Admin"
    assert "system" in data["sections"]
    assert "certificates" in data["sections"]


def test_refused_toggle_sets_no_cookie(client: TestClient, backend, sign_in):
    backend.records["u1"] = approved("u1")
    sign_in("u1")

    response = client.post("/dashboard/view", json={"view": "admin"})

    assert response.status_code == 200
    assert response.json() == {"view": "member", "changed": False}
    assert "dashboard_view" not in response.cookies


def test_toggle_is_remembered(client: TestClient, backend, sign_in):
    backend.roles["u1"] = ["chairman"]
    backend.records["u1"] = approved("u1")
    sign_in("u1")

    response = client.post("/dashboard/view", json={"view": "member"})

    assert response.json() == {"view": "member", "changed": True}
    assert response.cookies.get("dashboard_view") == "member"

    data = client.get("/dashboard").json()
    assert data["view"] == "member"


def test_toggle_requires_approval(client: TestClient, backend, sign_in):
    backend.records["u1"] = pending("u1")
    sign_in("u1")

    response = client.post("/dashboard/view", json={"view": "member"})

    assert response.status_code == 403
