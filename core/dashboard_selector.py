# core/dashboard_selector.py

from typing import List, Optional

from core.approval_resolver import ApprovalInfo
from core.logging_config import logger
from core.role_resolver import RoleInfo
from core.roles import is_admin_class
from models.enums import DashboardView, Role


class DashboardSelector:
    """
    Picks which dashboard variant to mount.

    Nothing is chosen until both the role and the approval resolution
    have settled; the first settled view is then kept, and later
    toggles to a view the principal cannot open are refused.
    """

    def __init__(
        self,
        role_info: Optional[RoleInfo] = None,
        approval: Optional[ApprovalInfo] = None,
        preferred: Optional[DashboardView] = None,
    ):
        self.role_info = role_info
        self.approval = approval
        self.preferred = preferred
        self._view: Optional[DashboardView] = None
        self._settle()

    # ---------------------------------------------------------
    # Access
    # ---------------------------------------------------------
    @property
    def settled(self) -> bool:
        return self.role_info is not None and self.approval is not None

    @property
    def has_admin_access(self) -> bool:
        if self.role_info is None or self.role_info.fetch_failed:
            return False
        return is_admin_class(self.role_info.inherited_roles)

    @property
    def has_community_access(self) -> bool:
        if self.role_info is None or self.role_info.fetch_failed:
            return False
        return self.has_admin_access or Role.community_admin in self.role_info.inherited_roles

    def can_open(self, view: DashboardView) -> bool:
        if view is DashboardView.admin:
            return self.has_admin_access
        if view is DashboardView.community:
            return self.has_community_access
        return True

    def available_views(self) -> List[DashboardView]:
        if not self.settled:
            return []
        return [view for view in DashboardView if self.can_open(view)]

    @property
    def admin_badge(self) -> Optional[str]:
        if not self.has_admin_access:
            return None
        return "Super Admin" if self.role_info.is_super_admin else "Admin"

    # ---------------------------------------------------------
    # Selection
    # ---------------------------------------------------------
    @property
    def current_view(self) -> Optional[DashboardView]:
        return self._view

    def update(self, role_info: Optional[RoleInfo] = None, approval: Optional[ApprovalInfo] = None):
        """Feed in resolutions as they arrive."""
        if role_info is not None:
            self.role_info = role_info
        if approval is not None:
            self.approval = approval
        self._settle()

    def _settle(self):
        if self._view is not None or not self.settled:
            return
        if self.preferred is not None and self.can_open(self.preferred):
            self._view = self.preferred
        elif self.has_admin_access:
            self._view = DashboardView.admin
        else:
            self._view = DashboardView.member

    def toggle(self, view: DashboardView) -> bool:
        """Switch views. Returns False (and changes nothing) when not allowed."""
        if not self.settled:
            return False
        if not self.can_open(view):
            logger.warning(
                f"Refused dashboard switch to '{view.value}' for {self.role_info.principal_id}"
            )
            return False
        self._view = view
        return True
