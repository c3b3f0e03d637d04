from typing import List, Optional
from pydantic import BaseModel

from models.enums import DashboardView


class DashboardViewRequest(BaseModel):
    view: DashboardView


class DashboardRead(BaseModel):
    view: DashboardView
    available_views: List[DashboardView]
    admin_badge: Optional[str] = None
    sections: List[str]


class DashboardToggleResult(BaseModel):
    view: DashboardView
    changed: bool
