from typing import List
from pydantic import BaseModel

from models.enums import Role


class RoleAssignment(BaseModel):
    user_id: str
    role: Role


class CatalogEntry(BaseModel):
    role: str
    label: str
    rank: int
    admin_class: bool
    permissions: List[str]


class RoleHolder(BaseModel):
    user_id: str
    roles: List[str]                 # hierarchy order
    primary_role: str
