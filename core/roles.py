# core/roles.py

"""
Role catalog: role → permissions, the role hierarchy, and the
admin-class allowlist.

Pure and synchronous. Role strings coming from the database are
parsed through parse_role(); anything unknown contributes no
permissions and sorts below every known role.
"""

from typing import Iterable, List, Optional, Union

from core.permissions import ROLE_PERMISSIONS
from models.enums import Permission, Role


RoleLike = Union[Role, str]


# ============================================================
# HIERARCHY — index is the rank, lower wins
# ============================================================
ROLE_HIERARCHY: List[Role] = [
    Role.super_admin,
    Role.chairman,
    Role.vice_chairman,
    Role.general_admin,
    Role.admin,
    Role.community_admin,
    Role.events_admin,
    Role.projects_admin,
    Role.finance_admin,
    Role.content_admin,
    Role.technical_admin,
    Role.marketing_admin,
    Role.member,
]

_RANKS = {role: index for index, role in enumerate(ROLE_HIERARCHY)}
_DECLARATION_ORDER = {role: index for index, role in enumerate(Role)}

# Rank given to role strings the catalog does not know
UNKNOWN_RANK = len(ROLE_HIERARCHY)


# ============================================================
# ADMIN-CLASS ALLOWLIST
# Bypasses the approval gate and unlocks the admin dashboard.
# ============================================================
ADMIN_CLASS_ROLES = frozenset({
    Role.super_admin,
    Role.general_admin,
    Role.community_admin,
    Role.admin,
    Role.chairman,
    Role.vice_chairman,
})


ROLE_LABELS = {
    Role.super_admin: "Super Admin",
    Role.chairman: "Chairman",
    Role.vice_chairman: "Vice Chairman",
    Role.general_admin: "General Admin",
    Role.admin: "Admin",
    Role.community_admin: "Community Admin",
    Role.events_admin: "Events Admin",
    Role.projects_admin: "Projects Admin",
    Role.finance_admin: "Finance Admin",
    Role.content_admin: "Content Admin",
    Role.technical_admin: "Technical Admin",
    Role.marketing_admin: "Marketing Admin",
    Role.member: "Member",
}


def _check_catalog():
    """Every Role must have a permission bundle, a rank and a label."""
    for table_name, table in (
        ("ROLE_PERMISSIONS", ROLE_PERMISSIONS),
        ("ROLE_HIERARCHY", _RANKS),
        ("ROLE_LABELS", ROLE_LABELS),
    ):
        missing = [role.value for role in Role if role not in table]
        if missing:
            raise RuntimeError(f"{table_name} is missing roles: {', '.join(missing)}")

    if len(ROLE_HIERARCHY) != len(_RANKS):
        raise RuntimeError("ROLE_HIERARCHY lists a role more than once")


_check_catalog()


# ============================================================
# LOOKUPS
# ============================================================
def parse_role(value: RoleLike) -> Optional[Role]:
    """Return the Role for a raw value, or None if the catalog does not know it."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_of(role: RoleLike) -> frozenset:
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def rank_of(role: RoleLike) -> int:
    parsed = parse_role(role)
    if parsed is None:
        return UNKNOWN_RANK
    return _RANKS[parsed]


def role_label(role: RoleLike) -> str:
    parsed = parse_role(role)
    if parsed is None:
        return str(role).replace("_", " ").title()
    return ROLE_LABELS[parsed]


def permissions_for(roles: Iterable[RoleLike]) -> frozenset:
    """Union of the permission bundles of every role."""
    granted = set()
    for role in roles:
        granted |= permissions_of(role)
    return frozenset(granted)


def has_permission(roles: Iterable[RoleLike], permission: Union[Permission, str]) -> bool:
    return permission in permissions_for(roles)


def primary_role(roles: Iterable[RoleLike]) -> Role:
    """
    Highest-ranked known role. Ranks are unique per role, so the
    declaration-order tie-break only orders roles that share a rank.
    Falls back to member when nothing known is present.
    """
    known = [r for r in (parse_role(role) for role in roles) if r is not None]
    if not known:
        return Role.member
    return min(known, key=lambda r: (rank_of(r), _DECLARATION_ORDER[r]))


def is_admin_class(roles: Iterable[RoleLike]) -> bool:
    """Single source for "holds an admin-class role"."""
    return any(parse_role(role) in ADMIN_CLASS_ROLES for role in roles)


def catalog_snapshot() -> List[dict]:
    """Catalog in hierarchy order, for admin role-management screens."""
    return [
        {
            "role": role.value,
            "label": ROLE_LABELS[role],
            "rank": _RANKS[role],
            "admin_class": role in ADMIN_CLASS_ROLES,
            "permissions": sorted(p.value for p in ROLE_PERMISSIONS[role]),
        }
        for role in ROLE_HIERARCHY
    ]
