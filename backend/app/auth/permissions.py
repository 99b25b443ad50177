# backend/app/auth/permissions.py
"""
Role checks used by every route.

These are the only places a role is interpreted. Both accept a ``UserRole``,
a raw string (token claim or DB column) or ``None``; anything unrecognised
is treated as a plain user.
"""
from ..users.models import UserRole

ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPERADMIN})


def is_admin(role) -> bool:
    return UserRole.parse(role) in ADMIN_ROLES


def is_super_admin(role) -> bool:
    return UserRole.parse(role) is UserRole.SUPERADMIN
