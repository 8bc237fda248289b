"""Authentication: JWT bearer tokens and role checks."""

from .dependencies import ManagerUser, get_current_user, require_role
from .schemas import AuthenticatedUser, RoleSlug

__all__ = [
    "AuthenticatedUser",
    "RoleSlug",
    "ManagerUser",
    "get_current_user",
    "require_role",
]
