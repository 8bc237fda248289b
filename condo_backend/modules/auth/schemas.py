"""Authentication schemas."""

import enum

from pydantic import BaseModel


class RoleSlug(str, enum.Enum):
    """Available user roles."""

    ADMIN = "admin"
    SINDICO = "sindico"
    PORTER = "porter"
    RESIDENT = "resident"


class AuthenticatedUser(BaseModel):
    """Authenticated user context for request handling."""

    id: int
    account_id: int
    company_id: int
    email: str
    role_slug: str
    is_active: bool = True
