# crm/identity.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .exceptions import AuthenticationError, AuthorizationError
from .models import User

Role = User.Role


@dataclass(frozen=True)
class Identity:
    """Who is calling, resolved once per request and passed to every operation."""

    user_id: int
    email: str
    role: str
    location_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            user_id=user.pk,
            email=user.email,
            role=user.role,
            location_id=user.location_id or None,
        )

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_scoped(self) -> bool:
        # super admins see every location
        return self.is_admin

    def require_admin(self) -> None:
        if not (self.is_admin or self.is_super_admin):
            raise AuthorizationError("Admin access required")
        if self.is_admin and not self.location_id:
            raise AuthorizationError("Admin location not found")


def resolve_identity(request) -> Identity:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        raise AuthenticationError()
    if not user.is_active:
        raise AuthenticationError("Account disabled")
    return Identity.from_user(user)
