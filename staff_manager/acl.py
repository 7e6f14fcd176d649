# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from .errors import AccessDenied, ValidationError
from .models.staff import Roster, StaffCategory, TransportCategory

ROLE_MANAGER = "manager"
ROLE_MLT_ADMIN = "mlt_admin"
ROLE_PETROLEUM_ADMIN = "petroleum_admin"
ROLE_CRUSHER_ADMIN = "crusher_admin"

ROLES = (ROLE_MANAGER, ROLE_MLT_ADMIN, ROLE_PETROLEUM_ADMIN, ROLE_CRUSHER_ADMIN)

# role -> categories it may see and edit; managers see everything
_ROLE_CATEGORIES: dict[str, FrozenSet[str]] = {
    ROLE_MANAGER: frozenset(
        [c.value for c in StaffCategory] + [c.value for c in TransportCategory]
    ),
    ROLE_MLT_ADMIN: frozenset(c.value for c in TransportCategory),
    ROLE_PETROLEUM_ADMIN: frozenset([StaffCategory.PETROLEUM.value]),
    ROLE_CRUSHER_ADMIN: frozenset([StaffCategory.CRUSHER.value]),
}


@dataclass(frozen=True)
class AuthContext:
    """Who is acting. Passed explicitly into every service call."""

    user_id: int
    role: str
    category: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "AuthContext":
        role = getattr(user, "role", "") or ""
        if role not in ROLES:
            raise AccessDenied(f"unknown role {role!r}")
        return cls(
            user_id=int(getattr(user, "id", 0) or 0),
            role=role,
            category=getattr(user, "category", None) or None,
        )

    def allowed_categories(self) -> FrozenSet[str]:
        return _ROLE_CATEGORIES.get(self.role, frozenset())

    def can_access(self, category: str) -> bool:
        return category in self.allowed_categories()

    def require(self, category: str) -> None:
        if not self.can_access(category):
            raise AccessDenied(f"role {self.role} cannot work with category {category!r}")

    def default_roster(self) -> Roster:
        return Roster.TRANSPORT if self.role == ROLE_MLT_ADMIN else Roster.STAFF


def resolve_scope(auth: AuthContext, roster: str | None, category: str | None) -> tuple[Roster, list[str]]:
    """
    Query args -> (roster, categories to show), restricted to what `auth` may see.

    An explicit category must belong to the roster and be visible to the
    caller; without one, every visible category of the roster is returned.
    """
    try:
        r = Roster((roster or auth.default_roster().value).strip().lower())
    except ValueError:
        raise ValidationError(f"unknown roster {roster!r}", code="bad_roster") from None

    if category:
        try:
            cat = r.parse_category(category).value
        except ValueError as e:
            raise ValidationError(str(e), code="bad_category") from None
        auth.require(cat)
        return r, [cat]

    cats = [c.value for c in r.categories if auth.can_access(c.value)]
    if not cats:
        raise AccessDenied(f"role {auth.role} has no access to roster {r.value}")
    return r, cats
