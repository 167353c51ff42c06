"""
Authorization domain models.
Roles, permissions and the per-request authorization context.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class Role(str, Enum):
    """Roles a principal can hold."""
    USER = "user"
    HR = "hr"
    MANAGER = "manager"
    ADMIN = "admin"


class Permission(str, Enum):
    """Capabilities granted through roles."""
    VIEW_ALL_TIMESHEETS = "view_all_timesheets"
    VIEW_USER_TIMESHEETS = "view_user_timesheets"
    VIEW_ALL_REPORTS = "view_all_reports"
    MANAGE_USERS = "manage_users"


ROLE_PERMISSIONS: Dict[Role, FrozenSet[Permission]] = {
    Role.USER: frozenset(),
    Role.HR: frozenset({
        Permission.VIEW_ALL_TIMESHEETS,
        Permission.VIEW_ALL_REPORTS,
    }),
    Role.MANAGER: frozenset({
        Permission.VIEW_USER_TIMESHEETS,
    }),
    Role.ADMIN: frozenset({
        Permission.VIEW_ALL_TIMESHEETS,
        Permission.VIEW_ALL_REPORTS,
        Permission.MANAGE_USERS,
    }),
}


@dataclass(frozen=True)
class AuthorizationMetadata:
    """Extra facts about the principal used by delegation rules."""
    
    direct_reports: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AuthorizationContext:
    """Who is asking, with which roles. Built once per request."""
    
    principal_id: str
    roles: Tuple[Role, ...] = (Role.USER,)
    metadata: AuthorizationMetadata = field(default_factory=AuthorizationMetadata)
    
    def __post_init__(self):
        if not self.roles:
            object.__setattr__(self, "roles", (Role.USER,))
    
    @property
    def direct_reports(self) -> Tuple[str, ...]:
        return self.metadata.direct_reports
    
    @property
    def role_names(self) -> str:
        """Roles formatted for denial messages, e.g. ``[user, hr]``."""
        return "[" + ", ".join(role.value for role in self.roles) + "]"


@dataclass(frozen=True)
class AuthorizationResult:
    """Outcome of an authorization check. Denials always carry a reason."""
    
    authorized: bool
    reason: Optional[str] = None
    
    @classmethod
    def allow(cls) -> "AuthorizationResult":
        return cls(authorized=True)
    
    @classmethod
    def deny(cls, reason: str) -> "AuthorizationResult":
        return cls(authorized=False, reason=reason)
    
    def __bool__(self) -> bool:
        return self.authorized
