"""Authorization service.
Role-based permission checks and manager/direct-report delegation.
"""

import logging
from typing import Iterable, Optional, Sequence, Union

from timetracker.domain.models.authorization import (
    AuthorizationContext,
    AuthorizationMetadata,
    AuthorizationResult,
    Permission,
    Role,
    ROLE_PERMISSIONS,
)


logger = logging.getLogger(__name__)

RawRoles = Optional[Union[str, Sequence[str]]]


class AuthorizationService:
    """
    Domain service answering "may this principal see that data?".
    
    Checks never raise. Every check returns an AuthorizationResult, and a
    denial always carries a human-readable reason.
    """

    def parse_role(self, value: Optional[str]) -> Role:
        """Case-insensitive role lookup; anything unknown is a plain user."""
        if not value:
            return Role.USER
        try:
            return Role(value.lower())
        except ValueError:
            return Role.USER

    def create_context(
        self,
        principal_id: str,
        raw_roles: RawRoles,
        metadata: Optional[AuthorizationMetadata] = None
    ) -> AuthorizationContext:
        """Build an authorization context from role strings of any source."""
        if isinstance(raw_roles, str):
            role_values = [raw_roles]
        elif raw_roles is None:
            role_values = []
        else:
            role_values = list(raw_roles)
        
        roles = tuple(self.parse_role(value) for value in role_values) or (Role.USER,)
        return AuthorizationContext(
            principal_id=principal_id,
            roles=roles,
            metadata=metadata or AuthorizationMetadata()
        )

    def resolve_roles(self, role_claim: RawRoles, stored_role: Optional[str]) -> RawRoles:
        """
        Pick the role source for a principal.
        
        A role claim from the token wins over the stored role, and a principal
        with neither is a plain user.
        """
        if isinstance(role_claim, str) and role_claim:
            return role_claim
        if role_claim and not isinstance(role_claim, str):
            return list(role_claim)
        if stored_role:
            return stored_role
        return Role.USER.value

    def context_for_principal(
        self,
        principal_id: str,
        role_claim: RawRoles = None,
        stored_role: Optional[str] = None,
        direct_reports: Iterable[str] = ()
    ) -> AuthorizationContext:
        """Build the context for an authenticated principal."""
        roles = self.resolve_roles(role_claim, stored_role)
        metadata = AuthorizationMetadata(direct_reports=tuple(direct_reports))
        return self.create_context(principal_id, roles, metadata)

    def has_permission(self, context: AuthorizationContext, permission: Permission) -> bool:
        return any(permission in ROLE_PERMISSIONS[role] for role in context.roles)

    def can_view_all_timesheets(self, context: AuthorizationContext) -> AuthorizationResult:
        if self.has_permission(context, Permission.VIEW_ALL_TIMESHEETS):
            return AuthorizationResult.allow()
        
        return self._deny(
            context,
            f"User with roles {context.role_names} does not have permission to view all timesheets"
        )

    def can_view_user_timesheets(
        self,
        context: AuthorizationContext,
        target_user_id: str
    ) -> AuthorizationResult:
        """
        Check access to one user's timesheets.
        
        Own timesheets are always visible. HR and admins see everyone, managers
        see their direct reports.
        """
        if target_user_id == context.principal_id:
            return AuthorizationResult.allow()
        
        if self.has_permission(context, Permission.VIEW_ALL_TIMESHEETS):
            return AuthorizationResult.allow()
        
        if self.has_permission(context, Permission.VIEW_USER_TIMESHEETS):
            if target_user_id in context.direct_reports:
                return AuthorizationResult.allow()
            return self._deny(
                context,
                f"User {target_user_id} is not in the manager's direct reports"
            )
        
        return self._deny(
            context,
            f"User with roles {context.role_names} cannot view timesheets for user {target_user_id}"
        )

    def can_view_reports(
        self,
        context: AuthorizationContext,
        target_user_ids: Optional[Sequence[str]] = None
    ) -> AuthorizationResult:
        """
        Check access to reports covering ``target_user_ids``.
        
        No targets (or only the principal) means the principal's own reports.
        """
        if not target_user_ids:
            return AuthorizationResult.allow()
        
        if all(user_id == context.principal_id for user_id in target_user_ids):
            return AuthorizationResult.allow()
        
        if self.has_permission(context, Permission.VIEW_ALL_TIMESHEETS):
            return AuthorizationResult.allow()
        
        if self.has_permission(context, Permission.VIEW_USER_TIMESHEETS):
            unauthorized = [
                user_id for user_id in target_user_ids
                if user_id != context.principal_id and user_id not in context.direct_reports
            ]
            if not unauthorized:
                return AuthorizationResult.allow()
            return self._deny(
                context,
                f"Cannot view reports for users: {', '.join(unauthorized)}"
            )
        
        return self._deny(
            context,
            f"User with roles {context.role_names} cannot view reports for other users"
        )

    def _deny(self, context: AuthorizationContext, reason: str) -> AuthorizationResult:
        logger.warning(f"Authorization denied for {context.principal_id}: {reason}")
        return AuthorizationResult.deny(reason)
