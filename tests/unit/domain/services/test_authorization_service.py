"""
Unit tests for the authorization service.
"""

import logging

import pytest

from timetracker.domain.models.authorization import (
    AuthorizationMetadata, Permission, Role, ROLE_PERMISSIONS
)
from timetracker.domain.services.authorization_service import AuthorizationService


class TestParseRole:
    """Test cases for role parsing."""
    
    def setup_method(self):
        self.service = AuthorizationService()
    
    @pytest.mark.parametrize("value, expected", [
        ("hr", Role.HR),
        ("HR", Role.HR),
        ("Manager", Role.MANAGER),
        ("ADMIN", Role.ADMIN),
        ("user", Role.USER),
        ("superuser", Role.USER),
        ("", Role.USER),
        (None, Role.USER),
    ])
    def test_parse_role(self, value, expected):
        """Test parsing role names."""
        assert self.service.parse_role(value) is expected


class TestCreateContext:
    """Test cases for authorization context creation."""
    
    def setup_method(self):
        self.service = AuthorizationService()
    
    def test_single_role_string(self):
        """Test context from a single role string."""
        context = self.service.create_context("u1", "hr")
        assert context.roles == (Role.HR,)
        assert context.principal_id == "u1"
    
    def test_role_list(self):
        """Test context from a role list."""
        context = self.service.create_context("u1", ["manager", "HR"])
        assert context.roles == (Role.MANAGER, Role.HR)
    
    @pytest.mark.parametrize("raw_roles", [None, [], ()])
    def test_defaults_to_user(self, raw_roles):
        """Test context defaults to user role."""
        assert self.service.create_context("u1", raw_roles).roles == (Role.USER,)
    
    def test_metadata_is_kept(self):
        """Test metadata is kept on the context."""
        metadata = AuthorizationMetadata(direct_reports=("u2",))
        context = self.service.create_context("u1", "manager", metadata)
        
        assert context.direct_reports == ("u2",)


class TestRolePrecedence:
    """Test cases for role precedence."""
    
    def setup_method(self):
        self.service = AuthorizationService()
    
    def test_claim_beats_stored_role(self):
        """Test role claim beats stored role."""
        context = self.service.context_for_principal("u1", role_claim="admin", stored_role="hr")
        assert context.roles == (Role.ADMIN,)
    
    def test_list_claim_beats_stored_role(self):
        """Test role list claim beats stored role."""
        context = self.service.context_for_principal("u1", role_claim=["manager"], stored_role="hr")
        assert context.roles == (Role.MANAGER,)
    
    def test_stored_role_used_without_claim(self):
        """Test stored role used without claim."""
        context = self.service.context_for_principal("u1", role_claim=None, stored_role="hr")
        assert context.roles == (Role.HR,)
    
    def test_empty_claim_falls_back_to_stored_role(self):
        """Test empty claim falls back to stored role."""
        context = self.service.context_for_principal("u1", role_claim=[], stored_role="manager")
        assert context.roles == (Role.MANAGER,)
    
    def test_defaults_to_user(self):
        """Test fallback to user role."""
        context = self.service.context_for_principal("u1")
        assert context.roles == (Role.USER,)
    
    def test_direct_reports_attached(self):
        """Test direct reports attached to manager context."""
        context = self.service.context_for_principal("m1", "manager", direct_reports=["u2", "u3"])
        assert context.direct_reports == ("u2", "u3")


class TestPermissions:
    """Test cases for role permissions."""
    
    def setup_method(self):
        self.service = AuthorizationService()
    
    def test_role_table(self):
        """Test permissions granted per role."""
        assert ROLE_PERMISSIONS[Role.USER] == frozenset()
        assert ROLE_PERMISSIONS[Role.HR] == {Permission.VIEW_ALL_TIMESHEETS, Permission.VIEW_ALL_REPORTS}
        assert ROLE_PERMISSIONS[Role.MANAGER] == {Permission.VIEW_USER_TIMESHEETS}
        assert ROLE_PERMISSIONS[Role.ADMIN] == {
            Permission.VIEW_ALL_TIMESHEETS, Permission.VIEW_ALL_REPORTS, Permission.MANAGE_USERS
        }
    
    @pytest.mark.parametrize("roles", [["user"], ["hr"], ["manager"], ["admin"], ["user", "manager"]])
    def test_has_permission_is_union_of_roles(self, roles):
        """Test permissions are the union of roles."""
        context = self.service.create_context("u1", roles)
        for permission in Permission:
            expected = any(permission in ROLE_PERMISSIONS[role] for role in context.roles)
            assert self.service.has_permission(context, permission) is expected
    
    def test_manager_does_not_manage_users(self):
        """Test manager lacks user management."""
        context = self.service.create_context("m1", "manager")
        assert not self.service.has_permission(context, Permission.MANAGE_USERS)


class TestCanViewAllTimesheets:
    """Test cases for viewing all timesheets."""
    
    def setup_method(self):
        self.service = AuthorizationService()
    
    @pytest.mark.parametrize("role", ["hr", "admin"])
    def test_allowed(self, role):
        """Test roles allowed to view all timesheets."""
        assert self.service.can_view_all_timesheets(self.service.create_context("u1", role)).authorized
    
    def test_denied_with_roles_in_reason(self):
        """Test denial reason names the roles."""
        context = self.service.create_context("u1", ["user", "manager"])
        result = self.service.can_view_all_timesheets(context)
        
        assert result.authorized is False
        assert result.reason == "User with roles [user, manager] does not have permission to view all timesheets"
    
    def test_denial_is_logged(self, caplog):
        """Test denial is logged."""
        with caplog.at_level(logging.WARNING):
            self.service.can_view_all_timesheets(self.service.create_context("u1", "user"))
        assert "Authorization denied for u1" in caplog.text


class TestCanViewUserTimesheets:
    """Test cases for viewing a user's timesheets."""
    
    def setup_method(self):
        self.service = AuthorizationService()
        self.manager = self.service.context_for_principal("m1", "manager", direct_reports=["u2"])
    
    @pytest.mark.parametrize("role", ["user", "hr", "manager", "admin"])
    def test_self_always_allowed(self, role):
        """Test own timesheets are always allowed."""
        context = self.service.create_context("u1", role)
        assert self.service.can_view_user_timesheets(context, "u1").authorized
    
    @pytest.mark.parametrize("role", ["hr", "admin"])
    def test_view_all_roles_see_anyone(self, role):
        """Test view-all roles see anyone."""
        context = self.service.create_context("u1", role)
        assert self.service.can_view_user_timesheets(context, "u9").authorized
    
    def test_manager_sees_direct_report(self):
        """Test manager sees a direct report."""
        assert self.service.can_view_user_timesheets(self.manager, "u2").authorized
    
    def test_manager_denied_for_non_report(self):
        """Test manager denied for a non-report."""
        result = self.service.can_view_user_timesheets(self.manager, "u9")
        
        assert not result.authorized
        assert result.reason == "User u9 is not in the manager's direct reports"
    
    def test_user_denied_for_other_user(self):
        """Test user denied for another user."""
        context = self.service.create_context("u1", "user")
        result = self.service.can_view_user_timesheets(context, "u2")
        
        assert not result.authorized
        assert result.reason == "User with roles [user] cannot view timesheets for user u2"


class TestCanViewReports:
    """Test cases for viewing reports."""
    
    def setup_method(self):
        self.service = AuthorizationService()
        self.user = self.service.create_context("u1", "user")
        self.manager = self.service.context_for_principal("m1", "manager", direct_reports=["u2", "u3"])
    
    @pytest.mark.parametrize("targets", [None, [], ["u1"], ["u1", "u1"]])
    def test_own_reports_allowed(self, targets):
        """Test own reports are allowed."""
        assert self.service.can_view_reports(self.user, targets).authorized
    
    def test_user_denied_for_others(self):
        """Test user denied for other users' reports."""
        result = self.service.can_view_reports(self.user, ["u1", "u2"])
        
        assert not result.authorized
        assert result.reason == "User with roles [user] cannot view reports for other users"
    
    @pytest.mark.parametrize("role", ["hr", "admin"])
    def test_view_all_roles_allowed(self, role):
        """Test view-all roles are allowed."""
        context = self.service.create_context("x", role)
        assert self.service.can_view_reports(context, ["u1", "u2", "u3"]).authorized
    
    def test_manager_with_reports_and_self(self):
        """Test manager with direct reports and self."""
        assert self.service.can_view_reports(self.manager, ["m1", "u2", "u3"]).authorized
    
    def test_manager_lists_every_unauthorized_user(self):
        """Test denial lists every unauthorized user."""
        result = self.service.can_view_reports(self.manager, ["u9", "u2", "u8"])
        
        assert not result.authorized
        assert result.reason == "Cannot view reports for users: u9, u8"
    
    def test_manager_single_unauthorized_user(self):
        """Test denial for a single unauthorized user."""
        result = self.service.can_view_reports(self.manager, ["u9"])
        assert result.reason == "Cannot view reports for users: u9"
    
    def test_results_are_never_exceptions(self):
        """Test checks return results instead of raising."""
        context = self.service.create_context("u1", "nonsense")
        for check in (
            self.service.can_view_all_timesheets(context),
            self.service.can_view_user_timesheets(context, "u2"),
            self.service.can_view_reports(context, ["u2"]),
        ):
            assert check.authorized is False
            assert check.reason
