"""Tests for the route access policy and redirect paths."""

import pytest

from modules.access.exceptions import UnknownRouteError
from modules.access.paths import RoutePaths
from modules.access.policy import RoutePolicy
from modules.roles.models import Role


class TestRoutePolicy:
    @pytest.fixture
    def policy(self):
        return RoutePolicy({
            "/admin-dashboard": ["admin"],
            "/admin-dashboard/payouts/": ["admin"],
            "/orders": ["customer"],
            "/profile": ["customer", "rider", "admin"],
        })

    def test_exact_match(self, policy):
        assert policy.allowed_roles("/orders") == frozenset({Role.CUSTOMER})

    def test_nested_path_uses_prefix(self, policy):
        assert policy.allowed_roles("/profile/edit") == frozenset(
            {Role.CUSTOMER, Role.RIDER, Role.ADMIN}
        )

    def test_trailing_slash(self, policy):
        assert policy.allowed_roles("/orders/") == frozenset({Role.CUSTOMER})

    def test_prefix_must_end_at_segment(self, policy):
        with pytest.raises(UnknownRouteError):
            policy.allowed_roles("/orders-archive")

    def test_unknown_route(self, policy):
        with pytest.raises(UnknownRouteError) as exc_info:
            policy.allowed_roles("/nowhere")
        assert exc_info.value.details == {"path": "/nowhere"}

    def test_defaults_from_settings(self):
        policy = RoutePolicy()
        assert policy.allowed_roles("/rider-dashboard") == frozenset({Role.RIDER})

    def test_unknown_role_in_config_rejected(self):
        with pytest.raises(ValueError):
            RoutePolicy({"/x": ["superuser"]})


class TestRoutePaths:
    def test_home_for(self):
        paths = RoutePaths()
        assert paths.home_for(Role.ADMIN) == "/admin-dashboard"
        assert paths.home_for(Role.RIDER) == "/rider-dashboard"
        assert paths.home_for(Role.CUSTOMER) == "/home"
        assert paths.home_for(Role.BUSINESS) == "/home"

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("LOGIN_PATH", "/sign-in")
        from shared.config import get_settings
        get_settings.cache_clear()

        assert RoutePaths.from_settings().login == "/sign-in"
