"""Tests for the identity bridge and login flow."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from modules.access.paths import RoutePaths
from modules.identity.exceptions import (
    AccountExistsError,
    BackendAuthError,
    IdentityBridgeError,
    InvalidCredentialsError,
)
from modules.identity.models import ExternalIdentity
from modules.identity.service import (
    DeferredExternalSignOut,
    IdentityBridge,
    LoginService,
    landing_path,
)
from modules.roles.exceptions import IdentityConflictError
from modules.roles.models import RiderStatus, Role, RoleResolution
from shared.models import BackendSession

SESSION = BackendSession(user_id="user-1", access_token="access", phone="923001234567")
PHONE_IDENTITY = ExternalIdentity(phone="+923001234567")


@pytest.fixture
def auth():
    mock = MagicMock()
    mock.sign_in_with_password = AsyncMock(return_value=SESSION)
    mock.sign_up = AsyncMock(return_value=None)
    mock.sign_out = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def bridge(auth):
    return IdentityBridge(auth, secret_key="bridge-secret", domain="fasthaazir.app", timeout=5)


class TestIdentityBridge:
    @pytest.mark.asyncio
    async def test_existing_account_signs_in(self, bridge, auth):
        session = await bridge.bridge(PHONE_IDENTITY)

        assert session == SESSION
        auth.sign_in_with_password.assert_awaited_once()
        email, _password = auth.sign_in_with_password.await_args.args
        assert email == "phone_923001234567@fasthaazir.app"
        auth.sign_up.assert_not_called()

    @pytest.mark.asyncio
    async def test_new_account_created_then_signed_in(self, bridge, auth):
        auth.sign_in_with_password.side_effect = [InvalidCredentialsError(), SESSION]

        session = await bridge.bridge(PHONE_IDENTITY)

        assert session == SESSION
        email, _password, metadata = auth.sign_up.await_args.args
        assert email == "phone_923001234567@fasthaazir.app"
        assert metadata == {"phone": "923001234567"}
        assert auth.sign_in_with_password.await_count == 2

    @pytest.mark.asyncio
    async def test_account_exists_race_is_success(self, bridge, auth):
        auth.sign_in_with_password.side_effect = [InvalidCredentialsError(), SESSION]
        auth.sign_up.side_effect = AccountExistsError()

        assert await bridge.bridge(PHONE_IDENTITY) == SESSION

    @pytest.mark.asyncio
    async def test_idempotent(self, bridge, auth):
        first = await bridge.bridge(PHONE_IDENTITY)
        second = await bridge.bridge(ExternalIdentity(phone="03001234567"))

        assert first == second
        calls = auth.sign_in_with_password.await_args_list
        assert calls[0].args == calls[1].args

    @pytest.mark.asyncio
    async def test_sign_in_failure_is_fatal(self, bridge, auth):
        auth.sign_in_with_password.side_effect = BackendAuthError("Service unavailable", 503)

        with pytest.raises(IdentityBridgeError) as exc_info:
            await bridge.bridge(PHONE_IDENTITY)

        assert exc_info.value.timed_out is False
        auth.sign_up.assert_not_called()

    @pytest.mark.asyncio
    async def test_sign_up_failure_is_fatal(self, bridge, auth):
        auth.sign_in_with_password.side_effect = InvalidCredentialsError()
        auth.sign_up.side_effect = BackendAuthError("Signups not allowed")

        with pytest.raises(IdentityBridgeError):
            await bridge.bridge(PHONE_IDENTITY)

        assert auth.sign_in_with_password.await_count == 1

    @pytest.mark.asyncio
    async def test_second_sign_in_rejected_is_fatal(self, bridge, auth):
        auth.sign_in_with_password.side_effect = InvalidCredentialsError()

        with pytest.raises(IdentityBridgeError):
            await bridge.bridge(PHONE_IDENTITY)

        assert auth.sign_in_with_password.await_count == 2

    @pytest.mark.asyncio
    async def test_timeout(self, auth):
        async def hang(*args):
            await asyncio.sleep(10)

        auth.sign_in_with_password.side_effect = hang
        bridge = IdentityBridge(auth, secret_key="s", domain="fasthaazir.app", timeout=0.01)

        with pytest.raises(IdentityBridgeError) as exc_info:
            await bridge.bridge(PHONE_IDENTITY)

        assert exc_info.value.timed_out is True


class TestLandingPath:
    paths = RoutePaths()

    def test_role_homes(self):
        assert landing_path(RoleResolution(role=Role.ADMIN), self.paths) == "/admin-dashboard"
        assert landing_path(
            RoleResolution(role=Role.RIDER, rider_status=RiderStatus.VERIFIED), self.paths
        ) == "/rider-dashboard"
        assert landing_path(RoleResolution(role=Role.BUSINESS), self.paths) == "/home"

    def test_blocked_and_registration_go_to_status(self):
        assert landing_path(
            RoleResolution(role=Role.ADMIN, is_blocked=True), self.paths
        ) == "/account-status"
        assert landing_path(RoleResolution.rider_needs_registration(), self.paths) == "/account-status"


class TestLoginService:
    @pytest.fixture
    def resolver(self):
        mock = MagicMock()
        mock.resolve_by_identifier = AsyncMock(return_value=RoleResolution(role=Role.ADMIN))
        return mock

    @pytest.fixture
    def external(self):
        return DeferredExternalSignOut()

    @pytest.fixture
    def service(self, bridge, auth, resolver, external):
        return LoginService(bridge, auth, resolver, external, paths=RoutePaths())

    @pytest.mark.asyncio
    async def test_login(self, service, resolver):
        result = await service.login(PHONE_IDENTITY)

        assert result.session == SESSION
        assert result.resolution.role is Role.ADMIN
        assert result.landing_path == "/admin-dashboard"
        resolver.resolve_by_identifier.assert_awaited_once_with("+923001234567")

    @pytest.mark.asyncio
    async def test_conflict_signs_out_of_both(self, service, auth, resolver, external):
        resolver.resolve_by_identifier.side_effect = IdentityConflictError("phone")

        with pytest.raises(IdentityConflictError):
            await service.login(PHONE_IDENTITY)

        auth.sign_out.assert_awaited_once()
        assert external.requested is True

    @pytest.mark.asyncio
    async def test_bridge_timeout_signs_out_of_both(self, auth, resolver, external):
        bridge = MagicMock()
        bridge.bridge = AsyncMock(side_effect=IdentityBridgeError(timed_out=True))
        service = LoginService(bridge, auth, resolver, external, paths=RoutePaths())

        with pytest.raises(IdentityBridgeError):
            await service.login(PHONE_IDENTITY)

        auth.sign_out.assert_awaited_once()
        assert external.requested is True

    @pytest.mark.asyncio
    async def test_bridge_failure_keeps_sessions(self, auth, resolver, external):
        bridge = MagicMock()
        bridge.bridge = AsyncMock(side_effect=IdentityBridgeError(reason="boom"))
        service = LoginService(bridge, auth, resolver, external, paths=RoutePaths())

        with pytest.raises(IdentityBridgeError):
            await service.login(PHONE_IDENTITY)

        auth.sign_out.assert_not_called()
        assert external.requested is False
        resolver.resolve_by_identifier.assert_not_called()
