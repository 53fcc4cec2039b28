"""Tests for the service container."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from api.dependencies import (
    create_login_service,
    create_user_resolver,
    get_container,
    get_route_policy,
    get_token_verifier,
    reset_container,
)
from modules.access.policy import RoutePolicy
from modules.identity.service import DeferredExternalSignOut, LoginService
from modules.identity.verifier import FirebaseTokenVerifier
from modules.roles.service import RoleResolver


class TestServiceContainer:
    def test_singletons_cached(self):
        assert get_token_verifier() is get_token_verifier()
        assert get_route_policy() is get_route_policy()
        assert isinstance(get_token_verifier(), FirebaseTokenVerifier)
        assert isinstance(get_route_policy(), RoutePolicy)

    def test_reset(self):
        container = get_container()
        policy = container.route_policy

        container.reset()

        assert container.route_policy is not policy

    def test_reset_container(self):
        container = get_container()
        reset_container()
        assert get_container() is not container


class TestFactories:
    @pytest.mark.asyncio
    @patch("shared.database.get_supabase_user_client", new_callable=AsyncMock)
    async def test_user_resolver(self, mock_client):
        mock_client.return_value = MagicMock()

        resolver = await create_user_resolver("access-token")

        mock_client.assert_awaited_once_with("access-token")
        assert isinstance(resolver, RoleResolver)

    @pytest.mark.asyncio
    @patch("shared.database.create_supabase_client", new_callable=AsyncMock)
    async def test_login_service(self, mock_client):
        mock_client.return_value = MagicMock()

        service = await create_login_service(DeferredExternalSignOut())

        mock_client.assert_awaited_once()
        assert isinstance(service, LoginService)
