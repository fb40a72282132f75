"""Tests for pipeline dependency wiring."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from identity.domain import User
from infrastructure.settings import get_app_settings
from localization.application import LocaleBundleCache
from localization.ports import TranslationService
from pipeline import dependencies
from pipeline.application import PipelineRunner
from pipeline.domain import RequestContext
from shared_kernel.session import SessionData
from tests.unit.conftest import make_tenant


@pytest.fixture(autouse=True)
def clear_caches():
    """Wire from a clean slate for each test."""
    getters = (
        get_app_settings,
        dependencies.get_tenant_directory,
        dependencies.get_user_directory,
        dependencies.get_membership_query,
        dependencies.get_bundle_cache,
        dependencies.get_auth_gate,
        dependencies.get_pipeline_runner,
    )
    for getter in getters:
        getter.cache_clear()
    yield
    for getter in getters:
        getter.cache_clear()


class TestGetPipelineRunner:
    def test_runner_is_application_scoped(self):
        runner = dependencies.get_pipeline_runner()

        assert isinstance(runner, PipelineRunner)
        assert dependencies.get_pipeline_runner() is runner

    def test_refresh_step_follows_settings(self, monkeypatch):
        monkeypatch.setenv("PORTICO_UPDATE_TRANSLATIONS_ON_EVERY_PAGE_LOAD", "true")

        step_names = dependencies.get_pipeline_runner().step_names

        assert step_names.index("refresh_translations") == (
            step_names.index("fetch_membership") + 1
        )

    def test_gates_run_last(self):
        step_names = dependencies.get_pipeline_runner().step_names

        assert step_names[-4:] == (
            "gate_on_membership",
            "gate_on_tenant_exclusivity",
            "gate_on_email_confirmation",
            "consume_analytics_event",
        )


class TestCloseUpstreamClients:
    @pytest.mark.asyncio
    async def test_closes_opened_clients(self):
        client = dependencies.get_identity_client()

        await dependencies.close_upstream_clients()

        assert client.is_closed
        assert dependencies.get_identity_client.cache_info().currsize == 0

    @pytest.mark.asyncio
    async def test_unopened_clients_are_not_created(self):
        dependencies.get_translation_client.cache_clear()

        await dependencies.close_upstream_clients()

        assert dependencies.get_translation_client.cache_info().currsize == 0


class TestWiredMembershipGate:
    """Signed-in users the membership gate turns away can reach its pages."""

    @pytest.fixture
    def wired_runner(self, monkeypatch) -> PipelineRunner:
        translation_service = MagicMock(spec=TranslationService)
        translation_service.get_translations = AsyncMock(return_value={})
        monkeypatch.setattr(
            dependencies,
            "get_bundle_cache",
            lambda: LocaleBundleCache(translation_service),
        )
        dependencies.get_tenant_directory().replace_all([make_tenant()])
        return dependencies.get_pipeline_runner()

    @staticmethod
    def signed_in_request(path: str) -> RequestContext:
        return RequestContext.start(
            scheme="http",
            host="sub.lvh.me",
            path=path,
            session=SessionData(user_id="u-9"),
        )

    @pytest.mark.asyncio
    async def test_non_member_reaches_join_page(self, wired_runner):
        dependencies.get_user_directory().add(User(id="u-9"))

        result = await wired_runner.run(self.signed_in_request("/memberships/new"))

        assert result.completed

    @pytest.mark.asyncio
    async def test_banned_user_reaches_banned_page(self, wired_runner):
        dependencies.get_user_directory().add(
            User(id="u-9", banned_tenant_ids=frozenset({"t-1"}))
        )

        result = await wired_runner.run(
            self.signed_in_request("/memberships/access_denied")
        )

        assert result.completed

    @pytest.mark.asyncio
    async def test_other_paths_still_send_non_members_to_join(self, wired_runner):
        dependencies.get_user_directory().add(User(id="u-9"))

        result = await wired_runner.run(self.signed_in_request("/listings"))

        assert result.redirect.location == "/memberships/new"
