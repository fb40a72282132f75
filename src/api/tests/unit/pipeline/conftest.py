"""Pipeline fixtures wiring every context with in-memory collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from unittest.mock import AsyncMock, MagicMock

import pytest

from access.application import AccessGuard
from access.domain import AccessGate
from billing.infrastructure import InMemoryPaymentSettingsQuery, SettingsPlanInfoProvider
from identity.application import AuthGate
from identity.infrastructure import (
    InMemoryIdentityExchange,
    InMemoryMembershipQuery,
    InMemoryUserDirectory,
)
from identity.ports import NotificationSink
from infrastructure.settings import PlanSettings
from localization.application import LocaleBundleCache, LocaleNegotiator
from localization.ports import TranslationService
from pipeline.application import (
    PipelineRunner,
    build_pipeline_steps,
    recover_unauthorized_session,
)
from shared_kernel.correlation import EventIdGenerator
from tenancy.application import TenantResolver
from tests.unit.conftest import ROOT_DOMAIN, TODAY

AVAILABLE_LOCALES = ("en", "fi", "es", "fr", "de", "sv")


@dataclass
class PipelineWorld:
    """Collaborators behind a wired pipeline, for arranging and asserting."""

    identity_exchange: InMemoryIdentityExchange
    users: InMemoryUserDirectory
    memberships: InMemoryMembershipQuery
    translation_service: MagicMock
    notification_sink: MagicMock
    bundle_cache: LocaleBundleCache
    auth_gate: AuthGate
    resolver: TenantResolver
    negotiator: LocaleNegotiator
    guard: AccessGuard
    payment_settings: InMemoryPaymentSettingsQuery
    plan_info_provider: SettingsPlanInfoProvider

    def build_runner(self, **overrides) -> PipelineRunner:
        options = dict(
            always_use_ssl=False,
            proxy_marker="portico_proxy",
            app_domain=ROOT_DOMAIN,
            available_locales=AVAILABLE_LOCALES,
            update_translations_on_every_page_load=False,
            auth_gate=self.auth_gate,
            resolver=self.resolver,
            memberships=self.memberships,
            bundle_cache=self.bundle_cache,
            negotiator=self.negotiator,
            event_id_generator=EventIdGenerator(clock_ns=lambda: 1700000000000000000),
            plan_info_provider=self.plan_info_provider,
            payment_settings=self.payment_settings,
            guard=self.guard,
            today=lambda: TODAY,
        )
        options.update(overrides)
        return PipelineRunner(
            steps=build_pipeline_steps(**options),
            on_unauthorized=partial(
                recover_unauthorized_session,
                auth_gate=self.auth_gate,
                available_locales=AVAILABLE_LOCALES,
            ),
        )


@pytest.fixture
def world(directory) -> PipelineWorld:
    translation_service = MagicMock(spec=TranslationService)
    translation_service.get_translations = AsyncMock(
        return_value={"es": {"layouts.title": "Mercado"}}
    )
    notification_sink = MagicMock(spec=NotificationSink)
    notification_sink.notify = AsyncMock()

    identity_exchange = InMemoryIdentityExchange()
    users = InMemoryUserDirectory()
    memberships = InMemoryMembershipQuery()
    bundle_cache = LocaleBundleCache(
        translation_service, base_catalog={"en": {"layouts": {"title": "Market"}}}
    )
    auth_gate = AuthGate(identity_exchange, users, notification_sink)

    return PipelineWorld(
        identity_exchange=identity_exchange,
        users=users,
        memberships=memberships,
        translation_service=translation_service,
        notification_sink=notification_sink,
        bundle_cache=bundle_cache,
        auth_gate=auth_gate,
        resolver=TenantResolver(
            directory=directory,
            root_domain=ROOT_DOMAIN,
            new_tenant_path="/tenants/new",
            tenant_not_found_path="/tenant_not_found",
        ),
        negotiator=LocaleNegotiator(
            bundle_cache=bundle_cache,
            available_locales=AVAILABLE_LOCALES,
            fallback_locale="en",
        ),
        guard=AccessGuard(
            login_path="/login",
            join_path="/memberships/new",
            access_denied_path="/memberships/access_denied",
            confirmation_pending_path="/sessions/confirmation_pending",
            confirmation_flow_prefix="/people/confirmation",
            exempt_paths={
                AccessGate.MEMBERSHIP: ["/sessions/confirmation_pending"],
                AccessGate.EMAIL_CONFIRMATION: ["/sessions/confirmation_pending"],
            },
        ),
        payment_settings=InMemoryPaymentSettingsQuery(),
        plan_info_provider=SettingsPlanInfoProvider(
            PlanSettings(pro_monthly_link="https://pay.test/m", pro_monthly_price="$9")
        ),
    )
