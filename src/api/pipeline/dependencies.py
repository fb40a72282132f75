"""Dependency wiring for the request pipeline.

Composes settings, upstream clients and adapters of every bounded context
into one application-scoped PipelineRunner.
"""

from functools import lru_cache, partial

import httpx

from access.application import AccessGuard
from access.domain import AccessGate
from billing.infrastructure import InMemoryPaymentSettingsQuery, SettingsPlanInfoProvider
from identity.application import AuthGate
from identity.infrastructure import (
    HttpIdentityExchange,
    InMemoryMembershipQuery,
    InMemoryUserDirectory,
    LoggingNotificationSink,
)
from infrastructure.settings import (
    get_app_settings,
    get_plan_settings,
    get_routing_settings,
    get_service_settings,
)
from localization.application import LocaleBundleCache, LocaleNegotiator
from localization.infrastructure import HttpTranslationService
from pipeline.application import (
    PipelineRunner,
    build_pipeline_steps,
    recover_unauthorized_session,
)
from shared_kernel.correlation import EventIdGenerator
from tenancy.application import TenantResolver
from tenancy.infrastructure import InMemoryTenantDirectory


@lru_cache
def get_identity_client() -> httpx.AsyncClient:
    """Get application-scoped client for the identity service."""
    settings = get_service_settings()
    return httpx.AsyncClient(
        base_url=settings.identity_url, timeout=settings.timeout_seconds
    )


@lru_cache
def get_translation_client() -> httpx.AsyncClient:
    """Get application-scoped client for the translation service."""
    settings = get_service_settings()
    return httpx.AsyncClient(
        base_url=settings.translation_url, timeout=settings.timeout_seconds
    )


@lru_cache
def get_tenant_directory() -> InMemoryTenantDirectory:
    """Get the tenant directory, seeded from file when configured."""
    path = get_app_settings().tenant_directory_file
    if path is None:
        return InMemoryTenantDirectory()
    return InMemoryTenantDirectory.from_file(path)


@lru_cache
def get_user_directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@lru_cache
def get_membership_query() -> InMemoryMembershipQuery:
    return InMemoryMembershipQuery()


@lru_cache
def get_bundle_cache() -> LocaleBundleCache:
    """Get the process-wide locale bundle cache (singleton)."""
    return LocaleBundleCache(HttpTranslationService(get_translation_client()))


@lru_cache
def get_event_id_generator() -> EventIdGenerator:
    return EventIdGenerator()


@lru_cache
def get_auth_gate() -> AuthGate:
    return AuthGate(
        identity_exchange=HttpIdentityExchange(get_identity_client()),
        user_directory=get_user_directory(),
        notification_sink=LoggingNotificationSink(),
    )


@lru_cache
def get_pipeline_runner() -> PipelineRunner:
    """Get the application-scoped pipeline runner.

    Every collaborator is application-scoped; the runner holds no
    per-request state.
    """
    app_settings = get_app_settings()
    routes = get_routing_settings()
    auth_gate = get_auth_gate()
    bundle_cache = get_bundle_cache()

    resolver = TenantResolver(
        directory=get_tenant_directory(),
        root_domain=app_settings.root_domain,
        new_tenant_path=routes.new_tenant_path,
        tenant_not_found_path=routes.tenant_not_found_path,
        not_found_redirect=routes.tenant_not_found_redirect,
    )
    negotiator = LocaleNegotiator(
        bundle_cache=bundle_cache,
        available_locales=app_settings.available_locales,
        fallback_locale=app_settings.fallback_locale,
    )
    guard = AccessGuard(
        login_path=routes.login_path,
        join_path=routes.join_path,
        access_denied_path=routes.access_denied_path,
        confirmation_pending_path=routes.confirmation_pending_path,
        confirmation_flow_prefix=routes.confirmation_flow_prefix,
        exempt_paths={
            AccessGate.MEMBERSHIP: routes.membership_gate_exempt_paths,
            AccessGate.EMAIL_CONFIRMATION: routes.confirmation_gate_exempt_paths,
        },
    )

    steps = build_pipeline_steps(
        always_use_ssl=app_settings.always_use_ssl,
        proxy_marker=app_settings.ssl_proxy_marker,
        app_domain=app_settings.domain,
        available_locales=app_settings.available_locales,
        update_translations_on_every_page_load=(
            app_settings.update_translations_on_every_page_load
        ),
        auth_gate=auth_gate,
        resolver=resolver,
        memberships=get_membership_query(),
        bundle_cache=bundle_cache,
        negotiator=negotiator,
        event_id_generator=get_event_id_generator(),
        plan_info_provider=SettingsPlanInfoProvider(get_plan_settings()),
        payment_settings=InMemoryPaymentSettingsQuery(),
        guard=guard,
    )

    on_unauthorized = partial(
        recover_unauthorized_session,
        auth_gate=auth_gate,
        available_locales=app_settings.available_locales,
    )
    return PipelineRunner(steps=steps, on_unauthorized=on_unauthorized)


async def close_upstream_clients() -> None:
    """Close upstream clients that were opened during the app's lifetime."""
    for getter in (get_identity_client, get_translation_client):
        if getter.cache_info().currsize:
            await getter().aclose()
        getter.cache_clear()
