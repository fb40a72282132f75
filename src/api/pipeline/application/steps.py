"""Pipeline steps.

Each step is an async function from a request context to a step outcome.
Collaborators are bound by keyword (see ``build_pipeline_steps``), so a
step can be tested on its own against a context snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from functools import partial
from typing import Awaitable, Callable, Collection

from access.application import AccessDecision, AccessGuard
from access.domain import AccessGate
from billing.ports import PaymentSettingsQuery, PlanInfoProvider
from identity.application import AuthGate
from identity.ports import MembershipQuery
from localization.application import LocaleBundleCache, LocaleNegotiator
from localization.domain import (
    LocaleNotAvailableError,
    locale_param_from_request,
    path_without_locale,
)
from pipeline.domain import Continue, Fatal, MailTarget, RequestContext, StepOutcome, Terminate
from shared_kernel.correlation import EventIdGenerator
from shared_kernel.exceptions import UpstreamUnauthorized
from shared_kernel.redirects import TerminalRedirect
from shared_kernel.session import FlashLevel, FlashMessage
from tenancy.application import TenantResolver

ROBOTS_PATH = "/robots.txt"

MISSING_PAYMENT_INFO_NOTICE = FlashMessage(
    level=FlashLevel.WARNING, key="payment_settings.missing_payment_info"
)


@dataclass(frozen=True)
class PipelineStep:
    """A named step of the pipeline."""

    name: str
    run: Callable[[RequestContext], Awaitable[StepOutcome]]


async def enforce_transport_security(
    context: RequestContext,
    *,
    always_use_ssl: bool,
    proxy_marker: str,
) -> StepOutcome:
    """Redirect plain HTTP to HTTPS when the deployment requires it.

    Requests through the trusted proxy (its marker in the ``Via`` header)
    and robots.txt are served as they are.
    """
    if (
        not always_use_ssl
        or context.scheme == "https"
        or proxy_marker in context.headers.get("via", "")
        or context.path == ROBOTS_PATH
    ):
        return Continue(context)

    return Terminate(
        context,
        TerminalRedirect.temporary(f"https://{context.host_with_port}{context.fullpath}"),
    )


async def consume_auth_token(context: RequestContext, *, auth_gate: AuthGate) -> StepOutcome:
    login = await auth_gate.consume_token(
        context.query, context.fullpath, headers=context.outbound_headers()
    )
    if login is None:
        return Continue(context)

    signed_in = context.evolve(
        user=login.user,
        session=context.session.signed_in_as(login.user.id),
    )
    return Terminate(signed_in, login.redirect)


async def fetch_identity(context: RequestContext, *, auth_gate: AuthGate) -> StepOutcome:
    if context.user is not None:
        return Continue(context)

    user = await auth_gate.fetch_identity(context.session.user_id)
    return Continue(context.evolve(user=user))


async def resolve_tenant(context: RequestContext, *, resolver: TenantResolver) -> StepOutcome:
    resolution = await resolver.resolve(context.host)
    if resolution.redirect is not None:
        return Terminate(context, resolution.redirect)
    return Continue(context.evolve(tenant=resolution.tenant))


async def canonicalize_domain(
    context: RequestContext,
    *,
    resolver: TenantResolver,
) -> StepOutcome:
    if context.tenant is None:
        return Continue(context)

    redirect = resolver.canonical_redirect(
        context.tenant, context.scheme, context.host, context.fullpath
    )
    if redirect is not None:
        return Terminate(context, redirect)
    return Continue(context)


async def fetch_membership(
    context: RequestContext,
    *,
    memberships: MembershipQuery,
    today: Callable[[], date] = date.today,
) -> StepOutcome:
    """Load the accepted membership and report the first page load of the day."""
    if context.user is None or context.tenant is None:
        return Continue(context)

    membership = await memberships.get_accepted(context.user.id, context.tenant.id)
    if membership is not None and not membership.page_loaded_on(today()):
        memberships.record_page_load(membership.id, context.host)
    return Continue(context.evolve(membership=membership))


async def refresh_translations(
    context: RequestContext,
    *,
    bundle_cache: LocaleBundleCache,
) -> StepOutcome:
    if context.tenant is not None:
        bundle_cache.invalidate(context.tenant.id)
    return Continue(context)


async def negotiate_locale(
    context: RequestContext,
    *,
    negotiator: LocaleNegotiator,
    available_locales: Collection[str],
) -> StepOutcome:
    locale_param = locale_param_from_request(context.path, context.query, available_locales)
    try:
        negotiated = await negotiator.negotiate(
            context.tenant,
            context.user.locale if context.user else None,
            locale_param,
            headers=context.outbound_headers(),
        )
    except LocaleNotAvailableError as e:
        return Fatal(context, e)

    return Continue(
        context.evolve(
            locale=negotiated.locale,
            translations=negotiated.translations,
            customization=negotiated.customization,
            return_to=path_without_locale(context.fullpath, locale_param),
        )
    )


async def generate_correlation_id(
    context: RequestContext,
    *,
    generator: EventIdGenerator,
) -> StepOutcome:
    return Continue(context.evolve(correlation_id=generator.generate(context.query)))


async def configure_mail_target(
    context: RequestContext,
    *,
    app_domain: str,
    always_use_ssl: bool,
) -> StepOutcome:
    if context.tenant is not None:
        host = context.tenant.full_domain(app_domain)
    else:
        host = f"www.{app_domain}"
    protocol = "https" if always_use_ssl else "http"
    return Continue(context.evolve(mail_target=MailTarget(host=host, protocol=protocol)))


async def fetch_plan_info(
    context: RequestContext,
    *,
    plan_info_provider: PlanInfoProvider,
) -> StepOutcome:
    if context.tenant is None:
        return Continue(context)
    plan_info = await plan_info_provider.get_plan_info(context.tenant.id)
    return Continue(context.evolve(plan_info=plan_info))


async def fetch_admin_status(context: RequestContext) -> StepOutcome:
    user = context.user
    is_admin = user is not None and (
        user.is_admin or (context.membership is not None and context.membership.admin)
    )
    return Continue(context.evolve(is_tenant_admin=is_admin))


async def warn_about_missing_payment_info(
    context: RequestContext,
    *,
    payment_settings: PaymentSettingsQuery,
) -> StepOutcome:
    if context.user is None or context.tenant is None:
        return Continue(context)

    if await payment_settings.has_missing_payment_info(context.user.id, context.tenant.id):
        return Continue(context.with_notice(MISSING_PAYMENT_INFO_NOTICE))
    return Continue(context)


def apply_access_decision(context: RequestContext, decision: AccessDecision) -> StepOutcome:
    """Apply an access decision's session effects and redirect."""
    if decision.keep_flash:
        context = context.keep_flash()
    if decision.invitation_code is not None:
        context = context.evolve(
            session=replace(context.session, invitation_code=decision.invitation_code)
        )
    if decision.sign_out:
        context = context.signed_out()
    if decision.flash is not None:
        context = context.with_flash(decision.flash)
    if decision.notice is not None:
        context = context.with_notice(decision.notice)

    if decision.redirect is not None:
        return Terminate(context, decision.redirect)
    return Continue(context)


async def gate_access(
    context: RequestContext,
    *,
    guard: AccessGuard,
    gate: AccessGate,
) -> StepOutcome:
    decision = guard.evaluate(
        gate,
        context.path,
        context.query,
        context.tenant,
        context.user,
        context.membership,
    )
    return apply_access_decision(context, decision)


async def consume_analytics_event(context: RequestContext) -> StepOutcome:
    """Move a reported analytics event from the session to the page, once."""
    event = context.session.analytics_event
    if event is None:
        return Continue(context)
    return Continue(
        context.evolve(
            analytics_event=event,
            session=replace(context.session, analytics_event=None),
        )
    )


async def recover_unauthorized_session(
    context: RequestContext,
    error: UpstreamUnauthorized,
    *,
    auth_gate: AuthGate,
    available_locales: Collection[str],
) -> StepOutcome:
    """Sign the user out and send them to the tenant root."""
    locale_param = locale_param_from_request(context.path, context.query, available_locales)
    recovery = await auth_gate.recover_unauthorized_session(
        error,
        context.query,
        user_id=context.session.user_id,
        root_path=f"/{locale_param or ''}",
    )
    return Terminate(context.signed_out().with_flash(recovery.flash), recovery.redirect)


def build_pipeline_steps(
    *,
    always_use_ssl: bool,
    proxy_marker: str,
    app_domain: str,
    available_locales: Collection[str],
    update_translations_on_every_page_load: bool,
    auth_gate: AuthGate,
    resolver: TenantResolver,
    memberships: MembershipQuery,
    bundle_cache: LocaleBundleCache,
    negotiator: LocaleNegotiator,
    event_id_generator: EventIdGenerator,
    plan_info_provider: PlanInfoProvider,
    payment_settings: PaymentSettingsQuery,
    guard: AccessGuard,
    today: Callable[[], date] = date.today,
) -> tuple[PipelineStep, ...]:
    """Assemble the fixed step order."""
    steps = [
        PipelineStep(
            "enforce_transport_security",
            partial(
                enforce_transport_security,
                always_use_ssl=always_use_ssl,
                proxy_marker=proxy_marker,
            ),
        ),
        PipelineStep("consume_auth_token", partial(consume_auth_token, auth_gate=auth_gate)),
        PipelineStep("fetch_identity", partial(fetch_identity, auth_gate=auth_gate)),
        PipelineStep("resolve_tenant", partial(resolve_tenant, resolver=resolver)),
        PipelineStep("canonicalize_domain", partial(canonicalize_domain, resolver=resolver)),
        PipelineStep(
            "fetch_membership",
            partial(fetch_membership, memberships=memberships, today=today),
        ),
    ]
    if update_translations_on_every_page_load:
        steps.append(
            PipelineStep(
                "refresh_translations",
                partial(refresh_translations, bundle_cache=bundle_cache),
            )
        )
    steps += [
        PipelineStep(
            "negotiate_locale",
            partial(
                negotiate_locale,
                negotiator=negotiator,
                available_locales=available_locales,
            ),
        ),
        PipelineStep(
            "generate_correlation_id",
            partial(generate_correlation_id, generator=event_id_generator),
        ),
        PipelineStep(
            "configure_mail_target",
            partial(
                configure_mail_target,
                app_domain=app_domain,
                always_use_ssl=always_use_ssl,
            ),
        ),
        PipelineStep(
            "fetch_plan_info",
            partial(fetch_plan_info, plan_info_provider=plan_info_provider),
        ),
        PipelineStep("fetch_admin_status", fetch_admin_status),
        PipelineStep(
            "warn_about_missing_payment_info",
            partial(warn_about_missing_payment_info, payment_settings=payment_settings),
        ),
        PipelineStep(
            "gate_on_membership",
            partial(gate_access, guard=guard, gate=AccessGate.MEMBERSHIP),
        ),
        PipelineStep(
            "gate_on_tenant_exclusivity",
            partial(gate_access, guard=guard, gate=AccessGate.TENANT_EXCLUSIVITY),
        ),
        PipelineStep(
            "gate_on_email_confirmation",
            partial(gate_access, guard=guard, gate=AccessGate.EMAIL_CONFIRMATION),
        ),
        PipelineStep("consume_analytics_event", consume_analytics_event),
    ]
    return tuple(steps)
