"""Tests for the pipeline steps, run in their fixed order."""

from __future__ import annotations

import pytest

from access.application.access_guard import CONFIRM_ACCOUNT_FLASH
from billing.infrastructure import InMemoryPaymentSettingsQuery
from identity.application.auth_gate import SESSION_ERROR_FLASH
from identity.domain import User
from pipeline.application.steps import (
    MISSING_PAYMENT_INFO_NOTICE,
    enforce_transport_security,
)
from pipeline.domain import Continue, MailTarget, RequestContext, Terminate
from shared_kernel.correlation import EVENT_ID_HEADER, EventIdGenerator
from shared_kernel.exceptions import UpstreamUnauthorized
from shared_kernel.redirects import TerminalRedirect
from shared_kernel.session import FlashLevel, FlashMessage, SessionData
from tests.unit.conftest import TODAY, make_membership, make_tenant

PREVIOUS_FLASH = FlashMessage(level=FlashLevel.NOTICE, key="layouts.notifications.saved")


def start(
    path: str = "/",
    host: str = "sub.example.com",
    query: dict[str, str] | None = None,
    session: SessionData | None = None,
    scheme: str = "http",
    port: int | None = None,
    headers: dict[str, str] | None = None,
) -> RequestContext:
    return RequestContext.start(
        scheme=scheme,
        host=host,
        path=path,
        port=port,
        query=query,
        headers=headers,
        session=session,
    )


def signed_in(user_id: str = "u-1", **kwargs) -> SessionData:
    return SessionData(user_id=user_id, **kwargs)


class TestStepOrder:
    def test_fixed_order(self, world):
        runner = world.build_runner(update_translations_on_every_page_load=True)

        assert runner.step_names == (
            "enforce_transport_security",
            "consume_auth_token",
            "fetch_identity",
            "resolve_tenant",
            "canonicalize_domain",
            "fetch_membership",
            "refresh_translations",
            "negotiate_locale",
            "generate_correlation_id",
            "configure_mail_target",
            "fetch_plan_info",
            "fetch_admin_status",
            "warn_about_missing_payment_info",
            "gate_on_membership",
            "gate_on_tenant_exclusivity",
            "gate_on_email_confirmation",
            "consume_analytics_event",
        )

    def test_refresh_translations_only_when_configured(self, world):
        assert "refresh_translations" not in world.build_runner().step_names


class TestCompletedRequest:
    @pytest.mark.asyncio
    async def test_anonymous_request(self, world):
        result = await world.build_runner().run(start("/listings", query={"page": "2"}))

        context = result.context
        assert result.completed
        assert context.tenant.id == "t-1"
        assert context.user is None
        assert context.locale == "en"
        assert context.translations["layouts.title"] == "Market"
        assert context.customization.name == "Sub Market"
        assert context.return_to == "listings?page=2"
        assert context.correlation_id == (
            f"{EventIdGenerator.fingerprint({'page': '2'})}_1700000000000000000.0"
        )
        assert context.outbound_headers() == {EVENT_ID_HEADER: context.correlation_id}
        assert context.mail_target == MailTarget(host="sub.example.com", protocol="http")
        assert context.plan_info.offers[0].name == "pro_monthly"
        assert not context.is_tenant_admin

    @pytest.mark.asyncio
    async def test_member_request(self, world, user):
        """A French user asking for es on an en/es tenant gets es."""
        world.users.add(user)
        world.memberships.add(make_membership(admin=True))

        result = await world.build_runner().run(
            start("/es/listings", session=signed_in())
        )

        context = result.context
        assert result.completed
        assert context.user == user
        assert context.membership.id == "m-u-1-t-1"
        assert context.locale == "es"
        assert context.translations == {"layouts.title": "Mercado"}
        assert context.customization.name == "Mercado Sub"
        assert context.return_to == "listings"
        assert context.is_tenant_admin
        assert world.memberships.page_loads == (("m-u-1-t-1", "sub.example.com"),)

    @pytest.mark.asyncio
    async def test_page_load_reported_once_a_day(self, world, user):
        world.users.add(user)
        world.memberships.add(make_membership(last_page_load_date=TODAY))

        await world.build_runner().run(start(session=signed_in()))

        assert world.memberships.page_loads == ()

    @pytest.mark.asyncio
    async def test_global_admin_without_membership(self, world):
        world.users.add(User(id="u-9", is_admin=True))

        result = await world.build_runner().run(start(session=signed_in("u-9")))

        assert result.completed
        assert result.context.is_tenant_admin

    @pytest.mark.asyncio
    async def test_incoming_flash_is_shown_once(self, world):
        result = await world.build_runner().run(
            start(session=SessionData(flash=(PREVIOUS_FLASH,)))
        )

        assert result.context.flash == (PREVIOUS_FLASH,)
        assert result.context.session.flash == ()

    @pytest.mark.asyncio
    async def test_missing_payment_info_warning(self, world, user):
        world.users.add(user)
        world.memberships.add(make_membership())
        world.payment_settings = InMemoryPaymentSettingsQuery([("u-1", "t-1")])

        result = await world.build_runner().run(start(session=signed_in()))

        assert MISSING_PAYMENT_INFO_NOTICE in result.context.flash
        assert result.context.session.flash == ()

    @pytest.mark.asyncio
    async def test_analytics_event_is_consumed(self, world):
        result = await world.build_runner().run(
            start(session=SessionData(analytics_event=("user", "signed_up")))
        )

        assert result.context.analytics_event == ("user", "signed_up")
        assert result.context.session.analytics_event is None

    @pytest.mark.asyncio
    async def test_mail_target_uses_https_when_ssl_is_enforced(self, world):
        result = await world.build_runner(always_use_ssl=True).run(start(scheme="https"))

        assert result.context.mail_target == MailTarget(
            host="sub.example.com", protocol="https"
        )

    @pytest.mark.asyncio
    async def test_refresh_translations_refetches_every_request(self, world):
        runner = world.build_runner(update_translations_on_every_page_load=True)

        await runner.run(start())
        await runner.run(start())

        assert world.translation_service.get_translations.await_count == 2


class TestTerminatedRequest:
    @pytest.mark.asyncio
    async def test_unknown_host(self, world):
        result = await world.build_runner().run(start(host="missing.example.com"))

        assert result.redirect == TerminalRedirect.temporary("/tenant_not_found")
        assert result.step == "resolve_tenant"
        assert result.context.correlation_id is None
        assert result.context.mail_target is None

    @pytest.mark.asyncio
    async def test_canonical_domain(self, world, directory):
        directory.replace_all([make_tenant(canonical_domain="www.market.test")])

        result = await world.build_runner().run(start("/listings", query={"page": "2"}))

        assert result.redirect == TerminalRedirect.permanent(
            "http://www.market.test/listings?page=2"
        )
        assert result.status_code == 301

    @pytest.mark.asyncio
    async def test_auth_token_signs_in_and_strips_token(self, world, user):
        world.users.add(user)
        world.identity_exchange.issue("tok-1", "u-1")

        result = await world.build_runner().run(
            start("/listings", query={"auth": "tok-1", "page": "2"})
        )

        assert result.redirect == TerminalRedirect.temporary("/listings?page=2")
        assert result.step == "consume_auth_token"
        assert result.context.session.user_id == "u-1"
        assert result.context.correlation_id is None

    @pytest.mark.asyncio
    async def test_auth_token_strip_keeps_repeated_parameters(self, world, user):
        world.users.add(user)
        world.identity_exchange.issue("T", "u-1")
        context = RequestContext.start(
            scheme="http",
            host="sub.example.com",
            path="/search",
            query={"tag": "b", "auth": "T"},
            raw_query="tag=a&tag=b&auth=T",
        )

        result = await world.build_runner().run(context)

        assert result.redirect == TerminalRedirect.temporary("/search?tag=a&tag=b")

    @pytest.mark.asyncio
    async def test_replayed_auth_token_stays_anonymous(self, world, user):
        world.users.add(user)
        world.identity_exchange.issue("tok-1", "u-1")
        runner = world.build_runner()
        await runner.run(start(query={"auth": "tok-1"}))

        result = await runner.run(start(query={"auth": "tok-1"}))

        assert result.completed
        assert result.context.user is None

    @pytest.mark.asyncio
    async def test_banned_non_member_sees_banned_page(self, world):
        world.users.add(User(id="u-1", banned_tenant_ids=frozenset({"t-1"})))

        result = await world.build_runner().run(
            start(session=signed_in(flash=(PREVIOUS_FLASH,)))
        )

        assert result.redirect.location == "/memberships/access_denied"
        assert result.step == "gate_on_membership"
        assert result.context.session.flash == (PREVIOUS_FLASH,)

    @pytest.mark.asyncio
    async def test_non_member_is_sent_to_join_with_invitation(self, world, user):
        world.users.add(user)

        result = await world.build_runner().run(
            start("/listings", query={"code": "INV-1"}, session=signed_in())
        )

        assert result.redirect.location == "/memberships/new"
        assert result.context.session.invitation_code == "INV-1"

    @pytest.mark.asyncio
    async def test_banned_user_reaches_banned_page(self, world):
        world.users.add(User(id="u-1", banned_tenant_ids=frozenset({"t-1"})))

        result = await world.build_runner().run(
            start("/memberships/access_denied", session=signed_in())
        )

        assert result.completed

    @pytest.mark.asyncio
    async def test_non_member_reaches_join_page(self, world, user):
        world.users.add(user)

        result = await world.build_runner().run(
            start("/memberships/new", session=signed_in())
        )

        assert result.completed
        assert result.context.user == user

    @pytest.mark.asyncio
    async def test_private_user_on_organizations_only_tenant(self, world, directory, user):
        directory.replace_all([make_tenant(only_organizations=True)])
        world.users.add(user)
        world.memberships.add(make_membership())

        result = await world.build_runner().run(start(session=signed_in()))

        assert result.redirect.location == "/login"
        assert result.step == "gate_on_tenant_exclusivity"
        assert result.context.session.user_id is None
        assert result.context.user is None

    @pytest.mark.asyncio
    async def test_unconfirmed_member(self, world):
        world.users.add(User(id="u-1", pending_confirmation_tenant_ids=frozenset({"t-1"})))
        world.memberships.add(make_membership())

        result = await world.build_runner().run(start("/listings", session=signed_in()))

        assert result.redirect.location == "/sessions/confirmation_pending"
        assert result.context.session.flash == (CONFIRM_ACCOUNT_FLASH,)

    @pytest.mark.asyncio
    async def test_unconfirmed_member_inside_confirmation_flow(self, world):
        world.users.add(User(id="u-1", pending_confirmation_tenant_ids=frozenset({"t-1"})))
        world.memberships.add(make_membership())

        result = await world.build_runner().run(
            start("/people/confirmation", session=signed_in())
        )

        assert result.completed
        assert CONFIRM_ACCOUNT_FLASH in result.context.flash


class TestFailures:
    @pytest.mark.asyncio
    async def test_unavailable_locale_is_fatal(self, world, directory):
        directory.replace_all([make_tenant(default_locale="ru", locales=("ru",))])

        result = await world.build_runner().run(start())

        assert result.failed
        assert result.status_code == 500
        assert result.step == "negotiate_locale"

    @pytest.mark.asyncio
    async def test_unauthorized_upstream_signs_out(self, world, user):
        world.users.add(user)
        world.memberships.add(make_membership())
        world.translation_service.get_translations.side_effect = UpstreamUnauthorized(
            "translation_service"
        )

        result = await world.build_runner().run(
            start("/es/listings", query={"auth": "", "page": "2"}, session=signed_in())
        )

        assert result.redirect == TerminalRedirect.temporary("/es")
        assert result.context.session.user_id is None
        assert result.context.session.flash == (SESSION_ERROR_FLASH,)
        assert result.context.user is None
        world.notification_sink.notify.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unauthorized_without_locale_goes_to_root(self, world, user):
        world.users.add(user)
        world.memberships.add(make_membership())
        world.translation_service.get_translations.side_effect = UpstreamUnauthorized(
            "translation_service"
        )

        result = await world.build_runner().run(start("/listings", session=signed_in()))

        assert result.redirect == TerminalRedirect.temporary("/")


class TestEnforceTransportSecurity:
    @pytest.mark.asyncio
    async def test_redirects_plain_http(self):
        outcome = await enforce_transport_security(
            start("/listings", query={"page": "2"}, port=8000),
            always_use_ssl=True,
            proxy_marker="portico_proxy",
        )

        assert isinstance(outcome, Terminate)
        assert outcome.redirect == TerminalRedirect.temporary(
            "https://sub.example.com:8000/listings?page=2"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "context",
        [
            start(scheme="https"),
            start(headers={"Via": "1.1 portico_proxy"}),
            start("/robots.txt"),
        ],
    )
    async def test_exemptions(self, context):
        outcome = await enforce_transport_security(
            context, always_use_ssl=True, proxy_marker="portico_proxy"
        )

        assert isinstance(outcome, Continue)

    @pytest.mark.asyncio
    async def test_disabled(self):
        outcome = await enforce_transport_security(
            start(), always_use_ssl=False, proxy_marker="portico_proxy"
        )

        assert isinstance(outcome, Continue)
