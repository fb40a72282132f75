"""Request context value object.

A RequestContext is created when a request arrives and discarded when it
ends. It is never shared between requests: every per-request value
(correlation id, mail target, locale) lives here instead of in process
globals, and each pipeline step returns a new context rather than
mutating the one it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import urlencode

from billing.domain import PlanInfo
from identity.domain import Membership, User
from shared_kernel.correlation import EVENT_ID_HEADER
from shared_kernel.session import FlashMessage, SessionData
from shared_kernel.urls import build_fullpath, host_with_port
from tenancy.domain import Tenant, TenantCustomization


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class MailTarget:
    """Host (and protocol) links in outgoing mail point to."""

    host: str
    protocol: str = "http"


@dataclass(frozen=True)
class RequestContext:
    """Everything the pipeline knows about one request.

    Attributes:
        scheme: Request scheme ("http" or "https")
        host: Request host without port
        path: Request path
        port: Request port, if given
        query: Query parameters, last value of each name
        raw_query: Query string as the client sent it
        headers: Request headers, lower-cased names
        session: Outgoing session state
        flash: Messages displayed on this request
        tenant: Resolved tenant
        user: Signed-in user
        membership: Accepted membership of the user in the tenant
        locale: Negotiated locale
        translations: Merged translation table of the negotiated locale
        customization: Tenant customization of the negotiated locale
        return_to: Path without locale prefix, for locale switching
        correlation_id: Event id sent with every outbound call
        mail_target: Host links in outgoing mail point to
        plan_info: Tenant plan status and promotional pricing
        is_tenant_admin: Whether the user administers the tenant
        analytics_event: Analytics event to push to the page
    """

    scheme: str
    host: str
    path: str
    port: int | None = None
    query: Mapping[str, str] = field(default_factory=_empty_mapping)
    raw_query: str = ""
    headers: Mapping[str, str] = field(default_factory=_empty_mapping)
    session: SessionData = field(default_factory=SessionData)
    flash: tuple[FlashMessage, ...] = ()
    tenant: Tenant | None = None
    user: User | None = None
    membership: Membership | None = None
    locale: str | None = None
    translations: Mapping[str, str] = field(default_factory=_empty_mapping)
    customization: TenantCustomization | None = None
    return_to: str | None = None
    correlation_id: str | None = None
    mail_target: MailTarget | None = None
    plan_info: PlanInfo | None = None
    is_tenant_admin: bool = False
    analytics_event: tuple[str, ...] | None = None

    @classmethod
    def start(
        cls,
        scheme: str,
        host: str,
        path: str,
        port: int | None = None,
        query: Mapping[str, str] | None = None,
        raw_query: str | None = None,
        headers: Mapping[str, str] | None = None,
        session: SessionData | None = None,
    ) -> RequestContext:
        """Create the context of a new request.

        Flash messages stored by the previous request move out of the
        session: they are displayed now and dropped unless a step keeps
        them. Without ``raw_query`` the query string is encoded from
        ``query``.
        """
        session = session or SessionData()
        return cls(
            scheme=scheme,
            host=host,
            path=path,
            port=port,
            query=MappingProxyType(dict(query or {})),
            raw_query=urlencode(query or {}) if raw_query is None else raw_query,
            headers=MappingProxyType(
                {name.lower(): value for name, value in (headers or {}).items()}
            ),
            session=replace(session, flash=()),
            flash=session.flash,
        )

    @property
    def fullpath(self) -> str:
        return build_fullpath(self.path, self.raw_query)

    @property
    def host_with_port(self) -> str:
        return host_with_port(self.host, self.port, self.scheme)

    def evolve(self, **changes: Any) -> RequestContext:
        """Copy of this context with ``changes`` applied."""
        return replace(self, **changes)

    def outbound_headers(self) -> dict[str, str]:
        """Headers every outbound call made for this request must carry."""
        if self.correlation_id is None:
            return {}
        return {EVENT_ID_HEADER: self.correlation_id}

    def keep_flash(self) -> RequestContext:
        """Carry this request's flash over to the next request."""
        return self.evolve(session=self.session.with_flash(*self.flash))

    def with_flash(self, message: FlashMessage) -> RequestContext:
        """Queue a message for the next request."""
        return self.evolve(session=self.session.with_flash(message))

    def with_notice(self, message: FlashMessage) -> RequestContext:
        """Add a message displayed on this request only."""
        return self.evolve(flash=self.flash + (message,))

    def signed_out(self) -> RequestContext:
        """Drop the session identity and everything derived from it."""
        return self.evolve(
            user=None,
            membership=None,
            is_tenant_admin=False,
            session=self.session.signed_out(),
        )
