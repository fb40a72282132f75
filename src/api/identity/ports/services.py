"""Service protocols (ports) for the identity bounded context.

Any implementation may raise ``UpstreamUnauthorized`` when the upstream
service reports the current session as unauthorized.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from identity.domain import Membership, User


@runtime_checkable
class IdentityExchange(Protocol):
    """Exchanges one-time login tokens for user identities."""

    async def use_token_for_login(
        self,
        token: str,
        headers: Mapping[str, str] | None = None,
    ) -> str | None:
        """Consume a login token.

        Returns:
            The user id the token was issued for, or None if the token is
            unknown, expired or already used.
        """
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Read access to user records."""

    async def get(self, user_id: str) -> User | None:
        ...


@runtime_checkable
class MembershipQuery(Protocol):
    """Read access to memberships plus the page-load event sink."""

    async def get_accepted(self, user_id: str, tenant_id: str) -> Membership | None:
        """Return the user's accepted membership in the tenant, if any."""
        ...

    def record_page_load(self, membership_id: str, host: str) -> None:
        """Enqueue a page-load event. Fire-and-forget: must not block."""
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Operator-facing alert channel."""

    async def notify(self, message: str, title: str, context: Mapping[str, Any]) -> None:
        ...
