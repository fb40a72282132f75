"""Domain probe for the auth gate.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class AuthGateProbe(Protocol):
    """Domain probe for sign-in and session recovery."""

    def login_token_consumed(self, user_id: str) -> None:
        """Record that a login token signed a user in."""
        ...

    def login_token_rejected(self) -> None:
        """Record that a login token was unknown, expired or already used."""
        ...

    def login_token_user_missing(self, user_id: str) -> None:
        """Record that a token resolved to a user id with no user record."""
        ...

    def session_user_missing(self, user_id: str) -> None:
        """Record that the session referenced a user that no longer exists."""
        ...

    def session_unauthorized(self, service: str, user_id: str | None) -> None:
        """Record that an upstream service invalidated the session."""
        ...

    def with_context(self, context: ObservationContext) -> AuthGateProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthGateProbe:
    """Default implementation of AuthGateProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAuthGateProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthGateProbe(logger=self._logger, context=context)

    def login_token_consumed(self, user_id: str) -> None:
        self._logger.info(
            "auth_login_token_consumed",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def login_token_rejected(self) -> None:
        self._logger.info("auth_login_token_rejected", **self._get_context_kwargs())

    def login_token_user_missing(self, user_id: str) -> None:
        self._logger.warning(
            "auth_login_token_user_missing",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def session_user_missing(self, user_id: str) -> None:
        self._logger.info(
            "auth_session_user_missing",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def session_unauthorized(self, service: str, user_id: str | None) -> None:
        self._logger.warning(
            "auth_session_unauthorized",
            service=service,
            user_id=user_id,
            **self._get_context_kwargs(),
        )
