"""Auth gate: one-time token sign-in, session identity and session recovery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from identity.application.observability import AuthGateProbe, DefaultAuthGateProbe
from identity.domain import User
from identity.ports import IdentityExchange, NotificationSink, UserDirectory
from shared_kernel.exceptions import UpstreamUnauthorized
from shared_kernel.redirects import TerminalRedirect
from shared_kernel.session import FlashLevel, FlashMessage
from shared_kernel.urls import remove_query_param

AUTH_TOKEN_PARAM = "auth"

SESSION_ERROR_FLASH = FlashMessage(
    level=FlashLevel.ERROR, key="layouts.notifications.error_with_session"
)


@dataclass(frozen=True)
class TokenLogin:
    """A successful token sign-in and the redirect that strips the token."""

    user: User
    redirect: TerminalRedirect


@dataclass(frozen=True)
class SessionRecovery:
    """How to recover from a session an upstream service rejected."""

    redirect: TerminalRedirect
    flash: FlashMessage = SESSION_ERROR_FLASH


class AuthGate:
    """Application service for request authentication.

    Login tokens are single-use: the identity exchange consumes the token,
    and the sign-in redirects to the same URL without the token so it can
    not be replayed from history or leak through links and referrers.
    """

    def __init__(
        self,
        identity_exchange: IdentityExchange,
        user_directory: UserDirectory,
        notification_sink: NotificationSink,
        probe: AuthGateProbe | None = None,
    ):
        self._identity_exchange = identity_exchange
        self._user_directory = user_directory
        self._notification_sink = notification_sink
        self._probe = probe or DefaultAuthGateProbe()

    async def consume_token(
        self,
        params: Mapping[str, str],
        fullpath: str,
        headers: Mapping[str, str] | None = None,
    ) -> TokenLogin | None:
        """Sign in with the request's login token, if it carries a valid one.

        Args:
            params: Request query parameters
            fullpath: Path and query of the request
            headers: Headers for the outbound identity exchange

        Returns:
            The signed-in user and the redirect to the token-less URL, or
            None when there is no token or it yields no known user.

        Raises:
            UpstreamUnauthorized: If the identity service rejects the session.
        """
        token = params.get(AUTH_TOKEN_PARAM)
        if not token:
            return None

        user_id = await self._identity_exchange.use_token_for_login(token, headers=headers)
        if user_id is None:
            self._probe.login_token_rejected()
            return None

        user = await self._user_directory.get(user_id)
        if user is None:
            self._probe.login_token_user_missing(user_id=user_id)
            return None

        self._probe.login_token_consumed(user_id=user.id)
        return TokenLogin(
            user=user,
            redirect=TerminalRedirect.temporary(
                remove_query_param(fullpath, AUTH_TOKEN_PARAM)
            ),
        )

    async def fetch_identity(self, session_user_id: str | None) -> User | None:
        """Load the user the session is signed in as."""
        if session_user_id is None:
            return None

        user = await self._user_directory.get(session_user_id)
        if user is None:
            self._probe.session_user_missing(user_id=session_user_id)
        return user

    async def recover_unauthorized_session(
        self,
        error: UpstreamUnauthorized,
        params: Mapping[str, str],
        user_id: str | None,
        root_path: str,
    ) -> SessionRecovery:
        """Alert operators and describe the recovery from a rejected session.

        The caller clears the session identity and applies the flash and
        redirect. An expired session makes this normal now and then; a high
        rate points to a broken upstream.
        """
        self._probe.session_unauthorized(service=error.service, user_id=user_id)
        await self._notification_sink.notify(
            message=(
                "Upstream session was unauthorized. This may be normal if the "
                "session just expired, but if this occurs frequently something "
                "is wrong."
            ),
            title="Upstream session error",
            context={
                "service": error.service,
                "user_id": user_id,
                "params": {
                    key: value
                    for key, value in params.items()
                    if key != AUTH_TOKEN_PARAM
                },
            },
        )
        return SessionRecovery(redirect=TerminalRedirect.temporary(root_path))
