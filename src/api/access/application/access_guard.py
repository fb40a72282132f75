"""Access guard: turns access outcomes into redirects and session effects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Mapping

from access.application.observability import AccessGuardProbe, DefaultAccessGuardProbe
from access.domain import AccessFacts, AccessGate, AccessOutcome, decide
from identity.domain import Membership, User
from shared_kernel.redirects import TerminalRedirect
from shared_kernel.session import FlashLevel, FlashMessage
from tenancy.domain import Tenant

INVITATION_CODE_PARAM = "code"

PRIVATE_USER_FLASH = FlashMessage(
    level=FlashLevel.WARNING,
    key="layouts.notifications.can_not_login_with_private_user",
)
CONFIRM_ACCOUNT_FLASH = FlashMessage(
    level=FlashLevel.WARNING,
    key="layouts.notifications.you_need_to_confirm_your_account_first",
)


@dataclass(frozen=True)
class AccessDecision:
    """An access outcome with everything the pipeline must apply.

    Attributes:
        outcome: Table outcome
        redirect: Where to send the user, unless allowed
        flash: Message for the next request
        notice: Message for the current request
        keep_flash: Carry the incoming flash over the redirect
        sign_out: Clear the session identity
        invitation_code: Invitation code to hold in the session
    """

    outcome: AccessOutcome
    redirect: TerminalRedirect | None = None
    flash: FlashMessage | None = None
    notice: FlashMessage | None = None
    keep_flash: bool = False
    sign_out: bool = False
    invitation_code: str | None = None

    @property
    def allowed(self) -> bool:
        return self.redirect is None


ALLOW = AccessDecision(outcome=AccessOutcome.ALLOW)


class AccessGuard:
    """Evaluates one access gate for a request."""

    def __init__(
        self,
        login_path: str,
        join_path: str,
        access_denied_path: str,
        confirmation_pending_path: str,
        confirmation_flow_prefix: str,
        exempt_paths: Mapping[AccessGate, Collection[str]] | None = None,
        probe: AccessGuardProbe | None = None,
    ):
        """Initialize the guard.

        Args:
            login_path: Target for users who may not use the tenant at all
            join_path: Target for signed-in non-members
            access_denied_path: Target for banned users
            confirmation_pending_path: Target for unconfirmed users
            confirmation_flow_prefix: Paths of the confirmation flow itself
            exempt_paths: Paths a gate never applies to
            probe: Optional domain probe for observability
        """
        self._login_path = login_path
        self._join_path = join_path
        self._access_denied_path = access_denied_path
        self._confirmation_pending_path = confirmation_pending_path
        self._confirmation_flow_prefix = confirmation_flow_prefix
        self._exempt_paths = {
            gate: frozenset(paths) for gate, paths in (exempt_paths or {}).items()
        }
        # The membership gate sends users to these pages; it must let them in.
        self._exempt_paths[AccessGate.MEMBERSHIP] = self._exempt_paths.get(
            AccessGate.MEMBERSHIP, frozenset()
        ) | {join_path, access_denied_path}
        self._probe = probe or DefaultAccessGuardProbe()

    def evaluate(
        self,
        gate: AccessGate,
        path: str,
        params: Mapping[str, str],
        tenant: Tenant | None,
        user: User | None,
        membership: Membership | None,
    ) -> AccessDecision:
        """Decide ``gate`` for a request."""
        if path in self._exempt_paths.get(gate, ()):
            self._probe.gate_skipped(gate=gate.value, path=path)
            return ALLOW

        outcome = decide(AccessFacts.gather(tenant, user, membership), gate)
        decision = self._decision_for(outcome, path, params)

        if not decision.allowed:
            self._probe.access_denied(
                gate=gate.value,
                outcome=outcome.value,
                user_id=user.id if user else None,
                tenant_id=tenant.id if tenant else None,
            )
        return decision

    def _decision_for(
        self,
        outcome: AccessOutcome,
        path: str,
        params: Mapping[str, str],
    ) -> AccessDecision:
        match outcome:
            case AccessOutcome.BANNED:
                return AccessDecision(
                    outcome=outcome,
                    redirect=TerminalRedirect.temporary(self._access_denied_path),
                    keep_flash=True,
                )
            case AccessOutcome.JOIN_REQUIRED:
                return AccessDecision(
                    outcome=outcome,
                    redirect=TerminalRedirect.temporary(self._join_path),
                    keep_flash=True,
                    invitation_code=params.get(INVITATION_CODE_PARAM) or None,
                )
            case AccessOutcome.ORGANIZATIONS_ONLY:
                return AccessDecision(
                    outcome=outcome,
                    redirect=TerminalRedirect.temporary(self._login_path),
                    flash=PRIVATE_USER_FLASH,
                    sign_out=True,
                )
            case AccessOutcome.CONFIRMATION_REQUIRED:
                if path.startswith(self._confirmation_flow_prefix):
                    # Let the confirmation itself through, still warning.
                    return AccessDecision(outcome=outcome, notice=CONFIRM_ACCOUNT_FLASH)
                return AccessDecision(
                    outcome=outcome,
                    redirect=TerminalRedirect.temporary(self._confirmation_pending_path),
                    flash=CONFIRM_ACCOUNT_FLASH,
                )
            case _:
                return ALLOW
