"""Access decision table.

Access is decided by an ordered table of rules. Each rule belongs to one of
the three gates the request pipeline runs (membership, tenant exclusivity,
email confirmation); within a gate the first applicable rule wins.

Running the gates in pipeline order evaluates the rules in table order:

1. banned non-member            -> BANNED
2. ineligible non-member        -> ORGANIZATIONS_ONLY
3. non-member                   -> JOIN_REQUIRED
4. ineligible member            -> ORGANIZATIONS_ONLY
5. pending email confirmation   -> CONFIRMATION_REQUIRED

so a banned or ineligible user never reaches the generic join prompt.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, NamedTuple

from identity.domain import Membership, User
from tenancy.domain import Tenant


class AccessGate(StrEnum):
    """Pipeline gates that consult the decision table."""

    MEMBERSHIP = "membership"
    TENANT_EXCLUSIVITY = "tenant_exclusivity"
    EMAIL_CONFIRMATION = "email_confirmation"


class AccessOutcome(StrEnum):
    """Outcome of an access decision."""

    ALLOW = "allow"
    BANNED = "banned"
    ORGANIZATIONS_ONLY = "organizations_only"
    JOIN_REQUIRED = "join_required"
    CONFIRMATION_REQUIRED = "confirmation_required"


@dataclass(frozen=True)
class AccessFacts:
    """The facts the decision table is evaluated over."""

    user_present: bool
    member_or_admin: bool = False
    banned: bool = False
    exclusivity_violated: bool = False
    confirmation_pending: bool = False

    @classmethod
    def gather(
        cls,
        tenant: Tenant | None,
        user: User | None,
        membership: Membership | None,
    ) -> AccessFacts:
        """Collect facts for a request.

        Anonymous requests and requests without a tenant carry no facts
        beyond ``user_present``.
        """
        if user is None or tenant is None:
            return cls(user_present=user is not None)

        return cls(
            user_present=True,
            member_or_admin=(membership is not None and membership.accepted)
            or user.is_admin,
            banned=user.banned_at(tenant.id),
            exclusivity_violated=tenant.only_organizations and not user.is_organization,
            confirmation_pending=user.pending_email_confirmation_to_join(tenant.id),
        )


class AccessRule(NamedTuple):
    gate: AccessGate
    outcome: AccessOutcome
    applies: Callable[[AccessFacts], bool]


def _non_member(facts: AccessFacts) -> bool:
    return facts.user_present and not facts.member_or_admin


ACCESS_RULES: tuple[AccessRule, ...] = (
    AccessRule(
        AccessGate.MEMBERSHIP,
        AccessOutcome.BANNED,
        lambda facts: _non_member(facts) and facts.banned,
    ),
    AccessRule(
        AccessGate.MEMBERSHIP,
        AccessOutcome.ORGANIZATIONS_ONLY,
        lambda facts: _non_member(facts) and facts.exclusivity_violated,
    ),
    AccessRule(
        AccessGate.MEMBERSHIP,
        AccessOutcome.JOIN_REQUIRED,
        _non_member,
    ),
    AccessRule(
        AccessGate.TENANT_EXCLUSIVITY,
        AccessOutcome.ORGANIZATIONS_ONLY,
        lambda facts: facts.user_present and facts.exclusivity_violated,
    ),
    AccessRule(
        AccessGate.EMAIL_CONFIRMATION,
        AccessOutcome.CONFIRMATION_REQUIRED,
        lambda facts: facts.user_present and facts.confirmation_pending,
    ),
)


def decide(
    facts: AccessFacts,
    gate: AccessGate,
    rules: tuple[AccessRule, ...] = ACCESS_RULES,
) -> AccessOutcome:
    """First applicable outcome of ``gate``, or ALLOW."""
    for rule in rules:
        if rule.gate == gate and rule.applies(facts):
            return rule.outcome
    return AccessOutcome.ALLOW


def decide_all(
    facts: AccessFacts,
    rules: tuple[AccessRule, ...] = ACCESS_RULES,
) -> AccessOutcome:
    """Outcome of running every gate in pipeline order."""
    for gate in AccessGate:
        outcome = decide(facts, gate, rules)
        if outcome != AccessOutcome.ALLOW:
            return outcome
    return AccessOutcome.ALLOW
