"""Value objects for the identity domain.

Users and memberships are owned by external stores; these are read-only
snapshots taken at the start of a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class MembershipStatus(StrEnum):
    """Status of a user's membership in a tenant."""

    ACCEPTED = "accepted"
    PENDING_EMAIL_CONFIRMATION = "pending_email_confirmation"
    BANNED = "banned"


@dataclass(frozen=True)
class User:
    """A person signed in to the marketplace.

    Attributes:
        id: User identifier
        locale: Stored locale preference
        is_admin: Global (superadmin) flag
        is_organization: Whether the account represents an organization
        banned_tenant_ids: Tenants that banned the user
        pending_confirmation_tenant_ids: Tenants the user is joining whose
            required email confirmation is not done yet
    """

    id: str
    locale: str | None = None
    is_admin: bool = False
    is_organization: bool = False
    banned_tenant_ids: frozenset[str] = frozenset()
    pending_confirmation_tenant_ids: frozenset[str] = frozenset()

    def banned_at(self, tenant_id: str) -> bool:
        return tenant_id in self.banned_tenant_ids

    def pending_email_confirmation_to_join(self, tenant_id: str) -> bool:
        return tenant_id in self.pending_confirmation_tenant_ids


@dataclass(frozen=True)
class Membership:
    """The (user, tenant) relationship."""

    id: str
    user_id: str
    tenant_id: str
    status: MembershipStatus
    admin: bool = False
    last_page_load_date: date | None = None

    @property
    def accepted(self) -> bool:
        return self.status == MembershipStatus.ACCEPTED

    def page_loaded_on(self, day: date) -> bool:
        return self.last_page_load_date == day
