"""In-memory identity adapters.

Backing stores for development and tests. Persistence of users and
memberships belongs to other systems; these adapters only implement the
ports over plain dictionaries.
"""

from __future__ import annotations

import threading
from typing import Iterable, Mapping

from identity.domain import Membership, User


class InMemoryIdentityExchange:
    """Single-use login token store."""

    def __init__(self, tokens: Mapping[str, str] | None = None):
        self._tokens: dict[str, str] = dict(tokens or {})
        self._lock = threading.Lock()

    def issue(self, token: str, user_id: str) -> None:
        with self._lock:
            self._tokens[token] = user_id

    async def use_token_for_login(
        self,
        token: str,
        headers: Mapping[str, str] | None = None,
    ) -> str | None:
        with self._lock:
            return self._tokens.pop(token, None)


class InMemoryUserDirectory:
    def __init__(self, users: Iterable[User] = ()):
        self._users = {user.id: user for user in users}

    def add(self, user: User) -> None:
        self._users[user.id] = user

    async def get(self, user_id: str) -> User | None:
        return self._users.get(user_id)


class InMemoryMembershipQuery:
    """Membership lookup with a queue of recorded page loads."""

    def __init__(self, memberships: Iterable[Membership] = ()):
        self._memberships = {
            (membership.user_id, membership.tenant_id): membership
            for membership in memberships
        }
        self._page_loads: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def add(self, membership: Membership) -> None:
        self._memberships[(membership.user_id, membership.tenant_id)] = membership

    @property
    def page_loads(self) -> tuple[tuple[str, str], ...]:
        """Recorded ``(membership_id, host)`` page-load events."""
        return tuple(self._page_loads)

    async def get_accepted(self, user_id: str, tenant_id: str) -> Membership | None:
        membership = self._memberships.get((user_id, tenant_id))
        if membership is None or not membership.accepted:
            return None
        return membership

    def record_page_load(self, membership_id: str, host: str) -> None:
        with self._lock:
            self._page_loads.append((membership_id, host))
