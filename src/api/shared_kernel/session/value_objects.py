"""Session value objects.

The session store itself is an external collaborator (a signed cookie in
the default deployment). These value objects are the typed view the
pipeline works with; they convert to and from the plain mapping the store
persists.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Mapping


class FlashLevel(StrEnum):
    """Severity of a user-facing flash message."""

    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FlashMessage:
    """A user-facing message identified by its translation key.

    Rendering (and translation) is left to the view layer.
    """

    level: FlashLevel
    key: str

    def to_list(self) -> list[str]:
        return [self.level.value, self.key]

    @classmethod
    def from_list(cls, raw: list[str] | tuple[str, str]) -> FlashMessage:
        level, key = raw
        return cls(level=FlashLevel(level), key=key)


@dataclass(frozen=True)
class SessionData:
    """Outgoing session state for the current request.

    Attributes:
        user_id: Identifier of the signed-in user, if any.
        invitation_code: Invitation code held for the join flow.
        flash: Messages to display on the *next* request.
        analytics_event: Analytics event reported by a previous request,
            pushed to the page once.
    """

    user_id: str | None = None
    invitation_code: str | None = None
    flash: tuple[FlashMessage, ...] = ()
    analytics_event: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> SessionData:
        """Build session data from the store's raw mapping.

        Unknown keys are ignored; malformed flash entries are dropped.
        """
        flash: list[FlashMessage] = []
        for entry in raw.get("flash") or ():
            try:
                flash.append(FlashMessage.from_list(entry))
            except (TypeError, ValueError):
                continue

        analytics_event = raw.get("analytics_event")
        return cls(
            user_id=raw.get("user_id"),
            invitation_code=raw.get("invitation_code"),
            flash=tuple(flash),
            analytics_event=tuple(analytics_event) if analytics_event else None,
        )

    def to_mapping(self) -> dict[str, Any]:
        """Convert to the plain mapping persisted by the session store."""
        result: dict[str, Any] = {}
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.invitation_code is not None:
            result["invitation_code"] = self.invitation_code
        if self.flash:
            result["flash"] = [message.to_list() for message in self.flash]
        if self.analytics_event is not None:
            result["analytics_event"] = list(self.analytics_event)
        return result

    def with_flash(self, *messages: FlashMessage) -> SessionData:
        """Queue messages for display on the next request."""
        return replace(self, flash=self.flash + messages)

    def signed_in_as(self, user_id: str) -> SessionData:
        return replace(self, user_id=user_id)

    def signed_out(self) -> SessionData:
        return replace(self, user_id=None)
