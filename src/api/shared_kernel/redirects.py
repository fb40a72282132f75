"""Terminal redirect value object.

A terminal redirect is an intended exit from the request pipeline, not an
error. Permanent redirects are reserved for domain canonicalization; every
gating redirect is temporary.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus


@dataclass(frozen=True)
class TerminalRedirect:
    """Where to send the client instead of running the handler."""

    location: str
    status_code: int = HTTPStatus.FOUND

    @classmethod
    def temporary(cls, location: str) -> TerminalRedirect:
        return cls(location=location, status_code=HTTPStatus.FOUND)

    @classmethod
    def permanent(cls, location: str) -> TerminalRedirect:
        return cls(location=location, status_code=HTTPStatus.MOVED_PERMANENTLY)

    @property
    def is_permanent(self) -> bool:
        return self.status_code == HTTPStatus.MOVED_PERMANENTLY
