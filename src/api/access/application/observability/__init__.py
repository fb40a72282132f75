"""Domain-Oriented Observability for the access guard."""

from access.application.observability.access_guard_probe import (
    AccessGuardProbe,
    DefaultAccessGuardProbe,
)

__all__ = ["AccessGuardProbe", "DefaultAccessGuardProbe"]
