"""Domain-Oriented Observability for the auth gate."""

from identity.application.observability.auth_gate_probe import (
    AuthGateProbe,
    DefaultAuthGateProbe,
)

__all__ = ["AuthGateProbe", "DefaultAuthGateProbe"]
