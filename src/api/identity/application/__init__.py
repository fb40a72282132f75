"""Application layer for identity."""

from identity.application.auth_gate import AuthGate, SessionRecovery, TokenLogin

__all__ = ["AuthGate", "SessionRecovery", "TokenLogin"]
