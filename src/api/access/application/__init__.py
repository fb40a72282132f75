"""Application layer for access."""

from access.application.access_guard import AccessDecision, AccessGuard

__all__ = ["AccessDecision", "AccessGuard"]
