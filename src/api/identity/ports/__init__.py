"""Ports (interfaces) for the identity bounded context."""

from identity.ports.services import (
    IdentityExchange,
    MembershipQuery,
    NotificationSink,
    UserDirectory,
)

__all__ = ["IdentityExchange", "MembershipQuery", "NotificationSink", "UserDirectory"]
