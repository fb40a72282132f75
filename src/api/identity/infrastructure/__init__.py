"""Infrastructure adapters for identity."""

from identity.infrastructure.identity_client import HttpIdentityExchange
from identity.infrastructure.in_memory import (
    InMemoryIdentityExchange,
    InMemoryMembershipQuery,
    InMemoryUserDirectory,
)
from identity.infrastructure.notification_sink import LoggingNotificationSink

__all__ = [
    "HttpIdentityExchange",
    "InMemoryIdentityExchange",
    "InMemoryMembershipQuery",
    "InMemoryUserDirectory",
    "LoggingNotificationSink",
]
