"""Per-request correlation identifiers."""

from shared_kernel.correlation.event_id_generator import (
    EVENT_ID_HEADER,
    EventIdGenerator,
)

__all__ = ["EVENT_ID_HEADER", "EventIdGenerator"]
