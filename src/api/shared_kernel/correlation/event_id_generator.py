"""Correlation (event) id generation for inbound requests.

Every request gets an event id that is attached to each outbound call made
while serving it, so upstream services can correlate their logs with the
page view that caused them.

This is part of the Shared Kernel - upstream services parse the format.
"""

from __future__ import annotations

import hashlib
import itertools
import threading
import time
from typing import Callable, Mapping

EVENT_ID_HEADER = "X-Event-Id"


class EventIdGenerator:
    """Generates unique, partly deterministic ids for inbound requests.

    The id format is: {fingerprint}_{timestamp_ns}.{sequence}
    - fingerprint: First 16 characters of SHA256 over the sorted request
      parameters. Identical requests share it, which groups retries.
    - timestamp_ns: Wall clock in nanoseconds at generation time.
    - sequence: Per-generator counter, so two identical requests landing on
      the same clock tick still get distinct ids.

    Example:
        >>> generator = EventIdGenerator(clock_ns=lambda: 1700000000000000000)
        >>> generator.generate({"page": "2"})
        "5c1b4f2e9d0a7b3c_1700000000000000000.0"

    The generated id is never cached: callers store it on the request
    context and discard it with the request.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns):
        self._clock_ns = clock_ns
        self._sequence = itertools.count()
        self._sequence_lock = threading.Lock()

    @staticmethod
    def fingerprint(params: Mapping[str, str]) -> str:
        """Deterministic fingerprint of request parameters.

        Parameter order does not affect the result.
        """
        combined = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha256(combined.encode()).hexdigest()[:16]

    def generate(self, params: Mapping[str, str]) -> str:
        """Generate a new event id for a request with the given parameters."""
        with self._sequence_lock:
            sequence = next(self._sequence)
        return f"{self.fingerprint(params)}_{self._clock_ns()}.{sequence}"
