"""Operator notification sink writing alerts to the structured log."""

from __future__ import annotations

from typing import Any, Mapping

import structlog


class LoggingNotificationSink:
    """Emits operator alerts as error-level log events.

    Log shipping turns these into alerts; no extra transport is involved.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    async def notify(self, message: str, title: str, context: Mapping[str, Any]) -> None:
        self._logger.error(
            "operator_notification",
            title=title,
            message=message,
            **dict(context),
        )
