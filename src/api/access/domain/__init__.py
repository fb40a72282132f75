"""Domain layer for access: the access decision table."""

from access.domain.decision_table import (
    ACCESS_RULES,
    AccessFacts,
    AccessGate,
    AccessOutcome,
    AccessRule,
    decide,
    decide_all,
)

__all__ = [
    "ACCESS_RULES",
    "AccessFacts",
    "AccessGate",
    "AccessOutcome",
    "AccessRule",
    "decide",
    "decide_all",
]
