"""Domain-oriented observability infrastructure.

Probes in each bounded context bind an ObservationContext so every event
they emit carries the request's correlation metadata.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from infrastructure.observability.context import ObservationContext
from infrastructure.observability.startup_probe import DefaultStartupProbe, StartupProbe

__all__ = [
    "DefaultStartupProbe",
    "ObservationContext",
    "StartupProbe",
]
