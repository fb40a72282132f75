"""Domain-Oriented Observability for localization."""

from localization.application.observability.locale_probe import (
    DefaultLocaleProbe,
    LocaleProbe,
)

__all__ = ["DefaultLocaleProbe", "LocaleProbe"]
