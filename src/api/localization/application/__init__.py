"""Application layer for localization."""

from localization.application.bundle_cache import LocaleBundleCache
from localization.application.locale_negotiator import (
    LocaleNegotiator,
    NegotiatedLocale,
)

__all__ = ["LocaleBundleCache", "LocaleNegotiator", "NegotiatedLocale"]
