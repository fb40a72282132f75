"""Domain layer for localization: locale precedence and bundles."""

from localization.domain.exceptions import LocaleNotAvailableError
from localization.domain.locale_bundle import LocaleBundle, flatten_catalog
from localization.domain.locale_selection import (
    locale_param_from_request,
    path_without_locale,
    select_locale,
)

__all__ = [
    "LocaleBundle",
    "LocaleNotAvailableError",
    "flatten_catalog",
    "locale_param_from_request",
    "path_without_locale",
    "select_locale",
]
