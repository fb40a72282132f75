"""Locale precedence rules.

Pure functions: no I/O, no configuration lookups.
"""

from __future__ import annotations

from typing import Collection, Mapping

LOCALE_PARAM = "locale"


def select_locale(
    user_locale: str | None,
    locale_param: str | None,
    tenant_locales: Collection[str],
    tenant_default_locale: str,
) -> str:
    """Pick the request locale.

    Precedence, first supported candidate wins:
    1. the user's stored preference, if the tenant supports it
    2. the explicit locale request parameter, if the tenant supports it
    3. the tenant's default locale

    Example:
        >>> select_locale("fr", "es", ["en", "es"], "en")
        "es"
    """
    for candidate in (user_locale, locale_param):
        if candidate and candidate in tenant_locales:
            return candidate
    return tenant_default_locale


def locale_param_from_request(
    path: str,
    query: Mapping[str, str],
    available_locales: Collection[str],
) -> str | None:
    """Extract the explicitly requested locale.

    An explicit ``locale`` query parameter wins over a locale prefix in the
    path (``/fr/listings``). Only globally available locales count as a
    path prefix so ordinary first segments are not mistaken for locales.
    """
    explicit = query.get(LOCALE_PARAM)
    if explicit:
        return explicit

    first_segment = path.lstrip("/").split("/", 1)[0]
    if first_segment in available_locales:
        return first_segment
    return None


def path_without_locale(fullpath: str, locale_param: str | None) -> str:
    """Path to return to after a locale change, without the locale prefix.

    The leading slash is removed as well.

    Example:
        >>> path_without_locale("/fr/listings?page=2", "fr")
        "listings?page=2"
    """
    path = fullpath
    if locale_param:
        prefix = f"/{locale_param}"
        if path == prefix or path.startswith(f"{prefix}/") or path.startswith(f"{prefix}?"):
            path = path[len(prefix):]
    return path.removeprefix("/")
