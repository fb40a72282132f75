"""URL helpers shared by pipeline steps."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

# Reserved characters allowed verbatim in a path (RFC 3986 pchar and "/").
PATH_SAFE_CHARACTERS = "/:@!$&'()*+,;=~"


def build_fullpath(path: str, query: str = "") -> str:
    """Percent-encoded path plus the raw query string, as the client sent it.

    ``path`` is the decoded request path; ``query`` is kept verbatim so
    repeated parameters and their order survive.

    Example:
        >>> build_fullpath("/a b", "tag=a&tag=b")
        "/a%20b?tag=a&tag=b"
    """
    quoted = quote(path, safe=PATH_SAFE_CHARACTERS)
    if not query:
        return quoted
    return f"{quoted}?{query}"


def remove_query_param(fullpath: str, param: str) -> str:
    """Remove every occurrence of ``param`` from the query of ``fullpath``.

    Example:
        >>> remove_query_param("/listings?auth=abc&page=2", "auth")
        "/listings?page=2"
    """
    parts = urlsplit(fullpath)
    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != param
    ]
    return urlunsplit(("", "", parts.path, urlencode(kept), parts.fragment))


def host_with_port(host: str, port: int | None, scheme: str) -> str:
    """Host, plus the port when it is not the scheme's default."""
    default_port = 443 if scheme == "https" else 80
    if port is None or port == default_port:
        return host
    return f"{host}:{port}"
