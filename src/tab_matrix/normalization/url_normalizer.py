"""
URL normalization and canonicalization.

The canonical form is the identity of a URL for deduplication. Steps run in
a fixed order because query sorting operates on what is left after tracking
parameters are removed:

- Parse and reject anything that is not an absolute http(s) URL
- Lowercase the host, drop default ports, strip a leading ``www.``
- Resolve dot segments and drop trailing slashes (except for the root path)
- Remove tracking parameters, discard the fragment
- Stable-sort the remaining query parameters by name
"""

import ipaddress
import logging
import unicodedata
from collections.abc import Iterable
from typing import Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from tab_matrix.config import get_config
from tab_matrix.errors import InvalidUrlError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

# Characters never allowed in a host name
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r#%/<>?@[\\]^|")

# Path characters left as-is when percent-encoding
_PATH_SAFE_CHARS = "/%:@!$&'()*+,;=-._~"

# Punctuation and symbols in root collation order; they sort before digits and letters
_PUNCTUATION_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def normalize_url(url: str, tracking_params: Optional[Iterable[str]] = None) -> str:
    """
    Canonicalize a URL.

    Args:
        url: Raw URL string
        tracking_params: Query parameter names to strip (defaults to config)

    Returns:
        Canonical URL string

    Raises:
        InvalidUrlError: If the URL cannot be parsed or is not http(s)

    Example:
        >>> normalize_url("https://WWW.Example.com/a/?utm_source=x&b=2&a=1#top")
        'https://example.com/a?a=1&b=2'
    """
    if not url or not isinstance(url, str):
        raise InvalidUrlError(url, "empty or not a string")

    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError as e:
        raise InvalidUrlError(url, str(e)) from e

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        reason = f"unsupported scheme '{scheme}'" if scheme else "not an absolute URL"
        raise InvalidUrlError(url, reason)

    host = _normalize_host(url, parsed.hostname)
    netloc = _build_netloc(host, port, scheme)
    path = _normalize_path(parsed.path)

    if tracking_params is None:
        tracking_params = get_config().normalization.tracking_params
    query = _normalize_query(parsed.query, frozenset(tracking_params))

    return urlunsplit((scheme, netloc, path, query, ""))


def extract_domain(url: str) -> str:
    """
    Return the lowercased host of a URL.

    Never raises: an unparseable URL yields an empty string, which the
    grouping stage treats as "no domain".
    """
    try:
        hostname = urlsplit(url.strip()).hostname
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug("Failed to extract domain from %r: %s", url, e)
        return ""
    return (hostname or "").lower()


def should_process_url(url: object, invalid_prefixes: Optional[Iterable[str]] = None) -> bool:
    """Return False for empty values and browser-internal pages."""
    if not url or not isinstance(url, str):
        return False

    if invalid_prefixes is None:
        invalid_prefixes = get_config().tabs.invalid_url_prefixes
    return not any(url.startswith(prefix) for prefix in invalid_prefixes)


def _normalize_host(url: str, hostname: Optional[str]) -> str:
    """
    Lowercase the host, convert IDNs to punycode and strip ``www.``.

    IPv6 literals are validated and returned in brackets.
    """
    if not hostname:
        raise InvalidUrlError(url, "URL must have a host")

    host = hostname.lower()

    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise InvalidUrlError(url, f"invalid IPv6 host: {e}") from e
        return f"[{host}]"

    if any(ch in _FORBIDDEN_HOST_CHARS for ch in host):
        raise InvalidUrlError(url, "host contains forbidden characters")

    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise InvalidUrlError(url, f"invalid internationalized host: {e}") from e

    # Repeated so the canonical form is a fixed point
    while host.startswith("www."):
        host = host[4:]

    if not host:
        raise InvalidUrlError(url, "host is empty after stripping 'www.'")

    return host


def _build_netloc(host: str, port: Optional[int], scheme: str) -> str:
    """Append the port unless it is the default for the scheme."""
    if port is None or port == DEFAULT_PORTS.get(scheme):
        return host
    return f"{host}:{port}"


def _normalize_path(path: str) -> str:
    """
    Resolve ``.``/``..`` segments and drop trailing slashes.

    Empty segments are kept, so ``/a//b`` stays distinct from ``/a/b``.
    """
    if not path:
        return "/"

    segments = path.split("/")[1:]
    resolved: list[str] = []
    for i, segment in enumerate(segments):
        is_last = i == len(segments) - 1
        if segment in (".", ".."):
            if segment == ".." and resolved:
                resolved.pop()
            if is_last:
                resolved.append("")
            continue
        resolved.append(segment)

    path = quote("/" + "/".join(resolved), safe=_PATH_SAFE_CHARS)

    if path != "/" and path.endswith("/"):
        path = path.rstrip("/") or "/"

    return path


def _normalize_query(query: str, tracking_params: frozenset) -> str:
    """
    Drop tracking parameters and sort the rest by name.

    The sort is stable, so repeated names keep their relative order.
    """
    if not query:
        return ""

    params = [
        (key, value)
        for key, value in parse_qsl(query, keep_blank_values=True)
        if key not in tracking_params
    ]
    params.sort(key=lambda kv: _collation_key(kv[0]))

    return urlencode(params, safe="*")


def _collation_key(name: str) -> tuple:
    """
    Locale-style collation key.

    Compares accent-insensitively first, with punctuation ahead of digits
    and digits ahead of letters, then case-insensitively, then with
    lowercase ahead of uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    primary = tuple(_primary_weight(ch) for ch in base.casefold())
    return (primary, name.casefold(), name.swapcase())


def _primary_weight(ch: str) -> tuple[int, str]:
    rank = _PUNCTUATION_ORDER.find(ch)
    if rank >= 0:
        return (0, chr(rank))
    if ch.isdigit():
        return (1, ch)
    return (2, ch)
