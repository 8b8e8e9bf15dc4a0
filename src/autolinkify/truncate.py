"""Anchor-text truncation.

Three strategies, all guaranteeing ``len(result) <= length``:

    end     "http://example.com/some/lo…"
    middle  "http://exam…/long/path"
    smart   "example.com/…/path"   keeps the host, trims path and query first
"""

from __future__ import annotations
from urllib.parse import urlsplit

from .types import ConfigurationError

ELLIPSIS = "…"
LOCATIONS = ("end", "middle", "smart")


def truncate_text(
    text: str,
    length: int | None,
    location: str = "end",
    ellipsis: str = ELLIPSIS,
) -> str:
    """Shorten ``text`` to at most ``length`` characters."""
    if location not in LOCATIONS:
        raise ConfigurationError(
            f"unknown truncate location {location!r}; expected one of {LOCATIONS}"
        )
    if not length or len(text) <= length:
        return text
    if length <= len(ellipsis):
        return text[:length]

    if location == "end":
        return truncate_end(text, length, ellipsis)
    if location == "middle":
        return truncate_middle(text, length, ellipsis)
    return truncate_smart(text, length, ellipsis)


def truncate_end(text: str, length: int, ellipsis: str = ELLIPSIS) -> str:
    if len(text) <= length:
        return text
    return text[: length - len(ellipsis)] + ellipsis


def truncate_middle(text: str, length: int, ellipsis: str = ELLIPSIS) -> str:
    if len(text) <= length:
        return text
    available = length - len(ellipsis)
    head = (available + 1) // 2
    tail = available - head
    return text[:head] + ellipsis + (text[-tail:] if tail else "")


def truncate_smart(text: str, length: int, ellipsis: str = ELLIPSIS) -> str:
    """Keep scheme-less host intact where possible, shorten the rest."""
    if len(text) <= length:
        return text

    has_scheme = "://" in text
    try:
        host = urlsplit(text if has_scheme else "//" + text).netloc
    except ValueError:
        # netloc urlsplit refuses, e.g. NFKC-unsafe characters
        return truncate_middle(text, length, ellipsis)
    rest = text[text.find(host) + len(host):] if host else ""

    if not host or len(host) + len(ellipsis) > length:
        return truncate_middle(text, length, ellipsis)

    # Drop the scheme first, it carries the least information.
    if len(host) + len(rest) <= length:
        return host + rest
    return host + truncate_middle(rest, length - len(host), ellipsis)
