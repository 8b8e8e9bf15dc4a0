"""Linker, the main API.  Walk HTML, run matchers, resolve overlaps, replace.

Usage:
    from autolinkify import Linker, LinkerConfig

    linker = Linker(LinkerConfig(mention="twitter", class_name="auto"))
    linker.link("Mail joe@example.com or ping @joe")
    # 'Mail <a href="mailto:joe@example.com" class="auto auto-email" ...>joe@example.com</a> or ...'

    for match in linker.parse("see www.example.com"):
        print(match.type, match.offset, match.matched_text)

A caller-supplied ``replace_fn`` can take over any match: return a string
or an ``HtmlTag`` to emit instead, ``SKIP``/``False`` to leave the text as
it was, or ``None``/``True`` to emit the default anchor.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence, Union

from .html_walker import iter_text_nodes
from .matchers import (
    EmailMatcher,
    HashtagMatcher,
    Matcher,
    MentionMatcher,
    PhoneMatcher,
    UrlMatcher,
)
from .tag_builder import AnchorTagBuilder, HtmlTag, escape_html
from .types import ConfigurationError, Match, MatchType

logger = logging.getLogger(__name__)


class _Skip:
    __slots__ = ()

    def __repr__(self) -> str:
        return "SKIP"


SKIP = _Skip()
"""Returned by a transform to keep a match's original text."""

ReplaceResult = Union[str, HtmlTag, bool, _Skip, None]

_URL_OPTIONS = frozenset({
    "scheme_matches", "www_matches", "tld_matches", "ipv4_matches", "require_scheme",
})


@dataclass
class LinkerConfig:
    """Configuration for the Linker."""
    urls: bool | Mapping[str, bool] = True     # or {"require_scheme": True, ...}
    email: bool = True
    phone: bool = True
    mention: str | bool = False                # service name, e.g. "twitter"
    hashtag: str | bool = False                # service name, e.g. "instagram"
    new_window: bool = True
    class_name: str = ""
    strip_prefix: bool | Mapping[str, bool] = True
    strip_trailing_slash: bool = True
    decode_percent_encoding: bool = True
    truncate: int | Mapping[str, Any] | None = None
    # Extra tie-break for equal offset and length, e.g. ["email", "url"]
    type_priority: Sequence[str] | None = None
    # Escape "<" and ">" in the input so it is treated as plain text
    sanitize_html: bool = False
    custom_matchers: list[Matcher] = field(default_factory=list)


class Linker:
    """Finds linkable entities in HTML-bearing text and wraps them in anchors.

    Construction validates the whole configuration and raises
    ``ConfigurationError`` on bad options.  After that a Linker is
    stateless and may be shared between threads.
    """

    def __init__(self, config: LinkerConfig | None = None) -> None:
        self.config = config or LinkerConfig()
        self.matchers: list[Matcher] = _build_matchers(self.config)
        self.type_priority = _normalize_priority(self.config.type_priority)
        self.tag_builder = AnchorTagBuilder(
            new_window=self.config.new_window,
            class_name=self.config.class_name,
            truncate=self.config.truncate,
            strip_prefix=self.config.strip_prefix,
            strip_trailing_slash=self.config.strip_trailing_slash,
            decode_percent_encoding=self.config.decode_percent_encoding,
        )

    def parse(self, text: str) -> list[Match]:
        """Return the resolved, non-overlapping matches in ``text``."""
        pooled: list[Match] = []
        for node_text, offset in iter_text_nodes(text):
            if not node_text.strip():
                continue
            for matcher in self.matchers:
                pooled.extend(matcher.parse_matches(node_text, offset))
        return resolve_overlaps(pooled, self.type_priority)

    def link(
        self,
        text: str,
        replace_fn: Callable[[Match], ReplaceResult] | None = None,
    ) -> str:
        """Return ``text`` with every match replaced by an anchor tag."""
        if not text:
            return text
        if self.config.sanitize_html:
            text = escape_html(text)

        def transform(match: Match) -> str | _Skip:
            if replace_fn is not None:
                result = replace_fn(match)
                if result is SKIP or result is False:
                    return SKIP
                if isinstance(result, str):
                    return result
                if isinstance(result, HtmlTag):
                    return result.to_anchor_string()
                if result is not None and result is not True:
                    raise TypeError(
                        f"replace_fn returned {type(result).__name__}; expected "
                        "str, HtmlTag, bool, SKIP or None"
                    )
            return self.tag_builder.build(match).to_anchor_string()

        return replace_matches(text, self.parse(text), transform)


# ── Collector ────────────────────────────────────────────────────────

def resolve_overlaps(
    matches: Iterable[Match],
    type_priority: Sequence[MatchType] | None = None,
) -> list[Match]:
    """Pick a non-overlapping, offset-ordered subset of ``matches``.

    Sorted by offset, longer match first on a tie (then by ``type_priority``
    when given); a single left-to-right sweep then drops every match that
    starts before the previously accepted one ends.
    """
    matches = list(matches)
    if not matches:
        return []

    rank = {t: i for i, t in enumerate(type_priority or ())}
    ordered = sorted(
        matches,
        key=lambda m: (m.offset, -len(m.matched_text), rank.get(m.type, len(rank))),
    )

    result: list[Match] = []
    last_end = 0
    for match in ordered:
        if match.offset < last_end:
            continue
        result.append(match)
        last_end = match.end_offset

    logger.debug("Overlap resolution: %s -> %s matches", len(matches), len(result))
    return result


# ── Replacer ─────────────────────────────────────────────────────────

def replace_matches(
    text: str,
    matches: Iterable[Match],
    transform: Callable[[Match], str | _Skip],
) -> str:
    """Splice ``transform(match)`` into ``text`` at each match's span.

    ``matches`` must be sorted and non-overlapping (the output of
    ``resolve_overlaps``).  Text outside the spans is copied unchanged; a
    transform returning ``SKIP`` keeps the matched text as it was.
    """
    parts: list[str] = []
    cursor = 0
    for match in matches:
        if match.offset < cursor:
            raise ValueError(
                f"match at {match.offset} overlaps or precedes the previous match "
                f"ending at {cursor}"
            )
        parts.append(text[cursor:match.offset])
        replacement = transform(match)
        parts.append(match.matched_text if replacement is SKIP else replacement)
        cursor = match.end_offset
    parts.append(text[cursor:])
    return "".join(parts)


# ── Config → matchers ────────────────────────────────────────────────

def _build_matchers(config: LinkerConfig) -> list[Matcher]:
    matchers: list[Matcher] = []
    url_matcher = _build_url_matcher(config.urls)
    if url_matcher is not None:
        matchers.append(url_matcher)
    if config.email:
        matchers.append(EmailMatcher())
    if config.phone:
        matchers.append(PhoneMatcher())
    if config.mention:
        matchers.append(MentionMatcher(_service_name(config.mention, "mention")))
    if config.hashtag:
        matchers.append(HashtagMatcher(_service_name(config.hashtag, "hashtag")))
    matchers.extend(config.custom_matchers)
    logger.debug("Configured matchers: %s", [type(m).__name__ for m in matchers])
    return matchers


def _build_url_matcher(urls: bool | Mapping[str, bool]) -> UrlMatcher | None:
    if isinstance(urls, bool):
        return UrlMatcher() if urls else None
    if not isinstance(urls, Mapping):
        raise ConfigurationError(f"urls must be a bool or a mapping, got {type(urls).__name__}")

    unknown = set(urls) - _URL_OPTIONS
    if unknown:
        raise ConfigurationError(f"unknown urls options: {sorted(unknown)}")
    options = {key: bool(urls.get(key, True)) for key in _URL_OPTIONS - {"require_scheme"}}
    if urls.get("require_scheme"):
        conflicting = sorted(k for k in ("www_matches", "tld_matches", "ipv4_matches") if urls.get(k))
        if conflicting:
            raise ConfigurationError(
                f"require_scheme cannot be combined with {', '.join(conflicting)}"
            )
        options.update(www_matches=False, tld_matches=False, ipv4_matches=False)
    return UrlMatcher(**options)


def _service_name(value: str | bool, kind: str) -> str:
    if value is True:
        return "twitter"
    if isinstance(value, str):
        return value.lower()
    raise ConfigurationError(f"{kind} must be a service name or a bool, got {value!r}")


def _normalize_priority(priority: Sequence[str] | None) -> list[MatchType] | None:
    if priority is None:
        return None
    try:
        return [MatchType(p) for p in priority]
    except ValueError as e:
        raise ConfigurationError(f"unknown match type in type_priority: {e}") from None
