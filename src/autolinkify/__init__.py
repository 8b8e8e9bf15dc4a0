"""autolinkify: find URLs, emails, phone numbers, mentions and hashtags in
HTML-bearing text and turn them into anchor tags."""

from typing import Any

from .linker import Linker, LinkerConfig, SKIP, resolve_overlaps, replace_matches
from .matchers import EmailMatcher, HashtagMatcher, MentionMatcher, PhoneMatcher, UrlMatcher
from .tag_builder import AnchorTagBuilder, HtmlTag, css_class_suffixes
from .config import create_linker, load_config, load_from_yaml
from .types import (
    ConfigurationError,
    EmailMatch,
    HashtagMatch,
    Match,
    MatchType,
    MentionMatch,
    PhoneMatch,
    UrlMatch,
)


def link(text: str, replace_fn=None, **options: Any) -> str:
    """One-shot convenience: ``link("see example.com", class_name="x")``."""
    return Linker(LinkerConfig(**options)).link(text, replace_fn)


def parse(text: str, **options: Any) -> list:
    """One-shot convenience returning the resolved matches."""
    return Linker(LinkerConfig(**options)).parse(text)


__all__ = [
    "link", "parse",
    "Linker", "LinkerConfig", "SKIP",
    "resolve_overlaps", "replace_matches",
    "UrlMatcher", "EmailMatcher", "PhoneMatcher", "MentionMatcher", "HashtagMatcher",
    "AnchorTagBuilder", "HtmlTag", "css_class_suffixes",
    "create_linker", "load_config", "load_from_yaml",
    "ConfigurationError", "Match", "MatchType",
    "UrlMatch", "EmailMatch", "PhoneMatch", "MentionMatch", "HashtagMatch",
]
__version__ = "0.1.0"
