"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union


class ConfigurationError(ValueError):
    """Invalid or mutually exclusive options passed at construction time."""


class MatchType(str, Enum):
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    MENTION = "mention"
    HASHTAG = "hashtag"


@dataclass(frozen=True, slots=True)
class _MatchBase:
    """Header shared by every match: where it is and what was found."""
    matched_text: str      # literal substring of the input
    offset: int            # index into the full input string

    @property
    def end_offset(self) -> int:
        return self.offset + len(self.matched_text)

    def with_offset(self, offset: int):
        """Return a copy of this match moved to ``offset``."""
        return replace(self, offset=offset)


@dataclass(frozen=True, slots=True)
class UrlMatch(_MatchBase):
    url: str                       # href form, scheme prepended if missing
    url_match_type: str = "scheme"  # "scheme" | "www" | "tld" | "ipv4"
    protocol_prepended: bool = False
    type = MatchType.URL


@dataclass(frozen=True, slots=True)
class EmailMatch(_MatchBase):
    email: str
    type = MatchType.EMAIL


@dataclass(frozen=True, slots=True)
class PhoneMatch(_MatchBase):
    number: str                    # digits only, e.g. "1234567890"
    plus_sign: bool = False
    extension: str | None = None
    type = MatchType.PHONE


@dataclass(frozen=True, slots=True)
class MentionMatch(_MatchBase):
    mention: str                   # without the leading "@"
    service: str = "twitter"
    type = MatchType.MENTION


@dataclass(frozen=True, slots=True)
class HashtagMatch(_MatchBase):
    hashtag: str                   # without the leading "#"
    service: str = "twitter"
    type = MatchType.HASHTAG


Match = Union[UrlMatch, EmailMatch, PhoneMatch, MentionMatch, HashtagMatch]
