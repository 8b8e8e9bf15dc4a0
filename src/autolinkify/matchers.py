"""Per-type matchers.

Each matcher scans a single text-node string (no markup) and returns the
entities it finds, in offset order.  ``base_offset`` is the position of that
string within the full document, so every match is created with its final
global offset and never has to be moved afterwards.

Matchers are pure: they keep only their configuration, never raise for any
``str`` input, and are safe to share between threads.
"""

from __future__ import annotations
import re
from typing import Protocol

from .patterns import (
    DOMAIN_RE,
    EMAIL_BAD_PRECEDING,
    EMAIL_RE,
    HASHTAG_HREFS,
    HASHTAG_MAX_LEN,
    IPV4_RE,
    MENTION_SERVICES,
    PHONE_RE,
    SCHEME_RE,
    UNSAFE_SCHEMES,
    URL_PATH_CHARS,
    URL_TRAILING_PUNCT,
    WORD_CHAR_RE,
    is_known_tld,
    is_word_char,
)
from .types import (
    ConfigurationError,
    EmailMatch,
    HashtagMatch,
    Match,
    MentionMatch,
    PhoneMatch,
    UrlMatch,
)


class Matcher(Protocol):
    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]: ...


# ── URLs ─────────────────────────────────────────────────────────────

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}
_PORT_RE = re.compile(r":\d{1,5}(?!\d)")
# "user:password@" ahead of the host in a scheme URL.
_USERINFO_RE = re.compile(r"[^\s/?#@<>\"'()\[\]{}]+@")
# A bare domain/www match must not be glued to any of these.
_HOST_BAD_PRECEDING = frozenset(".-@/")


class UrlMatcher:
    """Finds scheme, ``www.``, bare-domain and IPv4 URLs.

    The host is matched with a regex; everything after it is consumed by an
    explicit scan that counts bracket depth, so a URL inside a parenthetical
    keeps its own balanced parens but never the enclosing close-paren.
    """

    __slots__ = ("scheme_matches", "www_matches", "tld_matches", "ipv4_matches")

    def __init__(
        self,
        *,
        scheme_matches: bool = True,
        www_matches: bool = True,
        tld_matches: bool = True,
        ipv4_matches: bool = True,
    ) -> None:
        if not (scheme_matches or www_matches or tld_matches or ipv4_matches):
            raise ConfigurationError(
                "UrlMatcher needs at least one of scheme_matches, www_matches, "
                "tld_matches or ipv4_matches enabled"
            )
        self.scheme_matches = scheme_matches
        self.www_matches = www_matches
        self.tld_matches = tld_matches
        self.ipv4_matches = ipv4_matches

    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]:
        matches: list[Match] = []
        pos = 0
        n = len(text)
        while pos < n:
            prev = text[pos - 1] if pos else ""
            if not is_word_char(text[pos]) or is_word_char(prev):
                pos += 1
                continue
            found = None
            if self.scheme_matches:
                found = self._match_scheme(text, pos)
            if found is None and prev not in _HOST_BAD_PRECEDING:
                found = self._match_schemeless(text, pos)
            if found is None:
                pos += 1
                continue

            end, url_type = found
            matched = text[pos:end]
            prepend = url_type != "scheme"
            matches.append(UrlMatch(
                matched_text=matched,
                offset=base_offset + pos,
                url=("http://" + matched) if prepend else matched,
                url_match_type=url_type,
                protocol_prepended=prepend,
            ))
            pos = end
        return matches

    def _match_scheme(self, text: str, pos: int) -> tuple[int, str] | None:
        m = SCHEME_RE.match(text, pos)
        if m is None:
            return None
        scheme = m.group()[:-3].lower()
        if scheme in UNSAFE_SCHEMES:
            return None
        host_start = m.end()
        userinfo = _USERINFO_RE.match(text, host_start)
        if userinfo is not None and DOMAIN_RE.match(text, userinfo.end()):
            host_start = userinfo.end()
        host = DOMAIN_RE.match(text, host_start)
        if host is None or _char_at(text, host.end()) == "@":
            return None
        end = _scan_port_and_path(text, host.end())
        return end, "scheme"

    def _match_schemeless(self, text: str, pos: int) -> tuple[int, str] | None:
        if self.ipv4_matches:
            ip = IPV4_RE.match(text, pos)
            if ip is not None and not is_word_char(_char_at(text, ip.end())):
                return _scan_port_and_path(text, ip.end()), "ipv4"

        host = DOMAIN_RE.match(text, pos)
        if host is None:
            return None
        domain = host.group()
        if _char_at(text, host.end()) == "@":
            return None        # local part of an email address
        if domain[:4].lower() == "www.":
            if not self.www_matches or "." not in domain[4:]:
                return None
            return _scan_port_and_path(text, host.end()), "www"

        if not self.tld_matches:
            return None
        # Drop trailing labels until the last one is a known TLD, so that
        # "example.com.Next" still yields "example.com".
        while "." in domain and not is_known_tld(domain):
            domain = domain.rsplit(".", 1)[0]
        if "." not in domain:
            return None
        return _scan_port_and_path(text, pos + len(domain)), "tld"


def _char_at(text: str, i: int) -> str:
    return text[i] if i < len(text) else ""


def _scan_port_and_path(text: str, pos: int) -> int:
    """Return the end of the URL whose host ends at ``pos``."""
    port = _PORT_RE.match(text, pos)
    if port is not None:
        pos = port.end()
    if _char_at(text, pos) not in ("/", "?", "#"):
        return pos

    depth = {opener: 0 for opener in _OPENERS}
    end = pos
    n = len(text)
    while end < n:
        ch = text[end]
        if ch in _OPENERS:
            depth[ch] += 1
        elif ch in _CLOSERS:
            opener = _CLOSERS[ch]
            if depth[opener] == 0:
                break          # closes something outside the URL
            depth[opener] -= 1
        elif not (ch in URL_PATH_CHARS or WORD_CHAR_RE.match(ch)):
            break
        end += 1

    while end > pos and text[end - 1] in URL_TRAILING_PUNCT:
        end -= 1
    return end


# ── Email ────────────────────────────────────────────────────────────

class EmailMatcher:
    """Finds ``local@domain.tld`` addresses, with an optional ``mailto:``."""

    __slots__ = ()

    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]:
        matches: list[Match] = []
        for m in EMAIL_RE.finditer(text):
            start, end = m.span()
            if start and EMAIL_BAD_PRECEDING.match(text[start - 1]):
                continue
            after = _char_at(text, end)
            if is_word_char(after) or after in ("@", "-"):
                continue
            matches.append(EmailMatch(
                matched_text=m.group(),
                offset=base_offset + start,
                email=f"{m.group(1)}@{m.group(2)}",
            ))
        return matches


# ── Phone ────────────────────────────────────────────────────────────

_NON_DIGIT = re.compile(r"\D")
_DIGITS_ONLY = re.compile(r"\d+")


class PhoneMatcher:
    """Finds phone numbers written with separators.

    ``matched_text`` keeps the punctuation exactly as written; the match's
    ``number`` is the digits alone.  A bare digit run such as ``1234567890``
    is not treated as a phone number.
    """

    __slots__ = ()

    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]:
        matches: list[Match] = []
        for m in PHONE_RE.finditer(text):
            start, end = m.span()
            if start and is_word_char(text[start - 1]):
                continue
            if is_word_char(_char_at(text, end)):
                continue
            number = m.group("number")
            if not _NON_DIGIT.search(number):
                continue

            matches.append(PhoneMatch(
                matched_text=m.group(),
                offset=base_offset + start,
                number="".join(_DIGITS_ONLY.findall(number)),
                plus_sign=bool(m.group("nanp_plus") or m.group("intl_plus")),
                extension=m.group("ext"),
            ))
        return matches


# ── Mentions and hashtags ────────────────────────────────────────────

class MentionMatcher:
    """Finds ``@handle`` mentions for one social-media service."""

    __slots__ = ("service", "_regex", "_char_re")

    def __init__(self, service: str = "twitter") -> None:
        if service not in MENTION_SERVICES:
            raise ConfigurationError(
                f"unknown mention service {service!r}; "
                f"expected one of {sorted(MENTION_SERVICES)}"
            )
        chars, max_len = MENTION_SERVICES[service]
        self.service = service
        self._regex = re.compile(rf"@({chars}{{1,{max_len}}})")
        self._char_re = re.compile(chars)

    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]:
        matches: list[Match] = []
        for m in self._regex.finditer(text):
            start, end = m.span()
            if start and is_word_char(text[start - 1]):
                continue
            if end < len(text) and self._char_re.match(text[end]):
                continue       # longer than the service allows
            name = m.group(1).rstrip(".")
            if not name:
                continue
            matches.append(MentionMatch(
                matched_text="@" + name,
                offset=base_offset + start,
                mention=name,
                service=self.service,
            ))
        return matches


_HASHTAG_RE = re.compile(
    rf"#({WORD_CHAR_RE.pattern}{{1,{HASHTAG_MAX_LEN}}})"
)


class HashtagMatcher:
    """Finds ``#tag`` hashtags.  All-digit tags (``#1``) are ignored."""

    __slots__ = ("service",)

    def __init__(self, service: str = "twitter") -> None:
        if service not in HASHTAG_HREFS:
            raise ConfigurationError(
                f"unknown hashtag service {service!r}; "
                f"expected one of {sorted(HASHTAG_HREFS)}"
            )
        self.service = service

    def parse_matches(self, text: str, base_offset: int = 0) -> list[Match]:
        matches: list[Match] = []
        for m in _HASHTAG_RE.finditer(text):
            start, end = m.span()
            if start and (is_word_char(text[start - 1]) or text[start - 1] == "&"):
                continue
            if is_word_char(_char_at(text, end)):
                continue
            tag = m.group(1)
            if tag.isdigit():
                continue
            matches.append(HashtagMatch(
                matched_text=m.group(),
                offset=base_offset + start,
                hashtag=tag,
                service=self.service,
            ))
        return matches
