"""Anchor tag construction.

Usage:
    builder = AnchorTagBuilder(class_name="link", truncate=25)
    tag = builder.build(match)
    tag.add_class("extra")
    tag.to_anchor_string()   # '<a href="..." class="link link-url extra" ...>...</a>'

Everything that depends on the concrete match variant lives in the three
dispatch functions ``anchor_href``, ``anchor_text`` and
``css_class_suffixes``; each handles every variant explicitly.
"""

from __future__ import annotations
import re
from typing import Any, Mapping
from urllib.parse import unquote

from .patterns import HASHTAG_HREFS, MENTION_HREFS
from .truncate import LOCATIONS, truncate_text
from .types import (
    ConfigurationError,
    EmailMatch,
    HashtagMatch,
    Match,
    MentionMatch,
    PhoneMatch,
    UrlMatch,
)


class HtmlTag:
    """Minimal element builder used to serialize anchors."""

    __slots__ = ("tag_name", "attrs", "inner_html")

    def __init__(
        self,
        tag_name: str = "a",
        attrs: dict[str, str] | None = None,
        inner_html: str = "",
    ) -> None:
        self.tag_name = tag_name
        self.attrs: dict[str, str] = dict(attrs or {})
        self.inner_html = inner_html

    def set_attr(self, name: str, value: str) -> "HtmlTag":
        self.attrs[name] = value
        return self

    def get_attr(self, name: str) -> str | None:
        return self.attrs.get(name)

    def set_inner_html(self, html: str) -> "HtmlTag":
        self.inner_html = html
        return self

    def get_classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    def has_class(self, name: str) -> bool:
        return name in self.get_classes()

    def add_class(self, *names: str) -> "HtmlTag":
        classes = self.get_classes()
        for name in names:
            for cls in name.split():
                if cls not in classes:
                    classes.append(cls)
        self.attrs["class"] = " ".join(classes)
        return self

    def remove_class(self, *names: str) -> "HtmlTag":
        classes = [c for c in self.get_classes() if c not in names]
        if classes:
            self.attrs["class"] = " ".join(classes)
        else:
            self.attrs.pop("class", None)
        return self

    def to_anchor_string(self) -> str:
        attrs = "".join(
            f' {name}="{escape_html(value, quote=True)}"' for name, value in self.attrs.items()
        )
        return f"<{self.tag_name}{attrs}>{self.inner_html}</{self.tag_name}>"

    __str__ = to_anchor_string


def escape_html(text: str, quote: bool = False) -> str:
    """Escape ``<`` and ``>`` (and ``"`` when ``quote``), leaving ``&`` alone.

    Matched text comes out of HTML text nodes, so entities such as ``&amp;``
    are already encoded and must not be encoded a second time.
    """
    text = text.replace("<", "&lt;").replace(">", "&gt;")
    if quote:
        text = text.replace('"', "&quot;")
    return text


# ── Per-variant dispatch ─────────────────────────────────────────────

def css_class_suffixes(match: Match) -> list[str]:
    """Class suffixes appended to the configured class name."""
    if isinstance(match, MentionMatch):
        return ["mention", f"mention-{match.service}"]
    if isinstance(match, (UrlMatch, EmailMatch, PhoneMatch, HashtagMatch)):
        return [match.type.value]
    raise TypeError(f"not a match: {match!r}")


def anchor_href(match: Match) -> str:
    if isinstance(match, UrlMatch):
        return match.url
    if isinstance(match, EmailMatch):
        return "mailto:" + match.email
    if isinstance(match, PhoneMatch):
        href = "tel:" + ("+" if match.plus_sign else "") + match.number
        if match.extension:
            href += ";ext=" + match.extension
        return href
    if isinstance(match, MentionMatch):
        return MENTION_HREFS[match.service].format(match.mention)
    if isinstance(match, HashtagMatch):
        return HASHTAG_HREFS[match.service].format(match.hashtag)
    raise TypeError(f"not a match: {match!r}")


_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_WWW_PREFIX = re.compile(r"^((?:[A-Za-z][A-Za-z0-9+.\-]*://)?)www\.", re.IGNORECASE)


def anchor_text(
    match: Match,
    *,
    strip_scheme: bool = True,
    strip_www: bool = True,
    strip_trailing_slash: bool = True,
    decode_percent_encoding: bool = True,
) -> str:
    """Display text for ``match``, before truncation and escaping."""
    if isinstance(match, UrlMatch):
        text = match.matched_text
        if strip_scheme:
            text = _SCHEME_PREFIX.sub("", text)
        if strip_www:
            text = _WWW_PREFIX.sub(r"\1", text)
        if strip_trailing_slash and text.endswith("/") and text != "/":
            text = text[:-1]
        if decode_percent_encoding:
            text = _decode_percent(text)
        return text
    if isinstance(match, EmailMatch):
        return match.email
    if isinstance(match, (PhoneMatch, MentionMatch, HashtagMatch)):
        return match.matched_text
    raise TypeError(f"not a match: {match!r}")


def _decode_percent(text: str) -> str:
    """Decode %XX escapes unless they hide markup characters or whitespace."""
    if "%" not in text:
        return text
    try:
        decoded = unquote(text, errors="strict")
    except UnicodeDecodeError:
        return text
    if any(ch in decoded and ch not in text for ch in "<>\"'& "):
        return text
    return decoded


# ── Builder ──────────────────────────────────────────────────────────

class AnchorTagBuilder:
    """Turns a finished match into an ``<a>`` tag."""

    __slots__ = (
        "new_window",
        "class_name",
        "truncate_length",
        "truncate_location",
        "strip_scheme",
        "strip_www",
        "strip_trailing_slash",
        "decode_percent_encoding",
    )

    def __init__(
        self,
        *,
        new_window: bool = True,
        class_name: str = "",
        truncate: int | Mapping[str, Any] | None = None,
        strip_prefix: bool | Mapping[str, bool] = True,
        strip_trailing_slash: bool = True,
        decode_percent_encoding: bool = True,
    ) -> None:
        self.new_window = new_window
        self.class_name = class_name.strip()
        self.truncate_length, self.truncate_location = _normalize_truncate(truncate)
        self.strip_scheme, self.strip_www = _normalize_strip_prefix(strip_prefix)
        self.strip_trailing_slash = strip_trailing_slash
        self.decode_percent_encoding = decode_percent_encoding

    def build(self, match: Match) -> HtmlTag:
        tag = HtmlTag("a", {"href": anchor_href(match)})
        if self.class_name:
            tag.add_class(self.class_name, *(
                f"{self.class_name}-{suffix}" for suffix in css_class_suffixes(match)
            ))
        if self.new_window:
            tag.set_attr("target", "_blank")
            tag.set_attr("rel", "noopener noreferrer")

        text = anchor_text(
            match,
            strip_scheme=self.strip_scheme,
            strip_www=self.strip_www,
            strip_trailing_slash=self.strip_trailing_slash,
            decode_percent_encoding=self.decode_percent_encoding,
        )
        text = truncate_text(text, self.truncate_length, self.truncate_location)
        return tag.set_inner_html(escape_html(text))


def _normalize_truncate(
    truncate: int | Mapping[str, Any] | None,
) -> tuple[int | None, str]:
    if truncate is None:
        return None, "end"
    if isinstance(truncate, Mapping):
        length = truncate.get("length")
        location = truncate.get("location", "end")
    else:
        length, location = truncate, "end"
    if length is not None and (not isinstance(length, int) or length < 0):
        raise ConfigurationError(f"truncate length must be a non-negative int, got {length!r}")
    if location not in LOCATIONS:
        raise ConfigurationError(
            f"unknown truncate location {location!r}; expected one of {LOCATIONS}"
        )
    return length or None, location


def _normalize_strip_prefix(strip_prefix: bool | Mapping[str, bool]) -> tuple[bool, bool]:
    if isinstance(strip_prefix, bool):
        return strip_prefix, strip_prefix
    if isinstance(strip_prefix, Mapping):
        unknown = set(strip_prefix) - {"scheme", "www"}
        if unknown:
            raise ConfigurationError(f"unknown strip_prefix keys: {sorted(unknown)}")
        return bool(strip_prefix.get("scheme", True)), bool(strip_prefix.get("www", True))
    raise ConfigurationError(
        f"strip_prefix must be a bool or a mapping, got {type(strip_prefix).__name__}"
    )
