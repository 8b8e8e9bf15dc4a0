"""HTML walker: splits input into tag, comment, entity and text runs.

The nodes exactly tile the input: concatenating ``node.raw`` for every node
yielded by ``walk(html)`` gives back ``html``.  Only text runs are ever
offered to the matchers, so tags, attribute values and the entities that act
as word boundaries are never linked or altered.

Usage:
    for text, offset in iter_text_nodes('<p>Visit <b>example.com</b></p>'):
        ...   # ("Visit ", 3), ("example.com", 12)
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Iterator, Union

logger = logging.getLogger(__name__)

_MARKUP_RE = re.compile(
    r"<!--.*?(?:-->|\Z)"                                   # comment
    r"|<!\[CDATA\[.*?(?:\]\]>|\Z)"                         # CDATA
    r"|<![A-Za-z][^<>]*>"                                  # doctype
    r"|<(/)?([A-Za-z][A-Za-z0-9:\-]*)"                     # tag name
    r"((?:[^<>\"']|\"[^\"]*\"|'[^']*')*?)"                 # attributes
    r"(/)?>",
    re.DOTALL,
)

# Entities that separate words; a match never spans one of these.
_BOUNDARY_ENTITY_RE = re.compile(
    r"&(?:nbsp|lt|gt|quot|apos|#160|#xa0|#60|#x3c|#62|#x3e|#34|#x22|#39|#x27);",
    re.IGNORECASE,
)

# Content of these elements is never linked.
SKIP_ELEMENTS = frozenset({"a", "script", "style", "textarea"})
_RAW_TEXT_ELEMENTS = frozenset({"script", "style", "textarea"})


@dataclass(frozen=True, slots=True)
class TextNode:
    raw: str
    offset: int


@dataclass(frozen=True, slots=True)
class EntityNode:
    raw: str
    offset: int


@dataclass(frozen=True, slots=True)
class CommentNode:
    raw: str
    offset: int


@dataclass(frozen=True, slots=True)
class TagNode:
    raw: str
    offset: int
    name: str               # lower-cased
    closing: bool = False
    self_closing: bool = False


HtmlNode = Union[TextNode, EntityNode, CommentNode, TagNode]


def walk(html: str) -> Iterator[HtmlNode]:
    """Yield the nodes of ``html`` in document order."""
    pos = 0
    n = len(html)
    while pos < n:
        m = _MARKUP_RE.search(html, pos)
        if m is None:
            break
        if m.start() > pos:
            yield from _split_text(html[pos:m.start()], pos)
        pos = m.end()
        if m.group(2) is None:
            yield CommentNode(m.group(), m.start())
            continue

        tag = TagNode(
            m.group(),
            m.start(),
            name=m.group(2).lower(),
            closing=m.group(1) is not None,
            self_closing=m.group(4) is not None,
        )
        yield tag
        if tag.name in _RAW_TEXT_ELEMENTS and not (tag.closing or tag.self_closing):
            # Content runs verbatim up to the matching close tag.
            close = re.compile(rf"</{tag.name}\s*>", re.IGNORECASE).search(html, pos)
            end = close.start() if close else n
            if end > pos:
                yield TextNode(html[pos:end], pos)
            pos = end
    if pos < n:
        yield from _split_text(html[pos:], pos)


def _split_text(text: str, offset: int) -> Iterator[HtmlNode]:
    pos = 0
    for m in _BOUNDARY_ENTITY_RE.finditer(text):
        if m.start() > pos:
            yield TextNode(text[pos:m.start()], offset + pos)
        yield EntityNode(m.group(), offset + m.start())
        pos = m.end()
    if pos < len(text):
        yield TextNode(text[pos:], offset + pos)


def iter_text_nodes(html: str) -> Iterator[tuple[str, int]]:
    """Yield ``(text, offset)`` for every text run that may be linked.

    Text inside ``<a>``, ``<script>``, ``<style>`` and ``<textarea>`` is
    skipped.  Nesting is depth-counted per element, so a stray closing tag
    never drives a depth below zero.
    """
    depth = dict.fromkeys(SKIP_ELEMENTS, 0)
    for node in walk(html):
        if isinstance(node, TagNode):
            if node.name in depth and not node.self_closing:
                if node.closing:
                    depth[node.name] = max(0, depth[node.name] - 1)
                else:
                    depth[node.name] += 1
        elif isinstance(node, TextNode):
            if any(depth.values()):
                logger.debug("skipping text node at %d inside %s", node.offset,
                             [name for name, d in depth.items() if d])
                continue
            yield node.raw, node.offset
