"""
Projection of a parsed document onto abstract display attributes.

The result is an ordered list of ``(span, name, value)`` ranges that a UI
layer can replay onto its own rich-text type. Later ranges override earlier
ones for the same attribute name; nothing is merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Literal
from urllib.parse import urlsplit

from .address import SlashlinkURL, Slashlink, Slug
from .model import Block, Document, Inline, Span

AttributeName = Literal["font", "paragraph_spacing", "foreground", "background", "link"]

FONT_REGULAR = "regular"
FONT_BOLD = "bold"
FONT_ITALIC = "italic"
FOREGROUND_TEXT = "text"
FOREGROUND_MUTED = "muted"
BACKGROUND_CODE = "code"

DEFAULT_PARAGRAPH_SPACING = 4.0

Resolver = Callable[[str], Any]


@dataclass(frozen=True)
class AttributeRange:
    span: Span
    name: AttributeName
    value: Any


def url_target(text: str) -> str | None:
    """Accept absolute URLs such as ``https://example.com`` or ``mailto:a@b``."""
    parts = urlsplit(text)
    if not parts.scheme:
        return None
    if parts.scheme in ("http", "https") and not parts.netloc:
        return None
    return text


def slashlink_target(text: str) -> str | None:
    slashlink = Slashlink.parse(text)
    if slashlink is None:
        return None
    return SlashlinkURL(slashlink).to_url()


def wikilink_target(text: str) -> str | None:
    slug = Slug.format(text)
    if slug is None:
        return None
    return SlashlinkURL(Slashlink(slug), text=text).to_url()


class AttributeRenderer:
    """
    Turns documents into attribute ranges.

    With no resolver, web links resolve to themselves and shortlinks to
    ``sub://slashlink`` URLs. A custom ``resolver`` receives the address text
    of every link form (URL, bracketed URL, slashlink, wikilink text) and
    returns a navigation target or None.

    Args:
        resolver: Optional address text to target function
        paragraph_spacing: Value of the document-wide paragraph spacing
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        paragraph_spacing: float = DEFAULT_PARAGRAPH_SPACING,
    ):
        self.resolver = resolver
        self.paragraph_spacing = paragraph_spacing
        self._blocks = {
            "text": self._plain_block,
            "list": self._plain_block,
            "empty": self._plain_block,
            "heading": self._heading,
            "quote": self._quote,
        }
        self._inline = {
            "link": self._link,
            "bracketlink": self._bracketlink,
            "slashlink": self._slashlink,
            "wikilink": self._wikilink,
            "bold": self._bold,
            "italic": self._italic,
            "code": self._code,
        }

    def _resolve(self, text: str, default: Callable[[str], str | None]) -> Any:
        if self.resolver is not None:
            return self.resolver(text)
        return default(text)

    def render(self, document: Document) -> list[AttributeRange]:
        whole = Span(document.base, 0, len(document.base))
        out = [
            AttributeRange(whole, "font", FONT_REGULAR),
            AttributeRange(whole, "paragraph_spacing", self.paragraph_spacing),
            AttributeRange(whole, "foreground", FOREGROUND_TEXT),
        ]
        for block in document.blocks:
            out.extend(self._blocks[block.kind](block))
            for inline in block.inline:
                out.extend(self._inline[inline.kind](inline))
        return out

    def _plain_block(self, block: Block) -> list[AttributeRange]:
        return []

    def _heading(self, block: Block) -> list[AttributeRange]:
        return [AttributeRange(block.span, "font", FONT_BOLD)]

    def _quote(self, block: Block) -> list[AttributeRange]:
        return [AttributeRange(block.span, "font", FONT_ITALIC)]

    def _bold(self, inline: Inline) -> list[AttributeRange]:
        return [AttributeRange(inline.span, "font", FONT_BOLD)]

    def _italic(self, inline: Inline) -> list[AttributeRange]:
        return [AttributeRange(inline.span, "font", FONT_ITALIC)]

    def _code(self, inline: Inline) -> list[AttributeRange]:
        return [AttributeRange(inline.span, "background", BACKGROUND_CODE)]

    def _link(self, inline: Inline) -> list[AttributeRange]:
        target = self._resolve(inline.span.text, url_target)
        if target is None:
            return []
        return [AttributeRange(inline.span, "link", target)]

    def _slashlink(self, inline: Inline) -> list[AttributeRange]:
        target = self._resolve(inline.span.text, slashlink_target)
        if target is None:
            return []
        return [AttributeRange(inline.span, "link", target)]

    def _delimited_link(self, inline: Inline, target: Any) -> list[AttributeRange]:
        if target is None:
            return []
        return [
            AttributeRange(inline.span, "foreground", FOREGROUND_MUTED),
            AttributeRange(inline.body, "link", target),
        ]

    def _bracketlink(self, inline: Inline) -> list[AttributeRange]:
        return self._delimited_link(inline, self._resolve(inline.body.text, url_target))

    def _wikilink(self, inline: Inline) -> list[AttributeRange]:
        return self._delimited_link(inline, self._resolve(inline.body.text, wikilink_target))


def project_attributes(
    document: Document,
    resolver: Resolver | None = None,
    paragraph_spacing: float = DEFAULT_PARAGRAPH_SPACING,
) -> list[AttributeRange]:
    return AttributeRenderer(resolver, paragraph_spacing).render(document)


def effective_attributes(ranges: Iterable[AttributeRange], index: int) -> dict[str, Any]:
    """Attributes in force at ``index`` after replaying ``ranges`` in order."""
    out: dict[str, Any] = {}
    for attr in ranges:
        if attr.span.contains(index):
            out[attr.name] = attr.value
    return out
