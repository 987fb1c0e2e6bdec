from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .headers import Headers, WellKnownHeaders

BlockKind = Literal["text", "list", "quote", "heading", "empty"]
InlineKind = Literal[
    "link", "bracketlink", "slashlink", "wikilink", "bold", "italic", "code"
]

SHORTLINK_KINDS: frozenset[str] = frozenset({"slashlink", "wikilink"})

# Characters trimmed off each end of an inline span to get its body.
_INLINE_DELIMITERS: dict[str, tuple[int, int]] = {
    "link": (0, 0),
    "bracketlink": (1, 1),
    "slashlink": (1, 0),
    "wikilink": (2, 2),
    "bold": (1, 1),
    "italic": (1, 1),
    "code": (1, 1),
}

# Leading sigil width per block kind.
_BLOCK_SIGILS: dict[str, int] = {
    "text": 0,
    "list": 1,
    "quote": 1,
    "heading": 1,
    "empty": 0,
}


@dataclass(frozen=True)
class Span:
    """A half-open ``[start, end)`` range of characters in ``base``.

    Offsets count Python string indices, i.e. Unicode code points.
    """

    base: str = field(repr=False)
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.base[self.start : self.end]

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return self.end - self.start

    def drop_first(self, n: int = 1) -> Span:
        return Span(self.base, min(self.start + n, self.end), self.end)

    def drop_last(self, n: int = 1) -> Span:
        return Span(self.base, self.start, max(self.end - n, self.start))

    def lstrip(self, chars: str = " ") -> Span:
        start = self.start
        while start < self.end and self.base[start] in chars:
            start += 1
        return Span(self.base, start, self.end)

    def rstrip(self, chars: str = " ") -> Span:
        end = self.end
        while end > self.start and self.base[end - 1] in chars:
            end -= 1
        return Span(self.base, self.start, end)

    def strip(self, chars: str = " ") -> Span:
        return self.lstrip(chars).rstrip(chars)

    def contains(self, index: int) -> bool:
        return self.start <= index < self.end


@dataclass(frozen=True)
class Inline:
    kind: InlineKind
    span: Span

    @property
    def body(self) -> Span:
        """The span without its delimiters, e.g. ``cats`` for ``[[cats]]``."""
        head, tail = _INLINE_DELIMITERS[self.kind]
        return self.span.drop_first(head).drop_last(tail)

    @property
    def text(self) -> str:
        return self.span.text

    @property
    def is_shortlink(self) -> bool:
        return self.kind in SHORTLINK_KINDS

    def __str__(self) -> str:
        return self.span.text


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    span: Span  # the whole line, sigil included, line break excluded
    inline: tuple[Inline, ...] = ()

    def body(self) -> Span:
        """Line content without the block sigil and surrounding spaces.

        Sigil blocks drop the sigil first; spaces are then trimmed from both
        ends.
        """
        if self.kind == "empty":
            return self.span
        if self.kind == "text":
            return self.span.strip(" ")
        return self.span.drop_first(_BLOCK_SIGILS[self.kind]).strip(" ")

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"


@dataclass(frozen=True, eq=False)
class Document:
    """A parsed Subtext document.

    Two documents are equal when their source text is equal; the block list
    is fully determined by ``base``.
    """

    base: str
    blocks: tuple[Block, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.base == other.base

    def __hash__(self) -> int:
        return hash(self.base)

    def __str__(self) -> str:
        return self.base

    @classmethod
    def parse(cls, markup: str) -> Document:
        from .subtext import parse_document

        return parse_document(markup)

    @property
    def inline(self) -> list[Inline]:
        return [inline for block in self.blocks for inline in block.inline]

    def to_markup(self) -> str:
        return "\n".join(block.span.text for block in self.blocks)

    def append(self, other: Document) -> Document:
        return Document.parse(f"{self.base}\n\n{other.base}")


@dataclass(frozen=True)
class Summary:
    title: str | None = None
    excerpt: str | None = None


@dataclass
class Memo:
    slug: str
    headers: Headers
    body: Document
    fallback: WellKnownHeaders | None = None

    @property
    def well_known(self) -> WellKnownHeaders:
        from .headers import WellKnownHeaders

        return WellKnownHeaders.from_headers(
            self.headers, self.fallback or WellKnownHeaders.for_slug(self.slug)
        )

    def to_markup(self) -> str:
        from .headers import HeaderSubtext

        return str(HeaderSubtext(self.headers, self.body))
