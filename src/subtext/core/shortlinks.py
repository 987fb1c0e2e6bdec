"""Shortlink (slashlink and wikilink) discovery and cursor lookup."""

from __future__ import annotations

from typing import Callable

from .address import Slug, slashlink_to_slug, wikilink_to_slug
from .model import Document, Inline

SlugMaker = Callable[[str], Slug | None]


def shortlinks(document: Document) -> list[Inline]:
    """All slashlinks and wikilinks in document order, repeats included."""
    return [inline for inline in document.inline if inline.is_shortlink]


collect_shortlinks = shortlinks


def slashlinks(document: Document) -> list[Inline]:
    return [inline for inline in document.inline if inline.kind == "slashlink"]


def wikilinks(document: Document) -> list[Inline]:
    return [inline for inline in document.inline if inline.kind == "wikilink"]


def shortlink_to_slug(
    inline: Inline,
    wikilink_slug: SlugMaker = wikilink_to_slug,
    slashlink_slug: SlugMaker = slashlink_to_slug,
) -> Slug | None:
    if inline.kind == "wikilink":
        return wikilink_slug(inline.body.text)
    if inline.kind == "slashlink":
        return slashlink_slug(inline.body.text)
    return None


def collect_links(
    document: Document,
    wikilink_slug: SlugMaker = wikilink_to_slug,
    slashlink_slug: SlugMaker = slashlink_to_slug,
) -> list[Slug]:
    """
    Slugs of every shortlink in document order.

    Repeats are kept; shortlinks whose text does not make a valid slug are
    left out.
    """
    out = []
    for inline in shortlinks(document):
        slug = shortlink_to_slug(inline, wikilink_slug, slashlink_slug)
        if slug is not None:
            out.append(slug)
    return out


def collect_slugs(
    document: Document,
    wikilink_slug: SlugMaker = wikilink_to_slug,
    slashlink_slug: SlugMaker = slashlink_to_slug,
) -> set[Slug]:
    return set(collect_links(document, wikilink_slug, slashlink_slug))


def _lookup_end(inline: Inline) -> int:
    # A wikilink being typed is matched before its closing brackets.
    if inline.kind == "wikilink":
        return inline.body.end
    return inline.span.end


def find_inline_at(document: Document, index: int, kind: str | None = None) -> Inline | None:
    """
    Find the shortlink that ends at ``index``.

    Used to answer "which link is the cursor at the end of". Wikilinks end
    before their ``]]``, slashlinks at the end of their span. The first match
    in document order wins.

    Args:
        document: Parsed document
        index: Character offset into ``document.base``
        kind: Restrict to ``"wikilink"`` or ``"slashlink"``

    Returns:
        The matching inline, or None
    """
    for inline in shortlinks(document):
        if kind is not None and inline.kind != kind:
            continue
        if _lookup_end(inline) == index:
            return inline
    return None


def find_inline_for_range(
    document: Document, selection: tuple[int, int], kind: str | None = None
) -> Inline | None:
    """Like find_inline_at, for a selection; its lower bound is used."""
    start, _ = selection
    return find_inline_at(document, start, kind)


def wikilink_for(document: Document, index: int) -> Inline | None:
    return find_inline_at(document, index, "wikilink")


def slashlink_for(document: Document, index: int) -> Inline | None:
    return find_inline_at(document, index, "slashlink")


def shortlink_for(document: Document, index: int) -> Inline | None:
    return find_inline_at(document, index)
