"""Excerpts, titles and summaries derived from a document."""

from __future__ import annotations

from .model import Block, Document, Summary

EXCERPT_LIMIT = 512


def _content_blocks(document: Document) -> list[Block]:
    return [block for block in document.blocks if not block.is_empty]


def excerpt(document: Document, fallback: str = "", limit: int = EXCERPT_LIMIT) -> str:
    """
    Short plain-text preview of a document.

    Only the first ``limit`` characters of the source are considered. The
    bodies of the first two non-empty blocks are joined with a newline.

    Args:
        document: Parsed document
        fallback: Returned when the document has no content
        limit: Number of source characters to look at

    Returns:
        Excerpt text, or ``fallback``
    """
    if len(document.base) > limit:
        document = Document.parse(document.base[:limit])
    bodies = [block.body().text for block in _content_blocks(document)[:2]]
    text = "\n".join(bodies)
    return text if text else fallback


def derive_title(document: Document) -> str:
    """Body of the first block, empty if the document is empty."""
    if not document.blocks:
        return ""
    return document.blocks[0].body().text


def summarize(document: Document) -> Summary:
    blocks = _content_blocks(document)
    title = blocks[0].body().text if len(blocks) > 0 else None
    text = blocks[1].body().text if len(blocks) > 1 else None
    return Summary(title=title, excerpt=text)
