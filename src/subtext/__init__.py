"""Subtext markup engine: parse notes, derive excerpts, links and display attributes."""

__version__ = "0.3.0"

from .core.attributes import AttributeRange, effective_attributes, project_attributes
from .core.excerpt import excerpt, summarize
from .core.headers import Header, Headers, HeaderSubtext, WellKnownHeaders, parse_headers_and_body
from .core.model import Block, Document, Inline, Span
from .core.shortlinks import collect_links, collect_shortlinks, collect_slugs, find_inline_at
from .core.subtext import parse_document

__all__ = [
    "__version__",
    "AttributeRange",
    "Block",
    "Document",
    "Header",
    "HeaderSubtext",
    "Headers",
    "Inline",
    "Span",
    "WellKnownHeaders",
    "collect_links",
    "collect_shortlinks",
    "collect_slugs",
    "effective_attributes",
    "excerpt",
    "find_inline_at",
    "parse_document",
    "parse_headers_and_body",
    "project_attributes",
    "summarize",
]
