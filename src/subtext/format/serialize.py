"""Plain-data views of parsed documents for JSON and YAML output."""

import io
import json
from typing import Any, Iterable

import yaml

from ..core.attributes import AttributeRange
from ..core.headers import Headers
from ..core.model import Block, Document, Inline, Span


def span_to_dict(span: Span) -> dict[str, Any]:
    return {"start": span.start, "end": span.end, "text": span.text}


def inline_to_dict(inline: Inline) -> dict[str, Any]:
    return {
        "kind": inline.kind,
        "span": span_to_dict(inline.span),
        "body": inline.body.text,
    }


def block_to_dict(block: Block) -> dict[str, Any]:
    return {
        "kind": block.kind,
        "span": span_to_dict(block.span),
        "body": block.body().text,
        "inline": [inline_to_dict(inline) for inline in block.inline],
    }


def document_to_dict(document: Document, include_empty: bool = True) -> dict[str, Any]:
    """
    Convert a document to nested dicts and lists.

    Args:
        document: Parsed document
        include_empty: Keep blank-line blocks in the output

    Returns:
        ``{"blocks": [...]}`` with spans as character offsets into the source
    """
    blocks = [
        block_to_dict(block)
        for block in document.blocks
        if include_empty or not block.is_empty
    ]
    return {"blocks": blocks}


def headers_to_dict(headers: Headers) -> list[dict[str, str]]:
    # A list, not a mapping: order and duplicates are significant
    return [{"name": h.name, "value": h.value} for h in headers]


def attributes_to_list(ranges: Iterable[AttributeRange]) -> list[dict[str, Any]]:
    return [
        {
            "start": attr.span.start,
            "end": attr.span.end,
            "name": attr.name,
            "value": attr.value,
        }
        for attr in ranges
    ]


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def to_yaml(data: Any) -> str:
    buf = io.StringIO()
    yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
    return buf.getvalue()
