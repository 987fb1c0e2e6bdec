"""Serialization utilities for Subtext documents."""

from .serialize import (
    attributes_to_list,
    document_to_dict,
    headers_to_dict,
    inline_to_dict,
    to_json,
    to_yaml,
)

__all__ = [
    "attributes_to_list",
    "document_to_dict",
    "headers_to_dict",
    "inline_to_dict",
    "to_json",
    "to_yaml",
]
