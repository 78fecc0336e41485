"""
Text bridges for Documents.

The Document model has no text format of its own. These helpers hand the
decoded tree to the standard json module or PyYAML and encode whatever
they parse back into a Document.

Object key order is preserved both ways. Integers read from text are
split into Int/UInt exactly as encode() does for host ints.
"""
from __future__ import annotations

import json
from typing import Optional

import yaml

from hostbridge.converter import decode, encode
from hostbridge.document import Document


def document_to_json(doc: Document, *, sort_keys: bool = False, indent: Optional[int] = None) -> str:
    """
    Write a Document as standard JSON text.

    Raises:
        ValueError: for Float nan/inf, which JSON cannot represent
    """
    return json.dumps(decode(doc), sort_keys=sort_keys, indent=indent, allow_nan=False)


def document_from_json(s: str) -> Document:
    # Repeated keys in the text: dict() keeps the last value.
    return encode(json.loads(s, object_pairs_hook=dict))


def document_to_yaml(doc: Document) -> str:
    return yaml.safe_dump(decode(doc), sort_keys=False, allow_unicode=True)


def document_from_yaml(s: str) -> Document:
    """
    Parse YAML text into a Document.

    Raises:
        UnsupportedTypeError: for YAML scalars with no Document case
            (timestamps, sets)
    """
    return encode(yaml.safe_load(s))
