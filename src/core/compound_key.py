"""Compound store key parsing.

Keys take the form ``!<type>!<id>`` for top-level documents and
``!<parentType>.<childType>!<parentId>.<childId>`` for embedded ones.
"""

from __future__ import annotations

import re

from core.constants import FOLDER_TYPE
from core.errors import MalformedKeyError
from core.types import ParsedKey

_KEY_PATTERN = re.compile(r"!([^!]+)!(.+)", re.DOTALL)
_FOLDER_KEY_PREFIX = f"!{FOLDER_TYPE}!"


def parse_key(key: object) -> ParsedKey:
    """Parse a compound store key.

    Args:
        key: Raw store key.

    Returns:
        Decomposed key.

    Raises:
        MalformedKeyError: If the key does not follow the compound-key grammar.
    """
    if not isinstance(key, str):
        raise MalformedKeyError(f"Invalid store key {key!r}: expected a string.")
    match = _KEY_PATTERN.fullmatch(key)
    if match is None:
        raise MalformedKeyError(
            f"Invalid store key '{key}': expected '!<type>!<id>' "
            "or '!<type>.<subtype>!<parentId>.<childId>'."
        )
    type_segment, id_segment = match.groups()
    if "." not in type_segment:
        if "." in id_segment:
            raise MalformedKeyError(
                f"Invalid store key '{key}': only embedded keys may contain '.' in the id."
            )
        return ParsedKey(type_segment=type_segment, id_segment=id_segment, is_embedded=False)
    parent_type, _, child_type = type_segment.partition(".")
    parent_id, _, child_id = id_segment.partition(".")
    if not (parent_type and child_type and parent_id and child_id):
        raise MalformedKeyError(
            f"Invalid embedded key '{key}': parent and child halves must both be non-empty."
        )
    return ParsedKey(
        type_segment=type_segment,
        id_segment=id_segment,
        is_embedded=True,
        parent_type=parent_type,
        child_type=child_type,
        parent_id=parent_id,
        child_id=child_id,
    )


def compose_key(type_name: str, document_id: str) -> str:
    """Compose a store key from type and id segments.

    Raises:
        MalformedKeyError: If either segment cannot form a valid key.
    """
    if not type_name or "!" in type_name:
        raise MalformedKeyError(
            f"Invalid key type '{type_name}': expected a non-empty value without '!'."
        )
    if not document_id:
        raise MalformedKeyError(f"Invalid key id for type '{type_name}': expected a value.")
    return f"!{type_name}!{document_id}"


def is_folder_key(key: str) -> bool:
    """Return whether a key addresses a folder document."""
    return key.startswith(_FOLDER_KEY_PREFIX)
