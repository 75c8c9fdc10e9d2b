"""
Shape discovery for upstream payloads: envelope flattening, collection
discovery and pagination-metadata harvesting.

All three are bounded: discovery stops at ``MAX_COLLECTION_DEPTH`` and
harvesting never visits the same record twice.
"""
from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Set

ENVELOPE_KEYS = ("node", "comment", "value", "payload", "data")

COLLECTION_KEYS = (
    "items",
    "comments",
    "data",
    "results",
    "records",
    "collection",
    "list",
    "edges",
    "nodes",
    "docs",
    "entries",
    "values",
    "payload",
    "response",
    "children",
    "elements",
    "rows",
)

METADATA_KEYS = (
    "comments",
    "data",
    "results",
    "collection",
    "records",
    "list",
    "pagination",
    "pageInfo",
    "page_info",
    "meta",
    "metadata",
    "info",
    "links",
)

MAX_COLLECTION_DEPTH = 4


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _should_override(merged: Dict[str, Any], key: str, nested_value: Any) -> bool:
    if key not in merged or merged[key] is None:
        return True
    # A blank string only yields to a non-blank string, never to other types.
    return _is_blank(merged[key]) and isinstance(nested_value, str) and not _is_blank(nested_value)


def expand_entry(entry: Any) -> Optional[Dict[str, Any]]:
    """
    Flatten well-known wrapper keys into a copy of ``entry``.

    Wrappers are read from the accumulating record, in ``ENVELOPE_KEYS``
    order, so a later wrapper can still fill gaps an earlier one left.
    Returns ``None`` for anything that is not a record.
    """
    if not isinstance(entry, dict):
        return None

    merged: Dict[str, Any] = dict(entry)
    for wrapper in ENVELOPE_KEYS:
        nested = merged.get(wrapper)
        if not isinstance(nested, dict):
            continue
        for key, value in list(nested.items()):
            if _should_override(merged, key, value):
                merged[key] = value
    return merged


def find_first_array(value: Any, depth: int = 0) -> List[Any]:
    """Locate the first non-empty list of entities inside an unknown payload."""
    if isinstance(value, list):
        return value
    if not isinstance(value, dict) or depth >= MAX_COLLECTION_DEPTH:
        return []

    for key in COLLECTION_KEYS:
        if key not in value:
            continue
        found = find_first_array(value[key], depth + 1)
        if found:
            return found

    for key, candidate in value.items():
        if key in COLLECTION_KEYS:
            continue
        found = find_first_array(candidate, depth + 1)
        if found:
            return found

    return []


def gather_metadata_sources(value: Any) -> List[Dict[str, Any]]:
    """
    Breadth-first list of records that may carry cursor/hasMore fields,
    root first, shallower wrappers before deeper ones.
    """
    if not isinstance(value, dict):
        return []

    sources: List[Dict[str, Any]] = []
    seen: Set[int] = {id(value)}
    queue: Deque[Dict[str, Any]] = deque([value])

    while queue:
        current = queue.popleft()
        sources.append(current)
        for key in METADATA_KEYS:
            nested = current.get(key)
            if isinstance(nested, dict) and id(nested) not in seen:
                seen.add(id(nested))
                queue.append(nested)

    return sources
