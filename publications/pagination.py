"""
Page assembly: locate the raw entity list, normalize every entry and resolve
the cursor/hasMore pair from wherever the upstream put it.
"""
from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, TypeVar

from publications.coerce import pick_boolean_from_sources, pick_string_from_sources
from publications.envelopes import expand_entry, find_first_array, gather_metadata_sources
from publications.merge import dedupe_by_key
from publications.models import Comment, Page, Video
from publications.normalizers.comments import normalize_comment
from publications.normalizers.videos import normalize_video
from publications.paths import compile_paths

logger = logging.getLogger(__name__)

T = TypeVar("T")
Normalizer = Callable[..., Optional[T]]

NEXT_CURSOR_PATHS = compile_paths(
    "nextCursor",
    "next.cursor",
    "cursor",
    "pagination.nextCursor",
    "pagination.cursor",
    "pagination.next",
    "pagination.nextToken",
    "pagination.next_token",
    "pageInfo.endCursor",
    "pageInfo.end_cursor",
    "meta.nextCursor",
    "meta.next_cursor",
    "meta.nextToken",
    "meta.next_token",
    "comments.nextCursor",
    "comments.cursor",
    "comments.next.cursor",
    "comments.pagination.nextCursor",
    "data.nextCursor",
    "data.cursor",
    "data.pagination.nextCursor",
)

HAS_MORE_PATHS = compile_paths(
    "hasMore",
    "has_more",
    "hasNext",
    "hasNextPage",
    "pagination.hasMore",
    "pagination.has_more",
    "pagination.hasNext",
    "pagination.hasNextPage",
    "pageInfo.hasNextPage",
    "pageInfo.has_next_page",
    "meta.hasMore",
    "meta.has_more",
    "meta.hasNext",
    "comments.hasMore",
    "comments.has_more",
    "data.hasMore",
    "data.has_more",
)


def _has_text(record: Any, key: str) -> bool:
    value = record.get(key)
    return isinstance(value, str) and bool(value.strip())


def _is_normalized_listing(payload: Any, primary_field: str) -> bool:
    """True when ``payload`` already looks like ``{"items": [<entity>, ...]}``."""
    if not isinstance(payload, dict):
        return False
    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return False
    return all(
        isinstance(item, dict) and _has_text(item, "id") and _has_text(item, primary_field)
        for item in items
    )


def _raw_items(payload: Any, normalize: Normalizer) -> List[Any]:
    raw_items = find_first_array(payload)
    if not raw_items and isinstance(payload, list):
        raw_items = payload
    if not raw_items and isinstance(payload, dict) and normalize(payload) is not None:
        raw_items = [payload]
    return raw_items


def parse_page(
    payload: Any,
    normalize: Normalizer,
    *,
    primary_field: str,
    label: str = "items",
) -> Page:
    if _is_normalized_listing(payload, primary_field):
        raw_items = payload["items"]
        items = [entity for entity in (normalize(raw, expand=False) for raw in raw_items) if entity is not None]
    else:
        raw_items = _raw_items(payload, normalize)
        items = []
        for raw in raw_items:
            entry = expand_entry(raw)
            entity = normalize(entry if entry is not None else raw)
            if entity is not None:
                items.append(entity)

    if raw_items and not items:
        logger.warning("%s payload had %d raw entries but none could be normalized", label, len(raw_items))
    items = dedupe_by_key(items, key_fn=lambda entity: entity.id)

    sources = gather_metadata_sources(payload)
    next_cursor = pick_string_from_sources(sources, NEXT_CURSOR_PATHS)
    has_more = pick_boolean_from_sources(sources, HAS_MORE_PATHS)
    return Page(
        items=items,
        next_cursor=next_cursor,
        has_more=has_more if has_more is not None else next_cursor is not None,
    )


def parse_comments_page(payload: Any, *, now: Optional[datetime] = None) -> Page[Comment]:
    normalize = functools.partial(normalize_comment, now=now)
    return parse_page(payload, normalize, primary_field="text", label="comments")


def parse_videos_page(payload: Any) -> Page[Video]:
    return parse_page(payload, normalize_video, primary_field="videoUrl", label="videos")
