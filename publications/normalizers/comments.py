"""
Comment normalizer.

The alias tables below list, in priority order, every location a field has
been seen at across the upstream comment payload variants.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from publications.coerce import pick_boolean, pick_number, pick_string, round_count
from publications.envelopes import expand_entry
from publications.models import Comment
from publications.paths import compile_paths
from publications.timestamps import format_iso, parse_timestamp

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")

ID_PATHS = compile_paths(
    "id",
    "_id",
    "commentId",
    "comment_id",
    "commentID",
    "uuid",
    "uid",
    "externalId",
    "external_id",
    "nodeId",
    "comment.id",
    "comment._id",
    "node.id",
    "node._id",
    "value.id",
    "value._id",
)

TEXT_PATHS = compile_paths(
    "text",
    "body",
    "content",
    "message",
    "comment",
    "value",
    "bodyHtml",
    "body_html",
    "textHtml",
    "text_html",
    "rendered.text",
    "rendered.body",
    "commentText",
    "comment_text",
    "bodyText",
    "body_text",
    "textContent",
    "text_content",
    "payload.text",
    "payload.content",
    "payload.body",
    "node.text",
    "node.body",
    "node.content",
    "node.message",
    "comment.text",
    "comment.body",
    "comment.content",
    "comment.message",
    "data.text",
    "data.content",
    "attributes.text",
    "attributes.content",
    "attributes.body",
    "meta.text",
    "meta.body",
)

CREATOR_HANDLE_PATHS = compile_paths(
    "creatorHandle",
    "creator_handle",
    "creator.handle",
    "creator.username",
    "creator.name",
    "user.handle",
    "user.username",
    "user.name",
    "author.handle",
    "author.username",
    "author.name",
    "owner.handle",
    "owner.username",
    "owner.name",
    "profile.handle",
    "profile.username",
    "profile.name",
    "createdBy.handle",
    "createdBy.username",
    "created_by.handle",
    "created_by.username",
    "account.handle",
    "account.username",
    "account.name",
    "attributes.author",
    "attributes.username",
)

CREATED_BY_PATHS = compile_paths(
    "createdBy",
    "created_by",
    "createdById",
    "creatorId",
    "creator_id",
    "userId",
    "user_id",
    "authorId",
    "author_id",
    "ownerId",
    "owner_id",
    "profile.id",
    "creator.id",
    "creator._id",
    "user.id",
    "user._id",
    "author.id",
    "author._id",
    "comment.createdBy",
    "comment.created_by",
)

CREATED_AT_PATHS = compile_paths(
    "createdAt",
    "created_at",
    "created",
    "createdOn",
    "created_on",
    "timestamp",
    "publishedAt",
    "published_at",
    "insertedAt",
    "inserted_at",
    "dateCreated",
    "date_created",
    "node.createdAt",
    "node.created_at",
    "comment.createdAt",
    "comment.created_at",
    "meta.createdAt",
    "meta.created_at",
)

LIKES_PATHS = compile_paths(
    "likes",
    "likesCount",
    "likes_count",
    "likesTotal",
    "likes.count",
    "likes.total",
    "stats.likes",
    "metrics.likes",
    "interactions.likes",
    "engagement.likes",
    "node.likes",
    "comment.likes",
    "comment.likesCount",
    "meta.likes",
)

BOT_PATHS = compile_paths(
    "isBotUser",
    "isBot",
    "bot",
    "creator.isBot",
    "creator.isBotUser",
    "user.isBot",
    "user.isBotUser",
    "author.isBot",
    "author.isBotUser",
    "comment.isBot",
    "comment.isBotUser",
)


def strip_tags(text: str) -> str:
    """Best-effort removal of markup; not an HTML parser."""
    text = text.strip()
    if "<" in text and ">" in text:
        text = _TAG_RE.sub("", text).strip()
    return text


def normalize_comment(
    payload: Any,
    *,
    now: Optional[datetime] = None,
    expand: bool = True,
) -> Optional[Comment]:
    record = expand_entry(payload) if expand else None
    if record is None:
        record = payload if isinstance(payload, dict) else None
    if record is None:
        return None

    comment_id = pick_string(record, ID_PATHS) or ""
    text = strip_tags(pick_string(record, TEXT_PATHS) or "")
    if not comment_id or not text:
        return None

    created_at = parse_timestamp(pick_string(record, CREATED_AT_PATHS))
    if created_at is None:
        logger.debug("Comment %s has no usable timestamp; using normalization time", comment_id)
        created_at = format_iso(now or datetime.now(timezone.utc))

    likes = pick_number(record, LIKES_PATHS)
    return Comment(
        id=comment_id,
        text=text,
        created_at=created_at,
        creator_handle=pick_string(record, CREATOR_HANDLE_PATHS) or "User",
        created_by=pick_string(record, CREATED_BY_PATHS) or "",
        likes=round_count(likes) if likes is not None else 0,
        is_bot_user=bool(pick_boolean(record, BOT_PATHS)),
    )
