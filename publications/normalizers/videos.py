"""
Video normalizer plus the viewer-interaction payloads (like toggles,
interaction lookups) that update a video after it was listed.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Optional

from publications.coerce import (
    coerce_string,
    first_match,
    pick_boolean,
    pick_boolean_from_sources,
    pick_number,
    pick_number_from_sources,
    pick_string,
    round_count,
)
from publications.envelopes import expand_entry, gather_metadata_sources
from publications.models import Video, VideoInteractions, VideoStats
from publications.paths import compile_paths, value_at_path
from publications.timestamps import parse_timestamp

ID_PATHS = compile_paths("id", "_id", "videoId", "video_id", "publicationId", "publication_id")

VIDEO_URL_PATHS = compile_paths(
    "videoUrl",
    "video_url",
    "videoURL",
    "url",
    "src",
    "video.url",
    "media.url",
    "asset.url",
)

TITLE_PATHS = compile_paths("title", "name", "caption")
DESCRIPTION_PATHS = compile_paths("description", "desc", "summary")
PROMPT_PATHS = compile_paths("originalPrompt", "original_prompt", "prompt", "generation.prompt")
TAG_PATHS = compile_paths("tags", "hashtags")

CREATOR_HANDLE_PATHS = compile_paths(
    "creatorHandle",
    "creator_handle",
    "creator.handle",
    "creator.username",
    "user.handle",
    "user.username",
    "author.handle",
    "author.username",
    "owner.handle",
    "owner.username",
)

CREATED_BY_PATHS = compile_paths(
    "createdBy",
    "created_by",
    "creatorId",
    "creator_id",
    "userId",
    "user_id",
    "ownerId",
    "owner_id",
    "creator.id",
    "creator._id",
    "user.id",
    "user._id",
)

SESSION_PATHS = compile_paths("sessionId", "session_id", "session.id", "session._id")

CREATED_AT_PATHS = compile_paths(
    "createdAt",
    "created_at",
    "created",
    "publishedAt",
    "published_at",
    "timestamp",
    "dateCreated",
    "date_created",
)

LIKES_PATHS = compile_paths(
    "stats.likes",
    "stats.likesCount",
    "stats.like_count",
    "likes",
    "likesCount",
    "likes_count",
    "likeCount",
    "like_count",
    "metrics.likes",
    "statistics.likeCount",
)

COMMENTS_PATHS = compile_paths(
    "stats.comments",
    "stats.commentsCount",
    "stats.comment_count",
    "commentsCount",
    "comments_count",
    "commentCount",
    "comment_count",
    "metrics.comments",
    "statistics.commentCount",
)

SHARES_PATHS = compile_paths(
    "stats.shares",
    "stats.sharesCount",
    "stats.share_count",
    "shares",
    "sharesCount",
    "shares_count",
    "shareCount",
    "share_count",
    "metrics.shares",
)

VIEWER_LIKED_PATHS = compile_paths(
    "viewerHasLiked",
    "viewer_has_liked",
    "hasLiked",
    "has_liked",
    "liked",
    "isLiked",
    "is_liked",
    "viewer.hasLiked",
    "viewer.liked",
)

BOT_PATHS = compile_paths(
    "isBotUser",
    "is_bot_user",
    "isBot",
    "is_bot",
    "bot",
    "creator.isBot",
    "creator.isBotUser",
    "user.isBot",
    "user.isBotUser",
)

_IDENTIFIER_KEYS = ("$oid", "_id", "id")


def coerce_identifier(value: Any) -> Optional[str]:
    """
    Accept a plain string/number, or a record that carries its own string
    form (Mongo extended JSON ``{"$oid": ...}`` or an embedded ``_id``/``id``).
    """
    if isinstance(value, dict):
        for key in _IDENTIFIER_KEYS:
            if key in value:
                result = coerce_string(value[key])
                if result is not None:
                    return result
        return None
    return coerce_string(value)


def pick_tags(record: Any) -> Optional[List[str]]:
    for path in TAG_PATHS:
        source = value_at_path(record, path)
        if isinstance(source, list):
            return [tag.strip() for tag in source if isinstance(tag, str) and tag.strip()]
    return None


def _count(record: Any, paths) -> int:
    value = pick_number(record, paths)
    return round_count(value) if value is not None else 0


def normalize_video(payload: Any, *, expand: bool = True) -> Optional[Video]:
    record = expand_entry(payload) if expand else None
    if record is None:
        record = payload if isinstance(payload, dict) else None
    if record is None:
        return None

    video_id = first_match(record, ID_PATHS, coerce_identifier)
    video_url = pick_string(record, VIDEO_URL_PATHS)
    if not video_id or not video_url:
        return None

    return Video(
        id=video_id,
        video_url=video_url,
        title=pick_string(record, TITLE_PATHS) or "Untitled Video",
        description=pick_string(record, DESCRIPTION_PATHS) or "",
        original_prompt=pick_string(record, PROMPT_PATHS),
        tags=pick_tags(record),
        creator_handle=pick_string(record, CREATOR_HANDLE_PATHS),
        created_by=first_match(record, CREATED_BY_PATHS, coerce_identifier),
        session_id=first_match(record, SESSION_PATHS, coerce_identifier),
        created_at=parse_timestamp(pick_string(record, CREATED_AT_PATHS)),
        stats=VideoStats(
            likes=_count(record, LIKES_PATHS),
            comments=_count(record, COMMENTS_PATHS),
            shares=_count(record, SHARES_PATHS),
        ),
        viewer_has_liked=bool(pick_boolean(record, VIEWER_LIKED_PATHS)),
        is_bot_user=bool(pick_boolean(record, BOT_PATHS)),
    )


def _optional_count(sources, paths) -> Optional[int]:
    value = pick_number_from_sources(sources, paths)
    return round_count(value) if value is not None else None


def normalize_interactions(payload: Any) -> VideoInteractions:
    """Extract whatever viewer state a like/interactions response carries."""
    record = expand_entry(payload)
    if record is None:
        return VideoInteractions()
    sources = gather_metadata_sources(record)
    return VideoInteractions(
        viewer_has_liked=pick_boolean_from_sources(sources, VIEWER_LIKED_PATHS),
        likes=_optional_count(sources, LIKES_PATHS),
        comments=_optional_count(sources, COMMENTS_PATHS),
        shares=_optional_count(sources, SHARES_PATHS),
    )


def apply_interactions(video: Video, interactions: VideoInteractions) -> Video:
    """Return a copy of ``video`` with only the interaction fields that were found."""
    stats = replace(
        video.stats,
        **{
            name: value
            for name, value in (
                ("likes", interactions.likes),
                ("comments", interactions.comments),
                ("shares", interactions.shares),
            )
            if value is not None
        },
    )
    viewer_has_liked = video.viewer_has_liked
    if interactions.viewer_has_liked is not None:
        viewer_has_liked = interactions.viewer_has_liked
    return replace(video, stats=stats, viewer_has_liked=viewer_has_liked)
