"""
camelCase wire representation of the internal entities.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from publications.models import Comment, HealthStatus, Page, Video, VideoInteractions, VideoStats


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "text": comment.text,
        "creatorHandle": comment.creator_handle,
        "createdBy": comment.created_by,
        "createdAt": comment.created_at,
        "likes": comment.likes,
        "isBotUser": comment.is_bot_user,
    }


def stats_to_dict(stats: VideoStats) -> Dict[str, int]:
    return {"likes": stats.likes, "comments": stats.comments, "shares": stats.shares}


def video_to_dict(video: Video) -> Dict[str, Any]:
    return {
        "id": video.id,
        "videoUrl": video.video_url,
        "title": video.title,
        "description": video.description,
        "originalPrompt": video.original_prompt,
        "tags": list(video.tags) if video.tags is not None else None,
        "creatorHandle": video.creator_handle,
        "createdBy": video.created_by,
        "sessionId": video.session_id,
        "createdAt": video.created_at,
        "stats": stats_to_dict(video.stats),
        "viewerHasLiked": video.viewer_has_liked,
        "isBotUser": video.is_bot_user,
    }


def interactions_to_dict(interactions: VideoInteractions) -> Dict[str, Any]:
    stats: Dict[str, Optional[int]] = {
        "likes": interactions.likes,
        "comments": interactions.comments,
        "shares": interactions.shares,
    }
    return {
        "viewerHasLiked": interactions.viewer_has_liked,
        "stats": {key: value for key, value in stats.items() if value is not None},
    }


def page_to_dict(page: Page, item_to_dict: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = [item_to_dict(item) for item in page.items]
    return {
        "items": items,
        "nextCursor": page.next_cursor,
        "hasMore": page.has_more,
    }


def health_to_dict(status: HealthStatus) -> Dict[str, Any]:
    return {
        "name": status.name,
        "healthy": status.healthy,
        "last_error": status.last_error,
        "last_success": status.last_success.isoformat() if status.last_success else None,
        "items_last_fetch": status.items_last_fetch,
        "latency_ms": status.latency_ms,
        "extra": status.extra,
    }
