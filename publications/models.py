"""
Core data structures shared by the publication gateway.

Every entity here is the stable internal contract produced by the normalizers;
the upstream payloads they come from are not trusted to have any fixed shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class Comment:
    """
    Normalized comment attached to a published video.
    """

    id: str
    text: str
    created_at: str
    creator_handle: str = "User"
    created_by: str = ""
    likes: int = 0
    is_bot_user: bool = False

    VOLATILE_FIELDS: ClassVar[Tuple[str, ...]] = ()


@dataclass
class VideoStats:
    likes: int = 0
    comments: int = 0
    shares: int = 0


@dataclass
class Video:
    """
    Normalized published video as rendered by the gallery.
    """

    id: str
    video_url: str
    title: str = "Untitled Video"
    description: str = ""
    original_prompt: Optional[str] = None
    tags: Optional[List[str]] = None
    creator_handle: Optional[str] = None
    created_by: Optional[str] = None
    session_id: Optional[str] = None
    created_at: Optional[str] = None
    stats: VideoStats = field(default_factory=VideoStats)
    viewer_has_liked: bool = False
    is_bot_user: bool = False

    # Always taken from the newest copy when the same video is merged twice.
    VOLATILE_FIELDS: ClassVar[Tuple[str, ...]] = ("stats", "viewer_has_liked")


@dataclass
class VideoInteractions:
    """Viewer-specific state returned by the like/interactions endpoints."""

    viewer_has_liked: Optional[bool] = None
    likes: Optional[int] = None
    comments: Optional[int] = None
    shares: Optional[int] = None


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


@dataclass
class HealthStatus:
    name: str
    healthy: bool
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None
    items_last_fetch: int = 0
    latency_ms: Optional[float] = None
    extra: Dict[str, str] = field(default_factory=dict)
