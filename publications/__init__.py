"""
Public API for the publication gateway.
"""
from __future__ import annotations

from typing import Optional

from publications.client import MissingApiServer, PublicationClient
from publications.http_client import UpstreamError
from publications.merge import PagedCollection, merge_entities
from publications.models import Comment, Page, Video, VideoInteractions, VideoStats
from publications.normalizers import apply_interactions, normalize_comment, normalize_interactions, normalize_video
from publications.pagination import parse_comments_page, parse_page, parse_videos_page
from publications.settings import PublicationSettings, load_settings

_client: Optional[PublicationClient] = None


def get_client(settings: Optional[PublicationSettings] = None) -> PublicationClient:
    """
    Lazily build the shared client from the environment, or rebuild it from
    explicit ``settings``. Raises ``MissingApiServer`` while ``API_SERVER`` is unset.
    """
    global _client
    if _client is None or settings is not None:
        _client = PublicationClient.from_settings(settings or load_settings())
    return _client


__all__ = [
    "Comment",
    "MissingApiServer",
    "Page",
    "PagedCollection",
    "PublicationClient",
    "PublicationSettings",
    "UpstreamError",
    "Video",
    "VideoInteractions",
    "VideoStats",
    "apply_interactions",
    "get_client",
    "load_settings",
    "merge_entities",
    "normalize_comment",
    "normalize_interactions",
    "normalize_video",
    "parse_comments_page",
    "parse_page",
    "parse_videos_page",
]
