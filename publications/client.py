"""
Client for the upstream publication API.

Every response body goes through the tolerant normalizers, so callers only
ever see the internal entity contract. Transport errors surface as
``UpstreamError``; shape problems never do.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from publications.http_client import HttpClient, UpstreamError
from publications.models import Comment, HealthStatus, Page, Video, VideoInteractions
from publications.normalizers import normalize_comment, normalize_interactions, normalize_video
from publications.pagination import parse_comments_page, parse_videos_page
from publications.schemas import CommentDraft, PageQuery
from publications.settings import PublicationSettings

logger = logging.getLogger(__name__)


class MissingApiServer(RuntimeError):
    """Raised when no upstream base URL is configured."""

    def __init__(self) -> None:
        super().__init__("API_SERVER environment variable is not configured.")


class PublicationClient:
    def __init__(
        self,
        base_url: str,
        *,
        settings: Optional[PublicationSettings] = None,
        http: Optional[HttpClient] = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise MissingApiServer()
        self.base_url = base_url.strip().rstrip("/")
        self.settings = settings or PublicationSettings(api_server=self.base_url)
        self.http = http or HttpClient(
            timeout=self.settings.request_timeout,
            max_retries=self.settings.max_retries,
            user_agent=self.settings.user_agent,
        )
        self._health: Dict[str, HealthStatus] = {}

    @classmethod
    def from_settings(cls, settings: PublicationSettings, http: Optional[HttpClient] = None) -> "PublicationClient":
        if not settings.api_base:
            raise MissingApiServer()
        return cls(settings.api_base, settings=settings, http=http)

    def list_videos(
        self,
        limit: Optional[Any] = None,
        cursor: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Page[Video]:
        params = self._page_params(limit, cursor, self.settings.video_page_limit)
        payload, start = self._call("videos", "GET", "/publication", params=params, token=token)
        page = parse_videos_page(payload)
        self._record("videos", start, items=len(page.items))
        return page

    def get_video(self, video_id: str, token: Optional[str] = None) -> Optional[Video]:
        payload, start = self._call("video", "GET", f"/publication/{_quote(video_id)}", token=token)
        video = normalize_video(payload)
        if video is None:
            # Some deployments wrap the single record in a listing-style envelope.
            candidates = parse_videos_page(payload).items
            video = candidates[0] if candidates else None
        self._record("video", start, items=1 if video else 0)
        return video

    def list_comments(
        self,
        video_id: str,
        limit: Optional[Any] = None,
        cursor: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Page[Comment]:
        params = self._page_params(limit, cursor, self.settings.comment_page_limit)
        payload, start = self._call(
            "comments", "GET", f"/publication/{_quote(video_id)}/comments", params=params, token=token
        )
        page = parse_comments_page(payload)
        self._record("comments", start, items=len(page.items))
        return page

    def post_comment(self, video_id: str, text: Any, token: str) -> Optional[Comment]:
        draft = CommentDraft(text=text)
        payload, start = self._call(
            "comment-create",
            "POST",
            f"/publication/{_quote(video_id)}/comments",
            json={"text": draft.text},
            token=token,
        )
        comment = normalize_comment(payload)
        if comment is None:
            created = parse_comments_page(payload).items
            comment = created[0] if created else None
        if comment is None:
            logger.warning("Comment created on %s but response had no usable comment", video_id)
        self._record("comment-create", start, items=1 if comment else 0)
        return comment

    def toggle_like(self, video_id: str, token: str) -> VideoInteractions:
        payload, start = self._call("like", "POST", f"/publication/{_quote(video_id)}/like", token=token)
        self._record("like", start, items=1)
        return normalize_interactions(payload)

    def get_interactions(self, video_id: str, token: Optional[str] = None) -> VideoInteractions:
        payload, start = self._call("interactions", "GET", f"/publication/{_quote(video_id)}/interactions", token=token)
        self._record("interactions", start, items=1)
        return normalize_interactions(payload)

    def get_health(self) -> List[HealthStatus]:
        return list(self._health.values())

    def _page_params(self, limit: Optional[Any], cursor: Optional[str], default: int) -> Dict[str, Any]:
        query = PageQuery(limit=limit, cursor=cursor)
        params: Dict[str, Any] = {"limit": query.clamp(default, self.settings.max_page_limit)}
        if query.cursor:
            params["cursor"] = query.cursor
        return params

    def _call(self, name: str, method: str, path: str, **kwargs: Any) -> Tuple[Any, float]:
        start = time.time()
        try:
            payload = self.http.request(method, f"{self.base_url}{path}", **kwargs)
        except UpstreamError as exc:
            self._record(name, start, error=str(exc))
            raise
        return payload, start

    def _record(self, name: str, start: float, *, items: int = 0, error: Optional[str] = None) -> None:
        latency_ms = (time.time() - start) * 1000
        healthy = error is None
        previous = self._health.get(name)
        self._health[name] = HealthStatus(
            name=name,
            healthy=healthy,
            last_error=error,
            last_success=datetime.now(timezone.utc) if healthy else (previous.last_success if previous else None),
            items_last_fetch=items,
            latency_ms=latency_ms,
        )


def _quote(value: str) -> str:
    return quote(str(value), safe="")
