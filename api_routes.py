"""API routes for the publication gateway."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

from flask import jsonify, request
from pydantic import ValidationError

from publications.client import MissingApiServer, PublicationClient
from publications.http_client import UpstreamError
from publications.security import bearer_token, redact_secrets
from publications.serialize import (
    comment_to_dict,
    health_to_dict,
    interactions_to_dict,
    page_to_dict,
    video_to_dict,
)

logger = logging.getLogger("publications.gateway")


def get_auth_token() -> Optional[str]:
    """Session token from the ``authToken`` cookie, else the bearer header."""
    cookie = request.cookies.get("authToken")
    if cookie:
        return cookie
    return bearer_token(request.headers.get("Authorization", "")) or None


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def register_routes(app, client: Optional[PublicationClient]):
    """Register all API routes with the Flask app.

    Args:
        app: Flask app instance.
        client: Configured PublicationClient, or None when ``API_SERVER`` is unset.
    """

    def upstream(fallback: str):
        """Map configuration and upstream failures onto JSON error responses."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if client is None:
                    return _error(str(MissingApiServer()), 500)
                try:
                    return view(*args, **kwargs)
                except UpstreamError as exc:
                    logger.warning("%s: %s", fallback, redact_secrets(str(exc)))
                    return _error(exc.message or fallback, exc.status)
                except Exception:  # pragma: no cover
                    logger.error("%s (%s)", fallback, view.__name__, exc_info=True)
                    return _error(fallback, 502)

            return wrapper

        return decorator

    @app.route("/api/videos")
    @upstream("Could not load videos.")
    def api_list_videos():
        page = client.list_videos(
            limit=request.args.get("limit"),
            cursor=request.args.get("cursor"),
            token=get_auth_token(),
        )
        logger.info("Served %d videos (hasMore=%s)", len(page.items), page.has_more)
        return jsonify(page_to_dict(page, video_to_dict))

    @app.route("/api/videos/<video_id>")
    @upstream("Could not load video.")
    def api_get_video(video_id: str):
        video = client.get_video(video_id, token=get_auth_token())
        if video is None:
            logger.warning("Upstream returned no usable video for %s", video_id)
            return _error("Upstream returned an unrecognised video payload.", 502)
        return jsonify(video_to_dict(video))

    @app.route("/api/videos/<video_id>/comments")
    @upstream("Could not load comments.")
    def api_list_comments(video_id: str):
        page = client.list_comments(
            video_id,
            limit=request.args.get("limit"),
            cursor=request.args.get("cursor"),
            token=get_auth_token(),
        )
        return jsonify(page_to_dict(page, comment_to_dict))

    @app.route("/api/videos/<video_id>/comments", methods=["POST"])
    @upstream("Could not create comment.")
    def api_create_comment(video_id: str):
        token = get_auth_token()
        if not token:
            return _error("Authentication required.", 401)

        body = request.get_json(silent=True)
        if body is None:
            return _error("Invalid request body.", 400)
        text = body.get("text") if isinstance(body, dict) else None
        try:
            comment = client.post_comment(video_id, text, token)
        except ValidationError:
            return _error("Comment text is required.", 400)
        if comment is None:
            return _error("Upstream returned an unrecognised comment payload.", 502)
        return jsonify(comment_to_dict(comment)), 201

    @app.route("/api/videos/<video_id>/like", methods=["POST"])
    @upstream("Could not update like.")
    def api_toggle_like(video_id: str):
        token = get_auth_token()
        if not token:
            return _error("Authentication required.", 401)
        return jsonify(interactions_to_dict(client.toggle_like(video_id, token)))

    @app.route("/api/videos/<video_id>/interactions")
    @upstream("Could not load interactions.")
    def api_interactions(video_id: str):
        interactions = client.get_interactions(video_id, token=get_auth_token())
        return jsonify(interactions_to_dict(interactions))

    @app.route("/api/health")
    def api_health():
        """Per-endpoint health of the upstream calls made so far."""
        sources = [health_to_dict(status) for status in client.get_health()] if client else []
        return jsonify(
            {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "configured": client is not None,
                "sources_total": len(sources),
                "healthy_sources": sum(1 for entry in sources if entry["healthy"]),
                "sources": sources,
            }
        )
