"""
Centralised settings for the publication gateway (env-first, code-light).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "publications-gateway/1.0"


@dataclass
class PublicationSettings:
    api_server: Optional[str] = None
    video_page_limit: int = 24
    comment_page_limit: int = 20
    max_page_limit: int = 100
    request_timeout: int = 15
    max_retries: int = 3
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def api_base(self) -> Optional[str]:
        if not self.api_server:
            return None
        return self.api_server.rstrip("/")


def _int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(raw)
        return value if value > 0 else default
    except ValueError:
        logger.warning("Invalid int value for %s=%s; using default %s", key, raw, default)
        return default


def _str_from_env(key: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(key)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped or default


def load_settings() -> PublicationSettings:
    log_file = _str_from_env("PUBLICATIONS_LOG_FILE")
    return PublicationSettings(
        api_server=_str_from_env("API_SERVER"),
        video_page_limit=_int_from_env("PUBLICATIONS_VIDEO_LIMIT", 24),
        comment_page_limit=_int_from_env("PUBLICATIONS_COMMENT_LIMIT", 20),
        max_page_limit=_int_from_env("PUBLICATIONS_MAX_LIMIT", 100),
        request_timeout=_int_from_env("PUBLICATIONS_HTTP_TIMEOUT", 15),
        max_retries=_int_from_env("PUBLICATIONS_HTTP_RETRIES", 3),
        user_agent=_str_from_env("PUBLICATIONS_USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT,
        log_level=(_str_from_env("PUBLICATIONS_LOG_LEVEL", "INFO") or "INFO").upper(),
        log_file=Path(log_file) if log_file else None,
    )
