"""
Pydantic models for inbound gateway parameters.
These validate what our own callers send; upstream payloads go through the
tolerant normalizers instead.
"""
from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, field_validator

_LEADING_INT_RE = re.compile(r"\s*[+-]?\d+")


class PageQuery(BaseModel):
    limit: Optional[int] = None
    cursor: Optional[str] = None

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        match = _LEADING_INT_RE.match(str(value))
        return int(match.group(0)) if match else None

    @field_validator("cursor", mode="before")
    @classmethod
    def _blank_cursor(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    def clamp(self, default: int, maximum: int) -> int:
        if self.limit is None:
            return default
        return max(1, min(self.limit, maximum))


class CommentDraft(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Comment text is required.")
        return value
