"""
Timestamp helpers: upstream dates arrive as epoch milliseconds, ISO-8601
strings or RFC 2822 strings. Output is always ISO-8601 UTC with
millisecond precision and a ``Z`` suffix.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NUMERIC_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*")


def format_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_epoch_millis(value: float) -> Optional[datetime]:
    if not math.isfinite(value):
        return None
    try:
        return EPOCH + timedelta(milliseconds=math.trunc(value))
    except OverflowError:
        return None


def parse_date_string(text: str) -> Optional[datetime]:
    candidate = text.strip()
    if not candidate:
        return None
    try:
        parsed = datetime.fromisoformat(candidate.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is None:
        try:
            parsed = parsedate_to_datetime(candidate)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_timestamp(candidate: Optional[str]) -> Optional[str]:
    """
    Numeric candidates are epoch milliseconds; anything else goes through
    generic date parsing. Returns ``None`` when neither works.
    """
    if not candidate:
        return None
    parsed: Optional[datetime]
    if _NUMERIC_RE.fullmatch(candidate):
        try:
            parsed = from_epoch_millis(float(candidate))
        except (OverflowError, ValueError):
            parsed = None
    else:
        parsed = parse_date_string(candidate)
    if parsed is None:
        return None
    try:
        return format_iso(parsed)
    except (OverflowError, ValueError):
        return None
