import re

_QUERY_SECRET_RE = re.compile(r"(?i)(api[_-]?key|key|token|secret)=([^&\s]+)")
_AUTH_HEADER_RE = re.compile(r"(?i)Authorization:\s*Bearer\s+[A-Za-z0-9._\-]+")
_BEARER_RE = re.compile(r"(?i)Bearer\s+[A-Za-z0-9._\-]+")
_COOKIE_TOKEN_RE = re.compile(r"(?i)(authToken)=([^;\s]+)")


def redact_secrets(text: str) -> str:
    """Redact tokens from log lines and upstream error strings."""
    if not isinstance(text, str):
        return text

    redacted = _QUERY_SECRET_RE.sub(r"\1=***REDACTED***", text)
    redacted = _AUTH_HEADER_RE.sub("Authorization: Bearer ***REDACTED***", redacted)
    redacted = _BEARER_RE.sub("Bearer ***REDACTED***", redacted)
    redacted = _COOKIE_TOKEN_RE.sub(r"\1=***REDACTED***", redacted)
    return redacted


def bearer_token(header_value: str) -> str:
    """Return the token part of an ``Authorization: Bearer <token>`` header, or ''."""
    if not header_value:
        return ""
    parts = header_value.split("Bearer ", 1)
    if len(parts) != 2:
        return ""
    return parts[1].strip()
