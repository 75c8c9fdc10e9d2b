"""
HTTP helper with retries + JSON defaults used to talk to the upstream API.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from urllib3.util.retry import Retry

from publications.security import redact_secrets
from publications.settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when the upstream API answers with an error or cannot be reached."""

    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(f"Upstream responded with {status}: {message or 'Unknown error'}")
        self.status = status
        self.message = message


class HttpClient:
    def __init__(self, timeout: int = 15, max_retries: int = 3, user_agent: str | None = None):
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            backoff_factor=0.6,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = requests.adapters.HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update(
            {
                "User-Agent": user_agent or DEFAULT_USER_AGENT,
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        token: Optional[str] = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = self.session.request(method, url, params=params, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("HTTP %s exception %s", method, redact_secrets(str(exc)))
            raise UpstreamError(502, "Upstream unavailable") from exc

        if not resp.ok:
            message = resp.text or ""
            logger.warning("HTTP %s failed %s %s", method, resp.status_code, redact_secrets(message[:200]))
            raise UpstreamError(resp.status_code, message)

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("HTTP %s returned non-JSON body from %s", method, redact_secrets(url))
            raise UpstreamError(502, "Upstream returned an invalid JSON body") from exc

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, token: Optional[str] = None) -> Any:
        return self.request("GET", url, params=params, token=token)

    def post(self, url: str, json: Any = None, token: Optional[str] = None) -> Any:
        return self.request("POST", url, json=json, token=token)
