import unittest
from unittest.mock import MagicMock

import requests

from publications.http_client import HttpClient, UpstreamError


def _response(ok=True, status=200, text="", json_value=None, json_error=False):
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_value
    return resp


class HttpClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = HttpClient(timeout=5, max_retries=0)
        self.client.session = MagicMock()

    def test_returns_decoded_json_and_sends_bearer(self):
        self.client.session.request.return_value = _response(json_value={"items": []})
        payload = self.client.get("https://api/publication", params={"limit": 5}, token="tok")

        self.assertEqual(payload, {"items": []})
        self.client.session.request.assert_called_once_with(
            "GET",
            "https://api/publication",
            params={"limit": 5},
            json=None,
            headers={"Authorization": "Bearer tok"},
            timeout=5,
        )

    def test_error_status_keeps_upstream_message(self):
        self.client.session.request.return_value = _response(ok=False, status=404, text="not found")
        with self.assertRaises(UpstreamError) as ctx:
            self.client.post("https://api/publication/x/like", token="tok")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.message, "not found")

    def test_transport_failure_is_bad_gateway(self):
        self.client.session.request.side_effect = requests.ConnectionError("refused token=abc")
        with self.assertRaises(UpstreamError) as ctx:
            self.client.get("https://api/publication")
        self.assertEqual(ctx.exception.status, 502)

    def test_invalid_json_is_bad_gateway(self):
        self.client.session.request.return_value = _response(json_error=True)
        with self.assertRaises(UpstreamError) as ctx:
            self.client.get("https://api/publication")
        self.assertEqual(ctx.exception.status, 502)

    def test_default_headers(self):
        client = HttpClient(user_agent="agent/1")
        self.assertEqual(client.session.headers["User-Agent"], "agent/1")
        self.assertEqual(client.session.headers["Accept"], "application/json")


if __name__ == "__main__":
    unittest.main()
