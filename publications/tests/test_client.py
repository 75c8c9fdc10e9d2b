import unittest
from unittest.mock import MagicMock, patch

from pydantic import ValidationError

import publications
from publications.client import MissingApiServer, PublicationClient
from publications.http_client import UpstreamError
from publications.models import VideoInteractions
from publications.settings import PublicationSettings


class PublicationClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.http = MagicMock()
        self.client = PublicationClient("https://api.example.com/", http=self.http)

    def test_list_videos_clamps_limit_and_forwards_cursor(self):
        self.http.request.return_value = {
            "items": [{"id": "v1", "videoUrl": "https://cdn/1.mp4"}],
            "nextCursor": "n2",
        }
        page = self.client.list_videos(limit="500", cursor="n1", token="tok")

        self.http.request.assert_called_once_with(
            "GET",
            "https://api.example.com/publication",
            params={"limit": 100, "cursor": "n1"},
            token="tok",
        )
        self.assertEqual([video.id for video in page.items], ["v1"])
        self.assertEqual(page.next_cursor, "n2")

    def test_list_comments_uses_comment_default_limit(self):
        self.http.request.return_value = {"comments": []}
        page = self.client.list_comments("vid 1")

        self.http.request.assert_called_once_with(
            "GET",
            "https://api.example.com/publication/vid%201/comments",
            params={"limit": 20},
            token=None,
        )
        self.assertEqual(page.items, [])

    def test_get_video_quotes_id_and_unwraps_listing(self):
        self.http.request.return_value = {"items": [{"id": "a/b", "videoUrl": "https://cdn/1.mp4"}]}
        video = self.client.get_video("a/b")

        self.assertEqual(self.http.request.call_args[0][1], "https://api.example.com/publication/a%2Fb")
        self.assertEqual(video.id, "a/b")

    def test_get_video_without_usable_payload(self):
        self.http.request.return_value = {"status": "ok"}
        self.assertIsNone(self.client.get_video("v1"))

    def test_post_comment_validates_before_sending(self):
        with self.assertRaises(ValidationError):
            self.client.post_comment("v1", "   ", token="tok")
        self.http.request.assert_not_called()

    def test_post_comment_normalizes_created_comment(self):
        self.http.request.return_value = {"comment": {"_id": "c1", "text": "hi", "createdAt": "2024-01-01T00:00:00Z"}}
        comment = self.client.post_comment("v1", "hi", token="tok")

        self.http.request.assert_called_once_with(
            "POST",
            "https://api.example.com/publication/v1/comments",
            json={"text": "hi"},
            token="tok",
        )
        self.assertEqual(comment.id, "c1")
        self.assertEqual(comment.created_at, "2024-01-01T00:00:00.000Z")

    def test_toggle_like_and_interactions(self):
        self.http.request.return_value = {"liked": True, "likes": 3}
        self.assertEqual(self.client.toggle_like("v1", token="tok"), VideoInteractions(viewer_has_liked=True, likes=3))
        self.assertEqual(self.http.request.call_args[0], ("POST", "https://api.example.com/publication/v1/like"))

        self.http.request.return_value = {"data": {"viewerHasLiked": False}}
        interactions = self.client.get_interactions("v1")
        self.assertFalse(interactions.viewer_has_liked)
        self.assertEqual(self.http.request.call_args[0], ("GET", "https://api.example.com/publication/v1/interactions"))

    def test_overlapping_calls_time_themselves(self):
        def respond(method, url, **kwargs):
            if url.endswith("/publication"):
                self.client.get_interactions("v1")
                return {"items": [{"id": "v1", "videoUrl": "u"}]}
            return {"liked": True}

        self.http.request.side_effect = respond
        clock = [100.0, 200.0, 200.5, 100.3]
        with patch("publications.client.time.time", side_effect=clock):
            self.client.list_videos()

        health = {status.name: status for status in self.client.get_health()}
        self.assertAlmostEqual(health["videos"].latency_ms, 300.0, places=3)
        self.assertAlmostEqual(health["interactions"].latency_ms, 500.0, places=3)

    def test_health_tracks_success_and_failure(self):
        self.http.request.return_value = {"items": [{"id": "v1", "videoUrl": "u"}]}
        self.client.list_videos()
        self.http.request.side_effect = UpstreamError(503, "down")
        with self.assertRaises(UpstreamError):
            self.client.list_comments("v1")

        health = {status.name: status for status in self.client.get_health()}
        self.assertTrue(health["videos"].healthy)
        self.assertEqual(health["videos"].items_last_fetch, 1)
        self.assertIsNotNone(health["videos"].last_success)
        self.assertFalse(health["comments"].healthy)
        self.assertIn("503", health["comments"].last_error)

    def test_requires_base_url(self):
        with self.assertRaises(MissingApiServer):
            PublicationClient("  ")
        with self.assertRaises(MissingApiServer):
            PublicationClient.from_settings(PublicationSettings())

    def test_package_level_client(self):
        client = publications.get_client(PublicationSettings(api_server="https://api.example.com/"))
        self.assertEqual(client.base_url, "https://api.example.com")
        self.assertIs(publications.get_client(), client)

    def test_settings_limits_are_used(self):
        settings = PublicationSettings(api_server="https://api", video_page_limit=6, max_page_limit=10)
        client = PublicationClient.from_settings(settings, http=self.http)
        self.http.request.return_value = {}
        client.list_videos()
        self.assertEqual(self.http.request.call_args[1]["params"], {"limit": 6})
        client.list_videos(limit=50)
        self.assertEqual(self.http.request.call_args[1]["params"], {"limit": 10})


if __name__ == "__main__":
    unittest.main()
