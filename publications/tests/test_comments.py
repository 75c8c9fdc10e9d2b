import unittest
from datetime import datetime, timezone

from publications.models import Comment
from publications.normalizers import normalize_comment
from publications.serialize import comment_to_dict

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class NormalizeCommentTests(unittest.TestCase):
    def test_aliases_and_coercions(self):
        comment = normalize_comment(
            {
                "_id": "c1",
                "body": "<p>Hello <b>world</b></p>",
                "author": {"username": "ann", "id": 77},
                "likes": "1,234",
                "createdAt": 1700000000000,
                "user": {"isBot": "yes"},
            }
        )
        self.assertEqual(
            comment,
            Comment(
                id="c1",
                text="Hello world",
                created_at="2023-11-14T22:13:20.000Z",
                creator_handle="ann",
                created_by="77",
                likes=1234,
                is_bot_user=True,
            ),
        )

    def test_defaults(self):
        comment = normalize_comment({"id": "c2", "text": " hi "}, now=NOW)
        self.assertEqual(comment.text, "hi")
        self.assertEqual(comment.creator_handle, "User")
        self.assertEqual(comment.created_by, "")
        self.assertEqual(comment.likes, 0)
        self.assertFalse(comment.is_bot_user)
        self.assertEqual(comment.created_at, "2024-01-01T00:00:00.000Z")

    def test_rejects_entries_without_id_or_text(self):
        self.assertIsNone(normalize_comment({"text": "orphan"}))
        self.assertIsNone(normalize_comment({"id": "c3", "text": "   "}))
        self.assertIsNone(normalize_comment({"id": "c3", "text": "<br>"}))
        self.assertIsNone(normalize_comment("c3"))
        self.assertIsNone(normalize_comment(None))

    def test_envelopes_are_flattened(self):
        comment = normalize_comment({"node": {"id": 5, "text": "wrapped"}}, now=NOW)
        self.assertEqual(comment.id, "5")
        self.assertEqual(comment.text, "wrapped")

    def test_comment_key_as_text_or_wrapper(self):
        self.assertEqual(normalize_comment({"id": "a", "comment": "plain"}, now=NOW).text, "plain")
        self.assertEqual(normalize_comment({"id": "a", "comment": {"text": "nested"}}, now=NOW).text, "nested")

    def test_earlier_alias_wins(self):
        comment = normalize_comment({"id": "a", "_id": "b", "text": "t", "body": "u"}, now=NOW)
        self.assertEqual((comment.id, comment.text), ("a", "t"))

    def test_likes_are_rounded_and_clamped(self):
        self.assertEqual(normalize_comment({"id": "a", "text": "t", "likes": 2.5}, now=NOW).likes, 3)
        self.assertEqual(normalize_comment({"id": "a", "text": "t", "likes": -5}, now=NOW).likes, 0)
        self.assertEqual(normalize_comment({"id": "a", "text": "t", "likes": "many"}, now=NOW).likes, 0)
        self.assertEqual(normalize_comment({"id": "a", "text": "t", "stats": {"likes": "9"}}, now=NOW).likes, 9)

    def test_text_without_markup_is_untouched(self):
        comment = normalize_comment({"id": "a", "text": "2 < 3"}, now=NOW)
        self.assertEqual(comment.text, "2 < 3")

    def test_normalizing_serialized_comment_is_stable(self):
        first = normalize_comment(
            {"commentId": "c9", "message": "<i>again</i>", "creator": {"handle": "bo"}, "created_at": "2024-03-01T10:00:00Z"}
        )
        second = normalize_comment(comment_to_dict(first), now=NOW)
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
