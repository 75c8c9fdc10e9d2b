import unittest

from publications.merge import PagedCollection, dedupe_by_key, merge_entities, merge_entity
from publications.models import Comment, Page, Video, VideoStats


def _video(video_id: str, **kwargs) -> Video:
    return Video(id=video_id, video_url=f"https://cdn/{video_id}.mp4", **kwargs)


def _comment(comment_id: str, text: str = "text") -> Comment:
    return Comment(id=comment_id, text=text, created_at="2024-01-01T00:00:00.000Z")


class MergeEntitiesTests(unittest.TestCase):
    def test_updates_in_place_and_appends_new(self):
        existing = [_comment("a"), _comment("b", "old")]
        merged = merge_entities(existing, [_comment("b", "new"), _comment("c")])
        self.assertEqual([comment.id for comment in merged], ["a", "b", "c"])
        self.assertEqual(merged[1].text, "new")
        self.assertEqual(existing[1].text, "old")

    def test_empty_existing_copies_incoming(self):
        incoming = [_comment("a")]
        merged = merge_entities([], incoming)
        self.assertEqual(merged, incoming)
        self.assertIsNot(merged, incoming)

    def test_unset_fields_keep_current_value(self):
        current = _video("v1", original_prompt="prompt", creator_handle="maker")
        update = _video("v1", title="Renamed")
        merged = merge_entity(current, update)
        self.assertEqual(merged.title, "Renamed")
        self.assertEqual(merged.original_prompt, "prompt")
        self.assertEqual(merged.creator_handle, "maker")

    def test_volatile_fields_always_follow_update(self):
        current = _video("v1", stats=VideoStats(likes=5), viewer_has_liked=True)
        merged = merge_entities([current], [_video("v1")])
        self.assertEqual(merged[0].stats, VideoStats())
        self.assertFalse(merged[0].viewer_has_liked)

    def test_dedupe_by_key(self):
        items = [_comment("a", "1"), _comment("b"), _comment("a", "2")]
        self.assertEqual([c.text for c in dedupe_by_key(items, key_fn=lambda c: c.id)], ["1", "text"])


class PagedCollectionTests(unittest.TestCase):
    def test_pages_accumulate_and_reset(self):
        collection = PagedCollection()
        collection.apply(Page(items=[_comment("a"), _comment("b")], next_cursor="c1", has_more=True))
        collection.apply(Page(items=[_comment("b", "edited"), _comment("c")], next_cursor=None, has_more=False))

        self.assertEqual([c.id for c in collection.items], ["a", "b", "c"])
        self.assertEqual(collection.items[1].text, "edited")
        self.assertIsNone(collection.next_cursor)
        self.assertFalse(collection.has_more)
        self.assertEqual(collection.pages_loaded, 2)

        collection.apply(Page(items=[_comment("z")], next_cursor="c9", has_more=True), reset=True)
        self.assertEqual([c.id for c in collection.items], ["z"])
        self.assertEqual(collection.pages_loaded, 1)
        self.assertEqual(collection.next_cursor, "c9")

    def test_prepend_moves_existing_entity_to_top(self):
        collection = PagedCollection(items=[_comment("a"), _comment("b")])
        collection.prepend(_comment("b", "mine"))
        self.assertEqual([c.id for c in collection.items], ["b", "a"])
        self.assertEqual(collection.items[0].text, "mine")


if __name__ == "__main__":
    unittest.main()
