"""
Reconciliation of entity collections keyed by ``id``.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Generic, Hashable, Iterable, List, Optional, Sequence, TypeVar

from publications.models import Page

T = TypeVar("T")
E = TypeVar("E")


def dedupe_by_key(items: Iterable[T], key_fn: Callable[[T], Hashable]) -> List[T]:
    seen = set()
    result: List[T] = []
    for item in items:
        key = key_fn(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def merge_entity(current: E, update: E) -> E:
    """
    Shallow merge: every field set on ``update`` wins, and the entity's
    ``VOLATILE_FIELDS`` always come from ``update`` even when empty.
    """
    changes = {}
    for item_field in fields(update):
        value = getattr(update, item_field.name)
        if value is not None:
            changes[item_field.name] = value
    for name in getattr(type(update), "VOLATILE_FIELDS", ()):
        changes[name] = getattr(update, name)
    return replace(current, **changes)


def merge_entities(existing: Sequence[E], incoming: Sequence[E]) -> List[E]:
    if not existing:
        return list(incoming)

    merged: List[E] = list(existing)
    positions = {}
    for index, entity in enumerate(merged):
        positions.setdefault(_identity(entity), index)

    for entity in incoming:
        key = _identity(entity)
        index = positions.get(key)
        if index is None:
            positions[key] = len(merged)
            merged.append(entity)
        else:
            merged[index] = merge_entity(merged[index], entity)
    return merged


def _identity(entity: Any) -> str:
    return entity.id


@dataclass
class PagedCollection(Generic[E]):
    """
    Caller-held state for an infinitely scrolled list (video feed, comment
    drawer). Not thread-safe: callers apply pages from one flow at a time.
    """

    items: List[E] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False
    pages_loaded: int = 0

    def apply(self, page: Page, *, reset: bool = False) -> None:
        if reset:
            self.items = list(page.items)
            self.pages_loaded = 0
        else:
            self.items = merge_entities(self.items, page.items)
        self.next_cursor = page.next_cursor
        self.has_more = page.has_more
        self.pages_loaded += 1

    def prepend(self, entity: E) -> None:
        """Put a freshly created entity (e.g. a posted comment) at the top."""
        self.items = [entity] + [item for item in self.items if _identity(item) != _identity(entity)]
