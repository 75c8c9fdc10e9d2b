"""
Path resolution over decoded JSON values.

A path is an ordered sequence of segments. Dict segments are looked up as
keys, list segments must be plain non-negative integers within bounds. Any
failed step yields ``MISSING`` instead of raising.
"""
from __future__ import annotations

from typing import Any, Sequence, Tuple, Union

PathLike = Union[str, Sequence[str]]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def split_path(path: PathLike) -> Tuple[str, ...]:
    if isinstance(path, str):
        return tuple(path.split("."))
    return tuple(path)


def compile_paths(*paths: str) -> Tuple[Tuple[str, ...], ...]:
    """Turn dotted alias strings into segment tuples once, at import time."""
    return tuple(split_path(path) for path in paths)


def _list_index(segment: str, size: int) -> int:
    if not (segment.isascii() and segment.isdigit()):
        return -1
    index = int(segment)
    return index if index < size else -1


def value_at_path(source: Any, path: PathLike) -> Any:
    current = source
    for segment in split_path(path):
        if isinstance(current, list):
            index = _list_index(segment, len(current))
            if index < 0:
                return MISSING
            current = current[index]
            continue
        if not isinstance(current, dict) or segment not in current:
            return MISSING
        current = current[segment]
    return current
