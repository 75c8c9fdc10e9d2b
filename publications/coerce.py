"""
Scalar coercers driven by ordered candidate-path tables.

Each coercer walks its candidate paths in order and returns the first value
that coerces successfully. An earlier path always wins over a later one, even
when the later one would look like a better match. ``None`` means "absent".
"""
from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar, Union

from publications.paths import MISSING, PathLike, value_at_path

R = TypeVar("R")
Number = Union[int, float]

_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
TRUE_TOKENS = frozenset({"true", "yes", "1", "y"})
FALSE_TOKENS = frozenset({"false", "no", "0", "n"})


def is_number(value: Any) -> bool:
    # bool is an int subclass but never counts as a number in a payload
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    if not is_number(value):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def format_number(value: Number) -> str:
    """Render a number the way a JSON producer would print it (1.0 -> "1")."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def parse_float_prefix(text: str) -> Optional[float]:
    match = _FLOAT_PREFIX_RE.match(text.strip())
    if not match:
        return None
    try:
        parsed = float(match.group(0))
    except (OverflowError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def coerce_string(value: Any) -> Optional[str]:
    if isinstance(value, str):
        trimmed = value.strip()
        return trimmed or None
    if is_finite_number(value):
        return format_number(value)
    return None


def coerce_number(value: Any) -> Optional[Number]:
    if is_finite_number(value):
        return value
    if isinstance(value, str):
        return parse_float_prefix(value.replace(",", ""))
    return None


def coerce_boolean(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_TOKENS:
            return True
        if normalized in FALSE_TOKENS:
            return False
        return None
    if is_number(value):
        if value == 1:
            return True
        if value == 0:
            return False
    return None


def first_match(source: Any, paths: Iterable[PathLike], coerce: Callable[[Any], Optional[R]]) -> Optional[R]:
    for path in paths:
        value = value_at_path(source, path)
        if value is MISSING:
            continue
        result = coerce(value)
        if result is not None:
            return result
    return None


def pick_string(source: Any, paths: Iterable[PathLike]) -> Optional[str]:
    return first_match(source, paths, coerce_string)


def pick_number(source: Any, paths: Iterable[PathLike]) -> Optional[Number]:
    return first_match(source, paths, coerce_number)


def pick_boolean(source: Any, paths: Iterable[PathLike]) -> Optional[bool]:
    return first_match(source, paths, coerce_boolean)


def pick_string_from_sources(sources: Sequence[Any], paths: Sequence[PathLike]) -> Optional[str]:
    for source in sources:
        result = pick_string(source, paths)
        if result:
            return result
    return None


def pick_number_from_sources(sources: Sequence[Any], paths: Sequence[PathLike]) -> Optional[Number]:
    for source in sources:
        result = pick_number(source, paths)
        if result is not None:
            return result
    return None


def pick_boolean_from_sources(sources: Sequence[Any], paths: Sequence[PathLike]) -> Optional[bool]:
    for source in sources:
        result = pick_boolean(source, paths)
        if result is not None:
            return result
    return None


def round_count(value: Number) -> int:
    """Round half up (as browsers do) and clamp to a non-negative integer."""
    if isinstance(value, int):
        return max(0, value)
    return max(0, int(math.floor(value + 0.5)))
