"""
Utility functions for restgraph.

Includes:
- Order-preserving list helpers (compact append, intersection)
- Map merging with overlap policy
- JSON encoding of example/enum values
- Memoization
- Case conversion and pluralization for schema/path naming
"""

from __future__ import annotations

import json
import re
import threading
from typing import Any, Callable, Hashable, Iterable, TypeVar

from .errors import EncodingFailure, MergeConflict

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


# =============================================================================
# List helpers
# =============================================================================


def append_compact_func(
    orig: list[T],
    newv: Iterable[T],
    fn: Callable[[T, T], bool],
) -> list[T]:
    """
    Return a copy of orig with each value of newv appended, unless fn reports
    it matches a value already present.
    """
    result = list(orig)
    for value in newv:
        if not any(fn(existing, value) for existing in result):
            result.append(value)
    return result


def append_compact(orig: list[T], newv: Iterable[T]) -> list[T]:
    """Like append_compact_func, using equality."""
    return append_compact_func(orig, newv, lambda a, b: a == b)


def slice_compact(orig: Iterable[T]) -> list[T]:
    """Remove duplicates while keeping first-seen order."""
    return append_compact([], orig)


def slice_or(value: list[T] | None, *defaults: list[T] | None) -> list[T] | None:
    """
    Return value if non-empty, else the first non-empty default.

    Examples:
        slice_or([], ["foo"]) -> ["foo"]
        slice_or(["bar"], ["foo"]) -> ["bar"]
    """
    if value:
        return value
    for default in defaults:
        if default:
            return default
    return value


def intersect(a: Iterable[T], b: Iterable[T]) -> list[T]:
    """Values of b that are also in a, in b's order."""
    seen = set(a)
    return [v for v in b if v in seen]


# =============================================================================
# Map helpers
# =============================================================================


def merge_map(overlap: bool, orig: dict[K, V], newv: dict[K, V] | None) -> None:
    """
    Merge newv into orig in place.

    With overlap=False an existing key raises MergeConflict; with overlap=True
    newv's values win.
    """
    if orig is None:
        raise TypeError("orig is None")
    if not newv:
        return

    for key, value in newv.items():
        if key in orig and not overlap:
            raise MergeConflict(key)
        orig[key] = value


# =============================================================================
# JSON encoding
# =============================================================================


def to_raw_json(values: Iterable[Any]) -> list[str]:
    """
    JSON-encode each value.

    Values here come from generation logic, so a failure is a programming
    error and raises EncodingFailure.
    """
    encoded = []
    for value in values:
        try:
            encoded.append(json.dumps(value, allow_nan=False))
        except (TypeError, ValueError) as e:
            raise EncodingFailure(value, str(e)) from e
    return encoded


def to_enum(values: Iterable[Any]) -> list[Any]:
    """
    Validate that values can be used as OpenAPI enum members.

    Returns the values decoded back from JSON, so tuples become lists and
    the result is safe to embed in a document.
    """
    return [json.loads(raw) for raw in to_raw_json(values)]


# =============================================================================
# Memoization
# =============================================================================


def memoize(
    fn: Callable[[T], V],
    key: Callable[[T], Hashable] | None = None,
) -> Callable[[T], V]:
    """
    Memoize a single-argument function.

    key maps the argument to its cache key (the argument itself by default;
    key=id for unhashable objects). Reads of an existing entry take no lock;
    a miss takes the lock and re-checks, so fn runs at most once per key.
    """
    cache: dict[Hashable, V] = {}
    lock = threading.Lock()
    key_fn = key or (lambda arg: arg)

    def wrapper(arg: T) -> V:
        k = key_fn(arg)
        try:
            return cache[k]
        except KeyError:
            pass

        with lock:
            if k not in cache:
                cache[k] = fn(arg)
            return cache[k]

    def clear() -> None:
        with lock:
            cache.clear()

    wrapper.cache = cache  # type: ignore[attr-defined]
    wrapper.clear = clear  # type: ignore[attr-defined]
    return wrapper


# =============================================================================
# Case conversion utilities
# =============================================================================

_CAMEL_TO_SNAKE_PATTERN = re.compile(r"([a-z0-9])([A-Z])")
_SNAKE_TO_CAMEL_PATTERN = re.compile(r'_([a-z])')


def to_snake_case(name: str) -> str:
    """
    Convert camelCase/PascalCase to snake_case.

    Examples:
        followedBy -> followed_by
        HTTPResponse -> http_response
    """
    result = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    result = _CAMEL_TO_SNAKE_PATTERN.sub(r"\1_\2", result)
    return result.lower()


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        followed_by -> followedBy
    """
    def replace_underscore(match):
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)


def pluralize(word: str) -> str:
    """
    Naive English plural for path segments.

    Examples:
        pet -> pets
        category -> categories
        box -> boxes
        status -> statuses
        follows -> follows
    """
    if not word:
        return word
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(("ss", "us", "x", "z", "ch", "sh")):
        return word + "es"
    if word.endswith("s"):
        return word
    return word + "s"
