"""
Custom exceptions for restgraph.
"""

from __future__ import annotations

from typing import Any


class RestGraphError(Exception):
    """Base exception for all restgraph errors."""
    pass


class InvalidAnnotationKind(RestGraphError):
    """Raised when an annotation option is set on an element kind that does not support it."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid annotations: {errors}")


class MergeConflict(RestGraphError):
    """Raised when a no-overlap merge finds the same key on both sides."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"key {key!r} already exists in original map")


class EncodingFailure(RestGraphError):
    """Raised when a generated example or enum value cannot be JSON-encoded."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        super().__init__(f"failed to marshal {value!r}: {reason}")


class GraphConfigError(RestGraphError):
    """Raised when the schema graph or generator configuration is malformed."""

    def __init__(self, errors: list[str] | str):
        self.errors = [errors] if isinstance(errors, str) else errors
        super().__init__(f"Graph configuration invalid: {self.errors}")
