"""
Annotation record and merge engine.

An Annotation is the generation directive attached to a type, field or edge.
Every attribute is optional: None means "not set", which is distinct from
False or an empty list. Several fragments can be attached to one element;
they are folded left to right with Annotation.merge().

Usage:
    from restgraph.core.annotations import (
        Operation, with_include_operations, with_eager_load, merge_annotations,
    )

    ant = merge_annotations(
        with_include_operations(Operation.CREATE, Operation.READ),
        with_description("A pet."),
    )
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum, IntFlag
from typing import Any, Optional

from .errors import GraphConfigError
from .utils import append_compact, slice_compact


class Operation(str, Enum):
    """API operations a type, field or edge can participate in."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    UPSERT = "upsert"
    CREATE_OR_REPLACE = "create_or_replace"

    @classmethod
    def parse(cls, value: str | Operation) -> Operation:
        """Parse an operation from its wire name, e.g. "create_or_replace"."""
        if isinstance(value, Operation):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise GraphConfigError(f"Unknown operation '{value}'") from None


def as_list(key: str, value: Any) -> list[Any]:
    """A list option; a lone string is a one-element list."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise GraphConfigError(f"Option '{key}' must be a list, got {type(value).__name__}")
    return list(value)


# Operations used when neither an element nor its parent type sets any.
DEFAULT_OPERATIONS: list[Operation] = [
    Operation.CREATE,
    Operation.READ,
    Operation.UPDATE,
    Operation.DELETE,
    Operation.LIST,
]


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterGroup(IntFlag):
    """Groups of filter predicates generated for a field or edge."""
    NONE = 0
    EQUAL = 1 << 0        # eq, neq
    EQUAL_EXACT = 1 << 1  # eq, neq (no case folding)
    ARRAY = 1 << 2        # in, not_in
    LENGTH = 1 << 3       # gt, gte, lt, lte
    CONTAINS = 1 << 4     # contains, has_prefix, has_suffix
    NIL = 1 << 5          # is_nil, not_nil
    EDGE = 1 << 6         # has_<edge>, has_<edge>_with


@dataclass(frozen=True)
class Annotation:
    """
    Generation directives for one graph element.

    Attribute groups:
    - operations / excluded_operations: explicit inclusion list and carve-outs
    - sortable, pagination, eager_load, edge_update_bulk, read_only: tri-state
    - description, tags, additional_tags: documentation
    - filter, example, default_sort, default_order, items_per_page: passed
      through to the emitter
    """
    operations: Optional[tuple[Operation, ...]] = None
    excluded_operations: Optional[tuple[Operation, ...]] = None

    sortable: Optional[bool] = None
    pagination: Optional[bool] = None
    eager_load: Optional[bool] = None
    edge_update_bulk: Optional[bool] = None
    read_only: Optional[bool] = None

    description: Optional[str] = None
    tags: Optional[tuple[str, ...]] = None
    additional_tags: Optional[tuple[str, ...]] = None

    filter: Optional[FilterGroup] = None
    example: Any = None
    default_sort: Optional[str] = None
    default_order: Optional[Order] = None
    items_per_page: Optional[int] = None

    # Unioned across fragments, keeping first-seen order.
    UNIONED = ("additional_tags",)

    def merge(self, other: Annotation) -> Annotation:
        """
        Merge other on top of self and return the result.

        Set values in other win; unset values keep self's. additional_tags
        are unioned.
        """
        changes: dict[str, Any] = {}
        for f in fields(self):
            incoming = getattr(other, f.name)
            if incoming is None:
                continue
            if f.name in self.UNIONED:
                existing = getattr(self, f.name) or ()
                changes[f.name] = tuple(append_compact(list(existing), incoming))
            else:
                changes[f.name] = incoming
        return replace(self, **changes) if changes else self

    def set_options(self) -> list[str]:
        """Names of all attributes that are set."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def is_empty(self) -> bool:
        return not self.set_options()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Annotation:
        """
        Build an annotation from a schema document mapping.

        Example:
            {"operations": ["create", "read"], "eager_load": true, "filter": ["equal", "array"]}
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise GraphConfigError(f"Unknown annotation option(s): {unknown}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in ("operations", "excluded_operations"):
                values[key] = tuple(Operation.parse(op) for op in as_list(key, value))
            elif key in ("tags", "additional_tags"):
                values[key] = tuple(slice_compact(str(tag) for tag in as_list(key, value)))
            elif key == "filter":
                values[key] = _parse_filter(value)
            elif key == "default_order":
                values[key] = Order(str(value).lower())
            else:
                values[key] = value
        return cls(**values)


def _parse_filter(value: Any) -> FilterGroup:
    if isinstance(value, int):
        return FilterGroup(value)
    if isinstance(value, str):
        value = [value]

    group = FilterGroup.NONE
    for name in value:
        try:
            group |= FilterGroup[str(name).upper()]
        except KeyError:
            raise GraphConfigError(f"Unknown filter group '{name}'") from None
    return group


def merge_annotations(*fragments: Annotation) -> Annotation:
    """Fold fragments left to right into one effective annotation."""
    result = Annotation()
    for fragment in fragments:
        result = result.merge(fragment)
    return result


# =============================================================================
# Directive constructors
# =============================================================================


def with_include_operations(*ops: Operation | str) -> Annotation:
    """Only the given operations are generated for the element."""
    return Annotation(operations=tuple(Operation.parse(op) for op in ops))


def with_exclude_operations(*ops: Operation | str) -> Annotation:
    """The given operations are never generated for the element."""
    return Annotation(excluded_operations=tuple(Operation.parse(op) for op in ops))


def with_sortable(enabled: bool) -> Annotation:
    return Annotation(sortable=enabled)


def with_pagination(enabled: bool) -> Annotation:
    return Annotation(pagination=enabled)


def with_eager_load(enabled: bool) -> Annotation:
    return Annotation(eager_load=enabled)


def with_edge_update_bulk(enabled: bool) -> Annotation:
    """Render the edge as add_<edge>/remove_<edge> arrays on update."""
    return Annotation(edge_update_bulk=enabled)


def with_read_only(enabled: bool) -> Annotation:
    return Annotation(read_only=enabled)


def with_description(description: str) -> Annotation:
    return Annotation(description=description)


def with_tags(*tags: str) -> Annotation:
    return Annotation(tags=tuple(tags))


def with_additional_tags(*tags: str) -> Annotation:
    return Annotation(additional_tags=tuple(tags))


def with_filter(group: FilterGroup) -> Annotation:
    return Annotation(filter=group)


def with_example(example: Any) -> Annotation:
    return Annotation(example=example)


def with_default_sort(field_name: str) -> Annotation:
    return Annotation(default_sort=field_name)


def with_default_order(order: Order | str) -> Annotation:
    return Annotation(default_order=Order(order))


def with_items_per_page(count: int) -> Annotation:
    return Annotation(items_per_page=count)


class AnnotationBuilder:
    """
    Fluent accumulator over directive fragments.

    Example:
        ant = (
            AnnotationBuilder()
            .include(Operation.CREATE, Operation.UPSERT)
            .eager_load(True)
            .build()
        )
    """

    def __init__(self):
        self._fragments: list[Annotation] = []

    def add(self, *fragments: Annotation) -> AnnotationBuilder:
        self._fragments.extend(fragments)
        return self

    def include(self, *ops: Operation | str) -> AnnotationBuilder:
        return self.add(with_include_operations(*ops))

    def exclude(self, *ops: Operation | str) -> AnnotationBuilder:
        return self.add(with_exclude_operations(*ops))

    def sortable(self, enabled: bool = True) -> AnnotationBuilder:
        return self.add(with_sortable(enabled))

    def pagination(self, enabled: bool = True) -> AnnotationBuilder:
        return self.add(with_pagination(enabled))

    def eager_load(self, enabled: bool = True) -> AnnotationBuilder:
        return self.add(with_eager_load(enabled))

    def edge_update_bulk(self, enabled: bool = True) -> AnnotationBuilder:
        return self.add(with_edge_update_bulk(enabled))

    def description(self, text: str) -> AnnotationBuilder:
        return self.add(with_description(text))

    def tags(self, *tags: str) -> AnnotationBuilder:
        return self.add(with_tags(*tags))

    def additional_tags(self, *tags: str) -> AnnotationBuilder:
        return self.add(with_additional_tags(*tags))

    @property
    def fragments(self) -> list[Annotation]:
        return list(self._fragments)

    def build(self) -> Annotation:
        return merge_annotations(*self._fragments)
