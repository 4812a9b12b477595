"""
Annotation validator.

Rejects annotation options set on an element kind that cannot use them,
e.g. pagination on an edge or eager loading on a type, and a type
default_sort that is not a sortable field. Runs once per
element before any resolution; any error aborts the generation run.

Usage:
    from restgraph.core.validator import validate_graph

    validate_graph(graph)  # raises InvalidAnnotationKind
"""

from __future__ import annotations

from dataclasses import dataclass

from .annotations import Annotation, merge_annotations
from .defs import Element, GraphDef, TypeDef
from .errors import InvalidAnnotationKind

TYPE_ONLY = frozenset({"pagination", "default_sort", "default_order", "items_per_page"})
EDGE_ONLY = frozenset({"eager_load", "edge_update_bulk"})
FIELD_ONLY = frozenset({"read_only", "example"})
FIELD_OR_EDGE = frozenset({"sortable", "filter"})
TYPE_OR_EDGE = frozenset({"tags", "additional_tags"})

# Options that are invalid per element kind.
DISALLOWED = {
    "type": EDGE_ONLY | FIELD_ONLY | FIELD_OR_EDGE,
    "field": TYPE_ONLY | EDGE_ONLY | TYPE_OR_EDGE,
    "edge": TYPE_ONLY | FIELD_ONLY,
}


@dataclass
class AnnotationError:
    """Single misplaced-option error."""
    path: str
    kind: str
    options: list[str]

    def __str__(self) -> str:
        return f"[{self.path}] {self.kind} does not support option(s): {', '.join(self.options)}"


def check_annotation(element: Element, annotation: Annotation | None = None) -> AnnotationError | None:
    """
    Check an element's effective annotation without raising.

    If annotation is None, the element's fragments are merged first.
    """
    if annotation is None:
        annotation = merge_annotations(*element.annotations)

    invalid = [opt for opt in annotation.set_options() if opt in DISALLOWED[element.kind]]
    if not invalid:
        return None
    return AnnotationError(path=element.path, kind=element.kind, options=invalid)


def validate_annotations(element: Element, annotation: Annotation | None = None) -> None:
    """Raise InvalidAnnotationKind if element carries options its kind does not support."""
    error = check_annotation(element, annotation)
    if error is not None:
        raise InvalidAnnotationKind([str(error)])


def sortable_fields(type_def: TypeDef) -> list[str]:
    """The identity field plus every field annotated sortable, in order."""
    return [
        f.name for f in type_def.fields
        if f is type_def.id_field or merge_annotations(*f.annotations).sortable
    ]


def check_default_sort(type_def: TypeDef) -> str | None:
    """default_sort must name a sortable field of the type."""
    default_sort = merge_annotations(*type_def.annotations).default_sort
    if default_sort is None:
        return None
    sortable = sortable_fields(type_def)
    if default_sort in sortable:
        return None
    return f"[{type_def.path}] default_sort '{default_sort}' is not a sortable field, expected one of {sortable}"


def validate_graph(graph: GraphDef) -> None:
    """
    Validate every type, field and edge of the graph.

    All errors are collected before raising, so one run reports every
    misplaced option and every default_sort outside the sortable fields.
    """
    errors: list[str] = []
    for element, _parent in graph.elements():
        error = check_annotation(element)
        if error is not None:
            errors.append(str(error))
        if isinstance(element, TypeDef):
            sort_error = check_default_sort(element)
            if sort_error is not None:
                errors.append(sort_error)

    if errors:
        raise InvalidAnnotationKind(errors)
