"""
Operation resolver.

Decides whether a type, field or edge participates in an operation, using
three tiers: the element's own directives, then its parent type's, then the
global defaults from Config. Exclusions on the element always win.

Effective annotations are merged lazily and memoized in an AnnotationCache
that lives for exactly one generation run.

Usage:
    resolver = OperationResolver(config)
    resolver.has_operation(edge, pet_type, Operation.UPSERT)
"""

from __future__ import annotations

import logging

from .annotations import Annotation, Operation, merge_annotations
from .config import Config
from .defs import EdgeDef, Element, TypeDef
from .utils import append_compact, memoize, slice_or

logger = logging.getLogger(__name__)


class AnnotationCache:
    """
    Memoized effective annotations, keyed by element identity.

    Built on utils.memoize: hits are plain dict reads, and a miss takes the
    lock and re-checks before merging, so each element is merged at most
    once even when several threads resolve the same parent type. Two
    elements with the same path are still cached separately.
    """

    def __init__(self):
        self._merge = memoize(self._merge_element, key=id)

    @staticmethod
    def _merge_element(element: Element) -> tuple[Element, Annotation]:
        # The entry holds the element so its id() stays reserved while cached.
        return element, merge_annotations(*element.annotations)

    def get(self, element: Element) -> Annotation:
        return self._merge(element)[1]

    def clear(self) -> None:
        self._merge.clear()

    def __len__(self) -> int:
        return len(self._merge.cache)

    def __contains__(self, element: Element) -> bool:
        entry = self._merge.cache.get(id(element))
        return entry is not None and entry[0] is element


class OperationResolver:
    """Resolves operation participation and tri-state options against Config."""

    def __init__(self, config: Config, cache: AnnotationCache | None = None):
        self.config = config
        self.cache = cache if cache is not None else AnnotationCache()

    def annotation(self, element: Element) -> Annotation:
        """Effective (merged) annotation of an element."""
        return self.cache.get(element)

    def has_operation(
        self,
        element: Element,
        parent: TypeDef | None,
        op: Operation,
    ) -> bool:
        """
        Whether element participates in op.

        Order, first match wins:
        1. op in the element's excluded_operations -> False
        2. element sets operations -> membership
        3. parent type sets operations -> membership (fields/edges only)
        4. membership in config.default_operations
        """
        ant = self.annotation(element)

        if ant.excluded_operations is not None and op in ant.excluded_operations:
            return False

        if ant.operations is not None:
            return op in ant.operations

        if parent is not None and not isinstance(element, TypeDef):
            parent_ant = self.annotation(parent)
            if parent_ant.operations is not None:
                return op in parent_ant.operations

        return op in self.config.default_operations

    def type_operations(self, type_def: TypeDef) -> list[Operation]:
        """Operations the type itself participates in, in declaration order."""
        return [op for op in Operation if self.has_operation(type_def, None, op)]

    def pagination(self, type_def: TypeDef) -> bool:
        value = self.annotation(type_def).pagination
        return self.config.default_pagination if value is None else value

    def items_per_page(self, type_def: TypeDef) -> int:
        value = self.annotation(type_def).items_per_page
        if value is None:
            return self.config.items_per_page
        return min(value, self.config.max_items_per_page)

    def eager_load(self, edge: EdgeDef) -> bool:
        value = self.annotation(edge).eager_load
        return self.config.default_eager_load if value is None else value

    def edge_update_bulk(self, edge: EdgeDef) -> bool:
        value = self.annotation(edge).edge_update_bulk
        return self.config.default_edge_update_bulk if value is None else value

    def tags(self, element: TypeDef | EdgeDef, default: str) -> list[str]:
        """
        Tags for an operation rooted at element: explicit tags (an empty
        list counts as unset), else the default, followed by additional_tags.
        """
        ant = self.annotation(element)
        tags = slice_or(list(ant.tags or ()), [default])
        return append_compact(tags, ant.additional_tags or ())


def edge_has_operation(edge: EdgeDef, parent: TypeDef, config: Config, op: Operation) -> bool:
    """One-off check with a throwaway cache."""
    result = OperationResolver(config).has_operation(edge, parent, op)
    logger.debug(f"{edge.path} {op.value}: {result}")
    return result
