"""
Core module - annotations, graph definitions, resolution and emission.
"""

from __future__ import annotations

from .annotations import (
    DEFAULT_OPERATIONS,
    Annotation,
    AnnotationBuilder,
    FilterGroup,
    Operation,
    Order,
    merge_annotations,
    with_additional_tags,
    with_default_order,
    with_default_sort,
    with_description,
    with_eager_load,
    with_edge_update_bulk,
    with_example,
    with_exclude_operations,
    with_filter,
    with_include_operations,
    with_items_per_page,
    with_pagination,
    with_read_only,
    with_sortable,
    with_tags,
)
from .assembler import (
    Manifest,
    ManifestEntry,
    RenderShape,
    SchemaVariantAssembler,
    TypeManifests,
)
from .config import Config, load_config
from .defs import EdgeDef, FieldDef, GraphDef, TypeDef, inject_annotations
from .errors import (
    EncodingFailure,
    GraphConfigError,
    InvalidAnnotationKind,
    MergeConflict,
    RestGraphError,
)
from .openapi import OpenAPIEmitter, dump_document
from .registry import GraphRegistry, load_graph
from .resolver import AnnotationCache, OperationResolver, edge_has_operation
from .validator import validate_annotations, validate_graph

__all__ = [
    # Annotations
    "Annotation",
    "AnnotationBuilder",
    "Operation",
    "Order",
    "FilterGroup",
    "DEFAULT_OPERATIONS",
    "merge_annotations",
    "with_include_operations",
    "with_exclude_operations",
    "with_sortable",
    "with_pagination",
    "with_eager_load",
    "with_edge_update_bulk",
    "with_read_only",
    "with_description",
    "with_tags",
    "with_additional_tags",
    "with_filter",
    "with_example",
    "with_default_sort",
    "with_default_order",
    "with_items_per_page",
    # Definitions
    "FieldDef",
    "EdgeDef",
    "TypeDef",
    "GraphDef",
    "inject_annotations",
    # Errors
    "RestGraphError",
    "InvalidAnnotationKind",
    "MergeConflict",
    "EncodingFailure",
    "GraphConfigError",
    # Config
    "Config",
    "load_config",
    # Registry
    "GraphRegistry",
    "load_graph",
    # Validation
    "validate_annotations",
    "validate_graph",
    # Resolution
    "AnnotationCache",
    "OperationResolver",
    "edge_has_operation",
    # Assembly
    "SchemaVariantAssembler",
    "Manifest",
    "ManifestEntry",
    "RenderShape",
    "TypeManifests",
    # Emission
    "OpenAPIEmitter",
    "dump_document",
]
