"""
restgraph - REST API descriptions from entity-relationship graphs.

Resolves, for every type, field and edge, which operations it takes part in
and how it is rendered in each operation's schema, then emits an OpenAPI
document.

Usage:
    from restgraph import Config, generate, load_graph

    graph = load_graph("schema.yaml")
    result = generate(graph, Config())
    result.document["components"]["schemas"]["PetUpdate"]
"""

from __future__ import annotations

from .core import (
    DEFAULT_OPERATIONS,
    Annotation,
    AnnotationBuilder,
    AnnotationCache,
    Config,
    EdgeDef,
    EncodingFailure,
    FieldDef,
    FilterGroup,
    GraphConfigError,
    GraphDef,
    GraphRegistry,
    InvalidAnnotationKind,
    Manifest,
    ManifestEntry,
    MergeConflict,
    OpenAPIEmitter,
    Operation,
    OperationResolver,
    Order,
    RenderShape,
    RestGraphError,
    SchemaVariantAssembler,
    TypeDef,
    TypeManifests,
    dump_document,
    edge_has_operation,
    inject_annotations,
    load_config,
    load_graph,
    merge_annotations,
    validate_annotations,
    validate_graph,
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
from .generator import GenerationResult, Generator, generate

__version__ = "0.1.0"

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
    # Config / loading
    "Config",
    "load_config",
    "GraphRegistry",
    "load_graph",
    # Pipeline
    "validate_annotations",
    "validate_graph",
    "AnnotationCache",
    "OperationResolver",
    "edge_has_operation",
    "SchemaVariantAssembler",
    "Manifest",
    "ManifestEntry",
    "RenderShape",
    "TypeManifests",
    "OpenAPIEmitter",
    "dump_document",
    # Generator
    "Generator",
    "GenerationResult",
    "generate",
]
