"""
Graph registry - builds the schema graph from a declarative document.

The document maps type names to their fields, edges and annotations:

    version: 1
    types:
      Pet:
        annotations:
          operations: [create, read, update, delete, list]
        fields:
          name: {type: string, annotations: {sortable: true, example: Kuro}}
          age: {type: int, min: 0, max: 50}
        edges:
          owner: {target: User, unique: true, annotations: {eager_load: true}}
          categories: {target: Category, inverse: pets}

Usage:
    from restgraph.core.registry import GraphRegistry, load_graph

    graph = GraphRegistry.from_dict(data)
    graph = load_graph("schema.yaml")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .annotations import Annotation
from .defs import FIELD_TYPES, EdgeDef, FieldDef, GraphDef, TypeDef
from .errors import GraphConfigError

logger = logging.getLogger(__name__)

FIELD_KEYS = {
    "type", "optional", "nillable", "immutable", "sensitive", "default",
    "min", "max", "values", "comment", "annotations",
}
EDGE_KEYS = {"target", "unique", "required", "through", "inverse", "comment", "annotations"}


class GraphRegistry:
    """
    Collects type definitions and builds a checked GraphDef.

    Two-phase build:
    1. Register types (fields, edges, annotations)
    2. Check cross-type references (edge targets, through types, inverses)

    Example:
        registry = GraphRegistry()
        registry.register("Pet", {"fields": {"name": {"type": "string"}}})
        graph = registry.build()
    """

    GRAPH_VERSION = 1

    def __init__(self):
        self.types: list[TypeDef] = []
        self.errors: list[str] = []

    def _add_error(self, message: str, type_name: str | None = None, member: str | None = None):
        location = ".".join(p for p in (type_name, member) if p) or "global"
        self.errors.append(f"[{location}] {message}")

    def _annotation(self, data: Any, type_name: str, member: str | None = None) -> list[Annotation]:
        if not data:
            return []
        try:
            return [Annotation.from_dict(data)]
        except GraphConfigError as e:
            for message in e.errors:
                self._add_error(message, type_name, member)
            return []

    def register(self, name: str, data: dict[str, Any] | None) -> TypeDef:
        """Register one type from its document mapping."""
        data = data or {}

        fields = [
            self._build_field(name, field_name, field_data or {})
            for field_name, field_data in (data.get("fields") or {}).items()
        ]
        edges = [
            self._build_edge(name, edge_name, edge_data or {})
            for edge_name, edge_data in (data.get("edges") or {}).items()
        ]

        type_def = TypeDef(
            name=name,
            fields=fields,
            edges=edges,
            annotations=self._annotation(data.get("annotations"), name),
            comment=data.get("comment", ""),
        )
        self.types.append(type_def)
        return type_def

    def _build_field(self, type_name: str, name: str, data: dict[str, Any]) -> FieldDef:
        for key in sorted(set(data) - FIELD_KEYS):
            self._add_error(f"Unknown field option '{key}'", type_name, name)

        field_type = data.get("type", "string")
        if field_type not in FIELD_TYPES:
            self._add_error(
                f"Invalid type '{field_type}', must be one of {sorted(FIELD_TYPES)}",
                type_name,
                name,
            )

        enum_values = [str(v) for v in data.get("values", [])]
        if field_type == "enum" and not enum_values:
            self._add_error("Enum field has no values", type_name, name)

        return FieldDef(
            name=name,
            type=field_type,
            optional=bool(data.get("optional", False)),
            nillable=bool(data.get("nillable", False)),
            immutable=bool(data.get("immutable", False)),
            sensitive=bool(data.get("sensitive", False)),
            has_default="default" in data,
            min=data.get("min"),
            max=data.get("max"),
            enum_values=enum_values,
            comment=data.get("comment", ""),
            annotations=self._annotation(data.get("annotations"), type_name, name),
        )

    def _build_edge(self, type_name: str, name: str, data: dict[str, Any]) -> EdgeDef:
        for key in sorted(set(data) - EDGE_KEYS):
            self._add_error(f"Unknown edge option '{key}'", type_name, name)

        target = data.get("target")
        if not target:
            self._add_error("Missing target", type_name, name)

        return EdgeDef(
            name=name,
            target=target or "",
            unique=bool(data.get("unique", False)),
            optional=not data.get("required", False),
            through=data.get("through"),
            inverse=data.get("inverse"),
            comment=data.get("comment", ""),
            annotations=self._annotation(data.get("annotations"), type_name, name),
        )

    def build(self) -> GraphDef:
        """
        Check cross-type references and return the graph.

        Raises:
            GraphConfigError: with every collected problem
        """
        names = [t.name for t in self.types]
        for name in {n for n in names if names.count(n) > 1}:
            self._add_error("Duplicate type", name)

        known = set(names)
        for type_def in self.types:
            self._validate_edges(type_def, known)

        if self.errors:
            raise GraphConfigError(self.errors)

        logger.info(f"Built graph with {len(self.types)} types")
        return GraphDef(types=list(self.types), version=self.GRAPH_VERSION)

    def _validate_edges(self, type_def: TypeDef, known: set[str]):
        member_names = [f.name for f in type_def.fields]
        for edge in type_def.edges:
            if edge.name in member_names:
                self._add_error("Edge name clashes with a field", type_def.name, edge.name)

            if not edge.target:
                continue
            if edge.target not in known:
                self._add_error(f"Unknown target type '{edge.target}'", type_def.name, edge.name)
                continue

            if edge.through and edge.through not in known:
                self._add_error(f"Through type '{edge.through}' does not exist", type_def.name, edge.name)

            if edge.inverse:
                target = next(t for t in self.types if t.name == edge.target)
                if target.get_edge(edge.inverse) is None:
                    self._add_error(
                        f"Inverse edge '{edge.inverse}' not found on '{edge.target}'",
                        type_def.name,
                        edge.name,
                    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphDef:
        """Build a graph from a whole schema document."""
        if not isinstance(data, dict):
            raise GraphConfigError("Schema document must be a mapping")

        version = data.get("version", cls.GRAPH_VERSION)
        if version != cls.GRAPH_VERSION:
            raise GraphConfigError(f"Unsupported schema version {version}")

        registry = cls()
        for name, type_data in (data.get("types") or {}).items():
            registry.register(name, type_data)
        return registry.build()


def load_graph(path: Path | str) -> GraphDef:
    """Load and build a graph from a YAML (or JSON) schema document."""
    path = Path(path)
    if not path.exists():
        raise GraphConfigError(f"Schema file '{path}' not found")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise GraphConfigError(f"{path}: {e}") from e
    return GraphRegistry.from_dict(data)
