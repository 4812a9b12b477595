"""
Schema variant assembler.

For every type and every operation the type participates in, computes the
ordered manifest of fields and edges that appear in that operation's
request or response schema, with a render shape per entry.

Usage:
    resolver = OperationResolver(config)
    manifests = SchemaVariantAssembler(graph, resolver).assemble()
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .annotations import Operation
from .defs import EdgeDef, FieldDef, GraphDef, TypeDef
from .resolver import OperationResolver
from .utils import intersect

logger = logging.getLogger(__name__)


class RenderShape(str, Enum):
    """How a manifest entry is rendered."""
    VALUE = "value"  # plain field value
    ID = "id"  # single identifier of the edge target
    IDS = "ids"  # array of identifiers
    ADD_IDS = "add_ids"  # add_<edge> bulk array
    REMOVE_IDS = "remove_ids"  # remove_<edge> bulk array
    EMBEDDED_ONE = "embedded_one"  # related entity inline
    EMBEDDED_MANY = "embedded_many"  # array of related entities inline


# Schema name suffix per operation; Delete has no body.
SCHEMA_SUFFIXES: dict[Operation, str] = {
    Operation.CREATE: "Create",
    Operation.UPDATE: "Update",
    Operation.UPSERT: "Upsert",
    Operation.CREATE_OR_REPLACE: "Replace",
    Operation.READ: "Read",
    Operation.LIST: "List",
}

# Operations whose body is built like Create: every writable element, required
# where the schema requires it.
CREATE_LIKE = frozenset({Operation.CREATE, Operation.UPSERT, Operation.CREATE_OR_REPLACE})
READ_LIKE = frozenset({Operation.READ, Operation.LIST})


class ManifestEntry(BaseModel):
    """One property of an operation schema."""
    name: str  # property name, e.g. "owner" or "add_categories"
    kind: Literal["field", "edge"]
    element: str  # field/edge name on the owning type
    shape: RenderShape
    required: bool = False
    nullable: bool = False
    target: Optional[str] = None  # target type name for edges


class Manifest(BaseModel):
    """Ordered entries of one type's one operation."""
    type_name: str
    operation: Operation
    schema_name: Optional[str] = None
    entries: list[ManifestEntry] = Field(default_factory=list)

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def get(self, name: str) -> ManifestEntry | None:
        return next((e for e in self.entries if e.name == name), None)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


class TypeManifests(BaseModel):
    """All manifests of one type, in operation declaration order."""
    type_name: str
    manifests: list[Manifest] = Field(default_factory=list)
    pagination: bool = True
    items_per_page: int = 10

    @property
    def operations(self) -> list[Operation]:
        return [m.operation for m in self.manifests]

    def get(self, op: Operation) -> Manifest | None:
        return next((m for m in self.manifests if m.operation == op), None)


def schema_name(type_name: str, op: Operation) -> str | None:
    suffix = SCHEMA_SUFFIXES.get(op)
    return f"{type_name}{suffix}" if suffix else None


class SchemaVariantAssembler:
    """Builds per-type, per-operation manifests from a resolved graph."""

    def __init__(self, graph: GraphDef, resolver: OperationResolver):
        self.graph = graph
        self.resolver = resolver

    def assemble(self) -> list[TypeManifests]:
        """
        Manifests for every type that participates in at least one operation.

        Types with no operations are dropped from the surface.
        """
        result = []
        for type_def in self.graph:
            type_manifests = self.assemble_type(type_def)
            if type_manifests is None:
                logger.warning(f"Type '{type_def.name}' has no operations, skipping")
                continue
            result.append(type_manifests)
        return result

    def assemble_type(self, type_def: TypeDef) -> TypeManifests | None:
        operations = self.resolver.type_operations(type_def)
        if not operations:
            return None

        return TypeManifests(
            type_name=type_def.name,
            manifests=[self.build_manifest(type_def, op) for op in operations],
            pagination=self.resolver.pagination(type_def),
            items_per_page=self.resolver.items_per_page(type_def),
        )

    def build_manifest(self, type_def: TypeDef, op: Operation) -> Manifest:
        """
        Ordered entries for type_def under op: fields first, then edges,
        each in declaration order.
        """
        manifest = Manifest(
            type_name=type_def.name,
            operation=op,
            schema_name=schema_name(type_def.name, op),
        )
        if op == Operation.DELETE:
            return manifest

        for field_def in type_def.fields:
            if self._field_participates(type_def, field_def, op):
                manifest.entries.append(self._field_entry(field_def, op))

        for edge in type_def.edges:
            if self.resolver.has_operation(edge, type_def, op):
                manifest.entries.extend(self._edge_entries(edge, op))

        logger.debug(f"{manifest.schema_name}: {manifest.names()}")
        return manifest

    def _field_participates(self, type_def: TypeDef, field_def: FieldDef, op: Operation) -> bool:
        if not self.resolver.has_operation(field_def, type_def, op):
            return False

        if op in READ_LIKE:
            return not field_def.sensitive

        # Write operations.
        if field_def is type_def.id_field:
            return False
        if self.resolver.annotation(field_def).read_only:
            return False
        if op == Operation.UPDATE and field_def.immutable:
            return False
        return True

    def _field_entry(self, field_def: FieldDef, op: Operation) -> ManifestEntry:
        if op in CREATE_LIKE:
            required = not field_def.optional and not field_def.has_default
        elif op in READ_LIKE:
            required = not field_def.optional
        else:
            required = False

        return ManifestEntry(
            name=field_def.name,
            kind="field",
            element=field_def.name,
            shape=RenderShape.VALUE,
            required=required,
            nullable=field_def.nillable,
        )

    def _edge_entries(self, edge: EdgeDef, op: Operation) -> list[ManifestEntry]:
        def entry(name: str, shape: RenderShape, required: bool = False) -> ManifestEntry:
            return ManifestEntry(
                name=name,
                kind="edge",
                element=edge.name,
                shape=shape,
                required=required,
                nullable=edge.unique and edge.optional,
                target=edge.target,
            )

        plain = RenderShape.ID if edge.unique else RenderShape.IDS

        if op == Operation.UPDATE and self.resolver.edge_update_bulk(edge):
            return [
                entry(f"add_{edge.name}", RenderShape.ADD_IDS),
                entry(f"remove_{edge.name}", RenderShape.REMOVE_IDS),
            ]

        if op in CREATE_LIKE:
            return [entry(edge.name, plain, required=edge.unique and not edge.optional)]

        if op == Operation.UPDATE:
            return [entry(edge.name, plain)]

        # Read/List.
        if self.resolver.eager_load(edge) and self._embeddable(edge.target):
            shape = RenderShape.EMBEDDED_ONE if edge.unique else RenderShape.EMBEDDED_MANY
            return [entry(edge.name, shape, required=edge.unique and not edge.optional)]
        return [entry(edge.name, plain)]

    def _embeddable(self, target: str) -> bool:
        """Targets can only be embedded if they expose a readable schema."""
        target_def = self.graph.get_type(target)
        if target_def is None:
            return False
        return bool(intersect(READ_LIKE, self.resolver.type_operations(target_def)))
