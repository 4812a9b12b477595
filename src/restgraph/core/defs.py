"""
Core dataclass definitions for the restgraph schema graph.

These describe types, their fields and their edges, plus the annotation
fragments attached to each of them. The graph is produced by the loader
(see registry.py) and read by the generator; only inject_annotations()
appends fragments, and it must run before resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from .annotations import Annotation
from .errors import GraphConfigError

FIELD_TYPES = {"int", "float", "string", "bool", "time", "uuid", "enum", "json"}


@dataclass
class FieldDef:
    """Definition of a scalar (or JSON) field of a type."""
    name: str
    type: str = "string"
    optional: bool = False  # may be omitted on create
    nillable: bool = False  # may be null
    immutable: bool = False  # cannot be changed after create
    sensitive: bool = False  # never returned in responses
    has_default: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    enum_values: list[str] = field(default_factory=list)
    comment: str = ""
    annotations: list[Annotation] = field(default_factory=list)

    owner: Optional[str] = field(default=None, repr=False, compare=False)

    kind = "field"

    @property
    def path(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass
class EdgeDef:
    """
    Definition of an edge (relationship) between types.

    Example: Pet.owner -> User (unique), Pet.followed_by -> User through Follows.
    """
    name: str
    target: str
    unique: bool = False  # cardinality: one (True) or many (False)
    optional: bool = True
    through: Optional[str] = None  # join type for many-to-many with edge data
    inverse: Optional[str] = None  # name of the edge on target this one is the inverse of
    comment: str = ""
    annotations: list[Annotation] = field(default_factory=list)

    owner: Optional[str] = field(default=None, repr=False, compare=False)

    kind = "edge"

    @property
    def path(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass
class TypeDef:
    """Definition of an entity type. The identity field is always fields[0]."""
    name: str
    fields: list[FieldDef] = field(default_factory=list)
    edges: list[EdgeDef] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    comment: str = ""

    kind = "type"

    def __post_init__(self):
        if not any(f.name == "id" for f in self.fields):
            self.fields.insert(0, FieldDef(name="id", type="int"))
        elif self.fields[0].name != "id":
            id_field = next(f for f in self.fields if f.name == "id")
            self.fields.remove(id_field)
            self.fields.insert(0, id_field)

        for element in [*self.fields, *self.edges]:
            element.owner = self.name

    @property
    def path(self) -> str:
        return self.name

    @property
    def id_field(self) -> FieldDef:
        return self.fields[0]

    def get_field(self, name: str) -> FieldDef | None:
        return next((f for f in self.fields if f.name == name), None)

    def get_edge(self, name: str) -> EdgeDef | None:
        return next((e for e in self.edges if e.name == name), None)


Element = Union[TypeDef, FieldDef, EdgeDef]


@dataclass
class GraphDef:
    """Complete schema graph: an ordered collection of types."""
    types: list[TypeDef] = field(default_factory=list)
    version: int = 1

    def __iter__(self) -> Iterator[TypeDef]:
        return iter(self.types)

    def get_type(self, name: str) -> TypeDef | None:
        return next((t for t in self.types if t.name == name), None)

    def lookup(self, path: str) -> Element:
        """
        Resolve a dotted path to an element.

        Examples:
            "Pet" -> TypeDef
            "Pet.owner" -> EdgeDef
            "Pet.name" -> FieldDef
        """
        type_name, _, member = path.partition(".")
        type_def = self.get_type(type_name)
        if type_def is None:
            raise GraphConfigError(f"Type '{type_name}' not found")
        if not member:
            return type_def

        # Edges take precedence, matching how an edge shadows its FK field.
        element = type_def.get_edge(member) or type_def.get_field(member)
        if element is None:
            raise GraphConfigError(f"'{member}' not found on type '{type_name}'")
        return element

    def elements(self) -> Iterator[tuple[Element, TypeDef | None]]:
        """Yield (element, parent type) for every type, field and edge."""
        for type_def in self.types:
            yield type_def, None
            for field_def in type_def.fields:
                yield field_def, type_def
            for edge in type_def.edges:
                yield edge, type_def


def inject_annotations(graph: GraphDef, path: str, *fragments: Annotation) -> Element:
    """
    Append annotation fragments to the element at path.

    Meant for pre-generate hooks; fragments appended here are merged after
    those declared in the schema.
    """
    element = graph.lookup(path)
    element.annotations.extend(fragments)
    return element

