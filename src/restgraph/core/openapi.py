"""
OpenAPI 3 document emitter.

Renders assembled manifests into:
- component schemas: {T} (embeddable), {T}Read, {T}List, {T}Create,
  {T}Update, {T}Upsert, {T}Replace
- paths: /{plural}, /{plural}/{id}, /{plural}/upsert and
  /{plural}/{id}/{edge} for non-unique edges
- list query parameters: pagination, sorting and filter predicates
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Optional

import yaml

from .annotations import FilterGroup, Operation
from .assembler import READ_LIKE, Manifest, ManifestEntry, RenderShape, TypeManifests
from .config import Config
from .defs import EdgeDef, FieldDef, GraphDef, TypeDef
from .resolver import OperationResolver
from .utils import merge_map, pluralize, to_camel_case, to_enum, to_snake_case
from .validator import sortable_fields

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"

FIELD_SCHEMAS: dict[str, dict[str, Any]] = {
    "int": {"type": "integer"},
    "float": {"type": "number", "format": "double"},
    "string": {"type": "string"},
    "bool": {"type": "boolean"},
    "time": {"type": "string", "format": "date-time"},
    "uuid": {"type": "string", "format": "uuid"},
    "enum": {"type": "string"},
    "json": {},
}

# Predicate suffixes per filter group, e.g. "name.neq".
FILTER_PREDICATES: dict[FilterGroup, list[str]] = {
    FilterGroup.EQUAL: ["eq", "neq"],
    FilterGroup.EQUAL_EXACT: ["eq", "neq"],
    FilterGroup.ARRAY: ["in", "notIn"],
    FilterGroup.LENGTH: ["gt", "gte", "lt", "lte"],
    FilterGroup.CONTAINS: ["contains", "hasPrefix", "hasSuffix"],
    FilterGroup.NIL: ["null"],
}

# HTTP method and path kind per operation.
ROUTES: dict[Operation, tuple[str, str]] = {
    Operation.CREATE: ("post", "collection"),
    Operation.LIST: ("get", "collection"),
    Operation.READ: ("get", "item"),
    Operation.UPDATE: ("patch", "item"),
    Operation.CREATE_OR_REPLACE: ("put", "item"),
    Operation.DELETE: ("delete", "item"),
    Operation.UPSERT: ("post", "upsert"),
}


def new_document(config: Config) -> dict[str, Any]:
    """Empty document handed to the pre-generate hook."""
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": config.spec_title, "version": config.spec_version},
        "paths": {},
        "components": {"schemas": {}},
    }


def ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


class OpenAPIEmitter:
    """Renders TypeManifests into an OpenAPI document."""

    def __init__(self, graph: GraphDef, resolver: OperationResolver):
        self.graph = graph
        self.resolver = resolver
        self.config = resolver.config
        self._manifests: dict[str, TypeManifests] = {}

    def emit(self, document: dict[str, Any], manifests: list[TypeManifests]) -> dict[str, Any]:
        """
        Add schemas and paths for every type to document.

        Raises:
            MergeConflict: a schema or path name is already present
            EncodingFailure: an example or enum value is not JSON-encodable
        """
        self._manifests = {tm.type_name: tm for tm in manifests}
        schemas = document.setdefault("components", {}).setdefault("schemas", {})
        paths = document.setdefault("paths", {})

        for tm in manifests:
            type_def = self.graph.get_type(tm.type_name)
            merge_map(False, schemas, self.type_schemas(type_def, tm))
            merge_map(False, paths, self.type_paths(type_def, tm))

        logger.info(f"Emitted {len(schemas)} schemas and {len(paths)} paths")
        return document

    # -------------------------------------------------------------------------
    # Schemas
    # -------------------------------------------------------------------------

    def field_schema(self, field_def: FieldDef, with_example: bool = True) -> dict[str, Any]:
        schema = dict(FIELD_SCHEMAS.get(field_def.type, {"type": "string"}))
        ant = self.resolver.annotation(field_def)

        if field_def.type == "enum":
            schema["enum"] = to_enum(field_def.enum_values)
        if field_def.type in ("int", "float"):
            if field_def.min is not None:
                schema["minimum"] = field_def.min
            if field_def.max is not None:
                schema["maximum"] = field_def.max

        description = ant.description or field_def.comment
        if description:
            schema["description"] = description
        if with_example and ant.example is not None:
            schema["example"] = to_enum([ant.example])[0]
        return schema

    def id_schema(self, type_name: str) -> dict[str, Any]:
        target = self.graph.get_type(type_name)
        return self.field_schema(target.id_field, with_example=False)

    def entry_schema(self, type_def: TypeDef, entry: ManifestEntry) -> dict[str, Any]:
        if entry.kind == "field":
            schema = self.field_schema(type_def.get_field(entry.element))
        else:
            schema = self._edge_schema(type_def.get_edge(entry.element), entry)

        if entry.nullable:
            schema["nullable"] = True
        return schema

    def _edge_schema(self, edge: EdgeDef, entry: ManifestEntry) -> dict[str, Any]:
        if entry.shape == RenderShape.EMBEDDED_ONE:
            schema: dict[str, Any] = {"allOf": [ref(edge.target)]}
        elif entry.shape == RenderShape.EMBEDDED_MANY:
            schema = {"type": "array", "items": ref(edge.target)}
        elif entry.shape == RenderShape.ID:
            schema = self.id_schema(edge.target)
        else:
            schema = {"type": "array", "items": self.id_schema(edge.target)}

        if entry.shape == RenderShape.ADD_IDS:
            schema["description"] = f"IDs of {edge.target} entities to add to the {edge.name} edge."
        elif entry.shape == RenderShape.REMOVE_IDS:
            schema["description"] = f"IDs of {edge.target} entities to remove from the {edge.name} edge."
        else:
            description = self.resolver.annotation(edge).description or edge.comment
            if description:
                schema["description"] = description
        return schema

    def object_schema(self, type_def: TypeDef, manifest: Manifest) -> dict[str, Any]:
        response = manifest.operation in READ_LIKE
        properties: dict[str, Any] = {}
        required: list[str] = []

        for entry in manifest.entries:
            properties[entry.name] = self.entry_schema(type_def, entry)
            if entry.required or (response and not self.config.omit_empty):
                required.append(entry.name)

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        if response:
            description = self.resolver.annotation(type_def).description or type_def.comment
            if description:
                schema["description"] = description
        return schema

    def list_schema(self, item: dict[str, Any], paginated: bool) -> dict[str, Any]:
        if not paginated:
            return {"type": "array", "items": item}
        return {
            "type": "object",
            "properties": {
                "page": {"type": "integer", "minimum": 1},
                "total_count": {"type": "integer", "minimum": 0},
                "last_page": {"type": "integer", "minimum": 1},
                "is_last_page": {"type": "boolean"},
                "content": {"type": "array", "items": item},
            },
            "required": ["page", "total_count", "last_page", "is_last_page", "content"],
        }

    def type_schemas(self, type_def: TypeDef, tm: TypeManifests) -> dict[str, Any]:
        schemas: dict[str, Any] = {}
        base: Optional[dict[str, Any]] = None

        for manifest in tm.manifests:
            if manifest.schema_name is None:
                continue
            obj = self.object_schema(type_def, manifest)
            if manifest.operation == Operation.LIST:
                schemas[manifest.schema_name] = self.list_schema(obj, tm.pagination)
            else:
                schemas[manifest.schema_name] = obj

            if manifest.operation in READ_LIKE and base is None:
                base = copy.deepcopy(obj)

        if base is not None:
            schemas[type_def.name] = base
        return schemas

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def type_paths(self, type_def: TypeDef, tm: TypeManifests) -> dict[str, Any]:
        snake = to_snake_case(type_def.name)
        id_param = f"{to_camel_case(snake)}ID"
        collection = f"/{pluralize(snake)}"
        routes = {
            "collection": collection,
            "item": f"{collection}/{{{id_param}}}",
            "upsert": f"{collection}/upsert",
        }
        tags = self.resolver.tags(type_def, type_def.name)

        paths: dict[str, dict[str, Any]] = {}
        for manifest in tm.manifests:
            method, kind = ROUTES[manifest.operation]
            operation = self._operation(type_def, tm, manifest, tags)
            if kind == "item":
                operation["parameters"] = [self._id_parameter(type_def, id_param)]
            paths.setdefault(routes[kind], {})[method] = operation

        for edge in type_def.edges:
            sub = self._edge_path(type_def, edge, id_param)
            if sub is not None:
                paths[f"{routes['item']}/{edge.name}"] = sub
        return paths

    def _operation(
        self,
        type_def: TypeDef,
        tm: TypeManifests,
        manifest: Manifest,
        tags: list[str],
    ) -> dict[str, Any]:
        op = manifest.operation
        operation: dict[str, Any] = {
            "operationId": to_camel_case(f"{op.value}_{to_snake_case(type_def.name)}"),
            "summary": f"{op.value.replace('_', ' ').capitalize()} {type_def.name}",
            "tags": list(tags),
        }

        read_schema = f"{type_def.name}Read" if tm.get(Operation.READ) else None
        if op == Operation.DELETE:
            operation["responses"] = {"204": {"description": f"{type_def.name} deleted"}}
            return operation

        if op == Operation.LIST:
            operation["parameters"] = self._list_parameters(type_def, tm)
            operation["responses"] = {"200": self._json_response(manifest.schema_name)}
            return operation

        if op == Operation.READ:
            operation["responses"] = {"200": self._json_response(manifest.schema_name)}
            return operation

        operation["requestBody"] = {
            "required": True,
            "content": {"application/json": {"schema": ref(manifest.schema_name)}},
        }
        status = "201" if op == Operation.CREATE else "200"
        operation["responses"] = {status: self._json_response(read_schema)}
        return operation

    def _json_response(self, schema: Optional[str]) -> dict[str, Any]:
        if schema is None:
            return {"description": "OK"}
        return {"description": "OK", "content": {"application/json": {"schema": ref(schema)}}}

    def _id_parameter(self, type_def: TypeDef, name: str) -> dict[str, Any]:
        return {
            "name": name,
            "in": "path",
            "required": True,
            "schema": self.field_schema(type_def.id_field, with_example=False),
        }

    def _list_parameters(self, type_def: TypeDef, tm: TypeManifests) -> list[dict[str, Any]]:
        params: list[dict[str, Any]] = []
        if tm.pagination:
            params.append({
                "name": "page", "in": "query",
                "schema": {"type": "integer", "minimum": 1, "default": 1},
            })
            params.append({
                "name": "per_page", "in": "query",
                "schema": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": self.config.max_items_per_page,
                    "default": tm.items_per_page,
                },
            })

        ant = self.resolver.annotation(type_def)
        sortable = sortable_fields(type_def)
        params.append({
            "name": "sort", "in": "query",
            "schema": {"type": "string", "enum": sortable, "default": ant.default_sort or "id"},
        })
        params.append({
            "name": "order", "in": "query",
            "schema": {
                "type": "string",
                "enum": ["asc", "desc"],
                "default": ant.default_order.value if ant.default_order else "asc",
            },
        })

        for field_def in type_def.fields:
            if self.resolver.has_operation(field_def, type_def, Operation.LIST):
                params.extend(self._filter_parameters(field_def))
        for edge in type_def.edges:
            group = self.resolver.annotation(edge).filter
            if group and group & FilterGroup.EDGE:
                params.append({
                    "name": f"has.{edge.name}", "in": "query",
                    "schema": {"type": "boolean"},
                })
        return params

    def _filter_parameters(self, field_def: FieldDef) -> list[dict[str, Any]]:
        group = self.resolver.annotation(field_def).filter
        if not group:
            return []

        value_schema = self.field_schema(field_def, with_example=False)
        value_schema.pop("description", None)
        params = []
        seen: set[str] = set()
        for flag, predicates in FILTER_PREDICATES.items():
            if not group & flag:
                continue
            for predicate in predicates:
                if predicate in seen:
                    continue
                seen.add(predicate)
                if predicate in ("in", "notIn"):
                    schema = {"type": "array", "items": value_schema}
                elif predicate == "null":
                    schema = {"type": "boolean"}
                else:
                    schema = value_schema
                params.append({
                    "name": f"{field_def.name}.{predicate}", "in": "query", "schema": schema,
                })
        return params

    def _edge_path(self, type_def: TypeDef, edge: EdgeDef, id_param: str) -> dict[str, Any] | None:
        if edge.unique or not self.resolver.has_operation(edge, type_def, Operation.LIST):
            return None
        target_tm = self._manifests.get(edge.target)
        if target_tm is None or target_tm.get(Operation.LIST) is None:
            return None

        target_def = self.graph.get_type(edge.target)
        return {
            "get": {
                "operationId": to_camel_case(f"list_{to_snake_case(type_def.name)}_{edge.name}"),
                "summary": f"List {edge.name} of {type_def.name}",
                "tags": self.resolver.tags(edge, type_def.name),
                "parameters": [
                    self._id_parameter(type_def, id_param),
                    *self._list_parameters(target_def, target_tm),
                ],
                "responses": {"200": self._json_response(f"{edge.target}List")},
            }
        }


class _NoAliasDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True


def dump_document(document: dict[str, Any], fmt: str = "json") -> str:
    """Serialize the document as JSON or YAML."""
    if fmt == "yaml":
        return yaml.dump(document, Dumper=_NoAliasDumper, default_flow_style=False, sort_keys=False)
    return json.dumps(document, indent=2)
