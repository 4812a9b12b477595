"""
Tests for restgraph.core.assembler module.
"""

import pytest

from restgraph.core.annotations import (
    Operation,
    with_eager_load,
    with_edge_update_bulk,
    with_exclude_operations,
    with_include_operations,
)
from restgraph.core.assembler import RenderShape, SchemaVariantAssembler, schema_name
from restgraph.core.config import Config
from restgraph.core.defs import inject_annotations
from restgraph.core.resolver import OperationResolver

ALL_PET_OPS = (
    Operation.CREATE,
    Operation.READ,
    Operation.UPDATE,
    Operation.UPSERT,
    Operation.DELETE,
    Operation.LIST,
)


def assemble(graph, config=None):
    resolver = OperationResolver(config or Config())
    return {tm.type_name: tm for tm in SchemaVariantAssembler(graph, resolver).assemble()}


class TestScenarios:
    """End-to-end manifest scenarios on the pet store graph."""

    def test_upsert_inherits_unique_edge(self, graph):
        """Pet declares upsert; unannotated owner joins as a scalar id."""
        inject_annotations(graph, "Pet", with_include_operations(*ALL_PET_OPS))

        upsert = assemble(graph)["Pet"].get(Operation.UPSERT)

        assert upsert is not None
        assert upsert.schema_name == "PetUpsert"
        assert upsert.get("owner").shape == RenderShape.ID

    def test_edge_excluded_from_upsert(self, graph):
        inject_annotations(graph, "Pet", with_include_operations(*ALL_PET_OPS))
        inject_annotations(graph, "Pet.owner", with_exclude_operations(Operation.UPSERT))

        pet = assemble(graph)["Pet"]

        assert "owner" not in pet.get(Operation.UPSERT)
        assert pet.get(Operation.CREATE).get("owner").shape == RenderShape.ID

    def test_edge_update_bulk(self, graph):
        inject_annotations(graph, "Pet.categories", with_edge_update_bulk(True))

        pet = assemble(graph)["Pet"]
        update = pet.get(Operation.UPDATE)
        create = pet.get(Operation.CREATE)

        assert update.get("add_categories").shape == RenderShape.ADD_IDS
        assert update.get("remove_categories").shape == RenderShape.REMOVE_IDS
        assert "categories" not in update
        assert create.get("categories").shape == RenderShape.IDS
        assert "add_categories" not in create
        assert "remove_categories" not in create

        # Other edges keep their plain shape.
        assert update.get("friends").shape == RenderShape.IDS
        assert "add_friends" not in update

    def test_bulk_pair_on_unique_edge(self, graph):
        inject_annotations(graph, "Pet.owner", with_edge_update_bulk(True))

        update = assemble(graph)["Pet"].get(Operation.UPDATE)

        assert update.get("add_owner").shape == RenderShape.ADD_IDS
        assert update.get("remove_owner").shape == RenderShape.REMOVE_IDS
        assert "owner" not in update

    def test_non_unique_edge_in_upsert(self, graph):
        inject_annotations(graph, "Category", with_include_operations(*ALL_PET_OPS))

        upsert = assemble(graph)["Category"].get(Operation.UPSERT)

        assert upsert.get("pets").shape == RenderShape.IDS
        assert upsert.get("pets").target == "Pet"

    def test_parent_list_beats_defaults(self, graph):
        config = Config(default_operations=[Operation.READ, Operation.LIST])
        inject_annotations(graph, "Pet", with_include_operations(Operation.CREATE, Operation.READ))

        manifests = assemble(graph, config)

        assert manifests["Pet"].get(Operation.CREATE).get("owner").shape == RenderShape.ID
        assert manifests["User"].operations == [Operation.READ, Operation.LIST]

    def test_edge_in_create_or_replace(self, graph):
        replace = assemble(graph)["Pet"].get(Operation.CREATE_OR_REPLACE)
        assert replace.schema_name == "PetReplace"
        assert replace.get("owner").shape == RenderShape.ID
        assert replace.get("categories").shape == RenderShape.IDS


class TestFieldRules:
    """Tests for field participation per operation."""

    def test_create_excludes_identity(self, graph):
        create = assemble(graph)["Pet"].get(Operation.CREATE)
        assert "id" not in create
        assert create.names()[:5] == ["name", "nicknames", "description", "age", "type"]

    def test_read_includes_identity(self, graph):
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.names()[0] == "id"

    def test_fields_before_edges_in_declaration_order(self, graph):
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.names() == [
            "id", "name", "nicknames", "description", "age", "type",
            "categories", "owner", "friends", "followed_by",
        ]

    def test_required_on_create(self, graph):
        create = assemble(graph)["Pet"].get(Operation.CREATE)
        assert create.get("name").required
        assert create.get("age").required
        assert not create.get("nicknames").required
        assert not create.get("description").required
        assert create.get("description").nullable

    def test_nothing_required_on_update(self, graph):
        update = assemble(graph)["Pet"].get(Operation.UPDATE)
        assert not any(entry.required for entry in update.entries)

    def test_immutable_excluded_from_update(self, graph):
        user = assemble(graph)["User"]
        assert "created_at" in user.get(Operation.CREATE)
        assert not user.get(Operation.CREATE).get("created_at").required
        assert "created_at" not in user.get(Operation.UPDATE)

    def test_sensitive_excluded_from_read(self, graph):
        user = assemble(graph)["User"]
        assert "email" in user.get(Operation.CREATE)
        assert "email" not in user.get(Operation.READ)
        assert "email" not in user.get(Operation.LIST)

    def test_read_only_excluded_from_writes(self, graph):
        category = assemble(graph)["Category"]
        assert "readonly_slug" not in category.get(Operation.CREATE)
        assert "readonly_slug" not in category.get(Operation.UPDATE)
        assert "readonly_slug" in category.get(Operation.READ)

    def test_field_exclusion(self, graph):
        inject_annotations(graph, "Pet.age", with_exclude_operations(Operation.LIST))
        pet = assemble(graph)["Pet"]
        assert "age" in pet.get(Operation.READ)
        assert "age" not in pet.get(Operation.LIST)


class TestEdgeShapes:
    """Tests for edge shapes on read operations."""

    def test_eager_loaded_edges_embedded(self, graph):
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.get("categories").shape == RenderShape.EMBEDDED_MANY
        assert read.get("owner").shape == RenderShape.EMBEDDED_ONE
        assert read.get("owner").nullable

    def test_non_eager_edges_as_ids(self, graph):
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.get("friends").shape == RenderShape.IDS

    def test_eager_load_needs_readable_target(self, graph):
        inject_annotations(graph, "User", with_include_operations(Operation.CREATE))
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.get("owner").shape == RenderShape.ID

    def test_eager_load_from_config(self, graph):
        read = assemble(graph, Config(default_eager_load=True))["Category"].get(Operation.READ)
        assert read.get("pets").shape == RenderShape.EMBEDDED_MANY

    def test_eager_load_disabled_on_edge(self, graph):
        inject_annotations(graph, "Pet.owner", with_eager_load(False))
        read = assemble(graph)["Pet"].get(Operation.READ)
        assert read.get("owner").shape == RenderShape.ID

    def test_required_unique_edge_on_create(self, graph):
        create = assemble(graph)["Follows"].get(Operation.CREATE)
        assert create.get("user").required
        assert create.get("pet").required
        assert not assemble(graph)["Pet"].get(Operation.CREATE).get("owner").required


class TestSurface:
    """Tests for which types and operations appear at all."""

    def test_delete_has_empty_manifest(self, graph):
        delete = assemble(graph)["Pet"].get(Operation.DELETE)
        assert delete.entries == []
        assert delete.schema_name is None

    def test_type_without_operations_dropped(self, graph):
        inject_annotations(graph, "Follows", with_include_operations())
        assert "Follows" not in assemble(graph)

    def test_empty_mutation_manifest_kept(self, graph):
        for field in ("name", "readonly_slug"):
            inject_annotations(graph, f"Category.{field}", with_exclude_operations(Operation.CREATE))
        inject_annotations(graph, "Category.pets", with_exclude_operations(Operation.CREATE))

        create = assemble(graph)["Category"].get(Operation.CREATE)

        assert create is not None
        assert create.entries == []

    def test_operations_follow_type(self, graph):
        assert assemble(graph)["Pet"].operations == [
            Operation.CREATE,
            Operation.READ,
            Operation.UPDATE,
            Operation.DELETE,
            Operation.LIST,
            Operation.CREATE_OR_REPLACE,
        ]

    @pytest.mark.parametrize("op,expected", [
        (Operation.CREATE, "PetCreate"),
        (Operation.UPDATE, "PetUpdate"),
        (Operation.UPSERT, "PetUpsert"),
        (Operation.CREATE_OR_REPLACE, "PetReplace"),
        (Operation.READ, "PetRead"),
        (Operation.LIST, "PetList"),
        (Operation.DELETE, None),
    ])
    def test_schema_names(self, op, expected):
        assert schema_name("Pet", op) == expected

    def test_pagination_and_page_size(self, graph):
        tm = assemble(graph, Config(items_per_page=25))["Pet"]
        assert tm.pagination is True
        assert tm.items_per_page == 25
