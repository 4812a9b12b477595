"""
Tests for restgraph.generator module.
"""

import pytest

from restgraph import Config, Generator, generate
from restgraph.core.annotations import (
    Operation,
    with_eager_load,
    with_include_operations,
    with_pagination,
)
from restgraph.core.assembler import RenderShape
from restgraph.core.defs import inject_annotations
from restgraph.core.errors import InvalidAnnotationKind


class TestGenerator:
    """Tests for a full generation run."""

    def test_run(self, graph):
        result = generate(graph)

        assert [tm.type_name for tm in result.manifests] == ["Pet", "User", "Category", "Follows"]
        assert result.document["info"]["title"] == "restgraph API"
        assert "PetRead" in result.document["components"]["schemas"]

    def test_manifest_lookup(self, graph):
        result = generate(graph)
        assert result.manifest("Pet", Operation.UPSERT) is None
        assert result.manifest("Pet", Operation.READ).schema_name == "PetRead"
        assert result.manifest("Person", Operation.READ) is None

    def test_without_emit(self, graph):
        result = Generator(Config()).run(graph, emit=False)
        assert result.manifests
        assert result.document["paths"] == {}

    def test_hook_injects_annotations(self, graph):
        def hook(g, document):
            inject_annotations(g, "Pet", with_include_operations(Operation.UPSERT, Operation.READ))
            document["info"]["description"] = "Pet store"

        result = generate(graph, Config(pre_generate_hook=hook))

        assert result.manifest("Pet", Operation.UPSERT).get("owner").shape == RenderShape.ID
        assert result.manifest("Pet", Operation.CREATE) is None
        assert result.document["info"]["description"] == "Pet store"

    def test_hook_error_aborts(self, graph):
        def hook(g, document):
            raise InvalidAnnotationKind(["[Pet] hook failed"])

        with pytest.raises(InvalidAnnotationKind):
            generate(graph, Config(pre_generate_hook=hook))

    def test_invalid_annotation_aborts(self, graph):
        inject_annotations(graph, "Pet", with_eager_load(True))
        with pytest.raises(InvalidAnnotationKind, match=r"\[Pet\] type"):
            generate(graph)

    def test_fresh_cache_per_run(self, graph):
        generator = Generator(Config())
        assert generator.run(graph).get("Pet").pagination is True

        inject_annotations(graph, "Pet", with_pagination(False))

        assert generator.run(graph).get("Pet").pagination is False

    def test_spec_info_from_config(self, graph):
        result = generate(graph, Config(spec_title="Kitchensink", spec_version="2.0.0"))
        assert result.document["info"] == {"title": "Kitchensink", "version": "2.0.0"}
