"""
restgraph Generator - runs one full generation pass.

Usage:
    from restgraph import Config, Generator, load_graph

    graph = load_graph("schema.yaml")
    result = Generator(Config()).run(graph)
    result.document  # OpenAPI dict
    result.manifests  # per-type, per-operation manifests

Every run builds a fresh AnnotationCache, so annotations injected by the
pre-generate hook (or between runs) are always seen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .core.assembler import Manifest, SchemaVariantAssembler, TypeManifests
from .core.annotations import Operation
from .core.config import Config
from .core.defs import GraphDef
from .core.openapi import OpenAPIEmitter, new_document
from .core.resolver import AnnotationCache, OperationResolver
from .core.validator import validate_graph

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Output of one run."""
    manifests: list[TypeManifests] = field(default_factory=list)
    document: dict[str, Any] = field(default_factory=dict)

    def get(self, type_name: str) -> TypeManifests | None:
        return next((tm for tm in self.manifests if tm.type_name == type_name), None)

    def manifest(self, type_name: str, op: Operation) -> Manifest | None:
        tm = self.get(type_name)
        return tm.get(op) if tm else None


class Generator:
    """
    Orchestrates hook -> validation -> resolution -> assembly -> emission.

    Any RestGraphError aborts the run; no partial document is returned.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def run(self, graph: GraphDef, emit: bool = True) -> GenerationResult:
        document = new_document(self.config)

        if self.config.pre_generate_hook is not None:
            logger.debug("Running pre-generate hook")
            self.config.pre_generate_hook(graph, document)

        validate_graph(graph)

        resolver = OperationResolver(self.config, AnnotationCache())
        manifests = SchemaVariantAssembler(graph, resolver).assemble()
        logger.info(
            f"Assembled {sum(len(tm.manifests) for tm in manifests)} manifests "
            f"for {len(manifests)} types"
        )

        if emit:
            document = OpenAPIEmitter(graph, resolver).emit(document, manifests)

        return GenerationResult(manifests=manifests, document=document)


def generate(graph: GraphDef, config: Optional[Config] = None) -> GenerationResult:
    """Convenience function for a single run."""
    return Generator(config).run(graph)
