#!/usr/bin/env python3
"""
restgraph CLI - Main entry point.

Usage:
    restgraph init                               # Write default restgraph.yaml
    restgraph generate schema.yaml -o api.yaml   # Generate OpenAPI document
    restgraph manifest schema.yaml --type Pet    # Print resolved manifests
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.config import Config, load_config
from ..core.errors import RestGraphError
from ..core.openapi import dump_document
from ..core.registry import load_graph
from ..generator import Generator


def _load(args: argparse.Namespace):
    config = load_config(args.config) or Config()
    graph = load_graph(args.schema)
    return graph, config


def cmd_init(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    config_path = Path(args.config)

    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists. Use --force to overwrite.")
        return 1

    Config().save(config_path)
    print(f"Created {config_path}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate the OpenAPI document."""
    try:
        graph, config = _load(args)
        result = Generator(config).run(graph)
    except RestGraphError as e:
        print(f"Error: {e}")
        return 1

    fmt = args.format or ("yaml" if str(args.output or "").endswith((".yaml", ".yml")) else "json")
    content = dump_document(result.document, fmt)

    if args.output:
        Path(args.output).write_text(content)
        print(f"Wrote {args.output}")
    else:
        print(content)
    return 0


def cmd_manifest(args: argparse.Namespace) -> int:
    """Print resolved manifests, one line per operation."""
    try:
        graph, config = _load(args)
        result = Generator(config).run(graph, emit=False)
    except RestGraphError as e:
        print(f"Error: {e}")
        return 1

    for tm in result.manifests:
        if args.type and tm.type_name != args.type:
            continue
        print(tm.type_name)
        for manifest in tm.manifests:
            entries = ", ".join(f"{e.name}:{e.shape.value}" for e in manifest.entries)
            print(f"  {manifest.operation.value:18} {entries}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="restgraph",
        description="restgraph - REST API descriptions from entity graphs"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write default restgraph.yaml")
    init_parser.add_argument("--config", "-c", default="restgraph.yaml", help="Config path")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")

    # generate
    gen_parser = subparsers.add_parser("generate", help="Generate OpenAPI document")
    gen_parser.add_argument("schema", help="Schema document (YAML or JSON)")
    gen_parser.add_argument("--config", "-c", default="restgraph.yaml", help="Config path")
    gen_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    gen_parser.add_argument("--format", choices=["json", "yaml"], help="Output format")

    # manifest
    man_parser = subparsers.add_parser("manifest", help="Print resolved manifests")
    man_parser.add_argument("schema", help="Schema document (YAML or JSON)")
    man_parser.add_argument("--config", "-c", default="restgraph.yaml", help="Config path")
    man_parser.add_argument("--type", "-t", help="Only this type")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "generate": cmd_generate,
        "manifest": cmd_manifest,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
