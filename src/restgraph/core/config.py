"""
Generator configuration and YAML loading.

Example restgraph.yaml:

    default_operations: [create, read, update, delete, list]
    default_pagination: true
    items_per_page: 10
    max_items_per_page: 100
    spec:
      title: Kitchensink API
      version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from .annotations import DEFAULT_OPERATIONS, Operation, as_list
from .errors import GraphConfigError

# Called with the graph and the in-progress OpenAPI document before
# validation and resolution run.
PreGenerateHook = Callable[[Any, dict], None]


@dataclass
class Config:
    """Process-wide generation defaults."""
    default_operations: list[Operation] = field(default_factory=lambda: list(DEFAULT_OPERATIONS))
    pre_generate_hook: Optional[PreGenerateHook] = None

    default_pagination: bool = True
    default_eager_load: bool = False
    default_edge_update_bulk: bool = False
    items_per_page: int = 10
    max_items_per_page: int = 100

    # False: Read/List responses always carry every key, so every property is
    # required. True: only non-optional properties are required.
    omit_empty: bool = False

    spec_title: str = "restgraph API"
    spec_version: str = "1.0.0"

    def __post_init__(self):
        self.default_operations = [
            Operation.parse(op) for op in as_list("default_operations", self.default_operations)
        ]
        if self.items_per_page < 1 or self.max_items_per_page < self.items_per_page:
            raise GraphConfigError(
                f"items_per_page ({self.items_per_page}) must be between 1 "
                f"and max_items_per_page ({self.max_items_per_page})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        spec_data = data.get("spec", {}) or {}
        defaults = cls()

        return cls(
            default_operations=data.get("default_operations", defaults.default_operations),
            default_pagination=data.get("default_pagination", defaults.default_pagination),
            default_eager_load=data.get("default_eager_load", defaults.default_eager_load),
            default_edge_update_bulk=data.get(
                "default_edge_update_bulk", defaults.default_edge_update_bulk
            ),
            items_per_page=data.get("items_per_page", defaults.items_per_page),
            max_items_per_page=data.get("max_items_per_page", defaults.max_items_per_page),
            omit_empty=data.get("omit_empty", defaults.omit_empty),
            spec_title=spec_data.get("title", defaults.spec_title),
            spec_version=str(spec_data.get("version", defaults.spec_version)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        return {
            "default_operations": [op.value for op in self.default_operations],
            "default_pagination": self.default_pagination,
            "default_eager_load": self.default_eager_load,
            "default_edge_update_bulk": self.default_edge_update_bulk,
            "items_per_page": self.items_per_page,
            "max_items_per_page": self.max_items_per_page,
            "omit_empty": self.omit_empty,
            "spec": {
                "title": self.spec_title,
                "version": self.spec_version,
            },
        }

    def save(self, path: Path | str = "restgraph.yaml") -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_config(path: Path | str = "restgraph.yaml") -> Config | None:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        return None

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise GraphConfigError(f"{path}: {e}") from e
    if not isinstance(data, dict):
        raise GraphConfigError(f"{path}: expected a mapping at top level")
    return Config.from_dict(data)
