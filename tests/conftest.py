"""
Shared fixtures: a small pet store graph (Pet, User, Category, Follows).
"""

from __future__ import annotations

import copy

import pytest

from restgraph import Config, GraphRegistry

KITCHENSINK = {
    "version": 1,
    "types": {
        "Pet": {
            "annotations": {
                "operations": ["create", "read", "update", "create_or_replace", "delete", "list"],
                "default_sort": "name",
                "default_order": "asc",
            },
            "fields": {
                "id": {"type": "int"},
                "name": {
                    "type": "string",
                    "annotations": {"example": "Kuro", "sortable": True, "filter": ["equal", "array"]},
                },
                "nicknames": {"type": "json", "optional": True},
                "description": {
                    "type": "string",
                    "optional": True,
                    "nillable": True,
                    "comment": "Optional description of the pet.",
                },
                "age": {
                    "type": "int",
                    "min": 0,
                    "max": 50,
                    "annotations": {
                        "example": 2,
                        "sortable": True,
                        "filter": ["equal_exact", "array", "length"],
                    },
                },
                "type": {
                    "type": "enum",
                    "values": ["DOG", "CAT", "BIRD"],
                    "annotations": {"example": "DOG"},
                },
            },
            "edges": {
                "categories": {
                    "target": "Category",
                    "inverse": "pets",
                    "comment": "Categories that the pet belongs to.",
                    "annotations": {"eager_load": True, "filter": ["edge"]},
                },
                "owner": {
                    "target": "User",
                    "unique": True,
                    "inverse": "pets",
                    "comment": "The user that owns the pet.",
                    "annotations": {"eager_load": True, "filter": ["edge"]},
                },
                "friends": {
                    "target": "Pet",
                    "annotations": {"filter": ["edge"]},
                },
                "followed_by": {
                    "target": "User",
                    "through": "Follows",
                    "inverse": "followed_pets",
                },
            },
        },
        "User": {
            "fields": {
                "id": {"type": "uuid", "immutable": True},
                "username": {"type": "string"},
                "email": {"type": "string", "sensitive": True},
                "created_at": {"type": "time", "immutable": True, "default": "now"},
            },
            "edges": {
                "pets": {"target": "Pet"},
                "followed_pets": {"target": "Pet", "through": "Follows"},
            },
        },
        "Category": {
            "fields": {
                "name": {"type": "string"},
                "readonly_slug": {"type": "string", "annotations": {"read_only": True}},
            },
            "edges": {
                "pets": {"target": "Pet"},
            },
        },
        "Follows": {
            "fields": {
                "followed_at": {"type": "time", "default": "now"},
            },
            "edges": {
                "user": {"target": "User", "unique": True, "required": True},
                "pet": {"target": "Pet", "unique": True, "required": True},
            },
        },
    },
}


@pytest.fixture
def kitchensink_data() -> dict:
    return copy.deepcopy(KITCHENSINK)


@pytest.fixture
def graph(kitchensink_data):
    return GraphRegistry.from_dict(kitchensink_data)


@pytest.fixture
def config():
    return Config()
