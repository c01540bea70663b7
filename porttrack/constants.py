"""Default project layout and registry conventions used when no config overrides them."""

from __future__ import annotations

from typing import Dict, Tuple

CONFIG_FILENAME = ".porttrack.yml"

DEFAULT_REFERENCE_GRAMMAR = "java"
DEFAULT_TARGET_GRAMMAR = "rust"

_YARN_ROOT = "sources/yarn/build/namedSrc/net/minecraft"
_STEEL_ROOT = "sources/SteelMC/steel-core"

# (path, category) pairs; "auto" classifies entity-tree types by name suffix.
DEFAULT_REFERENCE_SOURCES: Tuple[Tuple[str, str], ...] = (
    (f"{_YARN_ROOT}/block", "block"),
    (f"{_YARN_ROOT}/item", "item"),
    (f"{_YARN_ROOT}/entity", "auto"),
)

DEFAULT_TARGET_SOURCES: Tuple[Tuple[str, str], ...] = (
    (f"{_STEEL_ROOT}/src/behavior/blocks", "block"),
    (f"{_STEEL_ROOT}/src/behavior/items", "item"),
    (f"{_STEEL_ROOT}/src/entity", "entity"),
)

DEFAULT_REGISTRY_CLASSES = f"{_STEEL_ROOT}/build/classes.json"

# Generated registration calls look like
#   vanilla_blocks :: BARREL , Box :: new (BarrelBlock :: new
#   vanilla_items :: ITEMS . stone , Box :: new (BlockItemBehavior :: new
BLOCK_REGISTRATION_PATTERN = (
    r"vanilla_blocks\s*::\s*(?P<id>\w+)\s*,\s*Box\s*::\s*new\s*\(\s*(?P<type>\w+)\s*::"
)
ITEM_REGISTRATION_PATTERN = (
    r"vanilla_items\s*::\s*ITEMS\s*\.\s*(?P<id>\w+)\s*,\s*Box\s*::\s*new\s*\(\s*(?P<type>\w+)"
)

DEFAULT_FAMILIES: Tuple[Dict[str, str], ...] = (
    {
        "name": "block",
        "category": "block",
        "entries": "blocks",
        "generated": f"{_STEEL_ROOT}/src/behavior/generated/blocks.rs",
        "pattern": BLOCK_REGISTRATION_PATTERN,
        "normalize": "lower",
    },
    {
        "name": "item",
        "category": "item",
        "entries": "items",
        "generated": f"{_STEEL_ROOT}/src/behavior/generated/items.rs",
        "pattern": ITEM_REGISTRATION_PATTERN,
        "normalize": "none",
    },
)

DEFAULT_CATEGORY_TABLES: Dict[str, str] = {
    "block": "block",
    "item": "item",
    "entity": "entity",
    "ai_goal": "goal",
    "ai_brain": "goal",
}
DEFAULT_TABLE = "entity"

DEFAULT_OUTPUT_DIR = "outputs"
