"""Registry resolution: reference class to reimplementation class via logical ids.

Two independently produced tables are joined per registry family:

1. a declarative registry table (``classes.json``) mapping logical id to the
   reference class, e.g. ``{"name": "barrel", "class": "BarrelBlock"}``;
2. generated registration code in the reimplementation, matched with a narrow
   regular expression over its known emitted shape, e.g.
   ``vanilla_blocks :: BARREL , Box :: new (BarrelBlock :: new``.

Both sides are normalized with the family's :class:`IdNormalization` before the
join. Ids present on only one side produce no mapping, which later surfaces as
a 0% implemented class rather than an error.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import ConfigError, FamilyConfig
from .logging import get_logger
from .models import IdNormalization

_logger = get_logger("registry")


class RegistryError(ConfigError):
    """Raised when the declarative registry table is missing or malformed."""


@dataclass(frozen=True)
class RegistryEntry:
    """Logical id to reference class, from the declarative registry table."""

    logical_id: str
    class_name: str


@dataclass(frozen=True)
class GeneratedEntry:
    """Logical id to reimplementation class, from generated registration code."""

    logical_id: str
    class_name: str


class ClassMapping:
    """Reference class name to reimplementation class name for one family.

    Lookups accept the exact reference name or its simple name, so a table
    keyed by ``net.minecraft.block.BarrelBlock`` still answers ``BarrelBlock``.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        self._mapping: Dict[str, str] = dict(mapping or {})
        self._by_simple_name: Dict[str, str] = {}
        for reference in sorted(self._mapping):
            self._by_simple_name.setdefault(_simple_name(reference), self._mapping[reference])

    def resolve(self, class_name: str) -> Optional[str]:
        target = self._mapping.get(class_name)
        if target is not None:
            return target
        return self._by_simple_name.get(_simple_name(class_name))

    def __len__(self) -> int:
        return len(self._mapping)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ClassMapping):
            return self._mapping == other._mapping
        if isinstance(other, dict):
            return self._mapping == other
        return NotImplemented


def _simple_name(class_name: str) -> str:
    return class_name.rsplit(".", 1)[-1]


def parse_generated(text: str, pattern: Union[str, re.Pattern[str]]) -> List[GeneratedEntry]:
    """Extract ``(id, type)`` pairs from generated source text.

    ``pattern`` must define the named groups ``id`` and ``type``.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return [
        GeneratedEntry(logical_id=match.group("id"), class_name=match.group("type"))
        for match in compiled.finditer(text)
    ]


def build_mapping(
    registry_entries: Iterable[RegistryEntry],
    generated_entries: Iterable[GeneratedEntry],
    *,
    normalize: IdNormalization = IdNormalization.LOWER,
) -> Dict[str, str]:
    """Join registry and generated entries on the normalized logical id."""
    generated: Dict[str, str] = {}
    for entry in generated_entries:
        generated[normalize.apply(entry.logical_id)] = entry.class_name

    mapping: Dict[str, str] = {}
    for entry in registry_entries:
        target = generated.get(normalize.apply(entry.logical_id))
        if target is not None:
            mapping[entry.class_name] = target
    return mapping


def load_registry_table(path: Path) -> Dict[str, Any]:
    """Read the declarative registry JSON; failures here abort the run."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RegistryError(f"Registry table not found: {path}") from exc
    except OSError as exc:
        raise RegistryError(f"Cannot read registry table {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise RegistryError(f"Registry table {path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RegistryError(f"Registry table {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise RegistryError(f"Registry table {path} must contain a JSON object")
    return payload


def registry_entries(table: Mapping[str, Any], key: str) -> List[RegistryEntry]:
    """Return the ``{name, class}`` records listed under ``key``."""
    raw_entries = table.get(key)
    if not isinstance(raw_entries, list):
        raise RegistryError(f"Registry table has no '{key}' list")
    entries: List[RegistryEntry] = []
    for index, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            raise RegistryError(f"Registry entry {key}[{index}] must be an object")
        name = raw.get("name")
        class_name = raw.get("class")
        if not isinstance(name, str) or not isinstance(class_name, str):
            raise RegistryError(f"Registry entry {key}[{index}] needs string 'name' and 'class'")
        entries.append(RegistryEntry(logical_id=name, class_name=class_name))
    return entries


class RegistryResolver:
    """Builds one :class:`ClassMapping` per configured registry family."""

    def __init__(self, families: Sequence[FamilyConfig]) -> None:
        owners: Dict[str, str] = {}
        for family in families:
            previous = owners.setdefault(family.category, family.name)
            if previous != family.name:
                raise RegistryError(
                    f"Registry families '{previous}' and '{family.name}' both map category '{family.category}'"
                )
        self.families = list(families)

    def resolve(self, table: Mapping[str, Any]) -> Dict[str, ClassMapping]:
        """Return ``{category: ClassMapping}`` for every family."""
        mappings: Dict[str, ClassMapping] = {}
        for family in self.families:
            entries = registry_entries(table, family.entries)
            generated = parse_generated(self._read_generated(family), family.pattern)
            mapping = build_mapping(entries, generated, normalize=family.normalize)
            _logger.debug(
                "Family %s: %d registry entries, %d generated registrations, %d mapped",
                family.name,
                len(entries),
                len(generated),
                len(mapping),
            )
            mappings[family.category] = ClassMapping(mapping)
        return mappings

    @staticmethod
    def _read_generated(family: FamilyConfig) -> str:
        try:
            return family.generated.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning(
                "Generated registrations for %s unavailable (%s); every %s class resolves empty",
                family.name,
                exc,
                family.category,
            )
            return ""


__all__ = [
    "ClassMapping",
    "GeneratedEntry",
    "RegistryEntry",
    "RegistryError",
    "RegistryResolver",
    "build_mapping",
    "load_registry_table",
    "parse_generated",
    "registry_entries",
]
