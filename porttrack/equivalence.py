"""Method equivalence tables: which reference methods are tracked and how they map.

A table entry is either :class:`Mapped` (the reimplementation exposes the
capability under another name) or :class:`KnownGap` (tracked, not implemented
yet). A method absent from the table is untracked and never counted.

Tables are configuration data. The packaged ``data/method_tables.yml`` is used
unless a config file points at another file. In YAML a ``null`` value is a
known gap::

    block:
      randomTick: random_tick
      onStateReplaced: null
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from .config import ConfigError


@dataclass(frozen=True)
class Mapped:
    """The reimplementation method that provides this capability."""

    name: str


@dataclass(frozen=True)
class KnownGap:
    """Tracked method with no reimplementation counterpart yet."""


CoverageTarget = Union[Mapped, KnownGap]

KNOWN_GAP = KnownGap()


@dataclass(frozen=True)
class MethodEquivalenceTable:
    """Reference method name to :data:`CoverageTarget` for one category group."""

    name: str
    entries: Mapping[str, CoverageTarget] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Optional[str]]) -> "MethodEquivalenceTable":
        entries: Dict[str, CoverageTarget] = {}
        for method, target in raw.items():
            if not isinstance(method, str):
                raise ConfigError(
                    f"Method table '{name}': key {method!r} is not a method name (quote it in YAML)"
                )
            if target is None:
                entries[method] = KNOWN_GAP
            elif isinstance(target, str) and target.strip():
                entries[method] = Mapped(target.strip())
            else:
                raise ConfigError(
                    f"Method table '{name}': '{method}' must map to a method name or null"
                )
        return cls(name=name, entries=entries)

    def tracks(self, method: str) -> bool:
        return method in self.entries

    def target_for(self, method: str) -> Optional[CoverageTarget]:
        """Return the entry for ``method``, or None when it is untracked."""
        return self.entries.get(method)

    def known_gaps(self) -> List[str]:
        return sorted(method for method, target in self.entries.items() if isinstance(target, KnownGap))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


@dataclass
class MethodTableSet:
    """All tables plus the category to table routing."""

    tables: Dict[str, MethodEquivalenceTable]
    categories: Dict[str, str] = field(default_factory=dict)
    default_table: Optional[str] = None

    def __post_init__(self) -> None:
        referenced = set(self.categories.values())
        if self.default_table is not None:
            referenced.add(self.default_table)
        missing = sorted(referenced.difference(self.tables))
        if missing:
            raise ConfigError(f"Unknown method tables referenced: {', '.join(missing)}")

    def for_category(self, category: str) -> Optional[MethodEquivalenceTable]:
        """Return the table that governs ``category`` (falls back to the default table)."""
        name = self.categories.get(category, self.default_table)
        if name is None:
            return None
        return self.tables[name]

    def known_gaps(self) -> List[Tuple[str, str]]:
        """Every ``(table, method)`` pair still marked as a known gap."""
        return [
            (table_name, method)
            for table_name in sorted(self.tables)
            for method in self.tables[table_name].known_gaps()
        ]


def load_tables(path: Optional[Path] = None) -> Dict[str, MethodEquivalenceTable]:
    """Load tables from ``path``, or the packaged defaults when ``path`` is None."""
    if path is None:
        text = resources.files("porttrack").joinpath("data/method_tables.yml").read_text(encoding="utf-8")
        origin = "packaged method_tables.yml"
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read method tables {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(f"Method tables {path} are not valid UTF-8: {exc}") from exc
        origin = str(path)
    return parse_tables(text, origin=origin)


def parse_tables(text: str, *, origin: str = "<string>") -> Dict[str, MethodEquivalenceTable]:
    try:
        loaded: Any = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {origin}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"{origin} must contain a mapping of table names")

    tables: Dict[str, MethodEquivalenceTable] = {}
    for name, raw in loaded.items():
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Method table '{name}' in {origin} must be a mapping")
        tables[str(name)] = MethodEquivalenceTable.from_mapping(str(name), raw)
    return tables


__all__ = [
    "KNOWN_GAP",
    "CoverageTarget",
    "KnownGap",
    "Mapped",
    "MethodEquivalenceTable",
    "MethodTableSet",
    "load_tables",
    "parse_tables",
]
