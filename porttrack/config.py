"""Configuration loading for porttrack (.porttrack.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from . import constants
from .models import IdNormalization


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is inconsistent."""


@dataclass
class SourceSpec:
    """One source root and the category its types are tagged with."""

    path: Path
    category: str


@dataclass
class SideConfig:
    """Grammar and source roots for one side of the comparison."""

    grammar: str
    sources: List[SourceSpec] = field(default_factory=list)


@dataclass
class FamilyConfig:
    """A registry family joined through generated registration code."""

    name: str
    category: str
    entries: str
    generated: Path
    pattern: str
    normalize: IdNormalization = IdNormalization.NONE


@dataclass
class RegistryConfig:
    classes: Optional[Path] = None
    families: List[FamilyConfig] = field(default_factory=list)


@dataclass
class MethodsConfig:
    """Where the method tables come from and which category uses which table."""

    tables: Optional[Path] = None
    categories: Dict[str, str] = field(default_factory=dict)
    default_table: Optional[str] = None


@dataclass
class OutputConfig:
    directory: Path


@dataclass
class PortTrackConfig:
    """Represents the settings defined in .porttrack.yml merged over built-in defaults."""

    root: Path
    reference: SideConfig
    target: SideConfig
    registry: RegistryConfig
    methods: MethodsConfig
    output: OutputConfig


def default_config(root: Path) -> PortTrackConfig:
    """Return the conventional layout rooted at ``root``."""
    root = root.resolve()
    return PortTrackConfig(
        root=root,
        reference=SideConfig(
            grammar=constants.DEFAULT_REFERENCE_GRAMMAR,
            sources=_default_sources(root, constants.DEFAULT_REFERENCE_SOURCES),
        ),
        target=SideConfig(
            grammar=constants.DEFAULT_TARGET_GRAMMAR,
            sources=_default_sources(root, constants.DEFAULT_TARGET_SOURCES),
        ),
        registry=RegistryConfig(
            classes=root / constants.DEFAULT_REGISTRY_CLASSES,
            families=[_parse_family(root, dict(raw)) for raw in constants.DEFAULT_FAMILIES],
        ),
        methods=MethodsConfig(
            tables=None,
            categories=dict(constants.DEFAULT_CATEGORY_TABLES),
            default_table=constants.DEFAULT_TABLE,
        ),
        output=OutputConfig(directory=root / constants.DEFAULT_OUTPUT_DIR),
    )


def load_config(config_path: Path, root: Optional[Path] = None) -> PortTrackConfig:
    """Load configuration from disk; sections missing from the file keep their defaults.

    Relative paths resolve against ``root``, which defaults to the directory
    holding the config file.
    """
    config_file = _resolve_config_path(config_path)
    root = (root if root is not None else config_file.parent).expanduser().resolve()
    config = default_config(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    if "reference" in data:
        config.reference = _parse_side(root, "reference", data["reference"], config.reference)
    if "target" in data:
        config.target = _parse_side(root, "target", data["target"], config.target)

    registry_data = _as_dict(data.get("registry"))
    if registry_data:
        classes = _as_str(registry_data.get("classes"))
        if classes:
            config.registry.classes = root / classes
        if "families" in registry_data:
            families = registry_data.get("families")
            if not isinstance(families, dict):
                raise ConfigError("registry.families must be a mapping of family name to settings")
            config.registry.families = [
                _parse_family(root, {"name": str(name), **_as_dict(raw)})
                for name, raw in families.items()
            ]

    methods_data = _as_dict(data.get("methods"))
    if methods_data:
        tables = _as_str(methods_data.get("tables"))
        if tables:
            config.methods.tables = root / tables
        if "categories" in methods_data:
            categories = methods_data.get("categories")
            if not isinstance(categories, dict):
                raise ConfigError("methods.categories must map category names to table names")
            config.methods.categories = {str(key): str(value) for key, value in categories.items()}
        if "default_table" in methods_data:
            config.methods.default_table = _as_str(methods_data.get("default_table"))

    output_data = _as_dict(data.get("output"))
    directory = _as_str(output_data.get("directory")) if output_data else None
    if directory:
        config.output.directory = root / directory

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / constants.CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _default_sources(root: Path, pairs: Sequence[Tuple[str, str]]) -> List[SourceSpec]:
    return [SourceSpec(path=root / path, category=category) for path, category in pairs]


def _parse_side(root: Path, section: str, raw: Any, fallback: SideConfig) -> SideConfig:
    data = _as_dict(raw)
    if not data:
        raise ConfigError(f"{section} must be a mapping with 'grammar' and 'sources'")
    grammar = _as_str(data.get("grammar")) or fallback.grammar
    if "sources" not in data:
        return SideConfig(grammar=grammar, sources=list(fallback.sources))

    raw_sources = data.get("sources")
    if not isinstance(raw_sources, list):
        raise ConfigError(f"{section}.sources must be a list")
    sources: List[SourceSpec] = []
    for index, entry in enumerate(raw_sources):
        entry_data = _as_dict(entry)
        path = _as_str(entry_data.get("path"))
        category = _as_str(entry_data.get("category"))
        if not path or not category:
            raise ConfigError(f"{section}.sources[{index}] needs both 'path' and 'category'")
        sources.append(SourceSpec(path=root / path, category=category))
    return SideConfig(grammar=grammar, sources=sources)


def _parse_family(root: Path, data: Mapping[str, Any]) -> FamilyConfig:
    name = _as_str(data.get("name")) or ""
    missing = [key for key in ("entries", "generated", "pattern") if not _as_str(data.get(key))]
    if missing:
        raise ConfigError(f"Registry family '{name}' is missing: {', '.join(missing)}")

    pattern = str(data["pattern"])
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Registry family '{name}' has an invalid pattern: {exc}") from exc
    if not {"id", "type"}.issubset(compiled.groupindex):
        raise ConfigError(f"Registry family '{name}' pattern needs named groups 'id' and 'type'")

    normalize_raw = (_as_str(data.get("normalize")) or IdNormalization.NONE.value).lower()
    try:
        normalize = IdNormalization(normalize_raw)
    except ValueError as exc:
        choices = ", ".join(item.value for item in IdNormalization)
        raise ConfigError(
            f"Registry family '{name}' normalize must be one of: {choices}"
        ) from exc

    return FamilyConfig(
        name=name,
        category=_as_str(data.get("category")) or name,
        entries=str(data["entries"]),
        generated=root / str(data["generated"]),
        pattern=pattern,
        normalize=normalize,
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


__all__ = [
    "ConfigError",
    "FamilyConfig",
    "MethodsConfig",
    "OutputConfig",
    "PortTrackConfig",
    "RegistryConfig",
    "SideConfig",
    "SourceSpec",
    "default_config",
    "load_config",
]
