"""Declaration extractor implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable

from .base import DeclarationExtractor
from .java import JavaExtractor
from .rust import RustExtractor
from .tree_sitter import QueryExtractor

_ENTRY_POINT_GROUP = "porttrack.extractors"

_BUILTIN_FACTORIES: Dict[str, Callable[[], DeclarationExtractor]] = {
    "java": JavaExtractor,
    "rust": RustExtractor,
}


def available_grammars() -> list[str]:
    """Return every grammar name that :func:`get_extractor` accepts."""
    names = set(_BUILTIN_FACTORIES)
    names.update(entry.name.lower() for entry in _iter_entry_points())
    return sorted(names)


def get_extractor(grammar: str) -> DeclarationExtractor:
    """Instantiate the extractor registered for ``grammar``.

    Built-in grammars take precedence over entry points of the same name.
    """
    key = grammar.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - third-party plugin failure
            raise RuntimeError(f"Failed to load extractor entry point '{entry.name}': {exc}") from exc
        return _coerce_extractor(loaded)

    known = ", ".join(available_grammars())
    raise ValueError(f"Unknown grammar '{grammar}' (available: {known})")


def _coerce_extractor(obj: object) -> DeclarationExtractor:
    if isinstance(obj, DeclarationExtractor):
        return obj
    if isinstance(obj, type) and issubclass(obj, DeclarationExtractor):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, DeclarationExtractor):
            return instance
    raise TypeError("Extractor entry point must be a DeclarationExtractor subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "DeclarationExtractor",
    "JavaExtractor",
    "QueryExtractor",
    "RustExtractor",
    "available_grammars",
    "get_extractor",
]
