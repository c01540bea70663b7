"""Type graph aggregation and structural classification.

A graph is built as a fold: every source file produces a partial graph from its
own matches, and partial graphs are combined with :meth:`TypeGraph.merge`. The
merge is additive (method and interface unions, last present supertype wins), so
the result does not depend on how the files were grouped.

Classification is a second pass over the finished graph. A type is abstract when
some other observed declaration names it as supertype or interface. This is a
closed-world view: an ancestor that lives outside the scanned corpus is never
discovered, so its children still classify as concrete.

Only types matched with at least one method take part. A class whose body
holds no methods (constructors do not count) yields no match, so it never
marks its supertype abstract.
"""

from __future__ import annotations

from functools import reduce
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set

from .extractors.base import DeclarationExtractor
from .logging import get_logger
from .models import ClassMethods, Declaration, ExtractionMatch, TypeKind
from .source_scanner import SourceFile

_logger = get_logger("graph")


class TypeGraph:
    """Immutable mapping of declaration name to :class:`Declaration`."""

    __slots__ = ("_declarations",)

    def __init__(self, declarations: Optional[Mapping[str, Declaration]] = None) -> None:
        self._declarations: Dict[str, Declaration] = dict(declarations or {})

    @classmethod
    def from_matches(cls, matches: Iterable[ExtractionMatch]) -> "TypeGraph":
        declarations: Dict[str, Declaration] = {}
        for match in matches:
            if not match.type_name:
                continue
            current = declarations.get(match.type_name) or Declaration(name=match.type_name)
            declarations[match.type_name] = current.absorb(match)
        return cls(declarations)

    def merge(self, other: "TypeGraph") -> "TypeGraph":
        """Return a new graph holding the facts of both graphs."""
        if not other._declarations:
            return self
        combined = dict(self._declarations)
        for name, declaration in other._declarations.items():
            existing = combined.get(name)
            combined[name] = existing.merged(declaration) if existing else declaration
        return TypeGraph(combined)

    def get(self, name: str) -> Optional[Declaration]:
        return self._declarations.get(name)

    def names(self) -> List[str]:
        return sorted(self._declarations)

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __iter__(self) -> Iterator[Declaration]:
        for name in self.names():
            yield self._declarations[name]

    def __len__(self) -> int:
        return len(self._declarations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeGraph):
            return NotImplemented
        return self._declarations == other._declarations

    def __repr__(self) -> str:
        return f"TypeGraph({len(self)} declarations)"


def aggregate(matches: Iterable[ExtractionMatch]) -> TypeGraph:
    """Fold raw matches into a type graph."""
    return TypeGraph.from_matches(matches)


def child_index(graph: TypeGraph) -> Dict[str, Set[str]]:
    """Map every named ancestor to the declarations that name it."""
    index: Dict[str, Set[str]] = {}
    for declaration in graph:
        for ancestor in declaration.ancestors():
            index.setdefault(ancestor, set()).add(declaration.name)
    return index


def classify(graph: TypeGraph) -> Dict[str, TypeKind]:
    """Mark each declaration concrete or abstract from the full graph."""
    parents: FrozenSet[str] = frozenset(child_index(graph))
    return {
        declaration.name: TypeKind.ABSTRACT if declaration.name in parents else TypeKind.CONCRETE
        for declaration in graph
    }


def extract_graph(extractor: DeclarationExtractor, files: Iterable[SourceFile]) -> TypeGraph:
    """Run ``extractor`` over ``files`` and reduce the per-file partial graphs."""
    partials = (
        TypeGraph.from_matches(extractor.extract(source.content))
        for source in files
        if extractor.supports(source.path)
    )
    graph = reduce(TypeGraph.merge, partials, TypeGraph())
    _logger.debug("%s extractor produced %d declarations", extractor.grammar, len(graph))
    return graph


def to_records(graph: TypeGraph, *, tracks_inheritance: bool = True) -> List[ClassMethods]:
    """Flatten a graph into raw records sorted by class name.

    ``class_type`` is left empty; callers tag records with their category.
    """
    kinds = classify(graph) if tracks_inheritance else {}
    return [
        ClassMethods(
            class_name=declaration.name,
            class_type="",
            methods=list(declaration.methods),
            is_real_class=kinds.get(declaration.name, TypeKind.CONCRETE) is TypeKind.CONCRETE,
        )
        for declaration in graph
    ]


class TargetIndex:
    """Case-folded lookup of reimplementation method sets.

    Declarations whose names fold to the same key have their method sets united.
    """

    def __init__(self, records: Iterable[ClassMethods] = ()) -> None:
        self._methods: Dict[str, Set[str]] = {}
        for record in records:
            self._methods.setdefault(_fold(record.class_name), set()).update(record.methods)

    def methods_for(self, name: Optional[str]) -> FrozenSet[str]:
        """Return the method set for ``name``, empty when it is unknown."""
        if not name:
            return frozenset()
        return frozenset(self._methods.get(_fold(name), ()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _fold(name) in self._methods

    def __len__(self) -> int:
        return len(self._methods)


def _fold(name: str) -> str:
    return name.casefold()


__all__ = [
    "TargetIndex",
    "TypeGraph",
    "aggregate",
    "child_index",
    "classify",
    "extract_graph",
    "to_records",
]
