"""Tree-sitter query driven declaration extraction.

Each grammar supplies a query whose captures use a shared vocabulary:

- ``@type_name``: the declared type (required for the match to be kept)
- ``@method_name``: one member function of that type
- ``@supertype``: the node naming the direct superclass, when the grammar has one
- ``@interfaces``: the node listing implemented interfaces

Supertype and interface captures may be wrapper nodes (``superclass``,
``super_interfaces``); the plain type names are read out of them, with generic
arguments and package qualifiers dropped.

The query is compiled once per extractor instance and run over every file.
"""

from __future__ import annotations

import importlib
from typing import Dict, Iterable, Iterator, List, Optional

from tree_sitter import Language, Node, Parser, Query, QueryCursor

from .base import DeclarationExtractor
from ..models import ExtractionMatch

_TYPE_LEAVES = {"type_identifier", "identifier"}
# Only the first named child carries the base name (``Foo`` in ``Foo<T>``).
_GENERIC_TYPES = {"generic_type"}
# The last named child carries the simple name (``Inner`` in ``Outer.Inner``).
_SCOPED_TYPES = {"scoped_type_identifier", "scoped_identifier"}


class QueryExtractor(DeclarationExtractor):
    """Extractor that runs a single tree-sitter query and normalizes its captures."""

    #: Importable module exposing ``language()``, e.g. ``tree_sitter_java``.
    grammar_module: str = ""
    query_source: str = ""

    def __init__(self) -> None:
        self._language: Optional[Language] = None
        self._parser: Optional[Parser] = None
        self._query: Optional[Query] = None

    def extract(self, source: bytes) -> Iterable[ExtractionMatch]:
        tree = self._get_parser().parse(source)
        return list(self._iter_matches(tree.root_node))

    def _iter_matches(self, root: Node) -> Iterator[ExtractionMatch]:
        cursor = QueryCursor(self._get_query())
        # matches() yields (pattern_index, {capture_name: [nodes]}) pairs
        for _pattern_index, captures in cursor.matches(root):
            yield _to_match(captures)

    def _get_language(self) -> Language:
        if self._language is None:
            try:
                module = importlib.import_module(self.grammar_module)
            except ImportError as err:
                raise ValueError(f"Grammar not installed: {self.grammar}") from err
            self._language = Language(module.language())
        return self._language

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(self._get_language())
        return self._parser

    def _get_query(self) -> Query:
        if self._query is None:
            self._query = Query(self._get_language(), self.query_source)
        return self._query


def _to_match(captures: Dict[str, List[Node]]) -> ExtractionMatch:
    supertypes = _names(captures.get("supertype"))
    return ExtractionMatch(
        type_name=_first_text(captures.get("type_name")),
        method_name=_first_text(captures.get("method_name")),
        supertype=supertypes[0] if supertypes else None,
        interfaces=tuple(dict.fromkeys(_names(captures.get("interfaces")))),
    )


def _first_text(nodes: Optional[List[Node]]) -> str:
    if not nodes:
        return ""
    return _node_text(nodes[0])


def _names(nodes: Optional[List[Node]]) -> List[str]:
    names: List[str] = []
    for node in nodes or ():
        names.extend(_type_names(node))
    return [name for name in names if name]


def _type_names(node: Node) -> List[str]:
    if node.type in _TYPE_LEAVES:
        return [_node_text(node)]
    children = node.named_children
    if not children:
        return []
    if node.type in _GENERIC_TYPES:
        return _type_names(children[0])
    if node.type in _SCOPED_TYPES:
        return _type_names(children[-1])
    names: List[str] = []
    for child in children:
        names.extend(_type_names(child))
    return names


def _node_text(node: Node) -> str:
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="ignore")


__all__ = ["QueryExtractor"]
