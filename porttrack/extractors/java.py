"""Java declarations: classes, their direct superclass, interfaces and methods."""

from __future__ import annotations

from .tree_sitter import QueryExtractor

# One match per (class, method) pair; the superclass and interface captures repeat
# on every match of the same class and are deduplicated during aggregation.
# Constructors are constructor_declaration nodes and never match.
_CLASS_METHODS_QUERY = """
(class_declaration
  name: (identifier) @type_name
  (superclass)? @supertype
  (super_interfaces)? @interfaces
  body: (class_body
    (method_declaration
      name: (identifier) @method_name)))
"""


class JavaExtractor(QueryExtractor):
    """Single-inheritance grammar: at most one superclass, any number of interfaces."""

    grammar = "java"
    extensions = (".java",)
    grammar_module = "tree_sitter_java"
    query_source = _CLASS_METHODS_QUERY


__all__ = ["JavaExtractor"]
