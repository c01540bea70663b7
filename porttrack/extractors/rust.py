"""Rust declarations: member functions grouped by the type named in each ``impl`` block."""

from __future__ import annotations

from .tree_sitter import QueryExtractor

# Inherent and trait impls both carry the implementing type in the ``type`` field.
_IMPL_METHODS_QUERY = """
(impl_item
  type: (type_identifier) @type_name
  body: (declaration_list
    (function_item
      name: (identifier) @method_name)))
"""


class RustExtractor(QueryExtractor):
    """Implementation-block grammar; there is no inheritance so every type is concrete."""

    grammar = "rust"
    extensions = (".rs",)
    tracks_inheritance = False
    grammar_module = "tree_sitter_rust"
    query_source = _IMPL_METHODS_QUERY


__all__ = ["RustExtractor"]
