"""
Syntax locator for module declarations.

Finds, in a parsed SourceFile:
  - whether ``import { Symbol } from 'source';`` is already present,
  - the first class decorator calling a given bare identifier (``NgModule``),
  - the array literal bound to a property of that decorator's config object.

Matching is textual: import clauses and array entries are compared by their
exact source text, never by what they resolve to. ``import {B} from 'b'``
(no spaces), ``import { B as C } from 'b'`` and ``import { A, B } from 'b'``
do not count as importing ``B``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from tree_sitter import Node

from ngimport.core.source import SourceFile, find_first, syntax_children

logger = logging.getLogger(__name__)

CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})


def text_matches(source: SourceFile, node: Optional[Node], expected: str) -> bool:
    """Textual exact match between a node's source text and ``expected``."""
    return node is not None and source.node_text(node) == expected


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------

def import_statements(source: SourceFile) -> List[Node]:
    """Top-level ES import declarations; ``import x = require(...)`` is not one."""
    return [
        st for st in source.statements
        if st.type == "import_statement"
        and not any(child.type == "import_require_clause" for child in st.named_children)
    ]


def _named_bindings(statement: Node) -> Optional[Node]:
    for child in statement.named_children:
        if child.type == "import_clause":
            for binding in child.named_children:
                if binding.type in ("named_imports", "namespace_import"):
                    return binding
    return None


def has_named_import(
    source: SourceFile,
    symbol: str,
    module: str,
    quote: str = "'",
) -> bool:
    """True if a top-level ``import { symbol } from 'module'`` exists verbatim."""
    specifier = f"{quote}{module}{quote}"
    clause = f"{{ {symbol} }}"
    return any(
        text_matches(source, st.child_by_field_name("source"), specifier)
        and text_matches(source, _named_bindings(st), clause)
        for st in import_statements(source)
    )


def last_import_end(source: SourceFile) -> int:
    """Character offset just past the last top-level import, or 0."""
    imports = import_statements(source)
    return source.end(imports[-1]) if imports else 0


# ----------------------------------------------------------------------
# Decorators
# ----------------------------------------------------------------------

def class_decorators(node: Node) -> List[Node]:
    """
    Decorators attached to a class declaration.

    ``@Dec() export class X {}`` parses with the decorator on the export
    statement; those count as the class's own.
    """
    decorators = [child for child in node.children if child.type == "decorator"]
    parent = node.parent
    if parent is not None and parent.type == "export_statement":
        decorators = [c for c in parent.children if c.type == "decorator"] + decorators
    return decorators


def _decorator_call(decorator: Node) -> Optional[Node]:
    expressions = syntax_children(decorator)
    if not expressions or expressions[0].type != "call_expression":
        return None
    return expressions[0]


def _calls(source: SourceFile, decorator: Node, name: str) -> bool:
    call = _decorator_call(decorator)
    if call is None:
        return False
    callee = call.child_by_field_name("function")
    return callee is not None and callee.type == "identifier" and text_matches(source, callee, name)


def _is_class_declaration(node: Node) -> bool:
    if node.type in CLASS_TYPES:
        return True
    # export default class {} parses as a ``class`` expression node
    parent = node.parent
    return node.type == "class" and parent is not None and parent.type == "export_statement"


def _matching_decorator(source: SourceFile, node: Node, name: str) -> Optional[Node]:
    if not _is_class_declaration(node):
        return None
    return next((d for d in class_decorators(node) if _calls(source, d, name)), None)


def find_decorator(source: SourceFile, name: str) -> Optional[Node]:
    """First decorator ``@name(...)`` on any class, in pre-order."""
    owner = find_first(
        source.root,
        lambda node: _matching_decorator(source, node, name) is not None,
    )
    if owner is None:
        logger.debug(f"No @{name} decorator in {source.path}")
        return None
    return _matching_decorator(source, owner, name)


# ----------------------------------------------------------------------
# Config object properties
# ----------------------------------------------------------------------

def _is_property(source: SourceFile, node: Node, key: str) -> bool:
    if node.type != "pair":
        return False
    name = node.child_by_field_name("key")
    return name is not None and name.type == "property_identifier" and text_matches(source, name, key)


def find_property_array(source: SourceFile, decorator: Node, key: str) -> Optional[Node]:
    """
    Array literal value of ``key`` in the decorator's first argument.

    Only ``@Dec({ key: [...] })`` qualifies: the first argument must be an
    object literal and the first ``key:`` property must hold an array
    literal. Anything else returns None.
    """
    call = _decorator_call(decorator)
    if call is None:
        return None
    arguments = call.child_by_field_name("arguments")
    args = syntax_children(arguments) if arguments is not None else []
    if not args or args[0].type != "object":
        return None

    prop = find_first(args[0], lambda node: _is_property(source, node, key), max_depth=1)
    if prop is None:
        return None
    value = prop.child_by_field_name("value")
    if value is None or value.type != "array":
        return None
    return value


def array_elements(array: Node) -> List[Node]:
    return syntax_children(array)
