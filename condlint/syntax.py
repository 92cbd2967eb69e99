"""
Node classification over the tree-sitter C syntax tree.

Rules never inspect raw node types themselves; they ask :func:`classify` what a
node is and get back one of three variants:

* :class:`Conditional` - an ``if`` statement or a ``?:`` expression, split into
  its condition, then-branch and optional else-branch.
* :class:`MacroExpansion` - an invocation of a function-like macro. Tree-sitter
  does not run the preprocessor, so the macro body is never seen; only the
  arguments, which the user wrote, are left to walk.
* :class:`Other` - anything else, with the children to keep descending into.

Typical usage:
    from condlint.syntax import Conditional, classify

    kind = classify(node, source, macro_names)
    if isinstance(kind, Conditional):
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterator, Optional, Tuple, Union

from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)

# Node types that carry condition / consequence / alternative fields
CONDITIONAL_TYPES = frozenset({"if_statement", "conditional_expression"})

# Function-like macros assumed to exist even when their #define is not in the file
DEFAULT_MACRO_NAMES = frozenset({"assert"})


@dataclass(frozen=True)
class Conditional:
    node: TSNode
    condition: TSNode
    then_branch: Optional[TSNode]
    else_branch: Optional[TSNode]


@dataclass(frozen=True)
class MacroExpansion:
    node: TSNode
    name: str
    arguments: Tuple[TSNode, ...]


@dataclass(frozen=True)
class Other:
    node: TSNode
    children: Tuple[TSNode, ...]


NodeKind = Union[Conditional, MacroExpansion, Other]


def _text(source: bytes, node: TSNode) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _unwrap_else(node: Optional[TSNode]) -> Optional[TSNode]:
    """
    Return the statement held by an ``else_clause``.

    Newer tree-sitter-c grammars wrap the alternative of an ``if_statement`` in
    an ``else_clause``; older ones store the statement directly. Comments
    between ``else`` and the statement are skipped.
    """
    if node is None or node.type != "else_clause":
        return node
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def macro_call_name(node: TSNode, source: bytes, macro_names: AbstractSet[str]) -> Optional[str]:
    """Return the macro name if ``node`` invokes a known function-like macro."""
    if node.type != "call_expression":
        return None
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return None
    name = _text(source, callee)
    if name in macro_names:
        return name
    return None


def classify(
    node: TSNode,
    source: bytes,
    macro_names: AbstractSet[str] = DEFAULT_MACRO_NAMES,
) -> NodeKind:
    """
    Tag ``node`` as a Conditional, a MacroExpansion or an Other node.

    Args:
        node: Any tree-sitter node.
        source: The bytes the tree was parsed from (needed to read callee names).
        macro_names: Names of function-like macros; calls to them are
            classified as MacroExpansion, whose callee is opaque and whose
            arguments are still walked.

    Returns:
        The variant describing the node. Other.children holds the named
        children only; anonymous tokens such as ``(`` or ``&&`` are not
        expressions and are never walked.
    """
    if node.type in CONDITIONAL_TYPES:
        condition = node.child_by_field_name("condition")
        if condition is not None:
            return Conditional(
                node=node,
                condition=condition,
                then_branch=node.child_by_field_name("consequence"),
                else_branch=_unwrap_else(node.child_by_field_name("alternative")),
            )
        # Error recovery can drop the condition; walk it like any other node.
        logger.debug("Conditional without condition at %s, treated as plain node", node.start_point)

    name = macro_call_name(node, source, macro_names)
    if name is not None:
        args = node.child_by_field_name("arguments")
        return MacroExpansion(
            node=node,
            name=name,
            arguments=children_for_generic_walk(args) if args is not None else (),
        )

    return Other(node=node, children=children_for_generic_walk(node))


def children_for_generic_walk(node: TSNode) -> Tuple[TSNode, ...]:
    return tuple(node.named_children)


def collect_macro_names(root: TSNode, source: bytes) -> frozenset[str]:
    """Return the names of every ``#define NAME(...)`` under ``root``."""
    names: set[str] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "preproc_function_def":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                names.add(_text(source, name_node))
            continue
        stack.extend(node.named_children)
    return frozenset(names)


def function_bodies(root: TSNode) -> Iterator[Tuple[TSNode, TSNode]]:
    """
    Yield ``(function_definition, body)`` pairs in document order.

    Definitions nested in preprocessor blocks (``#ifdef``) are found too.
    """
    for child in root.named_children:
        if child.type == "function_definition":
            body = child.child_by_field_name("body")
            if body is not None:
                yield child, body
            continue
        yield from function_bodies(child)


def function_name(func: TSNode, source: bytes) -> Optional[str]:
    """Best-effort name of a function_definition (e.g. ``main``), for logging."""
    declarator = func.child_by_field_name("declarator")
    while declarator is not None:
        if declarator.type == "identifier":
            return _text(source, declarator)
        declarator = declarator.child_by_field_name("declarator")
    return None
