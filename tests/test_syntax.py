"""Tests for condlint.syntax: node classification, macro names, function bodies."""

from condlint.parser import create_parser, parse_bytes
from condlint.syntax import (
    Conditional,
    MacroExpansion,
    Other,
    children_for_generic_walk,
    classify,
    collect_macro_names,
    function_bodies,
    function_name,
)


def _parse(source: bytes):
    return parse_bytes(source, parser=create_parser()).root_node


def _first(node, node_type):
    """Return the first node of node_type in document order."""
    if node.type == node_type:
        return node
    for child in node.children:
        found = _first(child, node_type)
        if found is not None:
            return found
    return None


def _text(source: bytes, node) -> str:
    return source[node.start_byte : node.end_byte].decode()


def test_classify_if_statement_with_else():
    source = b"void f(int a) { if (a) { a = 1; } else { a = 2; } }"
    node = _first(_parse(source), "if_statement")
    kind = classify(node, source)
    assert isinstance(kind, Conditional)
    assert kind.condition.type == "parenthesized_expression"
    assert _text(source, kind.then_branch) == "{ a = 1; }"
    assert _text(source, kind.else_branch) == "{ a = 2; }"


def test_classify_else_if_unwraps_to_if_statement():
    source = b"void f(int a) { if (a) { } else if (a > 1) { } }"
    node = _first(_parse(source), "if_statement")
    kind = classify(node, source)
    assert isinstance(kind, Conditional)
    assert kind.else_branch is not None
    assert kind.else_branch.type == "if_statement"


def test_classify_if_without_else():
    source = b"void f(int a) { if (a) a = 0; }"
    kind = classify(_first(_parse(source), "if_statement"), source)
    assert isinstance(kind, Conditional)
    assert kind.else_branch is None


def test_classify_ternary():
    source = b"int f(int a) { return a ? 1 : 2; }"
    node = _first(_parse(source), "conditional_expression")
    kind = classify(node, source)
    assert isinstance(kind, Conditional)
    assert _text(source, kind.condition) == "a"
    assert _text(source, kind.then_branch) == "1"
    assert _text(source, kind.else_branch) == "2"


def test_classify_macro_call():
    source = b"void f(int a) { CHECK(a); }"
    node = _first(_parse(source), "call_expression")
    kind = classify(node, source, frozenset({"CHECK"}))
    assert isinstance(kind, MacroExpansion)
    assert kind.name == "CHECK"
    assert [_text(source, a) for a in kind.arguments] == ["a"]
    assert isinstance(classify(node, source, frozenset()), Other)


def test_classify_other_uses_named_children():
    source = b"int f(int a, int b) { return a && b; }"
    node = _first(_parse(source), "binary_expression")
    kind = classify(node, source)
    assert isinstance(kind, Other)
    assert [c.type for c in kind.children] == ["identifier", "identifier"]
    assert children_for_generic_walk(node) == kind.children


def test_collect_macro_names_only_function_like():
    source = b"""
#define MAX(a, b) ((a) > (b) ? (a) : (b))
#define LIMIT 10
#ifdef DEBUG
#define TRACE(msg) puts(msg)
#endif
int f(void) { return LIMIT; }
"""
    names = collect_macro_names(_parse(source), source)
    assert names == frozenset({"MAX", "TRACE"})


def test_function_bodies_and_names():
    source = b"""
int one(void) { return 1; }
#ifdef FEATURE
static int *two(int x) { return 0; }
#endif
int three(void);
"""
    root = _parse(source)
    found = [(function_name(func, source), body.type) for func, body in function_bodies(root)]
    assert found == [("one", "compound_statement"), ("two", "compound_statement")]
