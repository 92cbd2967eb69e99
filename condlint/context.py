# Per-file analysis context: file path, source bytes, syntax tree and the
# function-like macros defined in the file. Unreadable files are logged and
# skipped; files with syntax errors still get a context so rules can run.

import logging
from pathlib import Path
from typing import AbstractSet, Iterable, Optional

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from condlint.findings.models import Location
from condlint.parser import create_parser, parse_bytes
from condlint.syntax import DEFAULT_MACRO_NAMES, collect_macro_names, function_bodies

logger = logging.getLogger(__name__)


def _count_nodes(node: TSNode) -> int:
    count = 1
    for child in node.children:
        count += _count_nodes(child)
    return count


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """Return (total node count, function definition count) for the tree."""
    return _count_nodes(root), sum(1 for _ in function_bodies(root))


class FileContext:
    """
    Per-file state for analysis: path, raw source bytes, tree and macro names.

    ``macro_names`` is the union of the function-like macros defined in the
    file and any extra names passed in (from configuration). Calls to these
    names are treated as macro expansions by the rules.
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        tree: Tree,
        *,
        has_parse_errors: bool = False,
        macro_names: Optional[AbstractSet[str]] = None,
    ) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.has_parse_errors = has_parse_errors
        if macro_names is None:
            macro_names = DEFAULT_MACRO_NAMES | collect_macro_names(tree.root_node, source)
        self.macro_names = frozenset(macro_names)

    @property
    def root_node(self) -> TSNode:
        return self.tree.root_node


def get_source_span(context: FileContext, node: TSNode) -> str:
    """Return the source text covered by node (bad UTF-8 is replaced)."""
    return context.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def get_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """
    Return (line, column) for the node's start position.

    Tree-sitter points are 0-based; one_based=True (default) shifts both for display.
    """
    row, col = node.start_point
    if one_based:
        return row + 1, col + 1
    return row, col


def get_location(context: FileContext, node: TSNode) -> Location:
    """Build the Location (start, end and snippet) a finding reports for node."""
    line, col = get_line_col(node)
    end_row, end_col = node.end_point
    return Location(
        path=context.path,
        line=line,
        column=col,
        end_line=end_row + 1,
        end_column=end_col + 1,
        snippet=get_source_span(context, node),
    )


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
    extra_macro_names: Iterable[str] = (),
) -> Optional[FileContext]:
    """
    Read and parse a C file into a FileContext.

    - Unreadable file (permission, missing): returns None and logs an error.
    - Syntax errors: returns a context with has_parse_errors=True and logs a warning.
    - Success: logs node and function counts.

    Args:
        path: The .c/.h file to load.
        parser: Optional shared parser.
        extra_macro_names: Function-like macro names to add to those the file
            defines itself (e.g. from configuration).
    """
    if parser is None:
        parser = create_parser()

    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    tree = parse_bytes(source, parser=parser)
    has_errors = tree.root_node.has_error
    if has_errors:
        logger.warning("File %s parsed with syntax errors; tree may be incomplete", path)

    defined = collect_macro_names(tree.root_node, source)
    macro_names = DEFAULT_MACRO_NAMES | defined | frozenset(extra_macro_names)

    node_count, func_count = count_tree_stats(tree.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d function(s), %d macro(s)%s",
        path,
        node_count,
        func_count,
        len(defined),
        " (with parse errors)" if has_errors else "",
    )

    return FileContext(
        path=path,
        source=source,
        tree=tree,
        has_parse_errors=has_errors,
        macro_names=macro_names,
    )


def load_contexts(
    paths: list[Path],
    parser: Optional[Parser] = None,
    extra_macro_names: Iterable[str] = (),
) -> list[FileContext]:
    """
    Load every readable file in ``paths``; failed files are omitted.

    Order matches the input order.
    """
    if parser is None:
        parser = create_parser()
    extra = frozenset(extra_macro_names)

    contexts: list[FileContext] = []
    for path in paths:
        ctx = create_context(path, parser=parser, extra_macro_names=extra)
        if ctx is not None:
            contexts.append(ctx)
    return contexts
