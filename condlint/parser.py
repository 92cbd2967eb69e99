# Tree-sitter front end: turn C source into the syntax trees the rules walk.

import logging
from typing import Optional, Union

import tree_sitter
from tree_sitter import Language
from tree_sitter_c import language as _c_language_capsule

logger = logging.getLogger(__name__)

_C_LANGUAGE = Language(_c_language_capsule())


def get_c_language() -> Language:
    """Return the Tree-sitter Language object for C."""
    return _C_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Create a Parser for C. Parsers are cheap; share one per scan."""
    return tree_sitter.Parser(_C_LANGUAGE)


def parse_bytes(
    source: Union[bytes, str],
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse C source into a syntax tree.

    Args:
        source: C source code. ``str`` input is encoded as UTF-8 first.
        parser: Optional parser instance; if None, a new one is created.

    Returns:
        The parse tree. Tree-sitter recovers from syntax errors, so a tree is
        always returned; ``tree.root_node.has_error`` tells whether ERROR
        nodes were inserted.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(
            "Parse completed with errors: root=%s, %d byte(s)",
            tree.root_node.type,
            len(source),
        )
    else:
        logger.debug("Parse succeeded: root=%s", tree.root_node.type)
    return tree

