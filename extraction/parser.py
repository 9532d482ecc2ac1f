"""
Tree-sitter front door for C++ headers.

Creates the C++ parser, reads header bytes from disk and reports where a
parse went wrong. Syntax errors are never fatal: tree-sitter always returns a
tree, and the mock generator works with whatever declarations survive.
"""

import logging
from typing import List, Tuple
import tree_sitter_cpp as tscpp
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

CPP_LANGUAGE = Language(tscpp.language())
UTF8_BOM = b"\xef\xbb\xbf"


def create_parser() -> Parser:
    """Create a tree-sitter parser for C++."""
    parser = Parser(CPP_LANGUAGE)
    logger.debug("Created tree-sitter C++ parser")
    return parser


def parse_bytes(source: bytes, label: str = "<memory>") -> Tree:
    """Parse raw C++ source bytes.

    Args:
        source: UTF-8 encoded C++ source.
        label: Name used in log messages, usually the file path.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"class IFoo { virtual void f() = 0; };")
        >>> tree.root_node.type
        'translation_unit'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    if tree.root_node.has_error:
        logger.warning(f"{label} contains syntax errors")
    logger.debug(f"Parsed {len(source)} bytes from {label}")
    return tree


def read_source(file_path: str) -> bytes:
    """Read a header from disk, dropping a leading UTF-8 byte order mark.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise

    if source_bytes.startswith(UTF8_BOM):
        source_bytes = source_bytes[len(UTF8_BOM):]
    return source_bytes


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a C++ header or source file.

    Returns:
        ``(tree, source_bytes)``; byte offsets in the tree index into
        ``source_bytes``.
    """
    source_bytes = read_source(file_path)
    tree = parse_bytes(source_bytes, label=file_path)
    logger.info(f"Parsed {file_path}")
    return tree, source_bytes


def find_error_nodes(tree: Tree) -> List[Node]:
    """Collect ERROR and MISSING nodes in document order.

    Walks with a cursor instead of recursion so deeply nested inputs do not
    hit the recursion limit.
    """
    if not tree.root_node.has_error:
        return []

    errors: List[Node] = []
    cursor = tree.walk()
    visited_children = False
    while True:
        if not visited_children:
            node = cursor.node
            if node.type == "ERROR" or node.is_missing:
                errors.append(node)
            if cursor.goto_first_child():
                continue
        if cursor.goto_next_sibling():
            visited_children = False
            continue
        if not cursor.goto_parent():
            break
        visited_children = True
    return errors


def count_error_nodes(tree: Tree) -> int:
    return len(find_error_nodes(tree))


def first_error_line(tree: Tree) -> int:
    """1-indexed line of the first syntax error, or 0 for a clean tree."""
    errors = find_error_nodes(tree)
    if not errors:
        return 0
    return errors[0].start_point.row + 1
