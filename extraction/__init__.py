"""
Layer 1: C++ front end

Tree-sitter-based C++ parser and declaration tree builder.
Turns a header into namespaces, linkage blocks, records, methods and free
functions for the mock generator.
"""

from extraction.models import (
    DeclKind,
    Declaration,
    FunctionDecl,
    LinkageSpecDecl,
    MethodDecl,
    NamespaceDecl,
    ParamDecl,
    RecordDecl,
    TranslationUnitDecl,
)
from extraction.parser import (
    count_error_nodes,
    create_parser,
    find_error_nodes,
    first_error_line,
    parse_bytes,
    parse_file,
)
from extraction.traversal import build_declaration_tree

__all__ = [
    # Declaration tree
    "DeclKind",
    "Declaration",
    "FunctionDecl",
    "LinkageSpecDecl",
    "MethodDecl",
    "NamespaceDecl",
    "ParamDecl",
    "RecordDecl",
    "TranslationUnitDecl",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "find_error_nodes",
    "first_error_line",
    # Tree building
    "build_declaration_tree",
]
