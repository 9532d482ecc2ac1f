"""
AST traversal that builds the declaration tree.

This module walks a tree-sitter C++ syntax tree and produces the
front-end agnostic declaration tree (``extraction.models``) that the mock
generator consumes: namespaces, linkage blocks, records, methods and free
functions, each with rendered type text.
"""

import logging
import os
import re
from typing import List, Optional, Tuple
from tree_sitter import Node, Tree

from extraction.config import (
    NAMESPACE_NODE,
    NESTED_NAMESPACE_NODE,
    LINKAGE_NODE,
    DECLARATION_NODE,
    FUNCTION_DEFINITION_NODE,
    FIELD_DECLARATION_NODE,
    FRIEND_DECLARATION_NODE,
    TEMPLATE_WRAPPER,
    RECORD_TYPES,
    RECORD_TAGS,
    PREPROCESSOR_CONTAINERS,
    PREPROCESSOR_ALTERNATIVES,
    FUNCTION_DECLARATOR,
    RETURN_DECLARATOR_WRAPPERS,
    DESTRUCTOR_NAME,
    QUALIFIED_IDENTIFIER,
    FUNCTION_NAME_TYPES,
    DECLARATOR_NAME_TYPES,
    PARAMETER_TYPES,
    ELLIPSIS_TOKEN,
    VIRTUAL_SPECIFIERS,
    VIRT_SPECIFIERS,
    STORAGE_CLASS_NODE,
    TYPE_QUALIFIER_NODE,
    TRAILING_RETURN_NODE,
)
from extraction.models import (
    Declaration,
    FunctionDecl,
    LinkageSpecDecl,
    MethodDecl,
    NamespaceDecl,
    ParamDecl,
    RecordDecl,
    TranslationUnitDecl,
)

logger = logging.getLogger(__name__)
_SPACE_RE = re.compile(r"\s+")
_SCOPE_SEPARATOR_RE = re.compile(r"\s*::\s*")

# Named children of a declarator that never lead to the declared name
_NON_DECLARATOR_CHILDREN = {
    "parameter_list",
    TYPE_QUALIFIER_NODE,
    "attribute_specifier",
    "attribute_declaration",
    "ms_pointer_modifier",
    "ms_based_modifier",
}


def normalize_cpp_text(text: str) -> str:
    """Collapse whitespace and ``::`` spacing in rendered C++ text."""
    normalized = _SCOPE_SEPARATOR_RE.sub("::", text.strip())
    normalized = _SPACE_RE.sub(" ", normalized)
    return normalized.strip()


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _span_text(source_bytes: bytes, start: int, end: int) -> str:
    return source_bytes[start:end].decode("utf-8", errors="replace")


def _inner_declarator(node: Node) -> Optional[Node]:
    """Step one level into a declarator wrapper.

    ``reference_declarator`` has no ``declarator`` field, so fall back to the
    first named child that can be a declarator.
    """
    inner = node.child_by_field_name("declarator")
    if inner is not None:
        return inner
    for child in node.named_children:
        if child.type not in _NON_DECLARATOR_CHILDREN:
            return child
    return None


def find_declarator_name(declarator: Optional[Node]) -> Optional[Node]:
    """Find the identifier a (possibly nested) declarator declares.

    Args:
        declarator: A declarator node such as ``pointer_declarator``.

    Returns:
        The identifier node, or None for abstract declarators.
    """
    node = declarator
    while node is not None:
        if node.type in DECLARATOR_NAME_TYPES:
            return node
        node = _inner_declarator(node)
    return None


def unwrap_function_declarator(declarator: Node) -> Optional[Node]:
    """Return the ``function_declarator`` a declaration declares, if any.

    Pointer and reference wrappers belong to the return type and are
    skipped. Function pointers (``void (*cb)(int)``) are variables, not
    functions, and yield None.
    """
    node: Optional[Node] = declarator
    while node is not None and node.type in RETURN_DECLARATOR_WRAPPERS:
        node = _inner_declarator(node)
    if node is None or node.type != FUNCTION_DECLARATOR:
        return None

    name_node = node.child_by_field_name("declarator")
    if name_node is None:
        return None
    if name_node.type not in FUNCTION_NAME_TYPES and name_node.type != QUALIFIED_IDENTIFIER:
        return None
    return node


def function_declarators(node: Node) -> List[Tuple[Node, Node]]:
    """Collect ``(outer_declarator, function_declarator)`` pairs of a declaration."""
    pairs = []
    for declarator in node.children_by_field_name("declarator"):
        function_declarator = unwrap_function_declarator(declarator)
        if function_declarator is not None:
            pairs.append((declarator, function_declarator))
    return pairs


def render_return_type(
    node: Node,
    outer_declarator: Node,
    function_declarator: Node,
    source_bytes: bytes,
) -> str:
    """Render the return type of a function-like declaration.

    Keeps type qualifiers and the type specifier, drops storage classes and
    ``virtual``/``inline``/``explicit``, and appends pointer/reference tokens
    found between the outer declarator and the function declarator.
    Constructors and destructors render as an empty string.
    """
    type_node = node.child_by_field_name("type")
    parts = []
    for child in node.children:
        if child.start_byte >= outer_declarator.start_byte:
            break
        if child.type == TYPE_QUALIFIER_NODE or (type_node is not None and child == type_node):
            parts.append(node_text(child, source_bytes))

    base = normalize_cpp_text(" ".join(parts))

    if base == "auto":
        for child in function_declarator.children:
            if child.type == TRAILING_RETURN_NODE:
                trailing = node_text(child, source_bytes).strip()
                if trailing.startswith("->"):
                    trailing = trailing[2:]
                base = normalize_cpp_text(trailing)
                break

    prefix = normalize_cpp_text(
        _span_text(source_bytes, outer_declarator.start_byte, function_declarator.start_byte)
    )
    if prefix:
        return f"{base} {prefix}".strip()
    return base


def build_param(param_node: Node, source_bytes: bytes, index: int) -> ParamDecl:
    """Build a parameter from a ``parameter_declaration`` node.

    Default arguments are dropped from both renderings. Unnamed parameters
    get the synthetic name ``arg<index>`` so forwarding calls stay valid.
    """
    start = param_node.start_byte
    end = param_node.end_byte
    if param_node.child_by_field_name("default_value") is not None:
        for child in param_node.children:
            if child.type == "=":
                end = child.start_byte
                break

    declaration_text = normalize_cpp_text(_span_text(source_bytes, start, end))
    name_node = find_declarator_name(param_node.child_by_field_name("declarator"))

    if name_node is None or name_node.end_byte > end:
        name = f"arg{index}"
        return ParamDecl(
            name=name,
            type_text=declaration_text,
            declaration_text=f"{declaration_text} {name}",
        )

    type_text = normalize_cpp_text(
        _span_text(source_bytes, start, name_node.start_byte)
        + _span_text(source_bytes, name_node.end_byte, end)
    )
    return ParamDecl(
        name=node_text(name_node, source_bytes),
        type_text=type_text,
        declaration_text=declaration_text,
    )


def build_params(function_declarator: Node, source_bytes: bytes) -> List[ParamDecl]:
    """Build the ordered parameter list of a function declarator.

    A lone unnamed ``void`` parameter means "no parameters". A trailing
    C-style ``...`` is not a parameter node; see ``_is_variadic``.
    """
    parameters = function_declarator.child_by_field_name("parameters")
    if parameters is None:
        return []

    param_nodes = [child for child in parameters.named_children if child.type in PARAMETER_TYPES]
    if len(param_nodes) == 1:
        only = param_nodes[0]
        if (
            only.child_by_field_name("declarator") is None
            and normalize_cpp_text(node_text(only, source_bytes)) == "void"
        ):
            return []

    return [build_param(node, source_bytes, index) for index, node in enumerate(param_nodes)]


def _is_variadic(function_declarator: Node) -> bool:
    parameters = function_declarator.child_by_field_name("parameters")
    if parameters is None:
        return False
    return any(child.type == ELLIPSIS_TOKEN for child in parameters.children)


def _has_virtual_keyword(node: Node, function_declarator: Node) -> bool:
    if any(child.type in VIRTUAL_SPECIFIERS for child in node.children):
        return True
    # override/final imply virtual
    return any(child.type in VIRT_SPECIFIERS for child in function_declarator.children)


def _has_static_storage(node: Node, source_bytes: bytes) -> bool:
    return any(
        child.type == STORAGE_CLASS_NODE and node_text(child, source_bytes).strip() == "static"
        for child in node.children
    )


def _is_const_function(function_declarator: Node, source_bytes: bytes) -> bool:
    return any(
        child.type == TYPE_QUALIFIER_NODE and node_text(child, source_bytes).strip() == "const"
        for child in function_declarator.children
    )


def build_functions(
    node: Node,
    source_bytes: bytes,
    file_name: str,
    as_methods: bool = False,
) -> List[FunctionDecl]:
    """Build function (or method) declarations from a declaration-like node.

    Args:
        node: A ``declaration``, ``field_declaration`` or
            ``function_definition`` node.
        source_bytes: The raw source file bytes.
        file_name: Base name of the parsed file.
        as_methods: Build ``MethodDecl`` instead of ``FunctionDecl``.

    Returns:
        One declaration per function declarator; empty for variables.
    """
    functions: List[FunctionDecl] = []
    for outer_declarator, function_declarator in function_declarators(node):
        name_node = function_declarator.child_by_field_name("declarator")
        name = normalize_cpp_text(node_text(name_node, source_bytes))
        line = node.start_point.row + 1

        if name_node.type == QUALIFIED_IDENTIFIER:
            logger.debug(f"Skipping out-of-line definition '{name}' at line {line}")
            continue

        decl_class = MethodDecl if as_methods else FunctionDecl
        functions.append(
            decl_class(
                name=name,
                file_name=file_name,
                line=line,
                return_type=render_return_type(
                    node, outer_declarator, function_declarator, source_bytes
                ),
                params=build_params(function_declarator, source_bytes),
                is_static=_has_static_storage(node, source_bytes),
                is_virtual=as_methods and _has_virtual_keyword(node, function_declarator),
                is_const=as_methods and _is_const_function(function_declarator, source_bytes),
                is_destructor=name_node.type == DESTRUCTOR_NAME,
                is_variadic=_is_variadic(function_declarator),
            )
        )
    return functions


def _record_name(name_node: Node, source_bytes: bytes) -> str:
    # class ns::Foo { ... } declares Foo
    while name_node.type == QUALIFIED_IDENTIFIER:
        inner = name_node.child_by_field_name("name")
        if inner is None:
            break
        name_node = inner
    return normalize_cpp_text(node_text(name_node, source_bytes))


def build_record(
    node: Node,
    source_bytes: bytes,
    file_name: str,
    parent: Optional[RecordDecl] = None,
) -> Optional[RecordDecl]:
    """Build a record from a class/struct/union specifier.

    Returns:
        The record, or None for anonymous records.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug(f"Skipping anonymous {node.type} at line {node.start_point.row + 1}")
        return None

    body = node.child_by_field_name("body")
    record = RecordDecl(
        name=_record_name(name_node, source_bytes),
        file_name=file_name,
        line=node.start_point.row + 1,
        tag=RECORD_TAGS.get(node.type, "class"),
        has_definition=body is not None,
        parent=parent,
    )
    if body is not None:
        collect_members(body, source_bytes, file_name, record)
    else:
        logger.debug(f"Found forward declaration of '{record.name}' at line {record.line}")
    return record


def _nested_record_specifier(node: Node) -> Optional[Node]:
    type_node = node.child_by_field_name("type")
    if type_node is not None and type_node.type in RECORD_TYPES:
        return type_node
    return None


def collect_members(body: Node, source_bytes: bytes, file_name: str, record: RecordDecl) -> None:
    """Append the methods and nested records of a class body to ``record``."""
    for child in body.named_children:
        if child.type in (FIELD_DECLARATION_NODE, DECLARATION_NODE):
            specifier = _nested_record_specifier(child)
            if specifier is not None and specifier.child_by_field_name("body") is not None:
                nested = build_record(specifier, source_bytes, file_name, parent=record)
                if nested is not None:
                    record.children.append(nested)
            for method in build_functions(child, source_bytes, file_name, as_methods=True):
                record.add_method(method)

        elif child.type == FUNCTION_DEFINITION_NODE:
            for method in build_functions(child, source_bytes, file_name, as_methods=True):
                record.add_method(method)

        elif child.type in RECORD_TYPES:
            nested = build_record(child, source_bytes, file_name, parent=record)
            if nested is not None:
                record.children.append(nested)

        elif child.type == FRIEND_DECLARATION_NODE:
            logger.debug(f"Skipping friend declaration in '{record.name}' at line {child.start_point.row + 1}")

        # Member templates and #ifdef blocks are transparent
        elif child.type == TEMPLATE_WRAPPER or child.type in PREPROCESSOR_CONTAINERS:
            collect_members(child, source_bytes, file_name, record)


def build_namespace(node: Node, source_bytes: bytes, file_name: str) -> NamespaceDecl:
    """Build a namespace; ``namespace a::b`` becomes two nested namespaces."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        names = [""]
    elif name_node.type == NESTED_NAMESPACE_NODE:
        text = normalize_cpp_text(node_text(name_node, source_bytes))
        names = [part.replace("inline ", "").strip() for part in text.split("::")]
    else:
        names = [normalize_cpp_text(node_text(name_node, source_bytes))]

    body = node.child_by_field_name("body")
    children = collect_scope_declarations(body, source_bytes, file_name) if body else []
    line = node.start_point.row + 1

    namespace = None
    for name in reversed(names):
        namespace = NamespaceDecl(
            name=name,
            file_name=file_name,
            line=line,
            children=children if namespace is None else [namespace],
        )
    return namespace


def build_linkage_spec(node: Node, source_bytes: bytes, file_name: str) -> LinkageSpecDecl:
    """Build an ``extern "C"`` block or single-declaration linkage spec."""
    value = node.child_by_field_name("value")
    language = node_text(value, source_bytes).strip().strip('"') if value else "C"

    body = node.child_by_field_name("body")
    if body is None:
        children = []
    elif body.type == "declaration_list":
        children = collect_scope_declarations(body, source_bytes, file_name)
    else:
        children = declarations_from_node(body, source_bytes, file_name)

    return LinkageSpecDecl(
        name=language,
        language=language,
        file_name=file_name,
        line=node.start_point.row + 1,
        children=children,
    )


def declarations_from_node(node: Node, source_bytes: bytes, file_name: str) -> List[Declaration]:
    """Translate one scope-level syntax node into declarations."""
    if node.type == NAMESPACE_NODE:
        return [build_namespace(node, source_bytes, file_name)]

    if node.type == LINKAGE_NODE:
        return [build_linkage_spec(node, source_bytes, file_name)]

    if node.type in RECORD_TYPES:
        record = build_record(node, source_bytes, file_name)
        return [record] if record is not None else []

    if node.type == DECLARATION_NODE:
        declarations: List[Declaration] = []
        specifier = _nested_record_specifier(node)
        if specifier is not None:
            record = build_record(specifier, source_bytes, file_name)
            if record is not None:
                declarations.append(record)
        declarations.extend(build_functions(node, source_bytes, file_name))
        return declarations

    if node.type == FUNCTION_DEFINITION_NODE:
        return list(build_functions(node, source_bytes, file_name))

    if node.type == TEMPLATE_WRAPPER or node.type in PREPROCESSOR_CONTAINERS:
        return collect_scope_declarations(node, source_bytes, file_name)

    if node.type in PREPROCESSOR_ALTERNATIVES:
        logger.debug(f"Skipping {node.type} branch at line {node.start_point.row + 1}")

    return []


def collect_scope_declarations(node: Node, source_bytes: bytes, file_name: str) -> List[Declaration]:
    """Collect the declarations of a translation unit or namespace body in source order."""
    declarations: List[Declaration] = []
    for child in node.named_children:
        declarations.extend(declarations_from_node(child, source_bytes, file_name))
    return declarations


def build_declaration_tree(tree: Tree, source_bytes: bytes, file_path: str) -> TranslationUnitDecl:
    """Build the declaration tree of a parsed C++ file.

    This is the main entry point of the front end.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.
        file_path: Path of the parsed file; its base name is recorded as the
            originating file of every declaration.

    Returns:
        The translation unit declaration.
    """
    file_name = os.path.basename(file_path)
    logger.info(f"Building declaration tree for {file_path}")
    children = collect_scope_declarations(tree.root_node, source_bytes, file_name)
    logger.info(f"Collected {len(children)} top-level declarations from {file_path}")
    return TranslationUnitDecl(name=file_name, children=children)
