"""
Configuration constants for building the declaration tree.

Defines the tree-sitter node type strings the front end dispatches on.
"""

from typing import Set

# Scope-level declarations
NAMESPACE_NODE: str = "namespace_definition"
NESTED_NAMESPACE_NODE: str = "nested_namespace_specifier"
LINKAGE_NODE: str = "linkage_specification"
DECLARATION_NODE: str = "declaration"
FUNCTION_DEFINITION_NODE: str = "function_definition"
FIELD_DECLARATION_NODE: str = "field_declaration"
FRIEND_DECLARATION_NODE: str = "friend_declaration"

# Template wrapper node type
TEMPLATE_WRAPPER: str = "template_declaration"

# Record specifiers (class Foo { ... })
RECORD_TYPES: Set[str] = {
    "class_specifier",
    "struct_specifier",
    "union_specifier",
}

RECORD_TAGS: dict = {
    "class_specifier": "class",
    "struct_specifier": "struct",
    "union_specifier": "union",
}

# Preprocessor directives whose primary branch we traverse
PREPROCESSOR_CONTAINERS: Set[str] = {
    "preproc_ifdef",
    "preproc_ifndef",
    "preproc_if",
}

# Alternative branches; the front end follows only the primary branch
PREPROCESSOR_ALTERNATIVES: Set[str] = {
    "preproc_else",
    "preproc_elif",
    "preproc_elifdef",
}

# Declarator nodes
FUNCTION_DECLARATOR: str = "function_declarator"
POINTER_DECLARATOR: str = "pointer_declarator"
REFERENCE_DECLARATOR: str = "reference_declarator"
DESTRUCTOR_NAME: str = "destructor_name"
QUALIFIED_IDENTIFIER: str = "qualified_identifier"

# Declarator wrappers between a return type and its function_declarator
RETURN_DECLARATOR_WRAPPERS: Set[str] = {
    POINTER_DECLARATOR,
    REFERENCE_DECLARATOR,
}

# Name nodes a function_declarator may carry for a real (non-pointer) function
FUNCTION_NAME_TYPES: Set[str] = {
    "identifier",
    "field_identifier",
    "destructor_name",
    "operator_name",
    "template_function",
    "template_method",
}

# Name nodes for parameters and plain declarators
DECLARATOR_NAME_TYPES: Set[str] = {
    "identifier",
    "field_identifier",
}

# Parameter declaration nodes
PARAMETER_TYPES: Set[str] = {
    "parameter_declaration",
    "optional_parameter_declaration",
    "variadic_parameter_declaration",
}

# Unnamed token of a C-style variadic parameter list
ELLIPSIS_TOKEN: str = "..."

# Specifier nodes
VIRTUAL_SPECIFIERS: Set[str] = {
    "virtual",
    "virtual_function_specifier",
}
VIRT_SPECIFIERS: Set[str] = {
    "virtual_specifier",
    "virt_specifier",
}
STORAGE_CLASS_NODE: str = "storage_class_specifier"
TYPE_QUALIFIER_NODE: str = "type_qualifier"
TRAILING_RETURN_NODE: str = "trailing_return_type"

# Header and source extensions accepted as mock inputs
CPP_EXTENSIONS: Set[str] = {
    ".cpp",
    ".cc",
    ".cxx",
    ".c",
    ".h",
    ".hh",
    ".hpp",
    ".hxx",
}
