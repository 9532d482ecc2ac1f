"""
Declaration tree consumed by the mock generator.

The tree is front-end agnostic: the tree-sitter adapter in
``extraction.traversal`` builds it, and tests build it by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional


class DeclKind(str, Enum):
    """Kind tag the traversal engine dispatches on."""

    TRANSLATION_UNIT = "TranslationUnit"
    LINKAGE_SPEC = "LinkageSpec"
    NAMESPACE = "Namespace"
    RECORD = "Record"
    METHOD = "Method"
    FUNCTION = "Function"


@dataclass
class ParamDecl:
    """A single function parameter.

    Attributes:
        name: Parameter name.
        type_text: Rendered type without the name (e.g. ``const char *``).
        declaration_text: Rendered ``type name`` form; derived from the
            other two fields when omitted.
    """

    name: str
    type_text: str
    declaration_text: Optional[str] = None

    @property
    def declaration(self) -> str:
        if self.declaration_text:
            return self.declaration_text
        return f"{self.type_text} {self.name}".strip()


@dataclass
class Declaration:
    """Common capabilities of every declaration node.

    Attributes:
        name: Declared name (empty for anonymous namespaces).
        file_name: Base name of the file the declaration was written in,
            or None when the front end does not know it.
        line: 1-indexed line of the declaration.
        children: Nested declarations in source order.
    """

    kind: ClassVar[DeclKind]

    name: str = ""
    file_name: Optional[str] = None
    line: int = 0
    children: List[Declaration] = field(default_factory=list)


@dataclass
class TranslationUnitDecl(Declaration):
    kind: ClassVar[DeclKind] = DeclKind.TRANSLATION_UNIT


@dataclass
class LinkageSpecDecl(Declaration):
    """An ``extern "C" { ... }`` or ``extern "C++" { ... }`` block."""

    kind: ClassVar[DeclKind] = DeclKind.LINKAGE_SPEC

    language: str = "C"


@dataclass
class NamespaceDecl(Declaration):
    kind: ClassVar[DeclKind] = DeclKind.NAMESPACE


@dataclass
class RecordDecl(Declaration):
    """A class, struct or union.

    Attributes:
        tag: ``class``, ``struct`` or ``union``.
        has_definition: False for forward declarations.
        parent: Enclosing record for nested records.
    """

    kind: ClassVar[DeclKind] = DeclKind.RECORD

    tag: str = "class"
    has_definition: bool = True
    parent: Optional[RecordDecl] = field(default=None, repr=False, compare=False)

    @property
    def methods(self) -> List[MethodDecl]:
        return [child for child in self.children if isinstance(child, MethodDecl)]

    @property
    def has_static_method(self) -> bool:
        return any(method.is_static for method in self.methods)

    @property
    def qualified_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.qualified_name}::{self.name}"

    def add_method(self, method: MethodDecl) -> MethodDecl:
        method.owner = self
        self.children.append(method)
        return method


@dataclass
class FunctionDecl(Declaration):
    """A free function declaration or definition.

    ``is_variadic`` marks a C-style ``...`` parameter pack, which is not part
    of ``params``.
    """

    kind: ClassVar[DeclKind] = DeclKind.FUNCTION

    return_type: str = "void"
    params: List[ParamDecl] = field(default_factory=list)
    is_static: bool = False
    is_virtual: bool = False
    is_const: bool = False
    is_destructor: bool = False
    is_variadic: bool = False


@dataclass
class MethodDecl(FunctionDecl):
    """A member function; ``owner`` is the record it was declared in."""

    kind: ClassVar[DeclKind] = DeclKind.METHOD

    owner: Optional[RecordDecl] = field(default=None, repr=False, compare=False)
