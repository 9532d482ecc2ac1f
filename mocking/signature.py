"""
Signature rendering for mock declarations and forwarding definitions.

Pure text functions over ``FunctionDecl``/``MethodDecl``; none of them
touches an output stream.
"""

from typing import Callable

from extraction.models import FunctionDecl, MethodDecl, ParamDecl

DEFAULT_INDENT = "    "


def _join_params(function: FunctionDecl, render: Callable[[ParamDecl], str]) -> str:
    return ", ".join(render(param) for param in function.params)


def render_param_list(function: FunctionDecl) -> str:
    """``const char *path, int flags``"""
    return _join_params(function, lambda param: param.declaration)


def render_param_type_list(function: FunctionDecl) -> str:
    """``const char *, int``"""
    return _join_params(function, lambda param: param.type_text)


def render_param_name_list(function: FunctionDecl) -> str:
    """``path, flags``"""
    return _join_params(function, lambda param: param.name)


def returns_void(function: FunctionDecl) -> bool:
    return function.return_type.strip() == "void"


def render_function_signature(function: FunctionDecl) -> str:
    """Render ``<ret> <Owner::>?<name>(<params>)``.

    The owner segment is present only for methods and is qualified through
    enclosing records (``Outer::Inner::``).
    """
    owner = ""
    if isinstance(function, MethodDecl) and function.owner is not None:
        owner = f"{function.owner.qualified_name}::"
    return f"{function.return_type} {owner}{function.name}({render_param_list(function)})"


def render_mock_call(mock_class_name: str, function: FunctionDecl) -> str:
    """Render the statement forwarding a call to the singleton mock instance."""
    prefix = "" if returns_void(function) else "return "
    return (
        f"{prefix}{mock_class_name}::instance()."
        f"{function.name}({render_param_name_list(function)});"
    )


def render_function_definition(
    mock_class_name: str,
    function: FunctionDecl,
    indent: str = DEFAULT_INDENT,
) -> str:
    """Render an out-of-line definition forwarding to ``mock_class_name``.

    Example:
        >>> render_function_definition("FileMock", fn)  # doctest: +SKIP
        'int file_open(const char *path)\\n{\\n    return FileMock::instance().file_open(path);\\n}\\n\\n'
    """
    return (
        f"{render_function_signature(function)}\n"
        "{\n"
        f"{indent}{render_mock_call(mock_class_name, function)}\n"
        "}\n\n"
    )
