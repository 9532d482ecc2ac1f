"""
Mock-macro emitters.

Two interchangeable dialects render one mock declaration line per function:

- legacy: ``MOCK_METHOD<n>`` / ``MOCK_CONST_METHOD<n>`` keyed by arity;
- current: the unified ``MOCK_METHOD`` macro with explicit qualifiers.

The dialect is chosen once per engine with :func:`select_mock_printer`.
"""

from typing import Dict

from core.mock_config import GmockStyle
from extraction.models import FunctionDecl
from mocking.signature import render_param_type_list


class MockMacroPrinter:
    """Renders the mock-macro line of a function, without indentation."""

    style: GmockStyle

    def render(self, function: FunctionDecl) -> str:
        raise NotImplementedError("MockMacroPrinter.render()")

    def render_line(self, function: FunctionDecl) -> str:
        return self.render(function) + "\n"


class LegacyMockPrinter(MockMacroPrinter):
    style = GmockStyle.OLD

    def render(self, function: FunctionDecl) -> str:
        macro = "MOCK_CONST_METHOD" if function.is_const else "MOCK_METHOD"
        return (
            f"{macro}{len(function.params)}({function.name}, "
            f"{function.return_type}({render_param_type_list(function)}));"
        )


class CurrentMockPrinter(MockMacroPrinter):
    style = GmockStyle.NEW

    @staticmethod
    def qualifiers(function: FunctionDecl) -> str:
        specs = []
        if function.is_const:
            specs.append("const")
        if function.is_virtual:
            specs.append("override")
        if not specs:
            return ""
        return f", ({', '.join(specs)})"

    def render(self, function: FunctionDecl) -> str:
        return (
            f"MOCK_METHOD({function.return_type}, {function.name}, "
            f"({render_param_type_list(function)}){self.qualifiers(function)});"
        )


_PRINTERS: Dict[GmockStyle, MockMacroPrinter] = {
    printer.style: printer for printer in (LegacyMockPrinter(), CurrentMockPrinter())
}


def select_mock_printer(style: GmockStyle) -> MockMacroPrinter:
    return _PRINTERS.get(style, _PRINTERS[GmockStyle.NEW])
