"""
Traversal engine that emits mock headers and forwarding sources.

The engine walks a declaration tree depth-first and writes text to an
``OutputSink`` as it goes. All per-run state is explicit: a frozen
``TraversalContext`` is handed to every visit and the visit returns the
context its next sibling starts from. The engine object itself only holds
immutable settings, so one instance can run any number of times and every
run over the same input produces the same bytes.

Header-only mode (no source path) mocks interfaces: every record gets a mock
class deriving from it with one mock declaration per virtual method.
Source mode mocks static methods and free functions: mock classes derive
from the configured singleton base and the source file defines each mocked
function as a call forwarded to ``<Mock>::instance()``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Callable, Dict, Optional

from core.mock_config import MockConfig
from extraction.models import (
    Declaration,
    DeclKind,
    FunctionDecl,
    LinkageSpecDecl,
    MethodDecl,
    NamespaceDecl,
    RecordDecl,
)
from mocking.emitters import select_mock_printer
from mocking.naming import (
    file_mock_class_name,
    include_guard_token,
    mock_class_name,
    relative_include_path,
)
from mocking.signature import render_function_definition
from mocking.sink import GenerationStats, OutputSink, open_output_sink

logger = logging.getLogger(__name__)

GMOCK_HEADER = "gmock/gmock.h"


class Stage(IntEnum):
    """How far into a scope's contents the walk has progressed.

    Only used to decide where separating blank lines go.
    """

    INCLUDES = 0
    NAMESPACES = 1
    CLASS = 2
    FUNCTIONS = 3


@dataclass(frozen=True)
class TraversalContext:
    """State visible to one visit.

    Attributes:
        stage: Current stage.
        class_name: Source class whose members are being visited.
        mock_class_name: Mock class that functions in this scope forward to.
    """

    stage: Stage
    class_name: str
    mock_class_name: str

    @classmethod
    def initial(cls, mock_class_name: str) -> "TraversalContext":
        return cls(stage=Stage.INCLUDES, class_name="", mock_class_name=mock_class_name)

    def with_stage(self, stage: Stage) -> "TraversalContext":
        return replace(self, stage=stage)

    def enter_class(self, class_name: str, mock_class_name: str) -> "TraversalContext":
        return replace(self, stage=Stage.CLASS, class_name=class_name, mock_class_name=mock_class_name)

    @property
    def before_members(self) -> bool:
        return self.stage in (Stage.INCLUDES, Stage.NAMESPACES)


Handler = Callable[[Declaration, TraversalContext, OutputSink], TraversalContext]


class MockGenerator:
    """Generates the mock header (and optional source) of one input file.

    Args:
        config: Run configuration.
        input_file_path: The header being mocked.
        output_header_path: Absolute path of the generated header.
        output_source_path: Absolute path of the generated source; enables
            source mode when given.
    """

    def __init__(
        self,
        config: MockConfig,
        input_file_path: str,
        output_header_path: str,
        output_source_path: Optional[str] = None,
    ):
        self.config = config
        self.input_file_path = input_file_path
        self.input_file_name = os.path.basename(input_file_path)
        self.output_header_path = output_header_path
        self.output_source_path = output_source_path or None
        self.file_mock_class_name = file_mock_class_name(input_file_path)
        self.relative_input_path = relative_include_path(input_file_path)
        self.guard_token = include_guard_token(self.relative_input_path)
        self._printer = select_mock_printer(config.gmock_style)
        self._handlers: Dict[DeclKind, Handler] = {
            DeclKind.TRANSLATION_UNIT: self._traverse_children,
            DeclKind.LINKAGE_SPEC: self._traverse_linkage_spec,
            DeclKind.NAMESPACE: self._traverse_namespace,
            DeclKind.RECORD: self._traverse_record,
            DeclKind.METHOD: self._visit_method,
            DeclKind.FUNCTION: self._visit_function,
        }

    @property
    def source_mode(self) -> bool:
        return self.output_source_path is not None

    def generate(self, translation_unit: Declaration) -> GenerationStats:
        """Run the generator over a translation unit.

        Raises:
            PathError: If an output path is not absolute.
            FilesystemError: If an output directory or file cannot be created.
        """
        logger.info(
            "Generating %s mocks for %s into %s",
            "singleton" if self.source_mode else "interface",
            self.input_file_path,
            self.output_header_path,
        )
        with open_output_sink(self.output_header_path, self.output_source_path) as sink:
            self._write_preamble(sink)
            self.traverse_decl(translation_unit, TraversalContext.initial(self.file_mock_class_name), sink)
            sink.header(f"#endif // {self.guard_token}\n")

        logger.info("Generated mocks for %s: %s", self.input_file_name, sink.stats.to_dict())
        return sink.stats

    def _write_preamble(self, sink: OutputSink) -> None:
        sink.header(
            f"#ifndef {self.guard_token}\n"
            f"#define {self.guard_token}\n\n"
            f'#include "{self.relative_input_path}"\n'
        )
        if sink.has_source:
            sink.header(f"#include <{self.config.singleton_path}>\n")
            sink.source(
                f'#include "{self.relative_input_path}"\n'
                f'#include "{relative_include_path(self.output_header_path)}"\n'
            )
        sink.header(f"#include <{GMOCK_HEADER}>\n")

    def is_from_input_file(self, decl: Declaration) -> bool:
        return decl.file_name is None or decl.file_name == self.input_file_name

    def traverse_decl(self, decl: Declaration, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        """Visit ``decl`` and return the context its next sibling starts from."""
        if not self.is_from_input_file(decl):
            logger.debug("Ignoring %s '%s' from %s", decl.kind.value, decl.name, decl.file_name)
            return ctx
        handler = self._handlers.get(decl.kind)
        if handler is None:
            return ctx
        return handler(decl, ctx, sink)

    def _traverse_children(self, decl: Declaration, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        # Class names are scoped to ``decl``; the stage carries over between siblings.
        current = ctx
        for child in decl.children:
            current = ctx.with_stage(self.traverse_decl(child, current, sink).stage)
        return current

    def _singleton_class_head(self, name: str) -> str:
        return f"class {name} : public {self.config.singleton_class}<{name}>\n{{\npublic:\n"

    def _traverse_linkage_spec(self, decl: LinkageSpecDecl, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        if ctx.stage is Stage.INCLUDES:
            sink.source("\n")

        mock_name = self.file_mock_class_name
        inner = replace(ctx, stage=Stage.NAMESPACES, class_name="", mock_class_name=mock_name)
        language = "C++" if decl.language.upper() in ("C++", "CXX") else "C"

        sink.header(self._singleton_class_head(mock_name))
        sink.stats.mock_classes += 1
        sink.source(f'extern "{language}" {{\n')

        result = self._traverse_children(decl, inner, sink)

        sink.source(f'}} // extern "{language}"\n')
        sink.header(f"}}; // class {mock_name}\n\n")
        return ctx.with_stage(result.stage)

    def _traverse_namespace(self, decl: NamespaceDecl, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        if ctx.stage is Stage.INCLUDES:
            sink.both("\n")

        opening = f"namespace {decl.name} {{\n" if decl.name else "namespace {\n"
        closing = f"}} // namespace {decl.name}\n" if decl.name else "} // namespace\n"

        sink.both(opening)
        result = self._traverse_children(decl, ctx.with_stage(Stage.NAMESPACES), sink)
        sink.both(closing)
        return ctx.with_stage(result.stage)

    def _traverse_record(self, decl: RecordDecl, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        if not decl.has_definition:
            logger.debug("Skipping undefined record '%s'", decl.name)
            return ctx

        # A class without static methods has nothing to forward in source mode.
        if sink.has_source and not decl.has_static_method:
            logger.debug("Skipping record '%s' without static methods", decl.name)
            return ctx

        if ctx.before_members:
            sink.both("\n")

        mock_name = mock_class_name(decl.name)
        inner = ctx.enter_class(decl.name, mock_name)
        singleton = self.config.singleton_class

        if sink.has_source:
            sink.header(
                self._singleton_class_head(mock_name)
                + f"{self.config.tab}{mock_name}() : {singleton}<{mock_name}>(*this) {{}}\n\n"
            )
        else:
            sink.header(f"class {mock_name} : public {decl.name}\n{{\npublic:\n")
        sink.stats.mock_classes += 1

        result = self._traverse_children(decl, inner, sink)

        sink.header(f"}}; // class {mock_name}\n\n")
        return ctx.with_stage(result.stage)

    def _emit_mock_declaration(self, function: FunctionDecl, sink: OutputSink) -> None:
        sink.header(self.config.tab + self._printer.render_line(function))
        sink.stats.mock_declarations += 1

    def _emit_definition(self, function: FunctionDecl, ctx: TraversalContext, sink: OutputSink) -> None:
        sink.source(render_function_definition(ctx.mock_class_name, function, self.config.tab))
        sink.stats.definitions += 1

    def _visit_method(self, decl: MethodDecl, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        if decl.is_variadic:
            logger.debug("Skipping variadic method '%s' of '%s'", decl.name, ctx.class_name)
        elif sink.has_source and decl.is_static:
            self._emit_mock_declaration(decl, sink)
            self._emit_definition(decl, ctx, sink)
        elif decl.is_virtual and not decl.is_destructor:
            self._emit_mock_declaration(decl, sink)
        else:
            logger.debug("Skipping method '%s' of '%s'", decl.name, ctx.class_name)
        return ctx.with_stage(Stage.FUNCTIONS)

    def _visit_function(self, decl: FunctionDecl, ctx: TraversalContext, sink: OutputSink) -> TraversalContext:
        if not sink.has_source:
            return ctx
        # GoogleMock cannot mock C-style variadic functions
        if decl.is_variadic:
            logger.debug("Skipping variadic function '%s'", decl.name)
            return ctx

        if ctx.before_members:
            sink.both("\n")

        self._emit_mock_declaration(decl, sink)
        self._emit_definition(decl, ctx, sink)
        return ctx.with_stage(Stage.FUNCTIONS)
