"""
Layer 2: Mock generation

Walks the declaration tree and emits GoogleMock headers and singleton
forwarding sources.
"""

from mocking.emitters import (
    CurrentMockPrinter,
    LegacyMockPrinter,
    MockMacroPrinter,
    select_mock_printer,
)
from mocking.engine import MockGenerator, Stage, TraversalContext
from mocking.generator import MockGenerationResult, generate_mocks
from mocking.naming import (
    file_mock_class_name,
    include_guard_token,
    mock_class_name,
    relative_include_path,
)
from mocking.sink import GenerationStats, OutputSink, open_output_sink

__all__ = [
    "CurrentMockPrinter",
    "LegacyMockPrinter",
    "MockMacroPrinter",
    "select_mock_printer",
    "MockGenerator",
    "Stage",
    "TraversalContext",
    "MockGenerationResult",
    "generate_mocks",
    "file_mock_class_name",
    "include_guard_token",
    "mock_class_name",
    "relative_include_path",
    "GenerationStats",
    "OutputSink",
    "open_output_sink",
]
