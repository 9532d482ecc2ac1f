"""
High-level orchestrator for mock generation.

Parses one C++ file, builds its declaration tree and runs one
``MockGenerator`` over it.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.mock_config import MockConfig
from core.structured_logging import input_scope, phase_scope
from extraction.config import CPP_EXTENSIONS
from extraction.parser import count_error_nodes, first_error_line, parse_file
from extraction.traversal import build_declaration_tree
from mocking.engine import MockGenerator
from mocking.sink import GenerationStats

logger = logging.getLogger(__name__)


@dataclass
class MockGenerationResult:
    """Outcome of generating the mocks of one input file."""

    input_path: str
    header_path: str
    source_path: Optional[str]
    parse_error_count: int = 0
    stats: GenerationStats = field(default_factory=GenerationStats)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "input_path": self.input_path,
            "header_path": self.header_path,
            "source_path": self.source_path,
            "parse_error_count": self.parse_error_count,
        }
        payload.update(self.stats.to_dict())
        return payload


def _validate_input(file_path: str) -> str:
    file_path = os.path.abspath(file_path)

    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1]
    if ext not in CPP_EXTENSIONS:
        raise ValueError(
            f"File {file_path} is not a C++ header or source file. "
            f"Expected one of: {sorted(CPP_EXTENSIONS)}"
        )
    return file_path


def generate_mocks(
    input_file_path: str,
    config: MockConfig,
    output_header_path: str,
    output_source_path: Optional[str] = None,
) -> MockGenerationResult:
    """Generate the mock header (and optional source) for one C++ file.

    Args:
        input_file_path: The header to mock.
        config: Run configuration.
        output_header_path: Absolute path of the generated header.
        output_source_path: Absolute path of the generated source file;
            enables singleton (source) mode when given.

    Returns:
        Paths, parse diagnostics and emission counters of the run.

    Raises:
        FileNotFoundError: If the input file does not exist.
        ValueError: If the input is not a C++ file.
        PathError: If an output path is not absolute.
        FilesystemError: If an output file cannot be created.

    Example:
        >>> result = generate_mocks("include/widgets/widget.h", config, "/tmp/mocks/widget_mock.h")
        >>> result.stats.mock_declarations
        1
    """
    input_path = _validate_input(input_file_path)

    with input_scope(os.path.basename(input_path)):
        with phase_scope("parse"):
            tree, source_bytes = parse_file(input_path)
            parse_error_count = count_error_nodes(tree)
            if parse_error_count:
                logger.warning(
                    "File %s contains syntax errors (%d error nodes, first at line %d); "
                    "mocks may be incomplete",
                    input_path,
                    parse_error_count,
                    first_error_line(tree),
                )
            translation_unit = build_declaration_tree(tree, source_bytes, input_path)

        with phase_scope("emit"):
            generator = MockGenerator(
                config,
                input_path,
                output_header_path,
                output_source_path,
            )
            stats = generator.generate(translation_unit)

    return MockGenerationResult(
        input_path=input_path,
        header_path=output_header_path,
        source_path=output_source_path or None,
        parse_error_count=parse_error_count,
        stats=stats,
    )
