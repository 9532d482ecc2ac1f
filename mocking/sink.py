"""
Output sink for generated mock files.

The sink fans writes out to the mandatory header stream and the optional
source stream. A scope the engine skips writes to neither, so the header and
source nesting cannot drift apart.
"""

from __future__ import annotations

import logging
import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO

from core.errors import FilesystemError, PathError

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Counters for one generation run."""

    mock_declarations: int = 0
    definitions: int = 0
    mock_classes: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "mock_declarations": self.mock_declarations,
            "definitions": self.definitions,
            "mock_classes": self.mock_classes,
        }


class OutputSink:
    """Header stream plus optional source stream."""

    def __init__(self, header: TextIO, source: Optional[TextIO] = None):
        self._header = header
        self._source = source
        self.stats = GenerationStats()

    @property
    def has_source(self) -> bool:
        return self._source is not None

    def header(self, text: str) -> None:
        self._header.write(text)

    def source(self, text: str) -> None:
        if self._source is not None:
            self._source.write(text)

    def both(self, text: str) -> None:
        self.header(text)
        self.source(text)


def _require_absolute(path: str, description: str) -> None:
    if not os.path.isabs(path):
        logger.error("Output %s path is not absolute: %s", description, path)
        raise PathError(f"Output {description} path is not absolute: {path}")


def _open_output(path: str, description: str, stack: ExitStack) -> TextIO:
    directory = os.path.dirname(path)
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(
            f"Can't create the directory for the output {description} file", path, exc
        ) from exc
    try:
        stream = open(path, "w", encoding="utf-8", newline="\n")
    except OSError as exc:
        raise FilesystemError(f"Can't open the output {description} file", path, exc) from exc
    return stack.enter_context(stream)


@contextmanager
def open_output_sink(header_path: str, source_path: Optional[str] = None) -> Iterator[OutputSink]:
    """Validate output paths, create their directories and open the streams.

    Both paths are validated before anything is created on disk.

    Raises:
        PathError: If an output path is relative.
        FilesystemError: If a directory or file cannot be created.
    """
    _require_absolute(header_path, "header")
    if source_path:
        _require_absolute(source_path, "source")

    with ExitStack() as stack:
        header = _open_output(header_path, "header", stack)
        source = _open_output(source_path, "source", stack) if source_path else None
        logger.debug("Opened output header %s (source: %s)", header_path, source_path or "-")
        yield OutputSink(header, source)
