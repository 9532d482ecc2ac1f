"""Log records tagged with the header being mocked and the current phase.

A script that mocks several headers in one process interleaves parse and
emit messages for every input; ``input_scope`` and ``phase_scope`` stamp
each record so the output can be grepped per header.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Dict, Iterator

UNSET = "-"

_CONTEXT_FIELDS: Dict[str, contextvars.ContextVar[str]] = {
    "input_file": contextvars.ContextVar("input_file", default=UNSET),
    "phase": contextvars.ContextVar("phase", default=UNSET),
}

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | input=%(input_file)s | phase=%(phase)s | "
    "%(name)s | %(message)s"
)


class _InputContextFilter(logging.Filter):
    """Copy the context fields onto every record a handler sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in _CONTEXT_FIELDS.items():
            setattr(record, name, var.get())
        return True


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Install ``LOG_FORMAT`` and the context filter on the root handlers."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in root_logger.handlers:
        handler.setFormatter(formatter)
        if not any(isinstance(f, _InputContextFilter) for f in handler.filters):
            handler.addFilter(_InputContextFilter())


def get_current_input() -> str:
    return _CONTEXT_FIELDS["input_file"].get()


@contextmanager
def _field_scope(name: str, value: str) -> Iterator[None]:
    var = _CONTEXT_FIELDS[name]
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


def input_scope(input_file: str):
    """Tag records emitted inside the block with ``input_file``."""
    return _field_scope("input_file", input_file)


def phase_scope(phase: str):
    """Tag records emitted inside the block with ``phase`` (``parse``, ``emit``)."""
    return _field_scope("phase", phase)
