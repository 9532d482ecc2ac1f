"""Tests for input/phase log correlation."""

import logging
import unittest

from core.structured_logging import (
    _InputContextFilter,
    get_current_input,
    input_scope,
    phase_scope,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("genmock", logging.INFO, __file__, 1, "message", None, None)


class TestStructuredLogging(unittest.TestCase):
    """Test context tagging of log records."""

    def test_defaults_outside_scopes(self) -> None:
        """Test the placeholder values outside any scope."""
        record = _record()
        _InputContextFilter().filter(record)

        self.assertEqual(record.input_file, "-")
        self.assertEqual(record.phase, "-")
        self.assertEqual(get_current_input(), "-")

    def test_scopes_tag_records(self) -> None:
        """Test that scopes set the input and phase fields."""
        with input_scope("widget.h"), phase_scope("emit"):
            record = _record()
            _InputContextFilter().filter(record)
            self.assertEqual(get_current_input(), "widget.h")

        self.assertEqual(record.input_file, "widget.h")
        self.assertEqual(record.phase, "emit")

    def test_scopes_restore_previous_values(self) -> None:
        """Test that leaving a scope restores the outer value."""
        with input_scope("a.h"):
            with input_scope("b.h"):
                self.assertEqual(get_current_input(), "b.h")
            self.assertEqual(get_current_input(), "a.h")
        self.assertEqual(get_current_input(), "-")


if __name__ == "__main__":
    unittest.main()
