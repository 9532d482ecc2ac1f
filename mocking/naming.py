"""Naming rules for mock classes, include paths and include guards."""

from __future__ import annotations

import os
import re

INTERFACE_MARKER = "I"
MOCK_SUFFIX = "Mock"
GUARD_MOCK_MARKER = "_MOCK"

_INCLUDE_SEGMENT_RE = re.compile(r"(?:^|/)include/")


def mock_class_name(class_name: str) -> str:
    """``IWidget`` -> ``WidgetMock``; ``Widget`` -> ``WidgetMock``."""
    if class_name.startswith(INTERFACE_MARKER):
        class_name = class_name[len(INTERFACE_MARKER):]
    return class_name + MOCK_SUFFIX


def file_mock_class_name(path: str) -> str:
    """Mock class name for declarations outside any class.

    ``/src/include/io/file_api.h`` -> ``File_apiMock``.
    """
    stem = os.path.basename(path).split(".", 1)[0]
    if stem:
        stem = stem[0].upper() + stem[1:]
    return stem + MOCK_SUFFIX


def relative_include_path(path: str) -> str:
    """Path used in ``#include "..."`` directives and guard tokens.

    Everything after the last ``include/`` directory segment, or the bare
    file name when the path has no such segment.
    """
    normalized = path.replace("\\", "/")
    matches = list(_INCLUDE_SEGMENT_RE.finditer(normalized))
    if not matches:
        return os.path.basename(normalized)
    return normalized[matches[-1].end():]


def include_guard_token(relative_path: str) -> str:
    """Build the include guard of a generated mock header.

    ``_MOCK`` goes between the directory part and the file name
    (``widgets/widget.h`` -> ``WIDGETS_MOCK_WIDGET_H``); without a directory
    it goes before the extension (``widget.h`` -> ``WIDGET_MOCK_H``).
    """
    token = "".join("_" if char in "/." else char.upper() for char in relative_path)
    insert_at = relative_path.rfind("/")
    if insert_at < 0:
        insert_at = relative_path.rfind(".")
    if insert_at < 0:
        return token + GUARD_MOCK_MARKER
    return token[:insert_at] + GUARD_MOCK_MARKER + token[insert_at:]
