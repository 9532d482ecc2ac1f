"""Core shared contracts: configuration, errors and logging."""

from core.errors import (
    ConfigurationError,
    FilesystemError,
    GenMockError,
    PathError,
)
from core.mock_config import (
    GmockStyle,
    MockConfig,
    default_config_path,
    load_mock_config,
    resolve_config_path,
)
from core.structured_logging import (
    configure_structured_logging,
    get_current_input,
    input_scope,
    phase_scope,
)

__all__ = [
    "ConfigurationError",
    "FilesystemError",
    "GenMockError",
    "PathError",
    "GmockStyle",
    "MockConfig",
    "default_config_path",
    "load_mock_config",
    "resolve_config_path",
    "configure_structured_logging",
    "get_current_input",
    "input_scope",
    "phase_scope",
]
