#!/usr/bin/env python3
"""
Command-line entry point for GoogleMock mock generation.

Generates a mock header for one input C++ header. In ``interface`` mode the
mocks derive from the mocked classes; in ``singleton`` mode they derive from
the configured singleton base and a companion source file forwards free
functions and static methods to the mock instance.

Usage:
    python run_genmock.py --outh /abs/mocks/widget_mock.h include/widgets/widget.h
    python run_genmock.py --mocktype singleton --outh /abs/mocks/file_mock.h \\
        --outsrc /abs/mocks/file_mock.cpp include/io/file.h
    python run_genmock.py --config ./genmock.json --outh /abs/mocks/api_mock.h api.h
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.errors import ConfigurationError, FilesystemError, PathError
from core.mock_config import load_mock_config, resolve_config_path
from core.structured_logging import configure_structured_logging
from mocking.generator import generate_mocks

logger = logging.getLogger(__name__)

MOCK_TYPES = ("interface", "singleton")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="GoogleMock mock generator for C++ headers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  genmock --outh /abs/mocks/widget_mock.h include/widgets/widget.h\n"
            "  genmock --mocktype singleton --outh /abs/mocks/file_mock.h "
            "--outsrc /abs/mocks/file_mock.cpp include/io/file.h\n"
        ),
    )

    parser.add_argument(
        "source",
        help="C++ header to mock. One header per run: --outh and --outsrc name single files.",
    )
    parser.add_argument(
        "--mocktype",
        choices=MOCK_TYPES,
        default="interface",
        help="Mock an interface (default) or mock using a singleton.",
    )
    parser.add_argument(
        "--outh",
        required=True,
        help="Absolute path of the output header file.",
    )
    parser.add_argument(
        "--outsrc",
        default=None,
        help="Absolute path of the output source file (singleton mode).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to the JSON/YAML config file. "
            "Default: $GENMOCK_CONFIG or <user config dir>/genmock/genmock.json"
        ),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)
    if args.mocktype == "singleton" and not args.outsrc:
        parser.error("--mocktype singleton requires --outsrc")
    if args.mocktype == "interface" and args.outsrc:
        parser.error("--outsrc is only valid with --mocktype singleton")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)
    configure_structured_logging(logging.DEBUG if args.verbose else logging.INFO)

    config_path = resolve_config_path(args.config)
    try:
        config = load_mock_config(config_path)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        result = generate_mocks(args.source, config, args.outh, args.outsrc)
        logger.info(f"Generated mocks: {result.to_dict()}")
    except (PathError, FilesystemError) as e:
        logger.error(f"Output error: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
