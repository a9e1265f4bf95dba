#!/usr/bin/env python3
"""Command-line interface for recordflow.

This module runs a request document through the pipeline:
- Argument parsing
- Request loading (YAML or JSON, from a file or stdin)
- Configuration file loading
- JSON output of {"result": [...]}

Example:
    $ recordflow --input request.yaml --indent 2
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

import yaml

from recordflow.core.config import ConfigError, ConfigManager
from recordflow.core.constants import RECORDFLOW_VERSION, ConfigKey, RequestKey
from recordflow.core.logging import Logger, configure_logging
from recordflow.pipeline import DataProcessor
from recordflow.rules.base import RuleExecutionError

DESCRIPTION = "recordflow - rule-based record filtering and ordering"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="recordflow",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Request format (YAML or JSON):
  data:
    - {name: John, email: john2@mail.com}
    - {name: Jane, email: jane@mail.com}
  condition:
    include: [{name: John}]
    sort_by: [email]

Examples:
  recordflow --input request.yaml
  cat request.json | recordflow --indent 2
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {RECORDFLOW_VERSION}",
    )

    parser.add_argument(
        "-i",
        "--input",
        metavar="FILE",
        type=str,
        default="-",
        help="Request document path, or - for stdin (default: -)",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    parser.add_argument(
        "--halt-on-error",
        action="store_true",
        help="Stop with an error when a rule fails",
    )

    output_group = parser.add_argument_group("output options")

    output_group.add_argument(
        "--indent",
        metavar="N",
        type=int,
        default=None,
        help="Indent JSON output by N spaces",
    )

    output_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(args)


def load_request(source: str, stdin: Optional[TextIO] = None) -> Dict[str, Any]:
    """
    Load a request document.

    Args:
        source: File path, or "-" for stdin
        stdin: Stream to read when source is "-" (defaults to sys.stdin)

    Returns:
        Request dictionary

    Raises:
        CLIError: If the document cannot be read or parsed
    """
    try:
        if source == "-":
            request = yaml.safe_load(stdin or sys.stdin)
        else:
            with open(source, "r", encoding="utf-8") as f:
                request = yaml.safe_load(f)

    except yaml.YAMLError as e:
        raise CLIError(f"Failed to parse request: {source}\n{e}")

    except OSError as e:
        raise CLIError(f"Failed to read request: {source}\n{e}")

    if not isinstance(request, dict):
        raise CLIError(f"Request must be a mapping with a '{RequestKey.DATA}' key: {source}")

    return request


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build configuration from the optional file and command-line flags.

    Raises:
        CLIError: If the configuration file cannot be loaded
    """
    try:
        config = ConfigManager(args.config)
    except ConfigError as e:
        raise CLIError(e.message)

    if args.debug:
        config.set(ConfigKey.LOG_LEVEL, "DEBUG")
    if args.halt_on_error:
        config.set(ConfigKey.HALT_ON_ERROR, True)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """Configure the global logger from configuration."""
    try:
        return configure_logging(
            level=config.get(ConfigKey.LOG_LEVEL, "INFO"),
            log_file=config.get(ConfigKey.LOG_FILE),
        )
    except ConfigError as e:
        raise CLIError(e.message)


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code
    """
    out = stdout or sys.stdout

    try:
        args = parse_arguments(argv)
        config = load_config(args)
        logger = setup_logging(config)

        request = load_request(args.input, stdin)
        processor = DataProcessor.from_config(config)
        response = processor.process(request)

        logger.debug("Processed request", records=len(response[RequestKey.RESULT]))

        json.dump(response, out, indent=args.indent, ensure_ascii=False, default=str)
        out.write("\n")
        return 0

    except (CLIError, RuleExecutionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
