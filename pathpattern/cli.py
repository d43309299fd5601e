#!/usr/bin/env python3
"""Command-line interface for pathpattern.

This module provides the ``pathpattern`` command:
- Argument parsing and validation
- Configuration file loading (YAML rules)
- Candidate paths from arguments, stdin or a directory walk
- Printing the paths that match

Example:
    >>> from pathpattern.cli import parse_arguments
    >>> args = parse_arguments(['**/*.c', 'src/main.c', '--full-path'])
"""

import argparse
import logging
import os
import sys
from typing import Callable, Iterable, Iterator, List, Optional, TextIO

from pathpattern.core.constants import PATHPATTERN_VERSION, ConfigKey, PatternFlags, parse_flags
from pathpattern.core.errors import PatternError
from pathpattern.core.validators import ValidationError
from pathpattern.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from pathpattern.infrastructure.logger import Logger, configure_loggers, set_global_logger
from pathpattern.rules.engine import RuleEngine
from pathpattern.rules.patterns import PathPattern

DESCRIPTION = "pathpattern - filter paths with a compact pattern language"

EXIT_MATCH = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


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

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If the arguments are inconsistent
    """
    parser = argparse.ArgumentParser(
        prog="pathpattern",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Pattern syntax:
  *  ?          any characters / one character within a segment
  **/           any number of whole directories
  a&b  a|b      conjunction / disjunction, evaluated left to right
  (...) (!...)  group / inverted group
  $*            escaped character

Examples:
  # Test explicit paths against a pattern
  pathpattern '*.c|*.h' src/main.c include/util.h README.md

  # Walk a directory and match full relative paths
  pathpattern --root ./src '(!test-*)&*.py'

  # Filter paths from stdin with rules from a configuration file
  find . -type f | pathpattern --config rules.yaml

With --config, every positional argument is a candidate path.
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {PATHPATTERN_VERSION}",
    )

    parser.add_argument(
        "pattern",
        nargs="?",
        help="Pattern to test candidate paths against",
    )

    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Candidate paths (default: read from stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file with rules (YAML format)",
    )

    parser.add_argument(
        "-r",
        "--root",
        metavar="DIR",
        type=str,
        help="Walk DIR and test every file path relative to it",
    )

    # Pattern flags
    flag_group = parser.add_argument_group("pattern flags")

    flag_group.add_argument(
        "-i",
        "--invert",
        action="store_true",
        help="Print paths that do NOT match",
    )

    flag_group.add_argument(
        "-s",
        "--case-sensitive",
        action="store_true",
        help="Compare literal characters exactly",
    )

    flag_group.add_argument(
        "-f",
        "--full-path",
        action="store_true",
        help="Match the whole path instead of the file name",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Write log messages to FILE",
    )

    parsed = parser.parse_args(args)

    # With a configuration file every positional is a path
    if parsed.config and parsed.pattern is not None:
        parsed.paths.insert(0, parsed.pattern)
        parsed.pattern = None

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    if args.pattern is None and not args.config:
        raise CLIError(
            "Either a PATTERN or --config must be specified\n" "Use --help for usage information"
        )

    if args.root:
        if not os.path.exists(args.root):
            raise CLIError(f"Root directory does not exist: {args.root}")
        if not os.path.isdir(args.root):
            raise CLIError(f"Root is not a directory: {args.root}")
        if args.paths:
            raise CLIError("Candidate paths cannot be combined with --root")

    if args.config:
        if not os.path.exists(args.config):
            raise CLIError(f"Configuration file does not exist: {args.config}")
        if not os.path.isfile(args.config):
            raise CLIError(f"Configuration path is not a file: {args.config}")


def get_flags(args: argparse.Namespace) -> PatternFlags:
    """
    Build pattern flags from arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Pattern flags
    """
    flags = PatternFlags.NONE
    if args.invert:
        flags |= PatternFlags.INVERSIVE
    if args.case_sensitive:
        flags |= PatternFlags.CASE_SENSITIVE
    if args.full_path:
        flags |= PatternFlags.FULL_PATH
    return flags


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Load configuration from defaults, environment, file and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration manager

    Raises:
        CLIError: If the configuration file cannot be loaded
    """
    config = ConfigManager()

    if args.config:
        try:
            config.load_file(args.config)
        except ConfigError as e:
            raise CLIError(str(e)) from e

    if args.debug:
        config.set(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.level", "DEBUG", ConfigSource.CLI_ARGS)
    if args.log_file:
        config.set(
            f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.file", args.log_file, ConfigSource.CLI_ARGS
        )

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Configuration manager

    Returns:
        Configured logger instance
    """
    level = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.level", "INFO")
    log_file = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.file")

    # Console output is reserved for matching paths
    logger = Logger("pathpattern.cli", level=level, handlers=[])

    handlers: List[logging.Handler] = []
    if log_file:
        handlers.append(logger.create_file_handler(log_file))
    elif str(level).upper() == "DEBUG":
        handlers.append(logger.create_console_handler())

    # Library loggers share the command line settings
    set_global_logger(logger)
    configure_loggers(level, handlers)

    return logger


def build_predicate(
    args: argparse.Namespace, config: ConfigManager, logger: Logger
) -> Callable[[str], bool]:
    """
    Build the inclusion test for candidate paths.

    Args:
        args: Parsed arguments namespace
        config: Configuration manager
        logger: Logger instance

    Returns:
        Function returning True for paths to print

    Raises:
        CLIError: If the pattern or the rules are invalid
    """
    section = config.get_section()
    cli_flags = get_flags(args)

    try:
        if args.pattern is not None:
            flags = parse_flags(section.get(ConfigKey.FLAGS)) | cli_flags
            pattern = PathPattern(args.pattern, flags)
            logger.info("Using pattern", pattern=pattern.pattern(), flags=int(flags))
            return pattern.test

        section = dict(section)
        section[ConfigKey.FLAGS] = parse_flags(section.get(ConfigKey.FLAGS)) | (
            cli_flags & ~PatternFlags.INVERSIVE
        )
        engine = RuleEngine.from_config(section)
        logger.info("Using rules", rules=len(engine), default=engine.get_default_action().value)

    except PatternError as e:
        raise CLIError(f"Invalid pattern: {e}") from e
    except (ValidationError, ValueError) as e:
        raise CLIError(f"Invalid configuration: {e}") from e

    if cli_flags & PatternFlags.INVERSIVE:
        return lambda path: not engine.should_include(path)
    return engine.should_include


def iter_paths(root: str) -> Iterator[str]:
    """
    Walk root and yield file paths relative to it.

    Args:
        root: Directory to walk

    Yields:
        Relative file paths in sorted order per directory
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            yield os.path.relpath(os.path.join(dirpath, filename), root)


def iter_candidates(args: argparse.Namespace, stdin: TextIO) -> Iterable[str]:
    """
    Select the source of candidate paths.

    Args:
        args: Parsed arguments namespace
        stdin: Stream to read paths from when none are given

    Returns:
        Iterable of candidate paths
    """
    if args.root:
        return iter_paths(args.root)
    if args.paths:
        return args.paths
    return (line.rstrip("\r\n") for line in stdin if line.strip())


def run(
    args: argparse.Namespace,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Test candidates and print the matching ones.

    Args:
        args: Parsed arguments namespace
        stdin: Input stream for candidate paths (default: sys.stdin)
        stdout: Output stream for matching paths (default: sys.stdout)

    Returns:
        Exit status
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    config = load_config(args)
    logger = setup_logging(config)
    predicate = build_predicate(args, config, logger)

    tested = matched = 0
    for path in iter_candidates(args, stdin):
        tested += 1
        if predicate(path):
            matched += 1
            stdout.write(path + "\n")

    logger.info("Done", tested=tested, matched=matched)
    return EXIT_MATCH if matched else EXIT_NO_MATCH


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        0 if any path matched, 1 if none did, 2 on errors
    """
    try:
        args = parse_arguments(argv)
        return run(args)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
