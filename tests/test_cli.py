#!/usr/bin/env python3
"""Tests for the pathpattern command-line interface."""

import io
import os

import pytest

from pathpattern import cli
from pathpattern.cli import (
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_MATCH,
    EXIT_NO_MATCH,
    CLIError,
    get_flags,
    iter_paths,
    main,
    parse_arguments,
    run,
)
from pathpattern.core.constants import PatternFlags
from pathpattern.infrastructure.logger import LogLevel, configure_loggers


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PATHPATTERN_* variables out of CLI runs."""
    for key in list(os.environ):
        if key.startswith("PATHPATTERN_"):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_loggers():
    """Restore library loggers after each CLI run."""
    yield
    configure_loggers(LogLevel.WARNING, [])


def output_lines(capsys):
    return capsys.readouterr().out.splitlines()


class TestArgumentParsing:
    """Tests for parse_arguments()."""

    def test_pattern_and_paths(self):
        """Test positional pattern and paths."""
        args = parse_arguments(["*.c", "a.c", "b.c"])
        assert args.pattern == "*.c"
        assert args.paths == ["a.c", "b.c"]
        assert get_flags(args) == PatternFlags.NONE

    def test_flags(self):
        """Test flag options."""
        args = parse_arguments(["-i", "-s", "--full-path", "*"])
        assert get_flags(args) == (
            PatternFlags.INVERSIVE | PatternFlags.CASE_SENSITIVE | PatternFlags.FULL_PATH
        )

    def test_config_moves_pattern_to_paths(self, config_file):
        """Test positionals are paths when a configuration file is given."""
        args = parse_arguments(["--config", str(config_file), "a.tmp", "b.c"])
        assert args.pattern is None
        assert args.paths == ["a.tmp", "b.c"]

    def test_requires_pattern_or_config(self):
        """Test a pattern or configuration is required."""
        with pytest.raises(CLIError, match="PATTERN or --config"):
            parse_arguments([])

    def test_missing_root(self, temp_dir):
        """Test a nonexistent root directory."""
        with pytest.raises(CLIError, match="does not exist"):
            parse_arguments(["*", "--root", str(temp_dir / "missing")])

    def test_root_is_file(self, config_file):
        """Test a root that is not a directory."""
        with pytest.raises(CLIError, match="not a directory"):
            parse_arguments(["*", "--root", str(config_file)])

    def test_root_with_paths(self, source_tree):
        """Test paths and --root are exclusive."""
        with pytest.raises(CLIError, match="cannot be combined"):
            parse_arguments(["*", "a.c", "--root", str(source_tree)])

    def test_missing_config(self, temp_dir):
        """Test a nonexistent configuration file."""
        with pytest.raises(CLIError, match="Configuration file does not exist"):
            parse_arguments(["--config", str(temp_dir / "missing.yaml")])

    def test_config_is_directory(self, temp_dir):
        """Test a configuration path that is a directory."""
        with pytest.raises(CLIError, match="not a file"):
            parse_arguments(["--config", str(temp_dir)])

    def test_version(self, capsys):
        """Test --version exits cleanly."""
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])
        assert exc_info.value.code == 0
        assert "pathpattern" in capsys.readouterr().out


class TestIterPaths:
    """Tests for directory walking."""

    def test_relative_sorted(self, source_tree):
        """Test files are yielded relative to the root in sorted order."""
        assert list(iter_paths(str(source_tree))) == [
            "README.md",
            "main.c",
            "notes.tmp",
            os.path.join("src", "test-util.c"),
            os.path.join("src", "util.h"),
            os.path.join("src", "deep", "cache.tmp"),
            os.path.join("src", "deep", "test-deep.h"),
        ]


class TestMainWithPattern:
    """Tests for main() with a pattern argument."""

    def test_match(self, capsys):
        """Test matching paths are printed."""
        assert main(["*.c|*.h", "a.c", "b.h", "c.o"]) == EXIT_MATCH
        assert output_lines(capsys) == ["a.c", "b.h"]

    def test_no_match(self, capsys):
        """Test exit status when nothing matches."""
        assert main(["*.py", "a.c"]) == EXIT_NO_MATCH
        assert output_lines(capsys) == []

    def test_basename_by_default(self, capsys):
        """Test only the file name is matched without --full-path."""
        assert main(["test-*", "src/test-a.c", "test/a.c"]) == EXIT_MATCH
        assert output_lines(capsys) == ["src/test-a.c"]

    def test_full_path(self, capsys):
        """Test --full-path matches the whole path."""
        assert main(["-f", "src/*", "src/a.c", "lib/src/a.c"]) == EXIT_MATCH
        assert output_lines(capsys) == ["src/a.c"]

    def test_case_sensitive(self, capsys):
        """Test --case-sensitive compares exactly."""
        assert main(["*.C", "a.c", "b.C"]) == EXIT_MATCH
        assert output_lines(capsys) == ["a.c", "b.C"]
        assert main(["-s", "*.C", "a.c", "b.C"]) == EXIT_MATCH
        assert output_lines(capsys) == ["b.C"]

    def test_invert(self, capsys):
        """Test --invert prints non-matching paths."""
        assert main(["-i", "*.tmp", "a.tmp", "b.c"]) == EXIT_MATCH
        assert output_lines(capsys) == ["b.c"]

    def test_root_walk(self, source_tree, capsys):
        """Test walking a directory."""
        code = main(["--root", str(source_tree), "(*.c|*.h)&(test-*)"])
        assert code == EXIT_MATCH
        assert output_lines(capsys) == [
            os.path.join("src", "test-util.c"),
            os.path.join("src", "deep", "test-deep.h"),
        ]

    def test_root_walk_inverted_group(self, source_tree, capsys):
        """Test an inverted group over a directory walk."""
        assert main(["-r", str(source_tree), "-f", "**/(!*.tmp)"]) == EXIT_MATCH
        assert output_lines(capsys) == [
            "README.md",
            "main.c",
            os.path.join("src", "test-util.c"),
            os.path.join("src", "util.h"),
            os.path.join("src", "deep", "test-deep.h"),
        ]

    def test_environment_flags(self, clean_env, capsys):
        """Test flags from the environment apply to a pattern."""
        clean_env.setenv("PATHPATTERN_FLAGS", "full_path")
        assert main(["src/*", "src/a.c", "a.c"]) == EXIT_MATCH
        assert output_lines(capsys) == ["src/a.c"]

    def test_stdin(self):
        """Test candidates are read from stdin when none are given."""
        args = parse_arguments(["*.c"])
        stdout = io.StringIO()
        code = run(args, stdin=io.StringIO("a.c\n\nb.h\r\nc.c\n"), stdout=stdout)
        assert code == EXIT_MATCH
        assert stdout.getvalue() == "a.c\nc.c\n"

    def test_log_file(self, temp_dir, capsys):
        """Test --log-file receives log messages."""
        log_file = temp_dir / "cli.log"
        assert main(["--log-file", str(log_file), "*", "a"]) == EXIT_MATCH
        assert output_lines(capsys) == ["a"]
        assert "Using pattern" in log_file.read_text()


    def test_debug_reaches_library_loggers(self, capsys):
        """Test --debug enables pattern compilation messages."""
        assert main(["--debug", "*.c", "a.c"]) == EXIT_MATCH
        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["a.c"]
        assert "Pattern compiled" in captured.err

    def test_log_file_receives_rejected_pattern(self, temp_dir):
        """Test library messages for a malformed pattern reach the log file."""
        log_file = temp_dir / "debug.log"
        assert main(["--log-file", str(log_file), "--debug", "(a", "x"]) == EXIT_ERROR
        assert "Pattern rejected" in log_file.read_text()

    def test_rules_logged(self, config_file, temp_dir):
        """Test rule engine messages follow the configured log file."""
        log_file = temp_dir / "rules.log"
        args = ["--debug", "--log-file", str(log_file), "-c", str(config_file), "a.c"]
        assert main(args) == EXIT_MATCH
        assert "Rule added" in log_file.read_text()


class TestMainWithConfig:
    """Tests for main() with rule configuration."""

    def test_rules_over_paths(self, config_file, capsys):
        """Test configured rules filter explicit paths."""
        code = main(["--config", str(config_file), "a.tmp", "src/b.c", "src/.git"])
        assert code == EXIT_MATCH
        assert output_lines(capsys) == ["src/b.c"]

    def test_rules_over_root(self, config_file, source_tree, capsys):
        """Test configured rules filter a directory walk."""
        assert main(["-c", str(config_file), "-r", str(source_tree)]) == EXIT_MATCH
        assert output_lines(capsys) == [
            "README.md",
            "main.c",
            os.path.join("src", "test-util.c"),
            os.path.join("src", "util.h"),
            os.path.join("src", "deep", "test-deep.h"),
        ]

    def test_rules_inverted(self, config_file, capsys):
        """Test --invert negates the rule verdict."""
        assert main(["-i", "-c", str(config_file), "a.tmp", "b.c"]) == EXIT_MATCH
        assert output_lines(capsys) == ["a.tmp"]

    def test_bad_rules(self, temp_dir, capsys):
        """Test invalid rules are reported as errors."""
        path = temp_dir / "bad.yaml"
        path.write_text("pathpattern:\n  rules:\n    - action: exclude\n      pattern: 'a||b'\n")
        assert main(["--config", str(path), "a"]) == EXIT_ERROR
        assert "Invalid configuration" in capsys.readouterr().err


class TestMainErrors:
    """Tests for error handling in main()."""

    def test_bad_pattern(self, capsys):
        """Test malformed patterns exit with an error."""
        assert main(["(*.c", "a.c"]) == EXIT_ERROR
        err = capsys.readouterr().err
        assert "Invalid pattern" in err
        assert "Unterminated group" in err

    def test_missing_arguments(self, capsys):
        """Test missing pattern and configuration."""
        assert main([]) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_interrupted(self, monkeypatch, capsys):
        """Test KeyboardInterrupt handling."""

        def interrupt(args):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "run", interrupt)
        assert main(["*", "a"]) == EXIT_INTERRUPTED
        assert "Interrupted" in capsys.readouterr().err
