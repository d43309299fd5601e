"""Shared pytest fixtures for pathpattern tests."""
from pathlib import Path
from typing import Any, Dict, Generator
import tempfile

import pytest
import yaml

from pathpattern.core.constants import PatternFlags
from pathpattern.rules.patterns import PathPattern


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_tree(temp_dir: Path) -> Path:
    """Create a directory tree with files to filter."""
    root = temp_dir / "tree"
    root.mkdir()

    (root / "README.md").write_text("# Readme")
    (root / "main.c").write_text("int main() { return 0; }")
    (root / "notes.tmp").write_text("scratch")

    (root / "src").mkdir()
    (root / "src" / "test-util.c").write_text("")
    (root / "src" / "util.h").write_text("")

    (root / "src" / "deep").mkdir()
    (root / "src" / "deep" / "test-deep.h").write_text("")
    (root / "src" / "deep" / "cache.tmp").write_text("")

    return root


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample pathpattern configuration."""
    return {
        "pathpattern": {
            "version": "1.0",
            "flags": ["full_path"],
            "default_action": "include",
            "rules": [
                {
                    "name": "hide-temp",
                    "action": "exclude",
                    "pattern": "**/*.tmp",
                    "priority": 10,
                },
                {
                    "name": "hide-hidden",
                    "action": "exclude",
                    "patterns": ["**/.*"],
                },
            ],
            "logging": {"level": "INFO"},
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Write the sample configuration to a YAML file."""
    path = temp_dir / "pathpattern.yaml"
    path.write_text(yaml.safe_dump(sample_config))
    return path


@pytest.fixture
def full_path_pattern():
    """Factory compiling a pattern in full path mode."""

    def make(text: str, flags: PatternFlags = PatternFlags.NONE) -> PathPattern:
        return PathPattern(text, flags | PatternFlags.FULL_PATH)

    return make
