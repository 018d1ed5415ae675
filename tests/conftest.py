"""Shared fixtures: a bundle source tree and a temp Claude home."""

from pathlib import Path

import pytest


@pytest.fixture
def bundle_source(tmp_path: Path) -> Path:
    """Create a bundle directory with the default layout."""
    src = tmp_path / "bundle-src"
    (src / "commands").mkdir(parents=True)
    (src / "commands" / "initialize-project.md").write_text("# Initialize project\n")
    (src / "skills").mkdir()
    (src / "skills" / "testing.md").write_text("# Testing\n\n- [ ] write tests\n")
    (src / "skills" / "code-review.md").write_text("# Code review\n")
    (src / "hooks").mkdir()
    (src / "hooks" / "pre-push").write_text("#!/bin/sh\nexit 0\n")
    (src / "scripts").mkdir()
    (src / "scripts" / "install-hooks.sh").write_text("#!/bin/sh\necho hooks\n")
    return src


@pytest.fixture
def claude_home(tmp_path: Path) -> Path:
    return (tmp_path / "claude-home").resolve()
