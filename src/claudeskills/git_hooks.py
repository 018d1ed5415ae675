"""Enable installed git hook templates in a project repository.

Hook templates live in ~/.claude/hooks after an install. This copies them
into a project's git hooks directory, e.g. to run a code review on pre-push.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .installer import file_sha256, make_executable

logger = logging.getLogger("claudeskills.git_hooks")

GITDIR_PREFIX = "gitdir:"
COMMONDIR_FILE = "commondir"


def git_dir_for(project: Path) -> Path:
    """Locate a project's git directory.

    Handles both a regular ``.git`` directory and the ``.git`` file that
    worktrees and submodules use (``gitdir: <path>``).

    Raises:
        FileNotFoundError: If the project is not a git repository.
    """
    dot_git = project / ".git"
    if dot_git.is_dir():
        return dot_git
    if dot_git.is_file():
        text = dot_git.read_text().strip()
        if text.startswith(GITDIR_PREFIX):
            target = Path(text[len(GITDIR_PREFIX):].strip())
            if not target.is_absolute():
                target = (project / target).resolve()
            if target.is_dir():
                return target
    raise FileNotFoundError(f"Not a git repository: {project}")


def hooks_dir_for(project: Path) -> Path:
    """The hooks directory git actually runs hooks from.

    Linked worktrees have a per-worktree git directory with a ``commondir``
    file pointing at the shared one; hooks live under the shared directory.
    """
    git_dir = git_dir_for(project)
    commondir = git_dir / COMMONDIR_FILE
    if commondir.is_file():
        common = Path(commondir.read_text().strip())
        if not common.is_absolute():
            common = (git_dir / common).resolve()
        return common / "hooks"
    return git_dir / "hooks"


def hook_templates(claude_home: Path) -> list[Path]:
    """Installed hook templates, skipping git's *.sample files."""
    hooks_dir = claude_home / "hooks"
    if not hooks_dir.is_dir():
        return []
    return sorted(
        p for p in hooks_dir.iterdir() if p.is_file() and p.suffix != ".sample"
    )


def install_git_hooks(project: Path, claude_home: Path, force: bool = False) -> list[Path]:
    """Copy the installed hook templates into a project's git hooks.

    Args:
        project: Root of the project working tree.
        claude_home: Claude home holding hooks/.
        force: Overwrite existing hooks that differ from the templates.

    Returns:
        list[Path]: The hook files written or already up to date.

    Raises:
        FileNotFoundError: If the project has no git directory or no hook
            templates are installed.
        FileExistsError: If a differing hook exists and force is False.
    """
    hooks_dir = hooks_dir_for(project)
    templates = hook_templates(claude_home)
    if not templates:
        raise FileNotFoundError(f"No hook templates installed in {claude_home / 'hooks'}")

    if not force:
        conflicts = [
            hooks_dir / t.name
            for t in templates
            if (hooks_dir / t.name).exists()
            and file_sha256(hooks_dir / t.name) != file_sha256(t)
        ]
        if conflicts:
            names = ", ".join(p.name for p in conflicts)
            raise FileExistsError(f"Existing hooks differ: {names}. Use force to overwrite.")

    hooks_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for template in templates:
        target = hooks_dir / template.name
        target.write_bytes(template.read_bytes())
        make_executable(target)
        logger.debug("Installed git hook %s", target)
        written.append(target)
    return written
