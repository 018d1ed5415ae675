"""Claude Skills installer — copy bundle files into the Claude home.

Directory layout:
    ~/.claude/
        commands/               # Slash-command templates
            initialize-project.md
        skills/                 # Skill documents
            testing.md
            ...
        hooks/                  # Git hook templates (executable)
            pre-push
        install-hooks.sh        # Helper scripts (executable)
        skills-install.json     # Ledger of installed bundles
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Optional

from .bundle import SkillBundle, destination_for
from .models import (
    FileAction,
    InstalledFile,
    InstallRecord,
    InstallReport,
    IssueKind,
    VerifyIssue,
    VerifyReport,
)

logger = logging.getLogger("claudeskills.installer")

LEDGER_NAME = "skills-install.json"
BASE_DIRS = ("commands", "skills", "hooks")


def _default_claude_home() -> Path:
    """Resolve the default Claude home, respecting CLAUDE_HOME env var.

    Returns:
        Path: The Claude home directory.
    """
    env = os.environ.get("CLAUDE_HOME")
    if env:
        return Path(env)
    return Path("~/.claude").expanduser()


def file_sha256(path: Path) -> str:
    """Hex SHA-256 digest of a file's content."""
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def is_executable(path: Path) -> bool:
    return bool(path.stat().st_mode & stat.S_IXUSR)


class Installer:
    """Installs bundles into the Claude home and tracks what it wrote.

    Args:
        claude_home: Destination directory (default: CLAUDE_HOME or ~/.claude).
    """

    def __init__(self, claude_home: Optional[Path] = None) -> None:
        self.claude_home = (claude_home or _default_claude_home()).expanduser().resolve()
        self.ledger_path = self.claude_home / LEDGER_NAME

    def ensure_dirs(self) -> None:
        """Create the directory structure if it doesn't exist."""
        for name in BASE_DIRS:
            (self.claude_home / name).mkdir(parents=True, exist_ok=True)

    def install(self, bundle: SkillBundle, dry_run: bool = False) -> InstallReport:
        """Copy every file the bundle provides into the Claude home.

        Identical destination files are left alone, so installing the same
        bundle twice changes nothing the second time.

        Args:
            bundle: The bundle to install.
            dry_run: Compute the report without writing anything.

        Returns:
            InstallReport: One entry per bundle file with the action taken.

        Raises:
            FileNotFoundError: If a required bundle entry has no files.
            ValueError: If two bundle files would land on the same destination.
            IsADirectoryError: If a directory sits where a file would go.
        """
        # Plan everything first so a broken bundle leaves the destination untouched
        pairs = bundle.resolve()

        report = InstallReport(
            bundle=bundle.name,
            version=bundle.manifest.version,
            claude_home=str(self.claude_home),
            dry_run=dry_run,
        )

        planned: dict[Path, Path] = {}
        for entry, source in pairs:
            dest = destination_for(entry, source, self.claude_home)
            if dest in planned:
                raise ValueError(
                    f"Bundle files clash at {dest}: {planned[dest]} and {source}"
                )
            planned[dest] = source

            digest = file_sha256(source)
            report.files.append(
                InstalledFile(
                    kind=entry.kind,
                    source=str(source.resolve()),
                    destination=str(dest),
                    sha256=digest,
                    executable=entry.executable,
                    action=self._plan(dest, digest),
                )
            )

        if not dry_run:
            self.ensure_dirs()
            for f in report.files:
                dest = Path(f.destination)
                dest.parent.mkdir(parents=True, exist_ok=True)
                if f.action != FileAction.UNCHANGED:
                    shutil.copy2(planned[dest], dest)
                if f.executable:
                    make_executable(dest)
                logger.debug("%s %s -> %s", f.action.value, f.source, dest)

            self._update_ledger(
                InstallRecord(
                    bundle=report.bundle,
                    version=report.version,
                    source=str(bundle.root.resolve()),
                    installed_at=report.installed_at,
                    files=report.files,
                )
            )
        counts = report.counts()
        logger.info(
            "Installed bundle '%s': %d created, %d updated, %d unchanged",
            report.bundle,
            counts[FileAction.CREATED],
            counts[FileAction.UPDATED],
            counts[FileAction.UNCHANGED],
        )
        return report

    def verify(self, bundle: Optional[SkillBundle] = None) -> VerifyReport:
        """Check installed files still match what was installed.

        Args:
            bundle: Compare against this bundle's current files instead of
                the ledger.

        Returns:
            VerifyReport: The files checked and any problems found.
        """
        expected: list[InstalledFile] = []
        if bundle is not None:
            for entry, source in bundle.resolve():
                expected.append(
                    InstalledFile(
                        kind=entry.kind,
                        source=str(source),
                        destination=str(destination_for(entry, source, self.claude_home)),
                        sha256=file_sha256(source),
                        executable=entry.executable,
                    )
                )
        else:
            for record in self.installed():
                expected.extend(record.files)

        report = VerifyReport(checked=len(expected))
        for f in expected:
            issue = self._check(f)
            if issue is not None:
                report.issues.append(VerifyIssue(destination=f.destination, issue=issue, kind=f.kind))
        return report

    def uninstall(self, name: str, force: bool = False) -> tuple[list[Path], list[Path]]:
        """Remove the files a bundle installed.

        Args:
            name: Bundle name.
            force: Also remove files modified since the install.

        Returns:
            tuple: (removed paths, kept paths). Both are empty when the bundle
            isn't in the ledger.
        """
        ledger = self._load_ledger()
        raw = ledger.get(name)
        if raw is None:
            return [], []

        try:
            record = InstallRecord.model_validate(raw)
        except ValueError:
            logger.warning("Dropping malformed ledger entry '%s'", name)
            ledger.pop(name, None)
            self._save_ledger(ledger)
            return [], []

        removed: list[Path] = []
        kept: list[Path] = []
        for f in record.files:
            dest = Path(f.destination)
            if not dest.is_file():
                continue
            if not force and file_sha256(dest) != f.sha256:
                logger.warning("Keeping modified file %s", dest)
                kept.append(dest)
                continue
            dest.unlink()
            removed.append(dest)

        ledger.pop(name, None)
        self._save_ledger(ledger)
        return removed, kept

    def installed(self) -> list[InstallRecord]:
        """All bundles recorded in the ledger, sorted by name."""
        records: list[InstallRecord] = []
        for name, raw in sorted(self._load_ledger().items()):
            try:
                records.append(InstallRecord.model_validate(raw))
            except ValueError:
                logger.warning("Ignoring malformed ledger entry '%s'", name)
        return records

    def get(self, name: str) -> Optional[InstallRecord]:
        raw = self._load_ledger().get(name)
        if raw is None:
            return None
        try:
            return InstallRecord.model_validate(raw)
        except ValueError:
            logger.warning("Ignoring malformed ledger entry '%s'", name)
            return None

    def _plan(self, dest: Path, digest: str) -> FileAction:
        if dest.is_dir():
            raise IsADirectoryError(f"Directory in the way of an installed file: {dest}")
        if not dest.exists():
            return FileAction.CREATED
        if file_sha256(dest) == digest:
            return FileAction.UNCHANGED
        return FileAction.UPDATED

    def _check(self, f: InstalledFile) -> Optional[IssueKind]:
        dest = Path(f.destination)
        if not dest.is_file():
            return IssueKind.MISSING
        if file_sha256(dest) != f.sha256:
            return IssueKind.MODIFIED
        if f.executable and not is_executable(dest):
            return IssueKind.NOT_EXECUTABLE
        return None

    def _load_ledger(self) -> dict:
        """Load the install ledger from disk."""
        if not self.ledger_path.exists():
            return {}
        try:
            data = json.loads(self.ledger_path.read_text())
        except (json.JSONDecodeError, OSError):
            logger.warning("Unreadable ledger %s, treating as empty", self.ledger_path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_ledger(self, ledger: dict) -> None:
        """Persist the install ledger to disk."""
        self.claude_home.mkdir(parents=True, exist_ok=True)
        self.ledger_path.write_text(json.dumps(ledger, indent=2, default=str))

    def _update_ledger(self, record: InstallRecord) -> None:
        """Add or replace a bundle in the install ledger."""
        ledger = self._load_ledger()
        ledger[record.bundle] = record.model_dump(mode="json")
        self._save_ledger(ledger)
