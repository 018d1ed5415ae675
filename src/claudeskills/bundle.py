"""Claude Skills bundle — resolve the files a source directory provides.

Default bundle layout:
    <bundle>/
        bundle.yaml                      # optional, overrides the defaults below
        commands/
            initialize-project.md        # required
        skills/
            *.md                         # required, at least one
        hooks/
            pre-push ...                 # optional git hook templates
        scripts/
            install-hooks.sh             # optional
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .models import BundleEntry, BundleManifest, ComponentKind, parse_bundle_yaml

logger = logging.getLogger("claudeskills.bundle")

BUNDLE_YAML = "bundle.yaml"


def default_manifest() -> BundleManifest:
    """The manifest used when a bundle has no bundle.yaml."""
    return BundleManifest(
        name="claude-skills",
        description="Skill documents, slash commands and git hook templates",
        entries=[
            BundleEntry(
                kind=ComponentKind.COMMAND,
                pattern="commands/initialize-project.md",
                required=True,
            ),
            BundleEntry(kind=ComponentKind.SKILL, pattern="skills/*.md", required=True),
            BundleEntry(kind=ComponentKind.HOOK, pattern="hooks/*", executable=True),
            BundleEntry(
                kind=ComponentKind.SCRIPT,
                pattern="scripts/install-hooks.sh",
                executable=True,
            ),
        ],
    )


def default_source() -> Path:
    """Resolve the default bundle source, respecting CLAUDE_SKILLS_SOURCE env var.

    Returns:
        Path: The bundle source directory.
    """
    env = os.environ.get("CLAUDE_SKILLS_SOURCE")
    if env:
        return Path(env).expanduser()
    return Path.cwd()


def destination_for(entry: BundleEntry, source: Path, claude_home: Path) -> Path:
    """Compute where a bundle file lands under the Claude home."""
    subdir = entry.kind.subdir
    base = claude_home / subdir if subdir else claude_home
    return base / source.name


class SkillBundle:
    """A bundle source directory and the manifest describing it.

    Args:
        root: The bundle directory.
        manifest: Manifest to use (default: bundle.yaml or the built-in layout).
    """

    def __init__(self, root: Path, manifest: Optional[BundleManifest] = None) -> None:
        self.root = root.expanduser()
        self.manifest = manifest or default_manifest()

    @classmethod
    def load(cls, root: Path) -> "SkillBundle":
        """Open a bundle directory.

        Args:
            root: The bundle directory.

        Returns:
            SkillBundle: The bundle, with bundle.yaml applied when present.

        Raises:
            FileNotFoundError: If the directory doesn't exist.
            ValueError: If bundle.yaml is present but invalid.
        """
        root = root.expanduser()
        if not root.is_dir():
            raise FileNotFoundError(f"Bundle directory not found: {root}")

        yaml_path = root / BUNDLE_YAML
        if yaml_path.exists():
            logger.debug("Using %s", yaml_path)
            return cls(root, parse_bundle_yaml(yaml_path))
        return cls(root)

    @property
    def name(self) -> str:
        return self.manifest.name

    def resolve(self) -> list[tuple[BundleEntry, Path]]:
        """Expand every entry's pattern into concrete files.

        Returns:
            list[tuple[BundleEntry, Path]]: (entry, source file) pairs, in
            manifest order and sorted within each entry.

        Raises:
            FileNotFoundError: If a required entry matches no file.
        """
        results: list[tuple[BundleEntry, Path]] = []
        for entry in self.manifest.entries:
            matches = self._match(entry)
            if not matches:
                if entry.required:
                    raise FileNotFoundError(
                        f"Required {entry.kind.value} files not found: {self.root / entry.pattern}"
                    )
                logger.debug("No optional %s files match %s", entry.kind.value, entry.pattern)
                continue
            results.extend((entry, path) for path in matches)
        return results

    def list_skills(self) -> list[str]:
        """Names of the skill documents this bundle provides."""
        return sorted(
            path.stem for entry, path in self.resolve() if entry.kind == ComponentKind.SKILL
        )

    def _match(self, entry: BundleEntry) -> list[Path]:
        # Directories are skipped, like cp without -r
        return sorted(p for p in self.root.glob(entry.pattern) if p.is_file())
