"""Claude Skills data models — bundle.yaml schema and install records.

A bundle ships four kinds of files:
  - Command: slash-command prompt templates (commands/*.md)
  - Skill: markdown skill documents (skills/*.md)
  - Hook: git hook templates (hooks/*)
  - Script: helper scripts placed at the Claude home root
"""

from __future__ import annotations

import enum
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ComponentKind(str, enum.Enum):
    """The kinds of files a bundle can install."""

    COMMAND = "command"
    SKILL = "skill"
    HOOK = "hook"
    SCRIPT = "script"

    @property
    def subdir(self) -> str:
        """Destination sub-directory under the Claude home ('' is the root)."""
        return _SUBDIRS[self]


_SUBDIRS = {
    ComponentKind.COMMAND: "commands",
    ComponentKind.SKILL: "skills",
    ComponentKind.HOOK: "hooks",
    ComponentKind.SCRIPT: "",
}


class FileAction(str, enum.Enum):
    """What an install did to a destination file."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class IssueKind(str, enum.Enum):
    """Problems verify can find at a destination."""

    MISSING = "missing"
    MODIFIED = "modified"
    NOT_EXECUTABLE = "not_executable"


class BundleEntry(BaseModel):
    """A glob of bundle files that install as one component kind."""

    kind: ComponentKind = Field(description="Component kind, selects the destination directory")
    pattern: str = Field(description="Glob relative to the bundle root (e.g. 'skills/*.md')")
    required: bool = Field(default=False, description="Abort the install if nothing matches")
    executable: bool = Field(default=False, description="Set execute bits on installed files")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Keep patterns inside the bundle."""
        p = PurePosixPath(v)
        if not v or p.is_absolute() or ".." in p.parts:
            raise ValueError(f"Entry pattern must be relative to the bundle: got '{v}'")
        return v


class BundleManifest(BaseModel):
    """The bundle definition — parsed from bundle.yaml or built from defaults."""

    name: str = Field(default="claude-skills", description="Bundle identifier (kebab-case)")
    version: str = Field(default="0.1.0", description="Bundle version string")
    description: str = Field(default="", description="Human-readable description")
    entries: list[BundleEntry] = Field(default_factory=list, description="Files to install")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Enforce kebab-case naming convention."""
        if not v or not all(c.isalnum() or c == "-" for c in v):
            raise ValueError(f"Bundle name must be kebab-case: got '{v}'")
        return v.lower()

    def entries_of(self, kind: ComponentKind) -> list[BundleEntry]:
        return [e for e in self.entries if e.kind == kind]


class InstalledFile(BaseModel):
    """One file written (or confirmed) by an install."""

    kind: ComponentKind
    source: str = Field(description="Absolute path of the bundle file")
    destination: str = Field(description="Absolute path under the Claude home")
    sha256: str
    executable: bool = False
    action: FileAction = FileAction.CREATED


class InstallReport(BaseModel):
    """Result of installing a bundle."""

    bundle: str
    version: str
    claude_home: str
    files: list[InstalledFile] = Field(default_factory=list)
    installed_at: datetime = Field(default_factory=datetime.now)
    dry_run: bool = False

    def by_kind(self, kind: ComponentKind) -> list[InstalledFile]:
        return [f for f in self.files if f.kind == kind]

    def counts(self) -> dict[FileAction, int]:
        """Number of files per action, including zero counts."""
        result = {action: 0 for action in FileAction}
        for f in self.files:
            result[f.action] += 1
        return result


class InstallRecord(BaseModel):
    """A bundle entry in the install ledger (skills-install.json)."""

    bundle: str
    version: str
    source: str = ""
    installed_at: datetime = Field(default_factory=datetime.now)
    files: list[InstalledFile] = Field(default_factory=list)


class VerifyIssue(BaseModel):
    destination: str
    issue: IssueKind
    kind: Optional[ComponentKind] = None


class VerifyReport(BaseModel):
    """Result of checking installed files against their expected content."""

    checked: int = 0
    issues: list[VerifyIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def parse_bundle_yaml(path: Path) -> BundleManifest:
    """Parse a bundle.yaml file into a BundleManifest.

    Args:
        path: Path to the bundle.yaml file.

    Returns:
        BundleManifest: The parsed bundle manifest.

    Raises:
        FileNotFoundError: If bundle.yaml doesn't exist.
        ValueError: If the YAML is invalid or missing required fields.
    """
    if not path.exists():
        raise FileNotFoundError(f"bundle.yaml not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"bundle.yaml must be a YAML mapping, got {type(raw).__name__}")

    # pydantic's ValidationError subclasses ValueError
    return BundleManifest.model_validate(raw)


def generate_bundle_yaml(manifest: BundleManifest) -> str:
    """Serialize a BundleManifest back to YAML.

    Args:
        manifest: The bundle manifest to serialize.

    Returns:
        str: YAML string representation.
    """
    data = manifest.model_dump(mode="json", exclude_none=True)
    return yaml.dump(data, default_flow_style=False, sort_keys=False)
