"""Tests for bundle resolution."""

import shutil
from pathlib import Path

import pytest

from claudeskills.bundle import SkillBundle, default_manifest, default_source, destination_for
from claudeskills.models import BundleEntry, ComponentKind


class TestLoad:
    """Test opening bundle directories."""

    def test_load_uses_default_manifest(self, bundle_source: Path):
        bundle = SkillBundle.load(bundle_source)
        assert bundle.name == "claude-skills"
        assert len(bundle.manifest.entries) == 4

    def test_load_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            SkillBundle.load(tmp_path / "nope")

    def test_load_reads_bundle_yaml(self, bundle_source: Path):
        (bundle_source / "bundle.yaml").write_text(
            "name: only-skills\nentries:\n  - kind: skill\n    pattern: skills/*.md\n"
        )
        bundle = SkillBundle.load(bundle_source)
        assert bundle.name == "only-skills"
        assert [e.kind for e in bundle.manifest.entries] == [ComponentKind.SKILL]


class TestResolve:
    """Test expanding entries into files."""

    def test_resolve_default_layout(self, bundle_source: Path):
        pairs = SkillBundle.load(bundle_source).resolve()
        names = [(e.kind, p.name) for e, p in pairs]
        assert names == [
            (ComponentKind.COMMAND, "initialize-project.md"),
            (ComponentKind.SKILL, "code-review.md"),
            (ComponentKind.SKILL, "testing.md"),
            (ComponentKind.HOOK, "pre-push"),
            (ComponentKind.SCRIPT, "install-hooks.sh"),
        ]

    def test_missing_skills_dir_fails(self, bundle_source: Path):
        """A bundle without skills/ cannot be installed."""
        shutil.rmtree(bundle_source / "skills")
        with pytest.raises(FileNotFoundError, match="Required skill"):
            SkillBundle.load(bundle_source).resolve()

    def test_empty_skills_dir_fails(self, bundle_source: Path):
        for f in (bundle_source / "skills").iterdir():
            f.unlink()
        with pytest.raises(FileNotFoundError, match="Required skill"):
            SkillBundle.load(bundle_source).resolve()

    def test_missing_command_fails(self, bundle_source: Path):
        (bundle_source / "commands" / "initialize-project.md").unlink()
        with pytest.raises(FileNotFoundError, match="Required command"):
            SkillBundle.load(bundle_source).resolve()

    def test_optional_entries_may_be_absent(self, bundle_source: Path):
        shutil.rmtree(bundle_source / "hooks")
        shutil.rmtree(bundle_source / "scripts")
        kinds = {e.kind for e, _ in SkillBundle.load(bundle_source).resolve()}
        assert kinds == {ComponentKind.COMMAND, ComponentKind.SKILL}

    def test_directories_are_skipped(self, bundle_source: Path):
        (bundle_source / "hooks" / "lib").mkdir()
        hooks = [p.name for e, p in SkillBundle.load(bundle_source).resolve() if e.kind == ComponentKind.HOOK]
        assert hooks == ["pre-push"]

    def test_non_markdown_skills_ignored(self, bundle_source: Path):
        (bundle_source / "skills" / "notes.txt").write_text("scratch")
        assert SkillBundle.load(bundle_source).list_skills() == ["code-review", "testing"]


class TestDestination:
    def test_destination_by_kind(self, tmp_path: Path):
        home = tmp_path / "home"
        skill = BundleEntry(kind=ComponentKind.SKILL, pattern="skills/*.md")
        script = BundleEntry(kind=ComponentKind.SCRIPT, pattern="scripts/x.sh")
        assert destination_for(skill, Path("/b/skills/a.md"), home) == home / "skills" / "a.md"
        assert destination_for(script, Path("/b/scripts/x.sh"), home) == home / "x.sh"

    def test_default_manifest_requires_command_and_skills(self):
        required = {e.kind for e in default_manifest().entries if e.required}
        assert required == {ComponentKind.COMMAND, ComponentKind.SKILL}

    def test_default_source_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CLAUDE_SKILLS_SOURCE", str(tmp_path))
        assert default_source() == tmp_path

    def test_default_source_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CLAUDE_SKILLS_SOURCE", raising=False)
        monkeypatch.chdir(tmp_path)
        assert default_source() == tmp_path
