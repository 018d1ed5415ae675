"""Claude Skills CLI — install skill documents from the terminal.

Commands:
    install     Copy a bundle into the Claude home
    verify      Check installed files against the ledger or a bundle
    list        Show installed bundles
    uninstall   Remove the files a bundle installed
    hooks       Enable git hook templates in a project
    new-skill   Scaffold a skill document in a bundle
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .bundle import SkillBundle, default_source
from .git_hooks import install_git_hooks
from .installer import Installer
from .models import ComponentKind, FileAction, InstallRecord

console = Console()

USAGE_EPILOGUE = """\
[bold]Usage:[/bold]
  1. Open any project folder
  2. Run Claude Code
  3. Type: [cyan]/initialize-project[/cyan]

[bold]Git Hooks (optional):[/bold]
  To enable pre-push code review in a project:
  [cyan]claude-skills hooks install <project>[/cyan]
"""


def _open_bundle(source: str | None) -> SkillBundle:
    return SkillBundle.load(Path(source) if source else default_source())


def _installed_at_label(record: InstallRecord) -> str:
    return record.installed_at.strftime("%Y-%m-%d %H:%M")


@click.group()
@click.version_option(__version__, prog_name="claude-skills")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool) -> None:
    """Claude Skills — skill documents and slash commands for Claude.

    Installs skills, commands and git hook templates into ~/.claude
    (or CLAUDE_HOME).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@main.command()
@click.option("--source", default=None, help="Bundle directory (default: CLAUDE_SKILLS_SOURCE or cwd).")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing.")
def install(source: str | None, dry_run: bool) -> None:
    """Install skills, commands and hooks from a bundle."""
    installer = Installer()
    console.print("Installing Claude Skills..." if not dry_run else "Dry run, nothing will be written:")
    try:
        bundle = _open_bundle(source)
        report = installer.install(bundle, dry_run=dry_run)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Install failed:[/red] {exc}")
        sys.exit(1)

    done = "[yellow]~[/yellow] Would install" if dry_run else "[green]✓[/green] Installed"

    for f in report.by_kind(ComponentKind.COMMAND):
        console.print(f"{done} /{Path(f.destination).stem} command ({f.action.value})")

    skills = report.by_kind(ComponentKind.SKILL)
    if skills:
        console.print(f"{done} skills:")
        for f in skills:
            console.print(f"  - {Path(f.destination).name} [dim]({f.action.value})[/dim]")

    hooks = report.by_kind(ComponentKind.HOOK)
    if hooks:
        console.print(f"{done} git hooks (templates): {len(hooks)}")

    for f in report.by_kind(ComponentKind.SCRIPT):
        console.print(f"{done} {Path(f.destination).name}")

    counts = report.counts()
    console.print(
        f"\n{counts[FileAction.CREATED]} created, "
        f"{counts[FileAction.UPDATED]} updated, "
        f"{counts[FileAction.UNCHANGED]} unchanged"
    )
    if dry_run:
        return

    console.print("\n[green]Installation complete![/green]\n")
    console.print(USAGE_EPILOGUE)


@main.command()
@click.option("--source", default=None, help="Compare against this bundle instead of the ledger.")
def verify(source: str | None) -> None:
    """Check installed files are present and unmodified."""
    installer = Installer()
    try:
        bundle = _open_bundle(source) if source else None
        report = installer.verify(bundle)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Verify failed:[/red] {exc}")
        sys.exit(1)

    if report.ok:
        console.print(f"[green]OK:[/green] {report.checked} files verified")
        return

    table = Table(title="Verification Issues")
    table.add_column("Kind", style="cyan")
    table.add_column("Issue", style="red")
    table.add_column("File")
    for issue in report.issues:
        table.add_row(
            issue.kind.value if issue.kind else "-",
            issue.issue.value,
            issue.destination,
        )
    console.print(table)
    console.print(f"{len(report.issues)} of {report.checked} files have problems")
    sys.exit(1)


@main.command("list")
def list_bundles() -> None:
    """Show installed bundles."""
    records = Installer().installed()

    if not records:
        console.print("[dim]No bundles installed.[/dim]")
        return

    table = Table(title="Installed Bundles")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Commands")
    table.add_column("Skills")
    table.add_column("Hooks")
    table.add_column("Installed", style="green")

    for r in records:
        kinds = [f.kind for f in r.files]
        table.add_row(
            r.bundle,
            r.version,
            str(kinds.count(ComponentKind.COMMAND)),
            str(kinds.count(ComponentKind.SKILL)),
            str(kinds.count(ComponentKind.HOOK)),
            _installed_at_label(r),
        )

    console.print(table)


@main.command()
@click.argument("name")
@click.option("--force", is_flag=True, help="Also remove files modified since install.")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation.")
def uninstall(name: str, force: bool, yes: bool) -> None:
    """Remove the files a bundle installed."""
    installer = Installer()
    if installer.get(name) is None:
        console.print(f"[red]Not found:[/red] {name}")
        sys.exit(1)

    if not yes:
        if not click.confirm(f"Uninstall '{name}' from {installer.claude_home}?"):
            return

    removed, kept = installer.uninstall(name, force=force)
    console.print(f"[green]Uninstalled:[/green] {name} ({len(removed)} files removed)")
    for path in kept:
        console.print(f"  [yellow]kept modified:[/yellow] {path}")


@main.group()
def hooks() -> None:
    """Manage git hook templates."""


@hooks.command("install")
@click.argument("project", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--force", is_flag=True, help="Overwrite existing hooks.")
def hooks_install(project: str, force: bool) -> None:
    """Enable the installed hook templates in PROJECT (default: cwd)."""
    installer = Installer()
    try:
        written = install_git_hooks(Path(project), installer.claude_home, force=force)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Hook install failed:[/red] {exc}")
        sys.exit(1)

    console.print(f"[green]Git hooks enabled:[/green] {', '.join(p.name for p in written)}")


@main.command("new-skill")
@click.argument("name")
@click.option("--source", default=None, help="Bundle directory (default: CLAUDE_SKILLS_SOURCE or cwd).")
@click.option("--description", "desc", default="", help="One-line skill description.")
def new_skill(name: str, source: str | None, desc: str) -> None:
    """Scaffold a skill document in a bundle's skills/ directory."""
    if not name or not all(c.isalnum() or c == "-" for c in name):
        console.print(f"[red]Skill name must be kebab-case:[/red] {name}")
        sys.exit(1)

    base = Path(source) if source else default_source()
    path = base / "skills" / f"{name.lower()}.md"
    if path.exists():
        console.print(f"[red]Skill already exists:[/red] {path}")
        sys.exit(1)

    title = name.replace("-", " ").title()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"# {title}\n\n"
        f"{desc or 'Instructions for Claude.'}\n\n"
        "## When to use\n\n"
        "## Checklist\n\n"
        "- [ ] \n"
    )
    console.print(f"\n[green]Skill scaffolded:[/green] {path}")
    console.print("\nNext: write the checklist, then [cyan]claude-skills install[/cyan]")


if __name__ == "__main__":
    main()
