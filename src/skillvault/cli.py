"""SkillVault CLI — install security skills for AI coding agents.

Commands:
    init        Install skills and guardrails into the current project
    list        Show which skills are installed on which platforms
    update      Refresh installed skills from the bundled copies
    remove      Delete installed skills
    help        Show usage
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.table import Table

from . import CONFIG_FILENAME, __version__
from .catalog import PLATFORMS, SKILLS, categories, filter_by_category, get_platform, get_skill
from .config import ConfigError, read_config, resolve_platforms, write_config
from .installer import Installer, default_platform, install_skills, platforms_with_skills
from .models import SkillVaultConfig
from .prompts import ask_guardrails, ask_platforms, ask_skills

console = Console()


def banner() -> None:
    console.print("")
    console.print("  [bold]SkillVault[/bold] — Security skills for AI agents")
    console.print("  ───────────────────────────────────────────")
    console.print("")


def dir_option(func: Callable) -> Callable:
    return click.option(
        "--dir",
        "directory",
        envvar="SKILLVAULT_DIR",
        default=".",
        show_default=True,
        type=click.Path(file_okay=False),
        help="Project directory (env: SKILLVAULT_DIR).",
    )(func)


def platform_options(func: Callable) -> Callable:
    """Add one --<platform> flag per catalog platform."""
    for platform in reversed(PLATFORMS):
        func = click.option(
            f"--{platform.flag}",
            f"flag_{platform.key}",
            is_flag=True,
            help=f"Target {platform.name}.",
        )(func)
    return func


def _load_config(target: Path) -> Optional[SkillVaultConfig]:
    try:
        return read_config(target)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _print_summary(files: list[str], dry_run: bool) -> None:
    console.print("")
    console.print("  Dry run — would install:\n" if dry_run else "  Installed:\n")
    for f in files:
        console.print(f"    + {f}")
    console.print("")
    if not dry_run:
        console.print("  [green]Done![/green] Your AI agent now has security superpowers.")
        console.print("")


@click.group()
@click.version_option(__version__, prog_name="skillvault")
@click.option("--verbose", "-v", is_flag=True, help="Log file operations.")
def main(verbose: bool) -> None:
    """SkillVault — security skills for AI coding agents.

    Installs code review, secret scanning, threat modeling and other
    security skills into Claude Code, Cursor, Copilot and friends.
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")


@main.command()
@click.option("--all", "install_all", is_flag=True, help="Install all skills (skip interactive selection).")
@platform_options
@click.option(
    "--category",
    "-c",
    "category_filter",
    multiple=True,
    type=click.Choice(categories(), case_sensitive=False),
    help="Only offer skills from this category (repeatable).",
)
@click.option("--no-guardrails", is_flag=True, help="Skip guardrail files.")
@click.option("--dry-run", is_flag=True, help="Show what would be installed without writing.")
@click.option("--no-config", is_flag=True, help=f"Ignore {CONFIG_FILENAME} and don't save choices.")
@click.option("--save", is_flag=True, help=f"Save choices to {CONFIG_FILENAME} even when non-interactive.")
@dir_option
def init(
    install_all: bool,
    category_filter: tuple[str, ...],
    no_guardrails: bool,
    dry_run: bool,
    no_config: bool,
    save: bool,
    directory: str,
    **platform_flags: bool,
) -> None:
    """Install skills into the project.

    Platforms come from flags, then .skillvaultrc, then detection, and
    are asked for interactively as a last resort.
    """
    target = Path(directory)
    config = None if no_config else _load_config(target)
    installer = Installer(target, dry_run=dry_run)
    asked = False

    banner()
    if config is not None:
        console.print(f"  Using saved choices from {CONFIG_FILENAME}\n")

    platforms: Optional[list[str]] = [
        p.key for p in PLATFORMS if platform_flags.get(f"flag_{p.key}")
    ] or None
    if platforms is None and config is not None and config.platform:
        platforms = resolve_platforms(config)
    if platforms is None:
        detected = installer.detected_platforms()
        if detected:
            platforms = [p.key for p in detected]
            names = " + ".join(p.name for p in detected)
            console.print(f"  Detected platform: [cyan]{names}[/cyan]\n")

    cats = list(category_filter) or (config.categories if config and config.categories else [])
    candidates = filter_by_category(SKILLS, cats)
    if not candidates:
        console.print(f"[red]Error:[/red] no skills in categories: {', '.join(cats)}")
        sys.exit(1)

    if platforms is None:
        if install_all:
            fallback = default_platform()
            platforms = [fallback.key]
            console.print(f"  No platform detected — defaulting to {fallback.name} with --all.\n")
        else:
            platforms = ask_platforms()
            console.print("")
            asked = True

    if install_all:
        selected = candidates
    elif config is not None and config.skills:
        selected = [s for s in candidates if s.slug in config.skills]
        if not selected:
            console.print(f"[red]Error:[/red] {CONFIG_FILENAME} selects no skills in the chosen categories")
            sys.exit(1)
    else:
        selected = ask_skills(candidates)
        asked = True

    if no_guardrails:
        include_guardrails = False
    elif config is not None and config.include_guardrails is not None:
        include_guardrails = config.include_guardrails
    elif install_all:
        include_guardrails = True
    else:
        include_guardrails = ask_guardrails()
        asked = True

    try:
        results = install_skills(target, platforms, selected, include_guardrails, dry_run=dry_run)
    except (FileNotFoundError, OSError, ValueError) as exc:
        console.print(f"[red]Install failed:[/red] {exc}")
        sys.exit(1)

    _print_summary([f for files in results.values() for f in files], dry_run)

    if (asked or save) and not dry_run and not no_config:
        choices = {
            "skills": [s.slug for s in selected],
            "platform": platforms if len(platforms) > 1 else platforms[0],
            "include_guardrails": include_guardrails,
        }
        if category_filter:
            choices["categories"] = [c.lower() for c in category_filter]
        base = config if config is not None else SkillVaultConfig()
        path = write_config(base.model_copy(update=choices), target)
        console.print(f"  [dim]Saved choices to {path.name}[/dim]\n")


@main.command("list")
@dir_option
def list_cmd(directory: str) -> None:
    """Show installed skills per platform."""
    installer = Installer(Path(directory))
    statuses = installer.list_skills()

    shown = platforms_with_skills(statuses) or [get_platform("claude"), get_platform("cursor")]

    table = Table(title="SkillVault Skills")
    table.add_column("Slug", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category", style="magenta")
    for platform in shown:
        table.add_column(platform.name)

    for s in statuses:
        marks = ["[green]yes[/green]" if s.installed_on(p.key) else "[dim]-[/dim]" for p in shown]
        table.add_row(s.slug, s.name, s.category, *marks)

    console.print(table)

    count = sum(1 for s in statuses if s.platforms)
    if count:
        console.print(f"  {count} of {len(statuses)} skills installed")
    else:
        console.print("[dim]No skills installed. Run 'skillvault init' to get started.[/dim]")


@main.command()
@dir_option
@click.option("--dry-run", is_flag=True, help="Show what would be refreshed without writing.")
def update(directory: str, dry_run: bool) -> None:
    """Refresh installed skills from the bundled copies.

    Only skills already installed are touched; nothing new is added.
    """
    installer = Installer(Path(directory), dry_run=dry_run)
    if not any(s.platforms for s in installer.list_skills()):
        console.print("[dim]No skills installed.[/dim]")
        return

    try:
        updated = installer.update_skills()
    except OSError as exc:
        console.print(f"[red]Update failed:[/red] {exc}")
        sys.exit(1)

    if not updated:
        console.print("[green]All installed skills are up to date.[/green]")
        return

    console.print("\n  Would update:\n" if dry_run else "\n  [green]Updated:[/green]\n")
    for f in updated:
        console.print(f"    ~ {f}")
    console.print("")


@main.command()
@click.argument("slugs", nargs=-1, required=True)
@dir_option
@click.option("--dry-run", is_flag=True, help="Show what would be removed without deleting.")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation.")
def remove(slugs: tuple[str, ...], directory: str, dry_run: bool, yes: bool) -> None:
    """Delete installed skills from every platform.

    Guardrail files are left in place.
    """
    known = []
    for slug in slugs:
        if get_skill(slug) is None:
            console.print(f"[yellow]Unknown skill:[/yellow] {slug}")
        else:
            known.append(slug)

    if not known:
        console.print("[dim]Nothing to remove.[/dim]")
        return

    if not (yes or dry_run):
        if not click.confirm(f"Remove {', '.join(known)} from all platforms?"):
            return

    installer = Installer(Path(directory), dry_run=dry_run)
    try:
        removed = installer.remove_skills(known)
    except OSError as exc:
        console.print(f"[red]Remove failed:[/red] {exc}")
        sys.exit(1)

    if not removed:
        console.print("[dim]Nothing to remove.[/dim]")
        return

    console.print("\n  Would remove:\n" if dry_run else "\n  [green]Removed:[/green]\n")
    for f in removed:
        console.print(f"    - {f}")
    console.print("")


@main.command("help")
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """Show usage."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    main()
