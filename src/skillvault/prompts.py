"""Interactive prompts for `skillvault init`.

Input is read through click so commands can be driven by
``CliRunner.invoke(..., input=...)`` in tests.
"""

from __future__ import annotations

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .catalog import PLATFORMS
from .models import Skill

console = Console()


def parse_platform_choice(answer: str) -> Optional[list[str]]:
    """Turn '1,3' or 'claude, cursor' into platform keys.

    Returns:
        Ordered, de-duplicated keys, or None if any token is invalid.
    """
    keys: list[str] = []
    tokens = [t.strip().lower() for t in answer.replace(" ", ",").split(",")]
    tokens = [t for t in tokens if t]
    if not tokens:
        return None

    by_key = {p.key: p for p in PLATFORMS}
    for token in tokens:
        if token.isdigit():
            index = int(token)
            if not 1 <= index <= len(PLATFORMS):
                return None
            key = PLATFORMS[index - 1].key
        elif token in by_key:
            key = token
        else:
            return None
        if key not in keys:
            keys.append(key)
    return keys


def ask_platforms() -> list[str]:
    """Ask which platforms to install into when none were detected."""
    console.print("  No supported AI assistant configuration detected.\n")
    console.print("  Which platforms are you using?\n")
    for i, platform in enumerate(PLATFORMS, start=1):
        console.print(f"    {i:>2}) {platform.name} [dim]({platform.key})[/dim]")
    console.print("")

    while True:
        answer = click.prompt(
            "  Enter numbers or keys, comma-separated", default="1", show_default=True
        )
        keys = parse_platform_choice(answer)
        if keys:
            return keys
        console.print(f"  [yellow]Enter numbers 1-{len(PLATFORMS)} or platform keys.[/yellow]")


def _print_skills(skills: list[Skill], selected: list[bool]) -> None:
    for i, skill in enumerate(skills):
        check = escape("[x]") if selected[i] else escape("[ ]")
        console.print(f"    {i + 1:>2}) {check} {skill.name}")
    console.print("")


def ask_skills(skills: list[Skill]) -> list[Skill]:
    """Toggle menu: numbers toggle, a=all, n=none, Enter confirms."""
    selected = [True] * len(skills)

    console.print(
        "  Select skills to install (enter number to toggle, a=all, n=none, "
        "press Enter to confirm):\n"
    )
    _print_skills(skills, selected)

    while True:
        answer = click.prompt(
            "  Toggle # (or a/n/Enter)", default="", show_default=False
        ).strip().lower()

        if answer == "":
            chosen = [s for s, on in zip(skills, selected) if on]
            if not chosen:
                console.print(
                    "  [yellow]No skills selected. Select at least one or press Ctrl+C to exit.[/yellow]\n"
                )
                continue
            return chosen

        if answer == "a":
            selected = [True] * len(skills)
            _print_skills(skills, selected)
            continue

        if answer == "n":
            selected = [False] * len(skills)
            _print_skills(skills, selected)
            continue

        if answer.isdigit() and 1 <= int(answer) <= len(skills):
            index = int(answer) - 1
            selected[index] = not selected[index]
            _print_skills(skills, selected)
        else:
            console.print(f"  Enter a number 1-{len(skills)}, a, n, or Enter.")


def ask_guardrails() -> bool:
    return click.confirm("  Include security guardrails?", default=True)
