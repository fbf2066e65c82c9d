"""SkillVault Catalog — the bundled skills and supported platforms.

Package layout:
    skillvault/
        catalog.yaml                    # Skill and platform tables
        content/
            skills/<category>/<file>    # Plain skills for rules-dir platforms
            commands/<command>          # Claude Code slash commands
            guardrails/<Platform>.md    # Per-platform guardrails documents
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml

from .models import Catalog, Platform, Skill

logger = logging.getLogger("skillvault.catalog")

PKG_ROOT = Path(__file__).parent
CONTENT_DIR = PKG_ROOT / "content"
CATALOG_PATH = PKG_ROOT / "catalog.yaml"


def load_catalog(path: Path = CATALOG_PATH) -> Catalog:
    """Parse a catalog YAML document.

    Args:
        path: Path to the catalog file.

    Returns:
        Catalog: The validated skill and platform tables.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist.
        ValueError: If the YAML is not a mapping or fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Catalog must be a YAML mapping, got {type(raw).__name__}")

    catalog = Catalog.model_validate(raw)
    logger.debug(
        "Loaded catalog: %d skills, %d platforms", len(catalog.skills), len(catalog.platforms)
    )
    return catalog


_CATALOG = load_catalog()

SKILLS: list[Skill] = _CATALOG.skills
PLATFORMS: list[Platform] = _CATALOG.platforms


def skill_source_path(skill: Skill) -> Path:
    """Bundled rules-dir form of a skill."""
    return CONTENT_DIR / "skills" / skill.category / skill.file


def command_source_path(skill: Skill) -> Path:
    """Bundled Claude slash-command form of a skill."""
    return CONTENT_DIR / "commands" / skill.command


def guardrails_source_path(platform: Platform) -> Path:
    """Bundled guardrails document for a platform.

    Raises:
        ValueError: If the platform ships no guardrails.
    """
    if not platform.guardrails_source:
        raise ValueError(f"Platform '{platform.key}' has no guardrails")
    return CONTENT_DIR / "guardrails" / platform.guardrails_source


def get_skill(slug: str) -> Optional[Skill]:
    """Look up a skill by slug."""
    for skill in SKILLS:
        if skill.slug == slug:
            return skill
    return None


def get_platform(key: str) -> Optional[Platform]:
    """Look up a platform by key."""
    for platform in PLATFORMS:
        if platform.key == key:
            return platform
    return None


def platform_keys() -> list[str]:
    return [p.key for p in PLATFORMS]


def categories() -> list[str]:
    """Distinct categories in catalog order."""
    seen: list[str] = []
    for skill in SKILLS:
        if skill.category not in seen:
            seen.append(skill.category)
    return seen


def filter_by_category(skills: list[Skill], cats: Optional[Iterable[str]]) -> list[Skill]:
    """Keep skills whose category is in ``cats`` (case-insensitive).

    An empty or missing filter keeps everything.
    """
    wanted = {c.lower() for c in (cats or [])}
    if not wanted:
        return list(skills)
    return [s for s in skills if s.category.lower() in wanted]
