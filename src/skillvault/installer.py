"""SkillVault Installer — copy, refresh, and remove skills in a project.

Target layouts:
    <project>/
        .claude/commands/review.md          # Claude Code slash commands
        CLAUDE.md                           # guardrails appended under a marker
        .cursor/rules/secret-scanner.md     # rules-dir platforms get skill files
        .cursor/rules/security-guardrails.md
        .github/copilot-instructions.md     # shared file, guardrails appended
        ...

Every operation returns the project-relative paths it touched (or would
touch, in dry-run mode) so the CLI can print a summary.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

from .catalog import (
    PLATFORMS,
    SKILLS,
    command_source_path,
    get_platform,
    get_skill,
    guardrails_source_path,
    skill_source_path,
)
from .models import Platform, Skill, SkillInstallStatus

logger = logging.getLogger("skillvault.installer")

GUARDRAILS_SEPARATOR = "\n\n"
CLAUDE_COMMANDS_DIR = ".claude/commands"


class UnknownPlatformError(ValueError):
    """Raised when a platform key is not in the catalog."""


class Installer:
    """Installs catalog skills into a single project directory.

    Args:
        target_dir: Project root to install into.
        dry_run: Report what would change without touching the filesystem.
    """

    def __init__(self, target_dir: Path, dry_run: bool = False) -> None:
        self.target_dir = Path(target_dir)
        self.dry_run = dry_run

    # ── Detection and status ─────────────────────────────────────────

    def detect_platforms(self) -> dict[str, bool]:
        """Check which platforms are already set up in the project.

        Returns:
            dict[str, bool]: Platform key -> detected, in catalog order.
        """
        result: dict[str, bool] = {}
        for platform in PLATFORMS:
            result[platform.key] = any((self.target_dir / r.path).exists() for r in platform.detect)
        return result

    def detected_platforms(self) -> list[Platform]:
        detected = self.detect_platforms()
        return [p for p in PLATFORMS if detected[p.key]]

    def list_skills(self) -> list[SkillInstallStatus]:
        """Report where each catalog skill is installed.

        Returns:
            list[SkillInstallStatus]: One entry per skill, in catalog order.
        """
        results: list[SkillInstallStatus] = []
        for skill in SKILLS:
            installed = {
                platform.key: self._installed_path(platform, skill).exists()
                for platform in PLATFORMS
            }
            results.append(
                SkillInstallStatus(
                    slug=skill.slug,
                    name=skill.name,
                    category=skill.category,
                    installed=installed,
                )
            )
        return results

    # ── Install ──────────────────────────────────────────────────────

    def install_claude(self, skills: list[Skill], include_guardrails: bool) -> list[str]:
        """Install skills as Claude Code slash commands.

        Args:
            skills: Skills to copy into .claude/commands.
            include_guardrails: Also create or extend CLAUDE.md.

        Returns:
            list[str]: Project-relative paths, annotated for guardrails.
        """
        platform = self._require_platform("claude")
        commands_dir = self.target_dir / CLAUDE_COMMANDS_DIR
        self._mkdir(commands_dir)

        copied: list[str] = []
        for skill in skills:
            self._copy(command_source_path(skill), commands_dir / skill.command)
            copied.append(f"{CLAUDE_COMMANDS_DIR}/{skill.command}")

        if include_guardrails:
            copied.extend(self._install_guardrails(platform))

        return copied

    def install_rules_dir(
        self,
        platform: Platform,
        skills: list[Skill],
        include_guardrails: bool,
    ) -> list[str]:
        """Install skill files into a platform's rules directory.

        Args:
            platform: A rules-dir platform from the catalog.
            skills: Skills to copy.
            include_guardrails: Also install the platform's guardrails.

        Returns:
            list[str]: Project-relative paths, annotated for guardrails.

        Raises:
            ValueError: If the platform has no rules directory.
        """
        if not platform.skills_dir:
            raise ValueError(f"Platform '{platform.key}' has no rules directory")

        rules_dir = self.target_dir / platform.skills_dir
        self._mkdir(rules_dir)

        copied: list[str] = []
        for skill in skills:
            self._copy(skill_source_path(skill), rules_dir / skill.file)
            copied.append(f"{platform.skills_dir}/{skill.file}")

        if include_guardrails:
            copied.extend(self._install_guardrails(platform))

        return copied

    def install_cursor(self, skills: list[Skill], include_guardrails: bool) -> list[str]:
        return self.install_rules_dir(self._require_platform("cursor"), skills, include_guardrails)

    def install_platform(
        self,
        platform_key: str,
        skills: list[Skill],
        include_guardrails: bool,
    ) -> list[str]:
        """Install skills for any platform by key.

        Raises:
            UnknownPlatformError: If the key is not in the catalog.
        """
        platform = self._require_platform(platform_key)
        logger.info(
            "Installing %d skills for %s%s",
            len(skills),
            platform.name,
            " (dry run)" if self.dry_run else "",
        )
        if platform.is_claude:
            return self.install_claude(skills, include_guardrails)
        return self.install_rules_dir(platform, skills, include_guardrails)

    # ── Update and remove ────────────────────────────────────────────

    def update_skills(self) -> list[str]:
        """Refresh every installed skill from the bundled copy.

        Skills that are not installed on a platform are left alone.

        Returns:
            list[str]: Project-relative paths that were (or would be) rewritten.
        """
        updated: list[str] = []
        for platform in PLATFORMS:
            for skill in SKILLS:
                dest = self._installed_path(platform, skill)
                if not dest.exists():
                    continue
                src = command_source_path(skill) if platform.is_claude else skill_source_path(skill)
                if dest.read_bytes() == src.read_bytes():
                    logger.debug("Up to date: %s", dest)
                    continue
                self._copy(src, dest)
                updated.append(self._relative(dest))
        return updated

    def remove_skills(self, slugs: Iterable[str]) -> list[str]:
        """Delete installed skills from every platform.

        Unknown slugs and skills that are not installed are skipped.
        Guardrails are never removed.

        Args:
            slugs: Skill slugs to remove.

        Returns:
            list[str]: Project-relative paths that were (or would be) deleted.
        """
        removed: list[str] = []
        for slug in slugs:
            skill = get_skill(slug)
            if skill is None:
                logger.warning("Skipping unknown skill: %s", slug)
                continue

            for platform in PLATFORMS:
                path = self._installed_path(platform, skill)
                if path.exists():
                    if not self.dry_run:
                        path.unlink()
                    removed.append(self._relative(path))
        return removed

    # ── Internals ────────────────────────────────────────────────────

    def _install_guardrails(self, platform: Platform) -> list[str]:
        """Copy or append a platform's guardrails document."""
        src = guardrails_source_path(platform)
        copied: list[str] = []

        if platform.guardrails_append_target:
            target = platform.guardrails_append_target
            dest = self.target_dir / target
            if dest.exists():
                existing = dest.read_text(encoding="utf-8")
                if platform.guardrails_append_marker in existing:
                    copied.append(f"{target} (guardrails already present)")
                else:
                    if not self.dry_run:
                        with dest.open("a", encoding="utf-8") as fh:
                            fh.write(GUARDRAILS_SEPARATOR + src.read_text(encoding="utf-8"))
                    copied.append(f"{target} (appended guardrails)")
            else:
                self._mkdir(dest.parent)
                self._copy(src, dest)
                copied.append(target)

        if platform.guardrails_target:
            dest = self.target_dir / platform.guardrails_target
            self._mkdir(dest.parent)
            self._copy(src, dest)
            copied.append(platform.guardrails_target)

        return copied

    def _installed_path(self, platform: Platform, skill: Skill) -> Path:
        if platform.is_claude:
            return self.target_dir / CLAUDE_COMMANDS_DIR / skill.command
        return self.target_dir / platform.skills_dir / skill.file

    def _require_platform(self, key: str) -> Platform:
        platform = get_platform(key)
        if platform is None:
            raise UnknownPlatformError(f"Unknown platform: {key}")
        return platform

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.target_dir).as_posix()

    def _mkdir(self, path: Path) -> None:
        if not self.dry_run:
            path.mkdir(parents=True, exist_ok=True)

    def _copy(self, src: Path, dest: Path) -> None:
        if self.dry_run:
            logger.debug("Would copy %s -> %s", src, dest)
            return
        shutil.copyfile(src, dest)
        logger.debug("Copied %s -> %s", src, dest)


def install_skills(
    target_dir: Path,
    platform_keys: Iterable[str],
    skills: list[Skill],
    include_guardrails: bool,
    dry_run: bool = False,
) -> dict[str, list[str]]:
    """Install skills for several platforms at once.

    Returns:
        dict[str, list[str]]: Platform key -> reported paths.
    """
    installer = Installer(target_dir, dry_run=dry_run)
    return {
        key: installer.install_platform(key, skills, include_guardrails) for key in platform_keys
    }


def platforms_with_skills(statuses: list[SkillInstallStatus]) -> list[Platform]:
    """Platforms that have at least one skill installed, in catalog order."""
    return [p for p in PLATFORMS if any(s.installed_on(p.key) for s in statuses)]


def default_platform() -> Optional[Platform]:
    return get_platform("claude")
