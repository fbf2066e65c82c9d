"""Tests for the SkillVault installer — install, detect, list, update, remove."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillvault.catalog import SKILLS, command_source_path, get_platform, skill_source_path
from skillvault.installer import Installer, UnknownPlatformError, install_skills


@pytest.fixture
def installer(tmp_path: Path) -> Installer:
    return Installer(tmp_path)


@pytest.fixture
def dry_installer(tmp_path: Path) -> Installer:
    return Installer(tmp_path, dry_run=True)


class TestInstallClaude:
    """Claude Code slash-command installs."""

    def test_copies_all_commands(self, installer: Installer, tmp_path: Path):
        copied = installer.install_claude(SKILLS, False)
        assert len(copied) == 10
        for skill in SKILLS:
            assert (tmp_path / ".claude" / "commands" / skill.command).exists()

    def test_creates_claude_md_when_missing(self, installer: Installer, tmp_path: Path):
        copied = installer.install_claude(SKILLS, True)
        dest = tmp_path / "CLAUDE.md"
        assert dest.exists()
        assert "# Security Skills for Claude" in dest.read_text()
        assert "CLAUDE.md" in copied

    def test_appends_to_existing_claude_md(self, installer: Installer, tmp_path: Path):
        dest = tmp_path / "CLAUDE.md"
        dest.write_text("# My Project\n\nExisting content.\n")

        copied = installer.install_claude(SKILLS, True)

        content = dest.read_text()
        assert content.startswith("# My Project")
        assert "Existing content.\n\n\n# Security Skills for Claude" in content
        assert "CLAUDE.md (appended guardrails)" in copied

    def test_skips_append_when_marker_present(self, installer: Installer, tmp_path: Path):
        dest = tmp_path / "CLAUDE.md"
        original = "# Security Skills for Claude\n\nAlready here.\n"
        dest.write_text(original)

        copied = installer.install_claude(SKILLS, True)

        assert dest.read_text() == original
        assert "CLAUDE.md (guardrails already present)" in copied

    def test_installs_only_subset(self, installer: Installer, tmp_path: Path):
        copied = installer.install_claude(SKILLS[:3], False)
        assert len(copied) == 3
        assert len(list((tmp_path / ".claude" / "commands").iterdir())) == 3

    def test_no_guardrails(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS, False)
        assert not (tmp_path / "CLAUDE.md").exists()

    def test_content_matches_source(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS, True)
        skill = SKILLS[0]
        dest = tmp_path / ".claude" / "commands" / skill.command
        assert dest.read_text() == command_source_path(skill).read_text()


class TestInstallRulesDir:
    """Rules-directory platforms."""

    def test_cursor_copies_skills_and_guardrails(self, installer: Installer, tmp_path: Path):
        copied = installer.install_cursor(SKILLS, True)
        assert len(copied) == 11

        rules = tmp_path / ".cursor" / "rules"
        for skill in SKILLS:
            assert (rules / skill.file).exists()
        assert (rules / "security-guardrails.md").exists()
        assert copied[-1] == ".cursor/rules/security-guardrails.md"

    def test_skill_content_matches_source(self, installer: Installer, tmp_path: Path):
        installer.install_platform("windsurf", SKILLS[:1], False)
        dest = tmp_path / ".windsurf" / "rules" / SKILLS[0].file
        assert dest.read_text() == skill_source_path(SKILLS[0]).read_text()

    def test_copilot_creates_instructions_file(self, installer: Installer, tmp_path: Path):
        copied = installer.install_platform("copilot", SKILLS, True)
        assert ".github/copilot-instructions.md" in copied
        text = (tmp_path / ".github" / "copilot-instructions.md").read_text()
        assert "# Security Skills for GitHub Copilot" in text
        assert (tmp_path / ".github" / "copilot" / "skills" / SKILLS[0].file).exists()

    def test_codex_appends_to_agents_md(self, installer: Installer, tmp_path: Path):
        agents = tmp_path / "AGENTS.md"
        agents.write_text("# Agents\n")

        copied = installer.install_platform("codex", SKILLS, True)

        assert "AGENTS.md (appended guardrails)" in copied
        assert "# Security Skills for Codex CLI" in agents.read_text()

        again = installer.install_platform("codex", SKILLS, True)
        assert "AGENTS.md (guardrails already present)" in again
        assert agents.read_text().count("# Security Skills for Codex CLI") == 1

    def test_every_platform_installs(self, installer: Installer, tmp_path: Path):
        results = install_skills(tmp_path, ["aider", "augment", "jetbrains", "amazonq"], SKILLS[:2], True)
        assert set(results) == {"aider", "augment", "jetbrains", "amazonq"}
        assert (tmp_path / ".aider" / "rules" / "security-guardrails.md").exists()
        assert (tmp_path / "augment-guidelines.md").exists()
        assert (tmp_path / ".junie" / "guidelines" / SKILLS[0].file).exists()
        assert (tmp_path / ".q" / "rules" / SKILLS[1].file).exists()

    def test_unknown_platform(self, installer: Installer):
        with pytest.raises(UnknownPlatformError, match="Unknown platform: vim"):
            installer.install_platform("vim", SKILLS, False)

    def test_rules_dir_rejects_claude(self, installer: Installer):
        with pytest.raises(ValueError, match="no rules directory"):
            installer.install_rules_dir(get_platform("claude"), SKILLS, False)


class TestDryRun:
    """Dry-run installs report but don't write."""

    def test_claude_dry_run(self, dry_installer: Installer, tmp_path: Path):
        copied = dry_installer.install_claude(SKILLS, False)
        assert len(copied) == 10
        assert not (tmp_path / ".claude" / "commands").exists()

    def test_claude_guardrails_dry_run(self, dry_installer: Installer, tmp_path: Path):
        copied = dry_installer.install_claude(SKILLS, True)
        assert "CLAUDE.md" in copied
        assert not (tmp_path / "CLAUDE.md").exists()

    def test_append_dry_run_leaves_file(self, dry_installer: Installer, tmp_path: Path):
        dest = tmp_path / "CLAUDE.md"
        dest.write_text("# Mine\n")
        copied = dry_installer.install_claude(SKILLS, True)
        assert "CLAUDE.md (appended guardrails)" in copied
        assert dest.read_text() == "# Mine\n"

    def test_cursor_dry_run(self, dry_installer: Installer, tmp_path: Path):
        copied = dry_installer.install_cursor(SKILLS, True)
        assert len(copied) == 11
        assert not (tmp_path / ".cursor" / "rules").exists()


class TestDetectPlatforms:
    """Platform detection."""

    def test_detects_claude_dir(self, installer: Installer, tmp_path: Path):
        (tmp_path / ".claude").mkdir()
        result = installer.detect_platforms()
        assert result["claude"] is True
        assert result["cursor"] is False

    def test_detects_cursor_dir(self, installer: Installer, tmp_path: Path):
        (tmp_path / ".cursor").mkdir()
        result = installer.detect_platforms()
        assert result["claude"] is False
        assert result["cursor"] is True

    def test_detects_file_markers(self, installer: Installer, tmp_path: Path):
        (tmp_path / "AGENTS.md").write_text("# Agents\n")
        (tmp_path / ".aider.conf.yml").write_text("model: x\n")
        detected = [p.key for p in installer.detected_platforms()]
        assert detected == ["codex", "aider"]

    def test_any_existing_path_counts(self, installer: Installer, tmp_path: Path):
        """A rule matches when its path exists, whatever kind of entry it is."""
        (tmp_path / ".claude").write_text("not a directory")
        (tmp_path / "AGENTS.md").mkdir()
        result = installer.detect_platforms()
        assert result["claude"] is True
        assert result["codex"] is True

    def test_detects_nothing(self, installer: Installer):
        result = installer.detect_platforms()
        assert len(result) == 14
        assert not any(result.values())


class TestListSkills:
    """Install status listing."""

    def test_nothing_installed(self, installer: Installer):
        result = installer.list_skills()
        assert len(result) == 10
        for s in result:
            assert s.installed_claude is False
            assert s.installed_cursor is False

    def test_after_claude_install(self, installer: Installer):
        installer.install_claude(SKILLS, False)
        for s in installer.list_skills():
            assert s.installed_claude is True
            assert s.installed_cursor is False

    def test_partial_install(self, installer: Installer):
        installer.install_claude(SKILLS[:3], False)
        installed = [s for s in installer.list_skills() if s.installed_claude]
        assert len(installed) == 3

    def test_rules_dir_platform(self, installer: Installer):
        installer.install_platform("tabnine", SKILLS[:1], False)
        status = installer.list_skills()[0]
        assert status.platforms == ["tabnine"]


class TestRemoveSkills:
    """Skill removal."""

    def test_removes_claude_commands(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS, False)
        removed = installer.remove_skills([SKILLS[0].slug, SKILLS[1].slug])
        assert removed == [
            f".claude/commands/{SKILLS[0].command}",
            f".claude/commands/{SKILLS[1].command}",
        ]
        assert not (tmp_path / ".claude" / "commands" / SKILLS[0].command).exists()

    def test_removes_from_all_platforms(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS, False)
        installer.install_cursor(SKILLS, True)
        removed = installer.remove_skills(["review"])
        assert removed == [".claude/commands/review.md", ".cursor/rules/code-security-reviewer.md"]
        assert (tmp_path / ".cursor" / "rules" / "security-guardrails.md").exists()

    def test_skips_missing_and_unknown(self, installer: Installer):
        assert installer.remove_skills(["review", "nonexistent-slug"]) == []

    def test_dry_run_keeps_files(self, tmp_path: Path):
        Installer(tmp_path).install_claude(SKILLS, False)
        removed = Installer(tmp_path, dry_run=True).remove_skills([SKILLS[0].slug])
        assert len(removed) == 1
        assert (tmp_path / ".claude" / "commands" / SKILLS[0].command).exists()


class TestUpdateSkills:
    """Refreshing installed skills."""

    def test_refreshes_modified_files(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS[:2], False)
        installer.install_cursor(SKILLS[:1], False)
        stale = tmp_path / ".cursor" / "rules" / SKILLS[0].file
        stale.write_text("old version")

        updated = installer.update_skills()

        assert updated == [f".cursor/rules/{SKILLS[0].file}"]
        assert stale.read_text() == skill_source_path(SKILLS[0]).read_text()

    def test_does_not_add_new_skills(self, installer: Installer, tmp_path: Path):
        installer.install_claude(SKILLS[:1], False)
        installer.update_skills()
        assert len(list((tmp_path / ".claude" / "commands").iterdir())) == 1

    def test_up_to_date(self, installer: Installer):
        installer.install_claude(SKILLS, False)
        assert installer.update_skills() == []

    def test_dry_run(self, tmp_path: Path):
        Installer(tmp_path).install_claude(SKILLS[:1], False)
        dest = tmp_path / ".claude" / "commands" / SKILLS[0].command
        dest.write_text("stale")
        updated = Installer(tmp_path, dry_run=True).update_skills()
        assert updated == [f".claude/commands/{SKILLS[0].command}"]
        assert dest.read_text() == "stale"
