"""SkillVault — security skills for AI coding agents.

Copies a curated set of markdown skills and guardrails into the
configuration directories of Claude Code, Cursor, Copilot, and the
other supported assistants.
"""

__version__ = "0.3.0"

CONFIG_FILENAME = ".skillvaultrc"
