"""SkillVault data models — catalog entries and .skillvaultrc as Pydantic models.

The catalog has two tables:
  - Skill: a markdown skill shipped in two forms (rules file + Claude command)
  - Platform: an AI assistant layout with a detection rule and copy targets
"""

from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DetectType(str, enum.Enum):
    """What kind of filesystem entry marks a platform as present."""

    DIR = "dir"
    FILE = "file"


class PlatformType(str, enum.Enum):
    """How skills are laid out for a platform."""

    CLAUDE_COMMANDS = "claude-commands"
    RULES_DIR = "rules-dir"


class Skill(BaseModel):
    """A static security skill from the bundled catalog."""

    name: str = Field(description="Human-readable skill name")
    slug: str = Field(description="Unique skill identifier (kebab-case)")
    category: str = Field(description="Skill category, e.g. 'developer' or 'cloud'")
    file: str = Field(description="Markdown file name used by rules-dir platforms")
    command: str = Field(description="Markdown file name used as a Claude slash command")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Enforce kebab-case slugs."""
        if not v or not all(c.isalnum() or c == "-" for c in v):
            raise ValueError(f"Skill slug must be kebab-case: got '{v}'")
        return v.lower()

    @field_validator("file", "command")
    @classmethod
    def validate_markdown(cls, v: str) -> str:
        if not v.endswith(".md"):
            raise ValueError(f"Skill files must be markdown: got '{v}'")
        return v


class DetectRule(BaseModel):
    """A path whose existence signals that a platform is in use."""

    type: DetectType
    path: str = Field(description="Path relative to the project directory")


class Platform(BaseModel):
    """An AI coding assistant that SkillVault can install into.

    Claude Code receives skills as slash commands; every other platform
    receives the plain skill files in a rules directory. Guardrails are
    either copied to a dedicated file or appended to a shared
    instructions file guarded by a marker heading.
    """

    key: str = Field(description="Registry key, also used in .skillvaultrc")
    name: str = Field(description="Display name")
    flag: str = Field(description="CLI flag name (without leading dashes)")
    detect: list[DetectRule] = Field(default_factory=list)
    type: PlatformType = Field(default=PlatformType.RULES_DIR)

    skills_dir: Optional[str] = Field(default=None, description="Directory for skill files")
    guardrails_source: Optional[str] = Field(default=None, description="Bundled guardrails file")
    guardrails_target: Optional[str] = Field(
        default=None, description="Copy guardrails to this path"
    )
    guardrails_append_target: Optional[str] = Field(
        default=None, description="Append guardrails to this shared instructions file"
    )
    guardrails_append_marker: Optional[str] = Field(
        default=None, description="Heading that marks guardrails as already appended"
    )

    @model_validator(mode="after")
    def check_layout(self) -> "Platform":
        """Rules-dir platforms need somewhere to put skills and guardrails."""
        if self.type == PlatformType.RULES_DIR:
            if not self.skills_dir:
                raise ValueError(f"Platform '{self.key}' requires skills_dir")
            if not self.guardrails_source:
                raise ValueError(f"Platform '{self.key}' requires guardrails_source")
        if self.guardrails_append_target and not self.guardrails_append_marker:
            raise ValueError(f"Platform '{self.key}' appends guardrails without a marker")
        return self

    @property
    def is_claude(self) -> bool:
        return self.type == PlatformType.CLAUDE_COMMANDS


class Catalog(BaseModel):
    """The full bundled catalog document."""

    skills: list[Skill] = Field(default_factory=list)
    platforms: list[Platform] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique(self) -> "Catalog":
        slugs = [s.slug for s in self.skills]
        if len(slugs) != len(set(slugs)):
            raise ValueError("Duplicate skill slug in catalog")
        keys = [p.key for p in self.platforms]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate platform key in catalog")
        return self


class SkillInstallStatus(BaseModel):
    """Where a single skill is currently installed in a project."""

    slug: str
    name: str
    category: str
    installed: dict[str, bool] = Field(
        default_factory=dict, description="Platform key -> installed flag"
    )

    def installed_on(self, platform_key: str) -> bool:
        return self.installed.get(platform_key, False)

    @property
    def installed_claude(self) -> bool:
        return self.installed_on("claude")

    @property
    def installed_cursor(self) -> bool:
        return self.installed_on("cursor")

    @property
    def platforms(self) -> list[str]:
        """Keys of every platform the skill is installed on."""
        return [key for key, present in self.installed.items() if present]


class SkillVaultConfig(BaseModel):
    """Choices persisted in .skillvaultrc for replay on later runs.

    Unknown keys are kept and written back unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    skills: Optional[list[str]] = Field(default=None, description="Skill slugs to install")
    platform: Optional[Union[str, list[str]]] = Field(
        default=None, description="Platform key, list of keys, or legacy 'both'"
    )
    include_guardrails: Optional[bool] = Field(default=None, alias="includeGuardrails")
    categories: Optional[list[str]] = Field(default=None, description="Category filter")

    def to_json_dict(self) -> dict:
        """Dump using on-disk key names, dropping unset fields."""
        return self.model_dump(exclude_none=True, by_alias=True)
