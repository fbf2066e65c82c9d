"""SkillVault config — read and write the per-project .skillvaultrc file.

Example:
    {
      "skills": ["review", "scan-secrets"],
      "platform": ["claude", "cursor"],
      "includeGuardrails": true
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from . import CONFIG_FILENAME
from .catalog import PLATFORMS, SKILLS, platform_keys
from .models import SkillVaultConfig

logger = logging.getLogger("skillvault.config")

LEGACY_PLATFORM_ALIASES = {"both": ["claude", "cursor"]}


class ConfigError(ValueError):
    """Raised when .skillvaultrc is unreadable or references unknown entries."""


def config_path(target_dir: Path) -> Path:
    return Path(target_dir) / CONFIG_FILENAME


def _valid_platform_values() -> list[str]:
    return platform_keys() + list(LEGACY_PLATFORM_ALIASES)


def validate_config_data(data: object) -> SkillVaultConfig:
    """Check raw .skillvaultrc data against the catalog.

    Args:
        data: Decoded JSON content.

    Returns:
        SkillVaultConfig: The validated config.

    Raises:
        ConfigError: On a wrong shape or an unknown skill or platform.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a JSON object")

    skills = data.get("skills")
    if skills is not None:
        if not isinstance(skills, list):
            raise ConfigError(f"{CONFIG_FILENAME}: 'skills' must be an array")
        valid_slugs = [s.slug for s in SKILLS]
        for slug in skills:
            if not isinstance(slug, str) or slug not in valid_slugs:
                raise ConfigError(f"{CONFIG_FILENAME}: unknown skill slug '{slug}'")

    platform = data.get("platform")
    if platform is not None:
        valid_keys = _valid_platform_values()
        if isinstance(platform, list):
            for p in platform:
                if not isinstance(p, str) or p not in valid_keys:
                    raise ConfigError(f"{CONFIG_FILENAME}: unknown platform '{p}'")
        elif not isinstance(platform, str) or platform not in valid_keys:
            raise ConfigError(
                f"{CONFIG_FILENAME}: platform must be one of: {', '.join(valid_keys)}"
            )

    guardrails = data.get("includeGuardrails")
    if guardrails is not None and not isinstance(guardrails, bool):
        raise ConfigError(f"{CONFIG_FILENAME}: 'includeGuardrails' must be true or false")

    cats = data.get("categories")
    if cats is not None and not (
        isinstance(cats, list) and all(isinstance(c, str) for c in cats)
    ):
        raise ConfigError(f"{CONFIG_FILENAME}: 'categories' must be an array of strings")

    try:
        return SkillVaultConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{CONFIG_FILENAME}: {exc.errors()[0]['msg']}") from exc


def read_config(target_dir: Path) -> Optional[SkillVaultConfig]:
    """Load .skillvaultrc from a project directory.

    Args:
        target_dir: Project directory.

    Returns:
        SkillVaultConfig, or None if the file doesn't exist.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = config_path(target_dir)
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{CONFIG_FILENAME} contains invalid JSON") from exc

    config = validate_config_data(data)
    logger.info("Loaded %s", path)
    return config


def write_config(config: Union[SkillVaultConfig, dict], target_dir: Path) -> Path:
    """Persist choices to .skillvaultrc.

    Args:
        config: Config model or a plain dict using on-disk key names.
        target_dir: Project directory.

    Returns:
        Path: The written file.
    """
    if isinstance(config, dict):
        config = validate_config_data(config)

    path = config_path(target_dir)
    path.write_text(json.dumps(config.to_json_dict(), indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote %s", path)
    return path


def resolve_platforms(config: SkillVaultConfig) -> list[str]:
    """Expand the config's platform field into ordered platform keys.

    Legacy aliases expand in place and duplicates are dropped. The result
    follows catalog order so installs are reported consistently.
    """
    if not config.platform:
        return []

    raw = config.platform if isinstance(config.platform, list) else [config.platform]
    wanted: set[str] = set()
    for value in raw:
        wanted.update(LEGACY_PLATFORM_ALIASES.get(value, [value]))
    return [p.key for p in PLATFORMS if p.key in wanted]
