#!/usr/bin/env python3
"""
SYMWIZARD CONFIG
----------------
Wizard settings with defaults, optionally overridden by a YAML file in the
project root (.symwizard.yml) or a path given on the command line.

Author: SymWizard Team
Date: 2026-10-19
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML, YAMLError

from symwizard.core import constants
from symwizard.core.errors import ConfigError

logger = logging.getLogger("symwizard.config")


@dataclass(frozen=True)
class WizardConfig:
    folder_prefix: str = constants.FOLDER_PREFIX
    url: str = constants.DEFAULT_URL
    platforms: Tuple[str, ...] = constants.PLATFORM_CHOICES
    ios_project_glob: str = constants.IOS_PROJECT_GLOB
    uninstall_glob: str = constants.ANY_PROJECT_GLOB
    properties_filename: str = constants.PROPERTIES_FILENAME
    phase_label: str = constants.PHASE_LABEL
    shell_path: str = constants.SHELL_PATH
    shell_script: str = constants.UPLOAD_SCRIPT
    cli_executable: str = constants.CLI_EXECUTABLE

    def merged(self, overrides: Dict[str, Any]) -> "WizardConfig":
        """Returns a copy with the non-None overrides applied."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = {k: v for k, v in overrides.items() if v is not None}
        if "platforms" in values:
            platforms = values["platforms"]
            if isinstance(platforms, str):
                platforms = [platforms]
            values["platforms"] = tuple(str(p) for p in platforms)
        return replace(self, **values)


def load_yaml(path: Path) -> Any:
    """Reads a YAML document with the safe loader; raises ConfigError."""
    yaml = YAML(typ="safe")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Failed to load {path}: {e}")


def load_config(project_root: Path, config_path: Optional[Path] = None) -> WizardConfig:
    """
    Builds the effective configuration. An explicit `config_path` must
    exist; the implicit project-root file is optional.
    """
    path = config_path
    if path is None:
        candidate = Path(project_root) / constants.CONFIG_FILENAME
        path = candidate if candidate.exists() else None
    elif not Path(path).exists():
        raise ConfigError(f"Config file not found: {path}")

    config = WizardConfig()
    if path is None:
        return config

    data = load_yaml(Path(path)) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    logger.debug(f"Loaded configuration from {path}")
    return config.merged(dict(data))
