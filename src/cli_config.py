"""Runtime settings assembled from CLI arguments, environment and config file.

Precedence for scalar settings is CLI, then environment, then config file.
Repository lists are merged in that order so every source contributes.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

try:
    from src.constants import Constants
except ImportError:  # Fall back when 'src' package is not available
    from constants import Constants

logger = logging.getLogger(__name__)


@dataclass
class RunSettings:
    """Validated inputs for one resolution run."""
    packages: List[str] = field(default_factory=list)
    repositories: List[str] = field(default_factory=list)
    target_dir: Optional[str] = None
    android_home: Optional[str] = None
    lock_groups: Optional[List[Dict[str, Any]]] = None
    fallback_type: str = Constants.FALLBACK_TYPE
    include_maven_local: bool = True


def split_list(value: Optional[str]) -> List[str]:
    """Split a semicolon separated list, dropping blank entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(Constants.LIST_SEPARATOR) if item.strip()]


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Args:
        config_path: Path to YAML/JSON config file.

    Returns:
        Configuration dict; empty when the path is unset, missing or invalid.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                import yaml  # pylint: disable=import-outside-toplevel

                data = yaml.safe_load(f)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Failed to load config: %s", e)
        return {}
    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config file %s: top level is not a mapping", config_path)
    return {}


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_list(value)
    return [str(v).strip() for v in value if str(v).strip()]


def _as_bool(value: Any, default: bool, key: str) -> bool:
    """Interpret a config flag; strings such as "false", "no" and "0" are false."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0"):
        return False
    logger.warning("Ignoring %s from config: expected a boolean, got %r", key, value)
    return default


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def build_settings(
    args: Any,
    packages_from_files: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> RunSettings:
    """Combine parsed CLI arguments, environment variables and config values."""
    env = os.environ if env is None else env
    config = config or {}

    cli_packages = list(getattr(args, "PACKAGES", None) or [])
    cli_packages += split_list(getattr(args, "PACKAGE_LIST", None))
    cli_packages += list(packages_from_files or [])
    packages = (
        cli_packages
        or split_list(env.get(Constants.ENV_PACKAGES))
        or _as_list(config.get("packages"))
    )

    repositories: List[str] = []
    for repo in (list(getattr(args, "REPOS", None) or [])
                 + split_list(env.get(Constants.ENV_REPOS))
                 + _as_list(config.get("repositories"))):
        if repo not in repositories:
            repositories.append(repo)

    lock_groups = config.get("lock_groups")
    if lock_groups is not None and not isinstance(lock_groups, list):
        logger.warning("Ignoring lock_groups from config: expected a list")
        lock_groups = None

    return RunSettings(
        packages=list(dict.fromkeys(packages)),
        repositories=repositories,
        target_dir=_first(getattr(args, "TARGET_DIR", None), env.get(Constants.ENV_TARGET_DIR),
                          config.get("target_dir")),
        android_home=_first(getattr(args, "ANDROID_HOME", None), env.get(Constants.ENV_ANDROID_HOME),
                            config.get("android_home")),
        lock_groups=lock_groups,
        fallback_type=str(config.get("fallback_type") or Constants.FALLBACK_TYPE),
        include_maven_local=not getattr(args, "NO_MAVEN_LOCAL", False)
        and _as_bool(config.get("maven_local"), True, "maven_local"),
    )
