"""Runtime settings for the resolver.

Settings are layered, highest precedence first: explicit overrides (the
CLI), environment variables, a YAML or JSON config file, built-in defaults.
Loading never raises on a bad config file; the problem is logged and the
file ignored.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .cache import ResolutionCache
from .constants import Constants
from .resolver import Resolver

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ResolverSettings:
    """Tunables for building a ``Resolver``.

    Attributes:
        conditions: Conditions matched in conditional exports and imports.
        experimental_flags: Node.js flags treated as enabled. None means
            they are read from ``NODE_OPTIONS``.
        enable_cache: Whether results are cached.
        log_level: Level name passed to ``configure_logging``.
    """

    conditions: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_CONDITIONS))
    experimental_flags: Optional[List[str]] = None
    enable_cache: bool = True
    log_level: str = "INFO"

    def create_resolver(self, file_system=None, cache: Optional[ResolutionCache] = None) -> Resolver:
        """Build a resolver from these settings."""
        return Resolver(
            file_system=file_system,
            conditions=self.conditions,
            exec_argv=self.experimental_flags,
            cache=cache,
        )


def _split_list(value: str) -> List[str]:
    return [item for item in re.split(r"[\s,]+", value) if item]


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _parse_string_list(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        return _split_list(value)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the resolver section of a YAML or JSON config file.

    Args:
        config_path: Path to the file. Files ending in ``.json`` are parsed
            as JSON, everything else as YAML.

    Returns:
        The ``resolver`` mapping if present, else the top-level mapping, or
        an empty dict if the file is missing or malformed.
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
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}

    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def _apply_mapping(settings: ResolverSettings, values: Mapping[str, Any], source: str) -> ResolverSettings:
    """Apply recognised keys from ``values``, skipping invalid ones."""
    updates: Dict[str, Any] = {}

    if "conditions" in values:
        conditions = _parse_string_list(values["conditions"])
        if conditions is None:
            logger.warning("Ignoring invalid conditions from %s: %r", source, values["conditions"])
        else:
            updates["conditions"] = conditions

    if "experimental_flags" in values:
        flags = _parse_string_list(values["experimental_flags"])
        if flags is None:
            logger.warning(
                "Ignoring invalid experimental_flags from %s: %r",
                source,
                values["experimental_flags"],
            )
        else:
            updates["experimental_flags"] = flags

    if "enable_cache" in values:
        enable_cache = _parse_bool(values["enable_cache"])
        if enable_cache is None:
            logger.warning("Ignoring invalid enable_cache from %s: %r", source, values["enable_cache"])
        else:
            updates["enable_cache"] = enable_cache

    if "log_level" in values:
        level = str(values["log_level"]).upper()
        if isinstance(logging.getLevelName(level), int):
            updates["log_level"] = level
        else:
            logger.warning("Ignoring invalid log_level from %s: %r", source, values["log_level"])

    return replace(settings, **updates)


def _environment_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if environ.get(Constants.ENV_CONDITIONS):
        values["conditions"] = environ[Constants.ENV_CONDITIONS]
    if environ.get(Constants.ENV_EXPERIMENTAL_FLAGS):
        values["experimental_flags"] = environ[Constants.ENV_EXPERIMENTAL_FLAGS]
    if environ.get(Constants.ENV_DISABLE_CACHE):
        disable = _parse_bool(environ[Constants.ENV_DISABLE_CACHE])
        if disable is not None:
            values["enable_cache"] = not disable
    if environ.get(Constants.ENV_LOG_LEVEL):
        values["log_level"] = environ[Constants.ENV_LOG_LEVEL]
    return values


def load_settings(
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverSettings:
    """Build settings from defaults, config file, environment and overrides.

    Args:
        config_path: Config file. Falls back to ``ESMRESOLVE_CONFIG``.
        overrides: Highest-precedence values; None entries are ignored.
        environ: Environment to read. Defaults to ``os.environ``.

    Returns:
        The merged settings.
    """
    environ = os.environ if environ is None else environ
    settings = ResolverSettings()

    path = config_path or environ.get(Constants.ENV_CONFIG)
    file_values = load_config_file(path)
    if file_values:
        settings = _apply_mapping(settings, file_values, path or "config")

    settings = _apply_mapping(settings, _environment_values(environ), "environment")

    if overrides:
        cli_values = {k: v for k, v in overrides.items() if v is not None}
        settings = _apply_mapping(settings, cli_values, "command line")

    return settings
