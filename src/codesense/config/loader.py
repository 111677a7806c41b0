"""
Configuration loader for CodeSense.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.codesense/config.yaml)
3. Project config (./.codesense.yaml)
4. Environment variables (CODESENSE_*)
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from codesense.config.schema import Config

ENV_PREFIX = "CODESENSE_"
PROJECT_CONFIG_NAME = ".codesense.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def get_codesense_home() -> Path:
    """
    Get the CodeSense home directory.

    Resolution order:
    1. CODESENSE_HOME environment variable
    2. Default: ~/.codesense

    Returns:
        Path to the CodeSense home directory.
    """
    env_home = os.environ.get("CODESENSE_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".codesense"


def get_global_config_path() -> Path:
    """Get the path to the global configuration file."""
    return get_codesense_home() / "config.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return content


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Nested dicts merge recursively; any other override value replaces the
    base value.
    """
    result = base.copy()

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern CODESENSE_<SECTION>_<KEY>=<value>,
    e.g. CODESENSE_LIMITS_MAX_FILES_PER_ROUND=5 sets limits.max_files_per_round.

    Args:
        config: Configuration dictionary to modify.

    Returns:
        Configuration with environment overrides applied.
    """
    result = config.copy()

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key == "CODESENSE_HOME":
            continue

        section, _, field = key[len(ENV_PREFIX):].lower().partition("_")
        if not field:
            continue

        section_values = dict(result.get(section) or {})
        section_values[field] = _parse_env_value(value)
        result[section] = section_values

    return result


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Args:
        value: String value from environment.

    Returns:
        Parsed value (bool, int, float, or string).
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    return value


def load_config(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        project_path: Directory holding the project config. Defaults to cwd.
        skip_project: Skip loading project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    global_path = get_global_config_path()
    if global_path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    if not skip_project:
        project_file = (project_path or Path.cwd()) / PROJECT_CONFIG_NAME
        if project_file.exists():
            config_dict = deep_merge(config_dict, load_yaml_file(project_file))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        Config instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
