"""
CodeSense configuration.

Usage:
    from codesense.config import get_config

    config = get_config()
    print(config.providers.model)
"""

from codesense.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    deep_merge,
    get_codesense_home,
    get_config,
    get_global_config_path,
    load_config,
    load_yaml_file,
)
from codesense.config.schema import Config, GitHubConfig, LimitsConfig, ProviderConfig

__all__ = [
    "Config",
    "ProviderConfig",
    "LimitsConfig",
    "GitHubConfig",
    "ConfigurationError",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_codesense_home",
    "get_config",
    "get_global_config_path",
    "load_config",
    "load_yaml_file",
]
