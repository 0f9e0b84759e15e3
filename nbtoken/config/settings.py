"""
settings.py

This module provides application configuration management for nbtoken.

Features:
- Centralized application configuration using Pydantic settings
- Loading of the defaults token tree from a JSON file
- Deep merging of configuration overrides

Usage:
Import appsettings for application configuration values and `config_load`
to build the TokenConfig a token store is created with.
"""

import copy
import json
from pathlib import Path
from typing import Any, Final, Mapping
from appdirs import user_config_dir
from pydantic_settings import BaseSettings, SettingsConfigDict
from nbtoken.lib.log import LOG
from nbtoken.models.dataModel import TokenConfig


# Configuration directory and default tokens file, located using appdirs
CONFIG_DIR: Final[Path] = Path(user_config_dir("nbtoken", ""))
TOKENS_FILE: Final[Path] = CONFIG_DIR / "tokens.json"


class App(BaseSettings):
    """
    Application settings model.

    Settings can be overridden through environment variables with NBT_ prefix.

    Attributes:
        beQuiet: Suppress detailed logging output
        delimiter: Token path delimiter
        defaults_file: JSON file holding the defaults token tree
    """

    beQuiet: bool = False
    delimiter: str = ":"
    defaults_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="NBT_",
        case_sensitive=False,
        extra="allow",
    )


def config_merge(config: TokenConfig, values: Mapping[str, Any]) -> TokenConfig:
    """
    Deep merge `values` over `config` and return a new TokenConfig.

    Nested mappings are merged key by key, other values replace what is there
    as deep copies. A `None` value never erases an existing entry but still
    declares a key that is not there yet, so unset tokens keep their placeholder.

    Args:
        config: The base configuration (left untouched)
        values: Override values, e.g. {"defaults": {"site": {"name": "X"}}}

    Returns:
        TokenConfig: The merged configuration

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    merged: dict[str, Any] = _tree_merge(copy.deepcopy(config.model_dump()), values)
    return TokenConfig.model_validate(merged)


def _tree_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in source.items():
        if value is None and key in target:
            continue
        if isinstance(value, Mapping):
            base: Any = target.get(key)
            target[key] = _tree_merge(
                base if isinstance(base, dict) else {}, value
            )
        else:
            target[key] = copy.deepcopy(value)
    return target


def defaultsFile_resolve(settings: App) -> Path | None:
    """
    Determine which defaults file, if any, should be read.

    An explicitly configured file is always returned (so a missing file is
    reported); otherwise the per-user tokens file is used when it exists.
    """
    if settings.defaults_file:
        return Path(settings.defaults_file).expanduser()
    if TOKENS_FILE.exists():
        return TOKENS_FILE
    return None


def defaults_read(path: Path) -> dict[str, Any]:
    """
    Read a defaults token tree from a JSON file.

    Args:
        path: The JSON file to read

    Returns:
        dict: The token tree

    Raises:
        ValueError: If the file is missing, unreadable or not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = json.load(f)
    except OSError as e:
        raise ValueError(f"Cannot read defaults file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Defaults file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Defaults file {path} must contain a JSON object")
    return data


def config_load(
    settings: App | None = None, overrides: Mapping[str, Any] | None = None
) -> TokenConfig:
    """
    Build the TokenConfig for a token store.

    Order of precedence, lowest first: built-in defaults, the settings
    delimiter, the defaults file, then explicit overrides.

    Args:
        settings: Application settings (defaults to `appsettings`)
        overrides: Values deep merged last, e.g. from command line options

    Returns:
        TokenConfig: The assembled configuration
    """
    settings = settings or appsettings
    config: TokenConfig = TokenConfig(delimiter=settings.delimiter)

    path: Path | None = defaultsFile_resolve(settings)
    if path is not None:
        LOG(f"Loading token defaults from {path}")
        config = config_merge(config, {"defaults": defaults_read(path)})

    if overrides:
        config = config_merge(config, overrides)
    return config


# Create the application settings instance
appsettings: Final[App] = App()
