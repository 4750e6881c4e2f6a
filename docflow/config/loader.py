"""Layered TOML configuration.

``default.toml`` is the base layer and ``{DOCFLOW_ENV}.toml`` is laid over
it. Either file may be absent, in which case the code defaults in the
settings models apply. Environment variables are applied later, by
pydantic-settings.
"""

import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "DOCFLOW_CONFIG_DIR"
ENVIRONMENT_ENV = "DOCFLOW_ENV"
DEFAULT_ENVIRONMENT = "development"
BASE_LAYER = "default"

# How far above the working directory to look for config/
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Directory holding the TOML layers.

    DOCFLOW_CONFIG_DIR wins when set and must exist. Otherwise the nearest
    ``config/`` at or above the working directory is used.

    Raises:
        FileNotFoundError: If DOCFLOW_CONFIG_DIR names a missing directory
    """
    configured = os.environ.get(CONFIG_DIR_ENV)
    if configured:
        path = Path(configured)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {configured}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][:SEARCH_DEPTH]:
        if (directory / "config").is_dir():
            return directory / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; tables merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Existing layer files, base first."""
    names = [BASE_LAYER] if environment == BASE_LAYER else [BASE_LAYER, environment]
    paths = (config_dir / f"{name}.toml" for name in names)
    return [path for path in paths if path.exists()]


def load_config(
    config_dir: Path | None = None, environment: str | None = None
) -> dict[str, Any]:
    """Merge the TOML layers into one dictionary.

    Args:
        config_dir: Layer directory (default: get_config_dir())
        environment: Overlay name (default: get_environment())
    """
    layers = config_layers(config_dir or get_config_dir(), environment or get_environment())
    return reduce(deep_merge, (load_toml(path) for path in layers), {})
