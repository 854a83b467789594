# hopper/core/config/loader.py
"""
Configuration loader for hopper.

Responsibilities:
- Load default config
- Load user config (optional, deep-merged over defaults)
- Expand ${ENV_VAR} placeholders
- Apply environment overrides (BULK_*, QDRANT_*)
- Validate via schema
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import ValidationError

from hopper.core.config.schema import HopperConfig
from hopper.exceptions import ConfigError
from hopper.logging.logger import get_logger
from hopper.logging.tags import CLI

logger = get_logger(__name__)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"

# env var -> (section, key, cast)
ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "BULK_CONCURRENCY": ("bulk", "concurrency", int),
    "BULK_EMBED_BATCH": ("bulk", "embed_batch_size", int),
    "BULK_UPSERT_BATCH": ("bulk", "upsert_batch_size", int),
    "BULK_CHUNK_SIZE": ("bulk", "chunk_size", int),
    "BULK_CHUNK_OVERLAP": ("bulk", "chunk_overlap", int),
    "QDRANT_URL": ("vector_db", "url", str),
    "QDRANT_API_KEY": ("vector_db", "api_key", str),
    "QDRANT_COLLECTION": ("vector_db", "collection", str),
    "HOPPER_MANIFEST_PATH": ("manifest", "path", str),
}


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _deep_merge(base: dict, override: Mapping) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    return _expand_env(data)


def _apply_env_overrides(data: dict, environ: Mapping[str, str]) -> dict:
    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            value = cast(raw)
        except ValueError as e:
            raise ConfigError(f"{env_name}={raw!r} is not a valid {cast.__name__}") from e
        data.setdefault(section, {})[key] = value
        logger.debug(f"{CLI} {env_name} overrides {section}.{key}")
    return data


def load_config(
    user_config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> HopperConfig:
    """
    Load and validate hopper configuration.

    Precedence (lowest to highest):
    - defaults
    - user config
    - environment overrides
    """
    logger.debug(f"{CLI} Loading default config from {DEFAULT_CONFIG_PATH}")
    data = _load_yaml(DEFAULT_CONFIG_PATH)

    if user_config_path:
        logger.debug(f"{CLI} Loading user config from {user_config_path}")
        data = _deep_merge(data, _load_yaml(Path(user_config_path)))

    data = _apply_env_overrides(data, os.environ if environ is None else environ)

    try:
        return HopperConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
