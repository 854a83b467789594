# hopper/llm/embedding/registry.py
"""
Embedding plugin registry.

Plugins are looked up by `plugin_name`. Third-party plugins can be added
with `register_embedding_plugin` before the service is built.
"""

from __future__ import annotations

from typing import Dict, List, Type

from hopper.core.config.schema import PluginConfig
from hopper.exceptions import ConfigError
from hopper.llm.embedding.base import EmbeddingPlugin
from hopper.llm.embedding.plugins import BUILTIN_EMBEDDING_PLUGINS
from hopper.logging.logger import get_logger
from hopper.logging.tags import EMBEDDING

logger = get_logger(__name__)

_REGISTRY: Dict[str, Type] = {}


def _plugin_name(cls: Type) -> str:
    name = getattr(cls, "plugin_name", None)
    if not isinstance(name, str) or not name:
        raise ValueError(f"{cls.__name__} has no plugin_name")
    return name


def register_embedding_plugin(cls: Type, *, replace: bool = False) -> None:
    name = _plugin_name(cls)
    if name in _REGISTRY and not replace:
        raise ValueError(f"Embedding plugin '{name}' already registered")
    _REGISTRY[name] = cls


def available_embedding_plugins() -> List[str]:
    return sorted(_REGISTRY)


def get_embedding_plugin(name: str) -> Type:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ConfigError(
            f"Unknown embedding plugin '{name}'. "
            f"Available: {', '.join(available_embedding_plugins())}"
        ) from None


def build_embedding_plugin(config: PluginConfig) -> EmbeddingPlugin:
    """Instantiate the configured plugin with its kwargs."""
    cls = get_embedding_plugin(config.plugin_name)
    logger.info(f"{EMBEDDING} Initializing embedding plugin '{config.plugin_name}'")
    try:
        return cls(**config.kwargs)
    except TypeError as e:
        raise ConfigError(f"Invalid kwargs for embedding plugin '{config.plugin_name}': {e}") from e


for _cls in BUILTIN_EMBEDDING_PLUGINS:
    register_embedding_plugin(_cls)


__all__ = [
    "available_embedding_plugins",
    "build_embedding_plugin",
    "get_embedding_plugin",
    "register_embedding_plugin",
]
