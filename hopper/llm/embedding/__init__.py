# hopper/llm/embedding/__init__.py
from .base import EmbeddingPlugin
from .plugins import GeminiEmbeddingClient, OpenAIEmbeddingClient
from .registry import (
    available_embedding_plugins,
    build_embedding_plugin,
    get_embedding_plugin,
    register_embedding_plugin,
)

__all__ = [
    "EmbeddingPlugin",
    "GeminiEmbeddingClient",
    "OpenAIEmbeddingClient",
    "available_embedding_plugins",
    "build_embedding_plugin",
    "get_embedding_plugin",
    "register_embedding_plugin",
]
