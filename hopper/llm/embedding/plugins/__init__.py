# hopper/llm/embedding/plugins/__init__.py
from .gemini import GeminiEmbeddingClient
from .openai_compatible import OpenAIEmbeddingClient

BUILTIN_EMBEDDING_PLUGINS = (OpenAIEmbeddingClient, GeminiEmbeddingClient)

__all__ = ["BUILTIN_EMBEDDING_PLUGINS", "GeminiEmbeddingClient", "OpenAIEmbeddingClient"]
