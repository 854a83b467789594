# hopper/llm/embedding/plugins/openai_compatible.py
"""
OpenAI embeddings API plugin.

Also works against any server speaking the same `/embeddings` wire format
(vLLM, Ollama, LM Studio) by pointing `base_url` elsewhere.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import httpx

from hopper.exceptions import ConfigError, EmbeddingError
from hopper.logging.logger import get_logger
from hopper.logging.tags import EMBEDDING

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


@dataclass
class OpenAIEmbeddingClient:
    """
    Embed batches through POST {base_url}/embeddings.

    Environment variables:
        OPENAI_API_KEY: API key (required for the default base URL)
        OPENAI_BASE_URL: Alternative endpoint
    """

    plugin_name: str = "openai"

    api_key: Optional[str] = None
    model: str = "text-embedding-3-small"
    base_url: Optional[str] = None
    dimensions: Optional[int] = None
    timeout: float = 60.0
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    _client: Any = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip(
            "/"
        )
        key = self.api_key or os.getenv("OPENAI_API_KEY")
        if not key and self.base_url == DEFAULT_BASE_URL:
            raise ConfigError("OPENAI_API_KEY is not set")

        headers = {"Authorization": f"Bearer {key}"} if key else {}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )
        logger.debug(f"{EMBEDDING} openai client ready: {self.base_url} model={self.model}")

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        body: dict[str, Any] = {"model": self.model, "input": list(texts)}
        if self.dimensions is not None:
            body["dimensions"] = self.dimensions

        response = await self._client.post("/embeddings", json=body)
        response.raise_for_status()

        try:
            data = sorted(response.json()["data"], key=lambda item: item["index"])
            return [item["embedding"] for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise EmbeddingError(f"Malformed embeddings response: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
