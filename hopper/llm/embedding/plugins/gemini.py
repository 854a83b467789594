# hopper/llm/embedding/plugins/gemini.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import httpx

from hopper.exceptions import ConfigError, EmbeddingError
from hopper.logging.logger import get_logger
from hopper.logging.tags import EMBEDDING

logger = get_logger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class GeminiEmbeddingClient:
    """
    Google Gemini embeddings via `models/{model}:batchEmbedContents`.

    text-embedding-004 yields 768-dimensional vectors.
    """

    plugin_name: str = "gemini"

    api_key: Optional[str] = None
    model: str = "text-embedding-004"
    task_type: str = "RETRIEVAL_DOCUMENT"
    timeout: float = 60.0
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    _client: Any = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        key = self.api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not key:
            raise ConfigError("GEMINI_API_KEY is not set")

        self._client = httpx.AsyncClient(
            base_url=GEMINI_BASE_URL,
            params={"key": key},
            timeout=self.timeout,
            transport=self.transport,
        )
        logger.debug(f"{EMBEDDING} gemini client ready: model={self.model}")

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        model_ref = f"models/{self.model}"
        body = {
            "requests": [
                {
                    "model": model_ref,
                    "content": {"parts": [{"text": text}]},
                    "taskType": self.task_type,
                }
                for text in texts
            ]
        }

        response = await self._client.post(f"/{model_ref}:batchEmbedContents", json=body)
        response.raise_for_status()

        try:
            return [item["values"] for item in response.json()["embeddings"]]
        except (KeyError, TypeError, ValueError) as e:
            raise EmbeddingError(f"Malformed embeddings response: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
