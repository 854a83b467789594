# hopper/llm/embedding/base.py
from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class EmbeddingPlugin(Protocol):
    """
    Canonical embedding plugin contract.

    Provider-specific logic must live in plugin implementations only.
    One call embeds one batch; vectors come back in input order.
    """

    plugin_name: str

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        ...

    async def aclose(self) -> None:
        ...
