"""
Embedding Client

Turns query and document text into vectors with an OpenAI-compatible
``/embeddings`` endpoint. The model comes from configuration only: every
stored vector in every domain was produced by it, so callers cannot pick
another one.

One ``Embedder`` is shared by all vector store handles.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
import logging
import httpx

from ..config import settings
from ..core.errors import EmbeddingError

logger = logging.getLogger("wwah.embedder")


class Embedder:
    """
    Parameters
    ----------
    api_key : Optional[str]
        Provider key. Defaults to ``settings.openai_api_key``.
    model : Optional[str]
        Defaults to ``settings.embedding_model``.
    base_url : Optional[str]
        Full endpoint URL. Defaults to ``settings.embedding_api_url``.
    timeout : float
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key or settings.openai_api_key.get_secret_value()
        self.model = model or settings.embedding_model
        self.base_url = base_url or str(settings.embedding_api_url)
        self.timeout = timeout

    async def embed_query(self, text: str) -> List[float]:
        """Vector for a single search query."""
        vectors = await self.embed([text])
        return vectors[0]

    async def embed(
        self,
        texts: Sequence[str],
        batch_size: int = 20,
    ) -> List[List[float]]:
        """
        Embed ``texts`` in order, ``batch_size`` inputs per request.

        Raises
        ------
        EmbeddingError
            On a transport or HTTP error, a malformed payload, or a batch
            that comes back with the wrong number of vectors.
        """
        if not texts:
            return []

        vectors: List[List[float]] = []

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for start in range(0, len(texts), batch_size):
                batch = list(texts[start : start + batch_size])
                vectors.extend(await self._embed_batch(client, batch))

        return vectors

    async def _embed_batch(
        self,
        client: httpx.AsyncClient,
        batch: List[str],
    ) -> List[List[float]]:
        try:
            response = await client.post(
                self.base_url,
                json={"model": self.model, "input": batch},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Embedding request for %d inputs failed: %s: %s",
                len(batch),
                type(exc).__name__,
                exc,
            )
            raise EmbeddingError(
                f"Embedding generation failed: {type(exc).__name__}"
            ) from exc

        vectors = self._extract_embeddings(response.json())
        if len(vectors) != len(batch):
            raise EmbeddingError(
                f"Expected {len(batch)} embeddings, received {len(vectors)}."
            )
        return vectors

    @staticmethod
    def _extract_embeddings(data: Dict[str, Any]) -> List[List[float]]:
        """
        Read ``{"data": [{"embedding": [...]}, ...]}`` into float lists.
        """
        records = data.get("data") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise EmbeddingError("Embedding response has no 'data' list.")

        vectors: List[List[float]] = []
        for index, record in enumerate(records):
            vector = record.get("embedding") if isinstance(record, dict) else None
            if not isinstance(vector, list) or not all(
                isinstance(x, (float, int)) and not isinstance(x, bool) for x in vector
            ):
                raise EmbeddingError(f"Bad embedding record at index {index}.")
            vectors.append([float(x) for x in vector])

        return vectors
