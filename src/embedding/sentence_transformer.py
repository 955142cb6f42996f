"""Sentence Transformer embedding provider implementation."""

import logging

from sentence_transformers import SentenceTransformer

from src.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Local embedding provider wrapping sentence-transformers models.

    Default model: all-MiniLM-L6-v2 (384 dimensions). Prefers a cached copy
    and only downloads when the model is not available locally.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL):
        logger.info("Loading sentence-transformers model: %s", model_name)
        try:
            self._model = SentenceTransformer(model_name, local_files_only=True)
        except OSError:
            self._model = SentenceTransformer(model_name)
        self._model_name = model_name
        self._dimension = self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        embeddings = self._model.encode(texts, show_progress_bar=False)
        return embeddings.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
