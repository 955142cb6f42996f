"""Abstract embedding provider interface."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Every vector a provider returns has length ``dimension``; chunks and
    queries compared against each other must come from providers with the
    same dimension.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of text strings.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.

        Raises:
            ValueError: If texts is empty.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for query texts.

        Override for models that need query-specific preprocessing.
        Default delegates to embed().
        """
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 384)."""
        ...
