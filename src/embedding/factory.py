"""Embedding provider selection from configuration."""

from config.settings import Settings, get_settings
from src.embedding.provider import EmbeddingProvider


def get_embedding_provider(settings: Settings | None = None) -> EmbeddingProvider:
    """Create the configured embedding provider.

    Default: local sentence-transformers. ``bedrock`` uses Amazon Titan.
    """
    settings = settings or get_settings()
    provider = settings.tutor_embedding_provider.lower()

    if provider == "sentence-transformers":
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        return SentenceTransformerEmbeddingProvider(model_name=settings.tutor_embedding_model)
    elif provider == "bedrock":
        from src.embedding.bedrock import BedrockEmbeddingProvider

        return BedrockEmbeddingProvider(
            model_id=settings.tutor_bedrock_model,
            region=settings.tutor_bedrock_region,
        )
    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'sentence-transformers', 'bedrock'"
        )
