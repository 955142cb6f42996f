"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tutor search settings loaded from environment variables."""

    # Embedding
    tutor_embedding_provider: str = "sentence-transformers"
    tutor_embedding_model: str = "all-MiniLM-L6-v2"
    tutor_bedrock_model: str = "amazon.titan-embed-text-v1"
    tutor_bedrock_region: str = "us-east-1"

    # Storage
    tutor_chroma_path: str = "./data/chroma"

    # Ingestion
    tutor_chunk_size: int = 512
    tutor_chunk_overlap: int = 50

    # Search
    tutor_default_max_results: int = 10
    tutor_hybrid_overfetch: int = 2
    tutor_external_timeout: float = 30.0

    # Ranking
    tutor_semantic_weight: float = 0.7
    tutor_keyword_weight: float = 0.3
    tutor_hybrid_boost: float = 1.2
    tutor_keyword_presence_bonus: float = 0.5

    @property
    def chroma_path(self) -> Path:
        return Path(self.tutor_chroma_path)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
