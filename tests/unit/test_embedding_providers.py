"""Tests for embedding providers with mocked model and Bedrock clients."""

import io
import json
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from botocore.exceptions import ClientError

from config.settings import Settings
from src.embedding.bedrock import BedrockEmbeddingProvider
from src.embedding.factory import get_embedding_provider


def _bedrock_response(embedding):
    return {"body": io.BytesIO(json.dumps({"embedding": embedding}).encode("utf-8"))}


@pytest.fixture
def bedrock_client():
    client = MagicMock()
    client.invoke_model.side_effect = lambda **kwargs: _bedrock_response([0.1, 0.2, 0.3])
    return client


class TestBedrockEmbeddingProvider:
    def test_embeds_each_text(self, bedrock_client):
        provider = BedrockEmbeddingProvider(client=bedrock_client)
        vectors = provider.embed(["first", "second"])

        assert vectors == [[0.1, 0.2, 0.3], [0.1, 0.2, 0.3]]
        assert bedrock_client.invoke_model.call_count == 2

    def test_titan_v1_request(self, bedrock_client):
        provider = BedrockEmbeddingProvider(client=bedrock_client)
        provider.embed(["photosynthesis"])

        kwargs = bedrock_client.invoke_model.call_args.kwargs
        assert kwargs["modelId"] == "amazon.titan-embed-text-v1"
        assert kwargs["contentType"] == "application/json"
        assert json.loads(kwargs["body"]) == {"inputText": "photosynthesis"}
        assert provider.dimension == 1536

    def test_titan_v2_request(self, bedrock_client):
        provider = BedrockEmbeddingProvider(model_id="amazon.titan-embed-text-v2:0", client=bedrock_client)
        provider.embed(["osmosis"])

        body = json.loads(bedrock_client.invoke_model.call_args.kwargs["body"])
        assert body == {"inputText": "osmosis", "dimensions": 1024, "normalize": True}
        assert provider.dimension == 1024

    def test_embed_query_delegates(self, bedrock_client):
        provider = BedrockEmbeddingProvider(client=bedrock_client)
        assert provider.embed_query(["q"]) == [[0.1, 0.2, 0.3]]

    def test_empty_batch_rejected(self, bedrock_client):
        with pytest.raises(ValueError):
            BedrockEmbeddingProvider(client=bedrock_client).embed([])

    def test_unsupported_model(self, bedrock_client):
        with pytest.raises(ValueError, match="Unsupported embedding model"):
            BedrockEmbeddingProvider(model_id="cohere.embed-english-v3", client=bedrock_client)

    def test_client_error_propagates(self):
        client = MagicMock()
        client.invoke_model.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}},
            "InvokeModel",
        )
        provider = BedrockEmbeddingProvider(client=client)
        with pytest.raises(ClientError):
            provider.embed(["q"])

    def test_unexpected_response_format(self):
        client = MagicMock()
        client.invoke_model.return_value = {"body": io.BytesIO(b'{"vectors": []}')}
        with pytest.raises(ValueError, match="Unexpected Bedrock response"):
            BedrockEmbeddingProvider(client=client).embed(["q"])


class TestSentenceTransformerEmbeddingProvider:
    @pytest.fixture
    def mock_model(self):
        with patch("src.embedding.sentence_transformer.SentenceTransformer") as MockST:
            model = MagicMock()
            model.get_sentence_embedding_dimension.return_value = 3
            model.encode.return_value = np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]])
            MockST.return_value = model
            yield MockST, model

    def test_embed_returns_lists(self, mock_model):
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        provider = SentenceTransformerEmbeddingProvider(model_name="test-model")
        vectors = provider.embed(["a", "b"])

        assert vectors == [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]
        assert provider.dimension == 3
        assert provider.model_name == "test-model"

    def test_falls_back_to_download(self, mock_model):
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        MockST, model = mock_model
        MockST.side_effect = [OSError("not cached"), model]
        SentenceTransformerEmbeddingProvider(model_name="test-model")

        assert MockST.call_count == 2
        assert MockST.call_args_list[0].kwargs == {"local_files_only": True}

    def test_empty_batch_rejected(self, mock_model):
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        with pytest.raises(ValueError):
            SentenceTransformerEmbeddingProvider().embed([])


class TestGetEmbeddingProvider:
    def test_sentence_transformers_default(self):
        with patch("src.embedding.sentence_transformer.SentenceTransformerEmbeddingProvider") as MockProvider:
            get_embedding_provider(Settings())
        MockProvider.assert_called_once_with(model_name="all-MiniLM-L6-v2")

    def test_bedrock(self):
        with patch("src.embedding.bedrock.BedrockEmbeddingProvider") as MockProvider:
            get_embedding_provider(Settings(tutor_embedding_provider="bedrock", tutor_bedrock_region="eu-west-1"))
        MockProvider.assert_called_once_with(model_id="amazon.titan-embed-text-v1", region="eu-west-1")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported embedding provider"):
            get_embedding_provider(Settings(tutor_embedding_provider="openai"))
