"""Amazon Bedrock Titan embedding provider."""

import json
import logging

import boto3
from botocore.exceptions import ClientError

from src.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_BEDROCK_MODEL = "amazon.titan-embed-text-v1"

# model id -> (dimension, request format)
TITAN_MODELS = {
    "amazon.titan-embed-text-v1": (1536, "titan"),
    "amazon.titan-embed-text-v2:0": (1024, "titan_v2"),
}


class BedrockEmbeddingProvider(EmbeddingProvider):
    """Embeds text through the bedrock-runtime InvokeModel API.

    Titan accepts a single input per request, so batches are embedded one
    text at a time. Client errors are logged and re-raised.
    """

    def __init__(self, model_id: str = DEFAULT_BEDROCK_MODEL, region: str = "us-east-1", client=None):
        if model_id not in TITAN_MODELS:
            raise ValueError(
                f"Unsupported embedding model: {model_id}. "
                f"Supported: {', '.join(sorted(TITAN_MODELS))}"
            )
        self._model_id = model_id
        self._dimension, self._request_format = TITAN_MODELS[model_id]
        self._client = client or boto3.client("bedrock-runtime", region_name=region)

    @property
    def model_id(self) -> str:
        return self._model_id

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        return [self._embed_one(text) for text in texts]

    def _embed_one(self, text: str) -> list[float]:
        if self._request_format == "titan_v2":
            body = {"inputText": text, "dimensions": self._dimension, "normalize": True}
        else:
            body = {"inputText": text}

        try:
            response = self._client.invoke_model(
                modelId=self._model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(body),
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("Bedrock embedding failed (%s): %s", error_code, e)
            raise

        payload = json.loads(response["body"].read().decode("utf-8"))
        embedding = payload.get("embedding")
        if embedding is None:
            raise ValueError(f"Unexpected Bedrock response format: keys {sorted(payload)}")
        return [float(x) for x in embedding]

    @property
    def dimension(self) -> int:
        return self._dimension
