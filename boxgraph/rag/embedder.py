"""Embedding backends for box excerpts.

``HashEmbedder`` is the offline default. Its vectors are slices of a SHA-256
digest, so cosine similarity between them measures hash similarity and says
nothing about meaning. ``HTTPEmbedder`` is the slot for a real model served
behind an OpenAI-compatible ``/embeddings`` endpoint.
"""

from __future__ import annotations

import hashlib
import json
import math
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import MAX_HASH_DIMENSIONS, ConfigError, EmbedderConfig
from ..logging import get_logger
from ..models import Embedding, utc_timestamp


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


class Embedder(ABC):
    """Capability interface: text in, fixed-length vector out."""

    model: str
    dimensions: int

    @abstractmethod
    def embed(self, text: str) -> Embedding:
        """Return the embedding for ``text``."""


class HashEmbedder(Embedder):
    """Deterministic placeholder embedder derived from a content digest."""

    def __init__(
        self,
        *,
        model: str = "lumen-bridge-v1",
        dimensions: int = 16,
        delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not 0 < dimensions <= MAX_HASH_DIMENSIONS:
            raise ValueError(
                f"Hash embeddings support 1-{MAX_HASH_DIMENSIONS} dimensions, got {dimensions}"
            )
        self.model = model
        self.dimensions = dimensions
        self.delay = max(0.0, delay)
        self._sleep = sleep

    def vector(self, text: str) -> List[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [byte / 255.0 for byte in digest[: self.dimensions]]

    def embed(self, text: str) -> Embedding:
        if self.delay:
            # Stands in for the latency of a remote embedding call.
            self._sleep(self.delay)
        return Embedding(
            model=self.model,
            vector=self.vector(text),
            tokens=estimate_tokens(text),
            timestamp=utc_timestamp(),
        )


class HTTPEmbedder(Embedder):
    """Calls an OpenAI-compatible embeddings endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        model: str,
        dimensions: int = 16,
        api_key: Optional[str] = None,
        request_timeout: float = 60.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.dimensions = dimensions
        self.api_key = api_key
        self.request_timeout = request_timeout

    def embed(self, text: str) -> Embedding:
        endpoint = f"{self.base_url}/embeddings"
        data = json.dumps({"model": self.model, "input": text}).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        request = Request(endpoint, data=data, headers=headers, method="POST")
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise RuntimeError(
                f"Embedding request failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise RuntimeError(f"Embedding request failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("Embedding endpoint returned invalid JSON") from exc

        vector = self._extract_vector(payload)
        if not vector:
            raise RuntimeError("Embedding endpoint returned no vector")
        usage = payload.get("usage") if isinstance(payload, dict) else None
        tokens = usage.get("prompt_tokens") if isinstance(usage, dict) else None
        return Embedding(
            model=self.model,
            vector=vector,
            tokens=tokens if isinstance(tokens, int) else estimate_tokens(text),
            timestamp=utc_timestamp(),
        )

    @staticmethod
    def _extract_vector(payload: object) -> List[float]:
        if not isinstance(payload, dict):
            return []
        data = payload.get("data")
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return []
        values = data[0].get("embedding")
        if not isinstance(values, list):
            return []
        return [float(value) for value in values if isinstance(value, (int, float))]


def build_embedder(config: EmbedderConfig) -> Embedder:
    """Instantiate the backend selected in configuration."""
    logger = get_logger("embedder")
    if config.backend == "hash":
        logger.debug("Using hash embedder (%d dimensions)", config.dimensions)
        return HashEmbedder(model=config.model, dimensions=config.dimensions, delay=config.delay)
    if config.backend == "http":
        if not config.base_url:
            raise ConfigError("The http embedder requires embedder.base_url")
        logger.debug("Using HTTP embedder at %s", config.base_url)
        return HTTPEmbedder(
            base_url=config.base_url,
            model=config.model,
            dimensions=config.dimensions,
            api_key=config.api_key,
            request_timeout=config.request_timeout,
        )
    raise ConfigError(f"Unknown embedder backend '{config.backend}'")


__all__ = ["Embedder", "HTTPEmbedder", "HashEmbedder", "build_embedder", "estimate_tokens"]
