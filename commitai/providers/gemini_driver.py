from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Config
from ..exceptions import (
    BackendError,
    EmptyResponseError,
    ProtocolError,
    TransportError,
)
from .base import BaseDriver

REQUEST_TIMEOUT = 60.0
TEMPERATURE = 0.3

logger = logging.getLogger(__name__)


class GeminiDriver(BaseDriver):
    """Driver handling Gemini ``models/<model>:generateContent`` calls."""

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self._api_key = config.gemini_api_key
        self._request_timeout = REQUEST_TIMEOUT

    @property
    def url(self) -> str:
        base = self.config.endpoint.rstrip("/")
        return f"{base}/models/{self.config.model}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": self.config.max_tokens,
            },
        }

    def invoke(self, prompt: str) -> str:
        logger.debug(
            "POST %s (prompt %d chars, maxOutputTokens=%d)",
            self.url,
            len(prompt),
            self.config.max_tokens,
        )
        try:
            response = httpx.post(
                self.url,
                params={"key": self._api_key},
                json=self.build_payload(prompt),
                timeout=self._request_timeout,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"request to Gemini failed: {e}") from e

        body = response.text
        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"failed to parse Gemini response: {e}", body=body
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                "failed to parse Gemini response: expected a JSON object",
                body=body,
            )

        return self.extract_text(data)

    @staticmethod
    def extract_text(data: dict[str, Any]) -> str:
        """Pull the first candidate's first part out of a decoded envelope."""
        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise BackendError(str(error.get("message") or ""))
            raise BackendError(str(error))

        candidates = data.get("candidates") or []
        if not candidates:
            raise EmptyResponseError("empty response from Gemini")
        try:
            content = candidates[0].get("content") or {}
            parts = content.get("parts") or []
            if not parts:
                raise EmptyResponseError("empty response from Gemini")
            text = parts[0].get("text") or ""
        except (AttributeError, KeyError, TypeError) as e:
            raise ProtocolError(
                f"unexpected Gemini envelope shape: {e}", body=str(data)
            ) from e
        logger.debug("Gemini reply (%d chars): %r", len(text), text[:300])
        return text
