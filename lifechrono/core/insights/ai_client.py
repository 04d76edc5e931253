"""Gemini generateContent client for insight narratives."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from lifechrono.core.errors import ExternalServiceError
from lifechrono.core.insights.schemas import InsightPayload

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class GeminiClient:
    """Minimal REST client; every failure surfaces as ``ExternalServiceError``."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 20.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the model's text.

        Args:
            prompt: Full prompt text, system instructions included

        Returns:
            The first candidate's text

        Raises:
            ExternalServiceError: On HTTP errors, timeouts, quota limits or
                a response without candidate text
        """
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        try:
            resp = requests.post(
                self.endpoint,
                headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceError(f"Gemini request failed: {e}") from e

        if resp.status_code == 429:
            raise ExternalServiceError("Gemini quota exceeded (429)")
        if resp.status_code >= 400:
            raise ExternalServiceError(f"Gemini returned HTTP {resp.status_code}")

        try:
            data = resp.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError(f"Unexpected Gemini response shape: {e}") from e

    def test_connection(self) -> Dict[str, Any]:
        try:
            text = self.generate('Return this exact JSON: {"status": "ok", "message": "Gemini is working"}')
            parsed = json.loads(extract_json_block(text))
        except (ExternalServiceError, ValueError) as e:
            return {"connected": False, "error": str(e), "isQuotaError": "429" in str(e)}
        return {
            "connected": True,
            "model": self.model,
            "apiKeyPrefix": f"{self.api_key[:8]}...",
            "parsed": parsed,
        }


def extract_json_block(text: str) -> str:
    match = _JSON_BLOCK.search(text or "")
    if not match:
        raise ExternalServiceError("No JSON found in model response")
    return match.group(0)


def parse_insight_payload(text: str) -> InsightPayload:
    """Validate model output against the insight contract.

    The first ``{...}`` block must decode to an object with a non-empty
    ``summary``, a numeric ``balanceScore`` and a ``recommendations`` list.
    Scores are clamped to 0-100 and recommendations cut to three.
    """
    try:
        raw = json.loads(extract_json_block(text))
    except (ValueError, RecursionError) as e:
        raise ExternalServiceError(f"Model response is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ExternalServiceError("Model response is not a JSON object")
    try:
        return InsightPayload.model_validate(raw)
    except PydanticValidationError as e:
        raise ExternalServiceError(f"Model response missing required fields: {e.error_count()} errors") from e
    except Exception as e:
        raise ExternalServiceError(f"Model response could not be validated: {e}") from e


def client_from_config(config: Mapping[str, Any]) -> Optional[GeminiClient]:
    """A client when an API key is configured, else None."""
    api_key = config.get("GEMINI_API_KEY") or ""
    if not api_key:
        return None
    return GeminiClient(
        api_key=api_key,
        model=config.get("GEMINI_MODEL") or DEFAULT_MODEL,
        api_url=config.get("GEMINI_API_URL") or DEFAULT_API_URL,
        timeout=float(config.get("INSIGHT_AI_TIMEOUT_SECONDS") or 20),
    )
