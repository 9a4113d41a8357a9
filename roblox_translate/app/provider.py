"""Client for the external text-generation provider (Google Gemini REST API).

The provider only tells failures apart through its error messages, so the
mapping from a failure to an :class:`ErrorKind` lives in a replaceable
classifier function instead of inside the client.
"""

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

import httpx

from .config import DEFAULT_API_BASE

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    QUOTA = "quota"
    CREDENTIALS = "credentials"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Raised for any provider failure.

    ``stage`` is ``"init"`` when the client could not be set up and
    ``"generate"`` when the generation call itself failed.
    """

    def __init__(self, message: str, stage: str = "generate", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.status_code = status_code


class GenerationProvider(Protocol):
    async def generate(self, prompt: str) -> str: ...


ProviderFactory = Callable[..., GenerationProvider]
ErrorClassifier = Callable[[BaseException], ErrorKind]

QUOTA_PATTERN = re.compile(r"quota|rate[ _-]?limit|(?<![a-z])rate(?![a-z])", re.IGNORECASE)
CREDENTIALS_PATTERN = re.compile(r"api[ _-]?key", re.IGNORECASE)


def classify_provider_error(exc: BaseException) -> ErrorKind:
    message = str(exc)
    if QUOTA_PATTERN.search(message):
        return ErrorKind.QUOTA
    if CREDENTIALS_PATTERN.search(message):
        return ErrorKind.CREDENTIALS
    return ErrorKind.UNKNOWN


class GeminiProvider:
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: float | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ProviderError("API key must be a non-empty string.", stage="init")
        if not model:
            raise ProviderError("A model name is required.", stage="init")
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json=body, headers=headers)
        except httpx.TimeoutException as exc:
            raise ProviderError("Generation request timed out.") from exc
        except httpx.RequestError as exc:
            raise ProviderError(f"Failed to reach generation provider: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderError(
                f"Provider returned HTTP {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Provider returned a non-JSON response.", status_code=response.status_code) from exc

        return _extract_text(data)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or "no error body"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text.strip() or "no error body"


def _extract_text(data: Any) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        feedback = data.get("promptFeedback", {}) if isinstance(data, dict) else {}
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise ProviderError(f"Prompt was blocked by the provider ({reason}).")
        raise ProviderError("Provider returned no candidates.")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [part["text"] for part in parts if isinstance(part, dict) and part.get("text")]
    if not texts:
        finish_reason = candidates[0].get("finishReason", "unknown")
        raise ProviderError(f"Provider returned an empty candidate (finishReason: {finish_reason}).")
    return "".join(texts)


def create_gemini_provider(
    api_key: str,
    model: str,
    *,
    base_url: str = DEFAULT_API_BASE,
    timeout: float | None = None,
) -> GeminiProvider:
    logger.debug("Creating Gemini provider for model %s", model)
    return GeminiProvider(api_key, model, base_url=base_url, timeout=timeout)
