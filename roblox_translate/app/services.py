import json
import logging
from collections.abc import Callable
from time import perf_counter
from typing import Any, NamedTuple

from pydantic import BaseModel

from .config import Settings, get_settings
from .languages import resolve_language_name
from .provider import (
    ErrorClassifier,
    ErrorKind,
    ProviderError,
    ProviderFactory,
    classify_provider_error,
    create_gemini_provider,
)
from .schemas import (
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    ServiceDescriptor,
    TranslationRequest,
    TranslationResult,
)

SERVICE_NAME = "Roblox Translation API"
SERVICE_VERSION = "1.0.0"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

PROMPT_TEMPLATE = (
    "Translate the following text to {language}. "
    "Only provide the translation, no explanations or additional text:\n{text}"
)


class TranslationOutcome(NamedTuple):
    status_code: int
    body: TranslationResult | ErrorResponse

    def content(self) -> dict[str, Any]:
        return dump(self.body)


def build_prompt(language_name: str, text: str) -> str:
    return PROMPT_TEMPLATE.format(language=language_name, text=text)


def service_descriptor() -> ServiceDescriptor:
    return ServiceDescriptor(
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        endpoints={"translate": "POST /translate", "health": "GET /health"},
    )


def health_status(settings: Settings) -> HealthResponse:
    return HealthResponse(
        status="ok",
        message="Translation service is running",
        api_key_configured=settings.api_key_configured,
        model=settings.gemini_model,
    )


def dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _failure(
    status_code: int,
    code: ErrorCode,
    error: str,
    details: str,
    solution: str | None = None,
) -> TranslationOutcome:
    return TranslationOutcome(
        status_code,
        ErrorResponse(error=error, details=details, error_code=code, solution=solution),
    )


class TranslationHandler:
    """Validates a translate request, calls the provider and shapes the response.

    Settings are loaded on every call, so the credential is read at request
    time. ``provider_factory`` receives the credential explicitly and returns
    a fresh provider per request; ``classifier`` turns provider failures into
    an :class:`ErrorKind`.
    """

    def __init__(
        self,
        settings_loader: Callable[[], Settings] = get_settings,
        provider_factory: ProviderFactory = create_gemini_provider,
        classifier: ErrorClassifier = classify_provider_error,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings_loader = settings_loader
        self.provider_factory = provider_factory
        self.classifier = classifier
        self.logger = logger or logging.getLogger(__name__)

    async def translate(self, raw_body: bytes | str) -> TranslationOutcome:
        try:
            return await self._translate(raw_body)
        except Exception as exc:
            self.logger.exception("Unexpected error while handling translate request")
            return _failure(500, ErrorCode.UNKNOWN_ERROR, "Translation failed", str(exc))

    async def _translate(self, raw_body: bytes | str) -> TranslationOutcome:
        started = perf_counter()
        settings = self.settings_loader()
        trace = self.logger.info if settings.debug else self.logger.debug

        try:
            body = json.loads(raw_body)
        except (ValueError, RecursionError) as exc:
            self.logger.warning("Rejected translate request: body is not valid JSON (%s)", exc)
            return _failure(400, ErrorCode.JSON_PARSE_ERROR, "Invalid JSON in request body", str(exc))
        trace("Parsed request body")

        text = body.get("text") if isinstance(body, dict) else None
        target_language = body.get("targetLanguage") if isinstance(body, dict) else None
        if not (text and isinstance(text, str) and target_language and isinstance(target_language, str)):
            self.logger.warning("Rejected translate request: missing text or targetLanguage")
            return _failure(
                400,
                ErrorCode.MISSING_FIELDS,
                "Missing required fields: text and targetLanguage",
                f"text present: {bool(text)}, targetLanguage present: {bool(target_language)}",
            )

        if len(text) > settings.max_text_length:
            self.logger.warning("Rejected translate request: text length %d exceeds limit", len(text))
            return _failure(
                400,
                ErrorCode.TEXT_TOO_LONG,
                f"Text too long (max {settings.max_text_length} characters)",
                f"Received {len(text)} characters",
            )
        request = TranslationRequest(text=text, target_language=target_language)
        trace("Request validated (%d characters)", len(request.text))

        if not settings.api_key_configured:
            self.logger.error("GEMINI_API_KEY is not configured")
            return _failure(
                500,
                ErrorCode.API_KEY_MISSING,
                "API key not configured",
                "GEMINI_API_KEY is not set in the server environment",
                solution="Set GEMINI_API_KEY in the environment or a .env file and restart the service.",
            )

        language_name = resolve_language_name(request.target_language)
        trace("Resolved target language %r to %r", request.target_language, language_name)
        prompt = build_prompt(language_name, request.text)

        try:
            provider = self.provider_factory(
                settings.gemini_api_key,
                settings.gemini_model,
                base_url=settings.gemini_api_base,
                timeout=settings.gemini_timeout_seconds,
            )
        except Exception as exc:
            self.logger.error("Failed to initialise generation provider: %s", exc)
            return self._provider_failure(exc, "init")

        try:
            trace("Calling model %s", settings.gemini_model)
            generated = await provider.generate(prompt)
            translation = generated.strip()
        except Exception as exc:
            self.logger.error("Translation error: %s", exc)
            return self._provider_failure(exc, "generate")

        elapsed_ms = (perf_counter() - started) * 1000
        self.logger.info("Translated %d characters to %s in %.0f ms", len(request.text), language_name, elapsed_ms)
        return TranslationOutcome(
            200,
            TranslationResult(
                translation=translation,
                source_text=request.text,
                target_language=language_name,
                processing_time=round(elapsed_ms, 2) if settings.debug else None,
            ),
        )

    @staticmethod
    def _invalid_key(exc: BaseException) -> TranslationOutcome:
        return _failure(
            500,
            ErrorCode.INVALID_API_KEY,
            "Invalid API key",
            str(exc),
            solution="Check that GEMINI_API_KEY holds a valid Gemini API key.",
        )

    def _provider_failure(self, exc: BaseException, default_stage: str) -> TranslationOutcome:
        # ProviderError carries its own stage; anything else takes the caller's.
        stage = exc.stage if isinstance(exc, ProviderError) else default_stage
        kind = self.classifier(exc)
        if stage == "generate" and kind is ErrorKind.QUOTA:
            return _failure(
                429,
                ErrorCode.QUOTA_EXCEEDED,
                "API quota exceeded",
                str(exc),
                solution="Wait before retrying or raise the provider quota.",
            )
        if kind is ErrorKind.CREDENTIALS:
            return self._invalid_key(exc)
        return _failure(500, ErrorCode.UNKNOWN_ERROR, "Translation failed", str(exc))
