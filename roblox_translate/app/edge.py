"""Edge-function entry point.

Serverless runtimes hand the function one request and an ``env`` mapping
holding the bindings/secrets, and expect a response object back. ``fetch``
routes that request through the same :class:`TranslationHandler` used by the
FastAPI app.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple
from urllib.parse import urlsplit

from .config import Settings
from .provider import ProviderFactory, create_gemini_provider
from .services import CORS_HEADERS, TranslationHandler, dump, health_status, service_descriptor

logger = logging.getLogger(__name__)


class EdgeResponse(NamedTuple):
    status: int
    headers: dict[str, str]
    body: str | None

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


def _json_response(payload: dict[str, Any], status: int = 200) -> EdgeResponse:
    return EdgeResponse(status, {"Content-Type": "application/json", **CORS_HEADERS}, json.dumps(payload))


async def fetch(
    method: str,
    url: str,
    body: bytes | str | None,
    env: Mapping[str, str],
    provider_factory: ProviderFactory = create_gemini_provider,
) -> EdgeResponse:
    method = method.upper()
    if method == "OPTIONS":
        return EdgeResponse(200, dict(CORS_HEADERS), None)

    path = urlsplit(url).path or "/"
    settings = Settings.from_env(env)

    if path == "/" and method == "GET":
        return _json_response(dump(service_descriptor()))
    if path == "/health" and method == "GET":
        return _json_response(dump(health_status(settings)))
    if path == "/translate" and method == "POST":
        handler = TranslationHandler(
            settings_loader=lambda: settings,
            provider_factory=provider_factory,
            logger=logger,
        )
        outcome = await handler.translate(body or b"")
        return _json_response(outcome.content(), outcome.status_code)

    return _json_response({"error": "Not found"}, 404)
