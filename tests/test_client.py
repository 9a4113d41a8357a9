"""Tests for the command-line client script."""

from __future__ import annotations

from typing import Any

import pytest
import requests

import translate_client


class FakeResponse:
    def __init__(self, payload: dict[str, Any], status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> dict[str, Any]:
        return self.payload


@pytest.fixture
def fake_server(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    sent: list[dict[str, Any]] = []

    def fake_get(url: str, headers=None, timeout=None):  # noqa: ANN001
        return FakeResponse({"status": "ok", "apiKeyConfigured": True})

    def fake_post(url: str, json=None, headers=None, timeout=None):  # noqa: ANN001
        sent.append({"url": url, "json": json})
        return FakeResponse({"translation": "Hola", "sourceText": json["text"], "targetLanguage": "Spanish"})

    monkeypatch.setattr(requests, "get", fake_get)
    monkeypatch.setattr(requests, "post", fake_post)
    return sent


def test_main_prints_translation(fake_server: list[dict[str, Any]], capsys: pytest.CaptureFixture[str]) -> None:
    assert translate_client.main(["Hello", "es"]) == 0

    assert fake_server == [
        {"url": f"{translate_client.TRANSLATOR_URL}/translate", "json": {"text": "Hello", "targetLanguage": "es"}}
    ]
    assert capsys.readouterr().out.strip() == "Spanish: Hola"


def test_main_requires_two_arguments(capsys: pytest.CaptureFixture[str]) -> None:
    assert translate_client.main(["Hello"]) == 2
    assert "usage" in capsys.readouterr().err


def test_translate_raises_on_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, json=None, headers=None, timeout=None):  # noqa: ANN001
        return FakeResponse({"error": "API quota exceeded", "errorCode": "QUOTA_EXCEEDED"}, status_code=429)

    monkeypatch.setattr(requests, "post", fake_post)

    with pytest.raises(requests.HTTPError):
        translate_client.translate("Hello", "es")
