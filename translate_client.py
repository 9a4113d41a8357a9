import os
import sys
from typing import Any

import requests

TRANSLATOR_URL = os.getenv("TRANSLATOR_URL", "http://127.0.0.1:3000")
HEADERS = {"Content-Type": "application/json"}


def health() -> dict[str, Any]:
    response = requests.get(f"{TRANSLATOR_URL}/health", headers=HEADERS, timeout=10)
    response.raise_for_status()
    return response.json()


def translate(text: str, target_language: str) -> dict[str, Any]:
    response = requests.post(
        f"{TRANSLATOR_URL}/translate",
        json={"text": text, "targetLanguage": target_language},
        headers=HEADERS,
        timeout=30,
    )
    response.raise_for_status()
    return response.json()


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("usage: translate_client.py TEXT TARGET_LANGUAGE", file=sys.stderr)
        return 2

    text, target_language = args
    status = health()
    if not status.get("apiKeyConfigured", False):
        print("Warning: the server reports no Gemini API key configured.", file=sys.stderr)

    result = translate(text, target_language)
    print(f"{result['targetLanguage']}: {result['translation']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
