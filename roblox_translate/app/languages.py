from types import MappingProxyType

LANGUAGE_NAMES = MappingProxyType(
    {
        "es": "Spanish",
        "fr": "French",
        "de": "German",
        "ja": "Japanese",
        "zh": "Chinese",
        "ko": "Korean",
        "it": "Italian",
        "pt": "Portuguese",
        "ru": "Russian",
        "ar": "Arabic",
        "vi": "Vietnamese",
        "th": "Thai",
        "nl": "Dutch",
        "pl": "Polish",
        "tr": "Turkish",
        "sv": "Swedish",
        "no": "Norwegian",
        "da": "Danish",
        "fi": "Finnish",
        "hi": "Hindi",
    }
)


def resolve_language_name(target_language: str) -> str:
    """Map a short code like ``es`` to ``Spanish``; anything else passes through."""
    return LANGUAGE_NAMES.get(target_language, target_language)
