import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ValidationError, field_validator

DEFAULT_MODEL = "gemini-2.0-flash-exp"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MAX_TEXT_LENGTH = 1000

TRUTHY_VALUES = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base: str = DEFAULT_API_BASE
    gemini_timeout_seconds: float | None = None
    debug: bool = False
    max_text_length: int = DEFAULT_MAX_TEXT_LENGTH
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @property
    def api_key_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from an environment mapping (``os.environ`` by default).

        Blank values count as unset so an empty ``GEMINI_API_KEY=`` line in a
        ``.env`` file is reported as a missing key. Values that fail
        validation are logged and replaced by their defaults.
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            value = env.get(name)
            if value is None:
                return None
            value = value.strip()
            return value or None

        values: dict[str, object] = {
            "gemini_api_key": read("GEMINI_API_KEY"),
            "gemini_model": read("GEMINI_MODEL"),
            "gemini_api_base": read("GEMINI_API_BASE"),
            "gemini_timeout_seconds": read("GEMINI_TIMEOUT_SECONDS"),
            "max_text_length": read("MAX_TEXT_LENGTH"),
            "host": read("HOST"),
            "port": read("PORT"),
            "log_level": read("LOG_LEVEL"),
        }
        debug = read("TRANSLATOR_DEBUG")
        if debug is not None:
            values["debug"] = debug.lower() in TRUTHY_VALUES

        values = {key: value for key, value in values.items() if value is not None}
        try:
            return cls(**values)
        except ValidationError as exc:
            invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        for name in sorted(invalid):
            logger.warning("Ignoring invalid value for setting %s; using the default", name)
            values.pop(name, None)
        return cls(**values)


def get_settings() -> Settings:
    # Read on every call so the credential is picked up at request time.
    return Settings.from_env()
