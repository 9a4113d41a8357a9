from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"
    MISSING_FIELDS = "MISSING_FIELDS"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    API_KEY_MISSING = "API_KEY_MISSING"
    INVALID_API_KEY = "INVALID_API_KEY"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class TranslationRequest(BaseModel):
    text: str = Field(..., min_length=1)
    target_language: str = Field(..., min_length=1, alias="targetLanguage")

    model_config = {"populate_by_name": True}


class TranslationResult(BaseModel):
    translation: str
    source_text: str = Field(..., alias="sourceText")
    target_language: str = Field(..., alias="targetLanguage")
    processing_time: float | None = Field(default=None, alias="processingTime")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str
    details: str
    error_code: ErrorCode | None = Field(default=None, alias="errorCode")
    solution: str | None = None

    model_config = {"populate_by_name": True}


class HealthResponse(BaseModel):
    status: str
    message: str
    api_key_configured: bool = Field(..., alias="apiKeyConfigured")
    model: str

    model_config = {"populate_by_name": True}


class ServiceDescriptor(BaseModel):
    service: str
    version: str
    endpoints: dict[str, str]
