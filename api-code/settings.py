from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration resolved from environment variables."""

    aws_region: str = Field(
        default="us-east-1", alias="AWS_REGION", description="AWS region hosting Bedrock"
    )
    bedrock_model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        alias="BEDROCK_MODEL_ID",
        description="Bedrock model identifier used for every chat request.",
    )
    bedrock_anthropic_version: str = Field(
        default="bedrock-2023-05-31",
        alias="BEDROCK_ANTHROPIC_VERSION",
        description="Protocol version tag sent in the Anthropic messages envelope.",
    )
    bedrock_max_tokens: int = Field(
        default=500,
        alias="BEDROCK_MAX_TOKENS",
        gt=0,
        description="Maximum number of output tokens per reply.",
    )
    bedrock_temperature: float = Field(
        default=0.7,
        alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
        description="Sampling temperature.",
    )
    bedrock_timeout_seconds: float = Field(
        default=25.0,
        alias="BEDROCK_TIMEOUT_SECONDS",
        gt=0,
        description="Upper bound on how long a chat request waits for Bedrock.",
    )
    bedrock_read_timeout_seconds: float = Field(
        default=30.0,
        alias="BEDROCK_READ_TIMEOUT_SECONDS",
        gt=0,
        description=(
            "Socket read timeout of the boto3 client. Bounds the worker thread of a "
            "call that already lost the race."
        ),
    )
    cors_production_origin: str = Field(
        default="https://ai-assistant-frontend-nu.vercel.app",
        alias="CORS_PRODUCTION_ORIGIN",
        description="Exact origin of the production frontend.",
    )
    cors_local_prefix: str = Field(
        default="http://localhost:",
        alias="CORS_LOCAL_PREFIX",
        description="Origin prefix accepted for local development.",
    )
    cors_trusted_suffix: str = Field(
        default=".vercel.app",
        alias="CORS_TRUSTED_SUFFIX",
        description="Origin suffix accepted for preview deployments.",
    )
    max_request_bytes: int = Field(
        default=1024 * 1024,
        alias="MAX_REQUEST_BYTES",
        gt=0,
        description="Largest accepted request body, in bytes.",
    )
    host: str = Field(default="0.0.0.0", alias="HOST", description="Listen address")
    port: int = Field(default=9090, alias="PORT", description="Listen port")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Root log level")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_env(cls) -> "Settings":
        return cls.model_validate(dict(os.environ))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance built from environment variables."""
    return Settings.from_env()
