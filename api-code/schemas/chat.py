from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


def _is_blank(value: Any) -> bool:
    # null, false, 0, NaN and "" count as a missing message; {} and [] do not
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


def render_message(value: Any) -> str:
    """Render a decoded JSON value the way a browser client would stringify it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return ",".join(render_message(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


class ChatRequest(BaseModel):
    message: str = Field(default="", description="User message for the assistant.")

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_message(cls, value: Any) -> str:
        if _is_blank(value):
            return ""
        return render_message(value).strip()


class ChatResponse(BaseModel):
    reply: str = Field(..., description="Model-generated response.")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Short machine-readable error label.")
    detail: Optional[str] = Field(default=None, description="Underlying error message.")


class ModelInvocation(BaseModel):
    """One outbound Bedrock call for a single user message."""

    model_id: str
    anthropic_version: str
    max_tokens: int
    temperature: float
    prompt_text: str

    def to_body(self) -> Dict[str, Any]:
        return {
            "anthropic_version": self.anthropic_version,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": self.prompt_text}],
                }
            ],
        }
