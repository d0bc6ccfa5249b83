from .chat import ChatRequest, ChatResponse, ErrorResponse, ModelInvocation, render_message
from .health import HealthResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "ModelInvocation",
    "render_message",
    "HealthResponse",
]
