from .chat_service import (
    NO_REPLY_PLACEHOLDER,
    BedrockChatService,
    ChatTimeoutError,
    build_bedrock_client,
    extract_reply,
)

__all__ = [
    "NO_REPLY_PLACEHOLDER",
    "BedrockChatService",
    "ChatTimeoutError",
    "build_bedrock_client",
    "extract_reply",
]
