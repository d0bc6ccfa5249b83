from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from schemas import ChatRequest, ChatResponse, ErrorResponse
from services import BedrockChatService


logger = logging.getLogger("chat-relay.chat")


def _error(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def build_chat_router(chat_service: BedrockChatService) -> APIRouter:
    """Create the chat router wired to the provided chat service."""
    router = APIRouter(tags=["chat"])

    @router.post(
        "/chat",
        response_model=ChatResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def chat_endpoint(payload: Optional[ChatRequest] = None):
        message = payload.message if payload is not None else ""
        if not message:
            return _error(status.HTTP_400_BAD_REQUEST, "message required")

        try:
            reply = await chat_service.generate_reply(message)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Bedrock error: %s", exc)
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "server_error",
                str(exc) or exc.__class__.__name__,
            )

        return ChatResponse(reply=reply)

    return router
