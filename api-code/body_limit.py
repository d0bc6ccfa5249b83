from __future__ import annotations

import logging
from typing import List

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = logging.getLogger("chat-relay")


class BodyLimitMiddleware:
    """Rejects request bodies larger than ``max_bytes`` with 413 before routing.

    The body is buffered and counted chunk by chunk, so chunked uploads without
    a ``Content-Length`` are held to the same limit. The buffered body is then
    replayed to the app in a single message.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            await self._reject(scope, receive, send, int(content_length))
            return

        chunks: List[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away; let the app observe the disconnect
                await self.app(scope, _replay(message, receive), send)
                return
            chunk = message.get("body", b"")
            received += len(chunk)
            if received > self.max_bytes:
                await self._reject(scope, receive, send, received)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body_message: Message = {"type": "http.request", "body": b"".join(chunks), "more_body": False}
        await self.app(scope, _replay(body_message, receive), send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(
            "Rejected %s %s: body of at least %d bytes exceeds %d",
            scope.get("method"),
            scope.get("path"),
            size,
            self.max_bytes,
        )
        response = JSONResponse(status_code=413, content={"error": "payload too large"})
        await response(scope, receive, send)


def _replay(first: Message, receive: Receive) -> Receive:
    sent = False

    async def replay_receive() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return first
        return await receive()

    return replay_receive
