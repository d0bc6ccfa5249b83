from __future__ import annotations

import logging
from typing import Optional, Sequence

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from settings import Settings


logger = logging.getLogger("chat-relay.cors")

ALLOWED_METHODS: Sequence[str] = ("GET", "POST", "OPTIONS")
ALLOWED_HEADERS: Sequence[str] = ("Content-Type", "Authorization")


class OriginGate:
    """Decides which browser origins may talk to the relay."""

    def __init__(self, production_origin: str, local_prefix: str, trusted_suffix: str):
        self.production_origin = production_origin
        self.local_prefix = local_prefix
        self.trusted_suffix = trusted_suffix

    @classmethod
    def from_settings(cls, settings: Settings) -> "OriginGate":
        return cls(
            production_origin=settings.cors_production_origin,
            local_prefix=settings.cors_local_prefix,
            trusted_suffix=settings.cors_trusted_suffix,
        )

    def is_allowed(self, origin: Optional[str]) -> bool:
        # no Origin header: curl, health probes, server-to-server calls
        if not origin:
            return True
        if self.local_prefix and origin.startswith(self.local_prefix):
            return True
        if origin == self.production_origin:
            return True
        if self.trusted_suffix and origin.endswith(self.trusted_suffix):
            return True
        return False


class OriginGateMiddleware(CORSMiddleware):
    """CORS middleware that refuses requests from origins the gate denies.

    Starlette's stock middleware lets simple requests from unknown origins
    through and only withholds the CORS headers. Here they are answered with
    403 before routing, so the chat handler never runs for them.
    """

    def __init__(self, app: ASGIApp, gate: OriginGate) -> None:
        super().__init__(
            app,
            allow_methods=ALLOWED_METHODS,
            allow_headers=ALLOWED_HEADERS,
            allow_credentials=False,
        )
        self.gate = gate

    def is_allowed_origin(self, origin: str) -> bool:
        return self.gate.is_allowed(origin)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if origin is not None and not self.gate.is_allowed(origin):
                logger.warning(
                    "CORS blocked for origin %s (%s %s)",
                    origin,
                    scope.get("method"),
                    scope.get("path"),
                )
                response = JSONResponse(
                    status_code=403,
                    content={
                        "error": "cors_blocked",
                        "detail": f"CORS blocked for origin: {origin}",
                    },
                )
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
