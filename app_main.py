from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parent
API_CODE_PATH = PROJECT_ROOT / "api-code"
if str(API_CODE_PATH) not in sys.path:
    sys.path.insert(0, str(API_CODE_PATH))

from fastapi import FastAPI  # noqa: E402

from body_limit import BodyLimitMiddleware  # noqa: E402
from env_loader import load_local_env  # noqa: E402
from exceptions import register_exception_handlers  # noqa: E402
from origin_gate import OriginGate, OriginGateMiddleware  # noqa: E402
from routers import build_chat_router, build_health_router  # noqa: E402
from services import BedrockChatService  # noqa: E402
from settings import Settings, get_settings  # noqa: E402


logger = logging.getLogger("chat-relay")


def create_app(
    settings: Optional[Settings] = None,
    chat_service: Optional[BedrockChatService] = None,
) -> FastAPI:
    """Wire settings, the Bedrock service and routers into a FastAPI app."""
    settings = settings or get_settings()
    chat_service = chat_service or BedrockChatService(settings)

    app = FastAPI(
        title="AI Chat Assistant API",
        version="0.1.0",
        description="Relays browser chat messages to a Claude model on AWS Bedrock.",
    )

    app.add_middleware(BodyLimitMiddleware, max_bytes=settings.max_request_bytes)
    # added last so it runs first: denied origins never reach the body limit or routing
    app.add_middleware(OriginGateMiddleware, gate=OriginGate.from_settings(settings))
    register_exception_handlers(app)

    app.include_router(build_health_router(settings))
    app.include_router(build_chat_router(chat_service))

    logger.info(
        "Chat relay configured: region=%s model=%s timeout=%.0fs",
        settings.aws_region,
        settings.bedrock_model_id,
        settings.bedrock_timeout_seconds,
    )
    return app


load_local_env(PROJECT_ROOT / ".env")
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logger.info("API running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
