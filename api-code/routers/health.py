from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from schemas import HealthResponse
from settings import Settings


def build_health_router(settings: Settings) -> APIRouter:
    router = APIRouter(tags=["health"])
    region = settings.aws_region
    model = settings.bedrock_model_id

    @router.get("/", response_class=PlainTextResponse)
    async def banner() -> str:
        return f"AI Chat Assistant API ✅ region={region} model={model}"

    @router.get("/health", response_model=HealthResponse)
    async def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", region=region, model=model)

    return router
