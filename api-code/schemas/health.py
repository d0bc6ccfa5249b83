from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(default="ok", description="Liveness flag.")
    region: str = Field(..., description="AWS region the relay talks to.")
    model: str = Field(..., description="Bedrock model identifier.")
