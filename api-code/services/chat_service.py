from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.config import Config

from schemas import ModelInvocation
from settings import Settings


logger = logging.getLogger("chat-relay.chat")

NO_REPLY_PLACEHOLDER = "(no reply)"


class ChatTimeoutError(RuntimeError):
    """Raised when Bedrock does not answer within the configured window."""


def build_bedrock_client(settings: Settings) -> Any:
    """Create the long-lived ``bedrock-runtime`` client shared by all requests."""
    config = Config(
        region_name=settings.aws_region,
        read_timeout=settings.bedrock_read_timeout_seconds,
        connect_timeout=10,
        retries={"max_attempts": 1, "mode": "standard"},
    )
    return boto3.client("bedrock-runtime", config=config)


def extract_reply(document: Any) -> str:
    """Return ``content[0].text`` of an Anthropic messages response."""
    if not isinstance(document, dict):
        return NO_REPLY_PLACEHOLDER
    content = document.get("content")
    if not isinstance(content, list) or not content:
        return NO_REPLY_PLACEHOLDER
    first = content[0]
    if not isinstance(first, dict):
        return NO_REPLY_PLACEHOLDER
    text = first.get("text")
    if text is None:
        return NO_REPLY_PLACEHOLDER
    return str(text)


class BedrockChatService:
    """Relays single chat messages to a Claude model hosted on Bedrock."""

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.model_id = settings.bedrock_model_id
        self.anthropic_version = settings.bedrock_anthropic_version
        self.max_tokens = settings.bedrock_max_tokens
        self.temperature = settings.bedrock_temperature
        self.timeout_seconds = settings.bedrock_timeout_seconds
        self.client = client if client is not None else build_bedrock_client(settings)

    def build_invocation(self, prompt: str) -> ModelInvocation:
        return ModelInvocation(
            model_id=self.model_id,
            anthropic_version=self.anthropic_version,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            prompt_text=prompt,
        )

    async def generate_reply(self, prompt: str) -> str:
        prompt = (prompt or "").strip()
        if not prompt:
            raise ValueError("Prompt must be a non-empty string.")

        invocation = self.build_invocation(prompt)
        # wait_for cancels only the awaiting side; the worker thread runs until
        # botocore's read timeout and its result is dropped.
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self._invoke_model, invocation),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Bedrock call to %s exceeded %.1fs; abandoning it.",
                self.model_id,
                self.timeout_seconds,
            )
            raise ChatTimeoutError("Bedrock request timed out") from exc

        document = json.loads(raw.decode("utf-8"))
        return extract_reply(document)

    def _invoke_model(self, invocation: ModelInvocation) -> bytes:
        response = self.client.invoke_model(
            modelId=invocation.model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(invocation.to_body()),
        )
        body = response["body"]
        # boto3 hands back a StreamingBody; fakes may hand back plain bytes
        if hasattr(body, "read"):
            return body.read()
        return bytes(body)
