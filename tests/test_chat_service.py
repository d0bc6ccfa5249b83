from __future__ import annotations

import io
import json
import sys
import threading
import time
import unittest
from pathlib import Path

from botocore.exceptions import ClientError

PROJECT_ROOT = Path(__file__).resolve().parent.parent
API_CODE_PATH = PROJECT_ROOT / "api-code"
if str(API_CODE_PATH) not in sys.path:
    sys.path.insert(0, str(API_CODE_PATH))

from services import (  # noqa: E402
    NO_REPLY_PLACEHOLDER,
    BedrockChatService,
    ChatTimeoutError,
    extract_reply,
)
from settings import Settings  # noqa: E402


def anthropic_payload(text: str) -> dict:
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
    }


class FakeBedrockClient:
    """Stands in for boto3's bedrock-runtime client."""

    def __init__(self, payload=None, *, raw: bytes | None = None, error: Exception | None = None,
                 release: threading.Event | None = None) -> None:
        self.payload = payload
        self.raw = raw
        self.error = error
        self.release = release
        self.calls: list[dict] = []

    def invoke_model(self, **kwargs):
        self.calls.append(kwargs)
        if self.release is not None:
            self.release.wait(timeout=2)
        if self.error is not None:
            raise self.error
        body = self.raw if self.raw is not None else json.dumps(self.payload).encode("utf-8")
        return {"body": io.BytesIO(body), "contentType": "application/json"}


class BedrockChatServiceTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.settings = Settings.model_validate(
            {
                "AWS_REGION": "eu-central-1",
                "BEDROCK_MODEL_ID": "anthropic.test-model",
                "BEDROCK_TIMEOUT_SECONDS": 0.1,
            }
        )

    async def test_generate_reply_returns_first_text_block(self) -> None:
        client = FakeBedrockClient(anthropic_payload("Hello from Claude"))
        service = BedrockChatService(self.settings, client=client)

        reply = await service.generate_reply("Hi there")

        self.assertEqual(reply, "Hello from Claude")

    async def test_request_envelope_matches_messages_format(self) -> None:
        client = FakeBedrockClient(anthropic_payload("ok"))
        service = BedrockChatService(self.settings, client=client)

        await service.generate_reply("  What is Bedrock?  ")

        self.assertEqual(len(client.calls), 1)
        call = client.calls[0]
        self.assertEqual(call["modelId"], "anthropic.test-model")
        self.assertEqual(call["contentType"], "application/json")
        self.assertEqual(call["accept"], "application/json")
        body = json.loads(call["body"])
        self.assertEqual(
            body,
            {
                "anthropic_version": "bedrock-2023-05-31",
                "max_tokens": 500,
                "temperature": 0.7,
                "messages": [
                    {
                        "role": "user",
                        "content": [{"type": "text", "text": "What is Bedrock?"}],
                    }
                ],
            },
        )

    async def test_empty_prompt_is_rejected_without_remote_call(self) -> None:
        client = FakeBedrockClient(anthropic_payload("unused"))
        service = BedrockChatService(self.settings, client=client)

        with self.assertRaises(ValueError):
            await service.generate_reply("   ")
        self.assertEqual(client.calls, [])

    async def test_missing_content_yields_placeholder(self) -> None:
        for payload in ({}, {"content": []}, {"content": None}, {"content": [{"type": "tool_use"}]}, []):
            with self.subTest(payload=payload):
                service = BedrockChatService(self.settings, client=FakeBedrockClient(payload))
                reply = await service.generate_reply("hello")
                self.assertEqual(reply, NO_REPLY_PLACEHOLDER)

    async def test_timeout_wins_the_race(self) -> None:
        release = threading.Event()
        self.addCleanup(release.set)
        client = FakeBedrockClient(anthropic_payload("too late"), release=release)
        service = BedrockChatService(self.settings, client=client)

        started = time.monotonic()
        with self.assertRaises(ChatTimeoutError) as ctx:
            await service.generate_reply("slow please")
        elapsed = time.monotonic() - started

        self.assertIn("timed out", str(ctx.exception))
        self.assertLess(elapsed, 1.5)

    async def test_provider_error_propagates(self) -> None:
        error = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "model access denied"}},
            "InvokeModel",
        )
        service = BedrockChatService(self.settings, client=FakeBedrockClient(error=error))

        with self.assertRaises(ClientError) as ctx:
            await service.generate_reply("hello")
        self.assertIn("model access denied", str(ctx.exception))

    async def test_malformed_json_raises(self) -> None:
        service = BedrockChatService(self.settings, client=FakeBedrockClient(raw=b"not-json"))

        with self.assertRaises(json.JSONDecodeError):
            await service.generate_reply("hello")

    async def test_non_utf8_body_raises(self) -> None:
        service = BedrockChatService(self.settings, client=FakeBedrockClient(raw=b"\xff\xfe"))

        with self.assertRaises(UnicodeDecodeError):
            await service.generate_reply("hello")


class ExtractReplyTest(unittest.TestCase):
    def test_text_is_returned_verbatim(self) -> None:
        self.assertEqual(extract_reply(anthropic_payload("  spaced  ")), "  spaced  ")

    def test_empty_text_is_kept(self) -> None:
        self.assertEqual(extract_reply({"content": [{"type": "text", "text": ""}]}), "")

    def test_null_text_uses_placeholder(self) -> None:
        self.assertEqual(extract_reply({"content": [{"type": "text", "text": None}]}), NO_REPLY_PLACEHOLDER)

    def test_non_object_document_uses_placeholder(self) -> None:
        self.assertEqual(extract_reply("plain string"), NO_REPLY_PLACEHOLDER)


if __name__ == "__main__":
    unittest.main()
