"""
Tests for the structured-output requestor.

Every backend is an httpx.MockTransport; nothing leaves the process.
"""

import json
import unittest

import httpx

from app.extraction.llm_client import (
    BackendError,
    InvalidResponseError,
    LLMConfig,
    MissingCredentialError,
    PaymentRequiredError,
    RateLimitError,
    StructuredOutputRequestor,
    build_request_payload,
    env_credentials,
    parse_tool_arguments,
)
from app.extraction.tool_schema import SYLLABUS_TOOL, TOOL_NAME

API_URL = "https://llm.test/v1/chat/completions"

CANDIDATE = {
    "course": {"title": "Linear Algebra", "code": "MATH 221", "semester": "Fall 2024"},
    "instructors": [{"name": "Dr. Ada Byron", "email": "ada@uni.edu", "role": "professor"}],
    "grading": [{"component": "Exams", "weight": 1.0}],
    "schedule": [],
    "policies": {},
}


def tool_call_body(arguments) -> dict:
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {"name": TOOL_NAME, "arguments": arguments},
                        }
                    ],
                }
            }
        ]
    }


class TestPayload(unittest.TestCase):
    def test_forced_tool_call(self) -> None:
        cfg = LLMConfig(api_url=API_URL, model="test-model")
        payload = build_request_payload("syllabus text", cfg)
        self.assertEqual(payload["model"], "test-model")
        self.assertEqual(payload["tools"], [SYLLABUS_TOOL])
        self.assertEqual(payload["tool_choice"], {"type": "function", "function": {"name": TOOL_NAME}})
        self.assertEqual(payload["messages"][0]["role"], "system")
        self.assertIn("syllabus text", payload["messages"][1]["content"])

    def test_document_truncated_to_limit(self) -> None:
        cfg = LLMConfig(api_url=API_URL, model="m", max_document_chars=10)
        payload = build_request_payload("0123456789ABCDEF", cfg)
        self.assertIn("0123456789", payload["messages"][1]["content"])
        self.assertNotIn("A", payload["messages"][1]["content"].split("\n\n", 1)[1])

    def test_schema_enums(self) -> None:
        props = SYLLABUS_TOOL["function"]["parameters"]["properties"]
        date_type = props["important_dates"]["items"]["properties"]["type"]
        self.assertEqual(date_type["enum"], ["exam", "deadline", "quiz", "project", "break", "other"])
        self.assertEqual(props["instructors"]["items"]["properties"]["role"]["enum"], ["professor", "ta"])


class TestParseToolArguments(unittest.TestCase):
    def test_json_string_arguments(self) -> None:
        self.assertEqual(parse_tool_arguments(tool_call_body(json.dumps(CANDIDATE))), CANDIDATE)

    def test_missing_tool_call(self) -> None:
        with self.assertRaises(InvalidResponseError):
            parse_tool_arguments({"choices": [{"message": {"content": "hello"}}]})

    def test_malformed_arguments(self) -> None:
        with self.assertRaises(InvalidResponseError):
            parse_tool_arguments(tool_call_body("{not json"))

    def test_non_object_arguments(self) -> None:
        with self.assertRaises(InvalidResponseError):
            parse_tool_arguments(tool_call_body("[1, 2]"))


class TestEnvCredentials(unittest.TestCase):
    def test_empty_value_is_no_credential(self) -> None:
        provider = env_credentials("SYLLABUS_TEST_UNSET_KEY")
        self.assertIsNone(provider())


class TestRequestor(unittest.IsolatedAsyncioTestCase):
    def make_requestor(self, handler, key="test-key", **cfg) -> StructuredOutputRequestor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        self.addAsyncCleanup(client.aclose)
        return StructuredOutputRequestor(
            credentials=lambda: key,
            config=LLMConfig(api_url=API_URL, model="test-model", **cfg),
            client=client,
        )

    async def test_success_returns_raw_arguments(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=tool_call_body(json.dumps(CANDIDATE)))

        result = await self.make_requestor(handler).request("Linear Algebra syllabus")
        self.assertEqual(result, CANDIDATE)

        self.assertEqual(len(seen), 1)
        self.assertEqual(str(seen[0].url), API_URL)
        self.assertEqual(seen[0].headers["authorization"], "Bearer test-key")
        sent = json.loads(seen[0].content)
        self.assertEqual(sent["tool_choice"]["function"]["name"], TOOL_NAME)

    async def test_status_codes_map_to_error_kinds(self) -> None:
        cases = [
            (429, RateLimitError, "rate_limit"),
            (402, PaymentRequiredError, "payment_required"),
            (500, BackendError, "backend_error"),
            (401, BackendError, "backend_error"),
        ]
        for status, exc_type, kind in cases:
            with self.subTest(status=status):
                requestor = self.make_requestor(lambda request, s=status: httpx.Response(s, text="nope"))
                with self.assertRaises(exc_type) as ctx:
                    await requestor.request("text")
                self.assertEqual(ctx.exception.kind, kind)
                self.assertEqual(ctx.exception.status_code, status)

    async def test_single_attempt_no_retry(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429)

        with self.assertRaises(RateLimitError):
            await self.make_requestor(handler).request("text")
        self.assertEqual(len(calls), 1)

    async def test_transport_failure_is_backend_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(BackendError):
            await self.make_requestor(handler).request("text")

    async def test_ok_without_tool_call_is_invalid_response(self) -> None:
        requestor = self.make_requestor(lambda request: httpx.Response(200, json={"choices": []}))
        with self.assertRaises(InvalidResponseError) as ctx:
            await requestor.request("text")
        self.assertEqual(ctx.exception.kind, "invalid_response")

    async def test_non_json_body_is_invalid_response(self) -> None:
        requestor = self.make_requestor(lambda request: httpx.Response(200, text="<html>"))
        with self.assertRaises(InvalidResponseError):
            await requestor.request("text")

    async def test_missing_credential_fails_before_any_request(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=tool_call_body("{}"))

        with self.assertRaises(MissingCredentialError) as ctx:
            await self.make_requestor(handler, key=None).request("text")
        self.assertEqual(ctx.exception.kind, "missing_credential")
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
