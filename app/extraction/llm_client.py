# chat-completions call with a forced function call; returns the raw tool arguments

# app/extraction/llm_client.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import httpx
from dotenv import load_dotenv

from .tool_schema import SYLLABUS_TOOL, SYSTEM_PROMPT, TOOL_CHOICE, TOOL_NAME

load_dotenv()

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"

CredentialProvider = Callable[[], Optional[str]]


class StructuredOutputError(RuntimeError):
    kind = "backend_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RateLimitError(StructuredOutputError):
    kind = "rate_limit"


class PaymentRequiredError(StructuredOutputError):
    kind = "payment_required"


class BackendError(StructuredOutputError):
    kind = "backend_error"


class InvalidResponseError(StructuredOutputError):
    kind = "invalid_response"


class MissingCredentialError(StructuredOutputError):
    kind = "missing_credential"


@dataclass
class LLMConfig:
    api_url: str = field(default_factory=lambda: os.getenv("LLM_API_URL", DEFAULT_API_URL))
    model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL))
    timeout_secs: float = field(default_factory=lambda: float(os.getenv("LLM_TIMEOUT_SECS", "60")))
    max_document_chars: int = 50_000


def env_credentials(var: str = "LLM_API_KEY") -> CredentialProvider:
    def _provider() -> Optional[str]:
        return os.getenv(var) or None

    return _provider


def build_request_payload(document_text: str, cfg: LLMConfig) -> Dict[str, Any]:
    # documents longer than the cap are cut, not rejected
    text = document_text[: cfg.max_document_chars]
    return {
        "model": cfg.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Extract the course information from this syllabus:\n\n{text}",
            },
        ],
        "tools": [SYLLABUS_TOOL],
        "tool_choice": TOOL_CHOICE,
    }


def parse_tool_arguments(body: Any) -> Dict[str, Any]:
    """
    Pull the extract_syllabus_data arguments out of a chat-completions body.

    Anything other than a JSON object in function.arguments is an InvalidResponseError.
    """
    try:
        tool_calls = body["choices"][0]["message"]["tool_calls"]
        call = next(c for c in tool_calls if c["function"]["name"] == TOOL_NAME)
        raw = call["function"]["arguments"]
    except (KeyError, IndexError, TypeError, StopIteration) as e:
        raise InvalidResponseError("No structured data returned from AI") from e

    if isinstance(raw, dict):
        return raw

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InvalidResponseError("AI returned malformed structured data") from e

    if not isinstance(parsed, dict):
        raise InvalidResponseError("AI returned malformed structured data")
    return parsed


class StructuredOutputRequestor:
    """
    One request per call, no retries. The client is injectable so tests can
    hand in an httpx.AsyncClient backed by a MockTransport.
    """

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        config: Optional[LLMConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = credentials or env_credentials()
        self.config = config or LLMConfig()
        self._client = client

    async def request(self, document_text: str) -> Dict[str, Any]:
        api_key = self.credentials()
        if not api_key:
            raise MissingCredentialError("LLM API key is not configured")

        payload = build_request_payload(document_text, self.config)
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

        try:
            if self._client is not None:
                resp = await self._client.post(self.config.api_url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout_secs) as client:
                    resp = await client.post(self.config.api_url, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise BackendError(f"AI service unreachable: {e}") from e

        if resp.status_code == 429:
            raise RateLimitError("Rate limit exceeded. Please try again later.", status_code=429)
        if resp.status_code == 402:
            raise PaymentRequiredError("AI credits depleted. Please add credits to continue.", status_code=402)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise BackendError(f"AI service error: {resp.status_code}", status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise InvalidResponseError("AI service returned a non-JSON body") from e

        return parse_tool_arguments(body)
