"""HTTP client for the Gemini ``generateContent`` REST API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from careermem.adapters.http_resilience import ResilientClient
from careermem.config import GeminiConfig
from careermem.config.gemini import KEY_VALIDATION_TIMEOUT_SECONDS
from careermem.domain.errors import OracleUnavailableError
from careermem.domain.oracle import OracleReply, TextOracle

from .schema import ErrorResponse, GenerateContentResponse
from .translator import parse_oracle_reply

if TYPE_CHECKING:
    from collections.abc import Callable

    from careermem.config import ResilienceConfig

log = getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class GeminiClient:
    """A :class:`TextOracle` backed by one Gemini API key.

    A fresh resilient HTTP client is opened per call, so one instance can be
    shared by coroutines running on different event loops.
    """

    config: GeminiConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def complete(
        self,
        prompt: str,
        *,
        expect_json: bool = False,
        grounded: bool = False,
    ) -> OracleReply:
        body = build_request_body(prompt, expect_json=expect_json, grounded=grounded)
        async with self.client_factory(self.config.resilience) as client:
            payload = await self._perform_request(client=client, body=body)
        reply = parse_oracle_reply(payload)
        log.debug(
            "Gemini returned %d chars and %d citations", len(reply.text), len(reply.citations)
        )
        return reply

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        body: dict[str, object],
    ) -> GenerateContentResponse:
        url = f"models/{self.config.model}:generateContent"
        try:
            response = await client.post(url, params={"key": self.config.api_key}, json=body)
        except httpx.HTTPError as exc:
            log.error("Gemini request failed: %s", type(exc).__name__)
            raise OracleUnavailableError(f"Could not reach the Gemini API: {exc}") from exc

        payload = _json_or_none(response)
        if response.is_error or (isinstance(payload, dict) and "error" in payload):
            raise _api_error(response, payload)

        try:
            parsed = GenerateContentResponse.model_validate(payload)
        except ValidationError as exc:
            raise OracleUnavailableError("Unexpected Gemini response payload") from exc

        if parsed.prompt_feedback and parsed.prompt_feedback.block_reason:
            raise OracleUnavailableError(
                f"Gemini blocked the prompt: {parsed.prompt_feedback.block_reason}"
            )
        return parsed


def build_request_body(
    prompt: str, *, expect_json: bool = False, grounded: bool = False
) -> dict[str, object]:
    body: dict[str, object] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    if expect_json:
        body["generationConfig"] = {"responseMimeType": JSON_MIME_TYPE}
    if grounded:
        body["tools"] = [{"googleSearch": {}}]
    return body


async def validate_api_key(
    api_key: str,
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
) -> bool:
    """Return whether ``api_key`` can complete a trivial prompt within ten seconds."""

    if not api_key.strip():
        return False
    base = GeminiConfig(api_key=api_key.strip())
    resilience = base.resilience.single_attempt(timeout_seconds=KEY_VALIDATION_TIMEOUT_SECONDS)
    client = GeminiClient(
        config=replace(base, resilience=resilience), client_factory=client_factory
    )
    try:
        await asyncio.wait_for(client.complete("hello"), KEY_VALIDATION_TIMEOUT_SECONDS)
    except (OracleUnavailableError, TimeoutError) as exc:
        log.error("API key validation failed: %s", exc)
        return False
    return True


def _json_or_none(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


def _api_error(response: httpx.Response, payload: object) -> OracleUnavailableError:
    message = f"Gemini API returned HTTP {response.status_code}"
    if isinstance(payload, dict) and "error" in payload:
        try:
            detail = ErrorResponse.model_validate(payload).error
        except ValidationError:
            detail = None
        if detail is not None:
            message = f"Gemini API error {detail.code or response.status_code}: {detail.message}"
    if response.status_code in {401, 403}:
        message = f"{message}. Check that GEMINI_API_KEY is valid."
    log.error(message)
    return OracleUnavailableError(message, status_code=response.status_code)


if TYPE_CHECKING:
    _oracle_check: TextOracle = GeminiClient(config=GeminiConfig(api_key=""))
