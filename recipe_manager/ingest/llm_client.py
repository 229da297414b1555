"""
Claude Messages API client: one user message in, first text block out.
"""

from __future__ import annotations

import base64
import logging
from typing import Annotated, List, Literal, Optional, Sequence, Union
from urllib.parse import urljoin

import httpx
import requests
from pydantic import BaseModel, Field, ValidationError

from recipe_manager.errors import (
    HttpError,
    NetworkError,
    NoTextInResponse,
    RecipeError,
    RequestTimeout,
)
from recipe_manager.result import Failure, Result, Success
from recipe_manager.settings import settings

logger = logging.getLogger(__name__)

MODEL = "claude-sonnet-4-5-20250929"
MAX_TOKENS = 4096
ANTHROPIC_VERSION = "2023-06-01"


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageSource(BaseModel):
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class ImagePart(BaseModel):
    type: Literal["image"] = "image"
    source: ImageSource

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImagePart":
        encoded = base64.b64encode(data).decode("ascii")
        return cls(source=ImageSource(media_type=mime_type, data=encoded))


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


class Message(BaseModel):
    role: str = "user"
    content: List[ContentPart]


class MessagesRequest(BaseModel):
    model: str = MODEL
    max_tokens: int = MAX_TOKENS
    messages: List[Message]


class ResponseContent(BaseModel):
    type: str
    text: Optional[str] = None


class MessagesResponse(BaseModel):
    id: str = ""
    type: str = ""
    role: str = ""
    content: List[ResponseContent] = Field(default_factory=list)
    model: str = ""
    stop_reason: Optional[str] = None

    def first_text(self) -> Optional[str]:
        for block in self.content:
            if block.type == "text" and block.text is not None:
                return block.text
        return None


Parts = Sequence[Union[TextPart, ImagePart]]


class _BaseClaudeClient:
    def __init__(self, api_key: str, base_url: str | None = None, timeout: float | None = None):
        self.api_key = api_key
        self.base_url = base_url or settings.ANTHROPIC_BASE_URL
        self.timeout = settings.LLM_TIMEOUT if timeout is None else timeout

    @property
    def endpoint(self) -> str:
        base = self.base_url if self.base_url.endswith("/") else self.base_url + "/"
        return urljoin(base, "messages")

    def _headers(self) -> dict:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def build_request(self, parts: Parts) -> MessagesRequest:
        request = MessagesRequest(messages=[Message(role="user", content=list(parts))])
        logger.debug(
            "Sending Claude request | model=%s parts=%s",
            request.model,
            [p.type for p in request.messages[0].content],
        )
        return request

    def _read_answer(self, resp: Union[requests.Response, httpx.Response]) -> str:
        """First text block of a Messages response; raises on HTTP or shape errors."""
        if not 200 <= resp.status_code < 300:
            body = resp.text or ""
            logger.error("Claude API HTTP %s: %s", resp.status_code, body[:500])
            raise HttpError(resp.status_code, body)

        try:
            parsed = MessagesResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.error("Claude API returned an unreadable body: %s", (resp.text or "")[:200])
            raise NoTextInResponse(f"Unreadable response body: {e}") from e

        text = parsed.first_text()
        if text is None:
            logger.error("No text block in Claude response | stop_reason=%s", parsed.stop_reason)
            raise NoTextInResponse()
        logger.info(
            "Claude response received | model=%s stop_reason=%s chars=%d",
            parsed.model,
            parsed.stop_reason,
            len(text),
        )
        logger.debug("Claude response preview: %s", text[:500])
        return text


class ClaudeClient(_BaseClaudeClient):
    """Sends a single-message request to the Messages endpoint.

    The session is injectable so tests can script responses without a network.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        super().__init__(api_key, base_url=base_url, timeout=timeout)
        self.session = session

    def _post(self, payload: dict) -> requests.Response:
        session = self.session or requests
        try:
            return session.post(
                self.endpoint,
                headers=self._headers(),
                json=payload,
                timeout=(self.timeout, self.timeout),
            )
        except requests.Timeout as e:
            raise RequestTimeout(f"Claude API request timed out: {e}") from e
        except requests.RequestException as e:
            raise NetworkError(f"Claude API request failed: {e}") from e

    def complete_text(self, parts: Parts) -> str:
        """Send the parts as one user message and return the first text block.

        Raises a RecipeError subclass on failure.
        """
        request = self.build_request(parts)
        return self._read_answer(self._post(request.model_dump()))

    def complete(self, parts: Parts) -> Result[str]:
        try:
            return Success(self.complete_text(parts))
        except RecipeError as e:
            return Failure(e)


class AsyncClaudeClient(_BaseClaudeClient):
    """httpx-backed twin of ClaudeClient for callers on an event loop.

    Cancelling the awaiting task aborts the HTTP request in flight.
    """

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        super().__init__(api_key, base_url=base_url, timeout=timeout)
        self.client = client

    async def _post(self, payload: dict) -> httpx.Response:
        try:
            return await self.client.post(
                self.endpoint,
                headers=self._headers(),
                json=payload,
                timeout=httpx.Timeout(self.timeout),
            )
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"Claude API request timed out: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Claude API request failed: {e}") from e

    async def complete_text(self, parts: Parts) -> str:
        request = self.build_request(parts)
        return self._read_answer(await self._post(request.model_dump()))

    async def complete(self, parts: Parts) -> Result[str]:
        try:
            return Success(await self.complete_text(parts))
        except RecipeError as e:
            return Failure(e)
