from __future__ import annotations

import json
import math
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from slack_history_archive.errors import ApiError, RateLimitedError, TransportError
from slack_history_archive.page import Page

CONVERSATION_HISTORY_ENDPOINT = "https://slack.com/api/conversations.history"
DEFAULT_PAGE_LIMIT = 1000
_TIMEOUT_SECONDS = 30.0


@runtime_checkable
class PageFetcher(Protocol):
    async def fetch(self, cursor: str | None = None) -> Page: ...


def parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def _reject_constant(token: str) -> float:
    raise ValueError(f"non-standard JSON constant {token}")


def parse_body(content: bytes) -> Any:
    """Strict JSON decode; NaN and Infinity are not JSON and cannot be archived."""
    return json.loads(content, parse_constant=_reject_constant)


def decode_page(payload: Any) -> Page:
    """Turn a decoded conversations.history body into a Page.

    Raises ApiError when the API reports failure or the body is unusable.
    """
    if not isinstance(payload, dict):
        raise ApiError(f"malformed response body of type {type(payload).__name__}")

    if not payload.get("ok", False):
        raise ApiError(payload.get("error") or "Unknown")

    messages = payload.get("messages") or []
    if not isinstance(messages, list):
        raise ApiError("malformed response: 'messages' is not a list")

    has_more = bool(payload.get("has_more", False))
    metadata = payload.get("response_metadata") or {}
    next_cursor = metadata.get("next_cursor") if isinstance(metadata, dict) else None

    # guard against a continuation without a usable cursor
    if has_more and not next_cursor:
        raise ApiError("response missing cursor")

    return Page(
        messages=tuple(messages),
        next_cursor=next_cursor or None,
        has_more=has_more,
    )


class SlackPageFetcher:
    def __init__(
        self,
        token: str,
        channel: str,
        *,
        endpoint: str = CONVERSATION_HISTORY_ENDPOINT,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        timeout: float = _TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        self._token = token
        self._channel = channel
        self._endpoint = endpoint
        self._page_limit = page_limit
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> SlackPageFetcher:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _params(self, cursor: str | None) -> dict[str, str]:
        params = {
            "channel": self._channel,
            "limit": str(self._page_limit),
        }
        if cursor:
            params["cursor"] = cursor
        return params

    async def fetch(self, cursor: str | None = None) -> Page:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }
        logger.debug(f"API request: channel={self._channel}, cursor={cursor or '<first>'}")
        try:
            response = await self._client.get(
                self._endpoint, headers=headers, params=self._params(cursor)
            )
        except httpx.DecodingError as ex:
            raise ApiError(f"malformed response body: {ex}") from ex
        except httpx.InvalidURL as ex:
            raise ApiError(f"invalid endpoint {self._endpoint!r}: {ex}") from ex
        except httpx.RequestError as ex:
            raise TransportError(ex) from ex

        if response.status_code == 429:
            raise RateLimitedError(parse_retry_after(response.headers.get("Retry-After")))
        if response.status_code >= 500:
            raise TransportError(f"HTTP {response.status_code} from {self._endpoint}")

        try:
            payload = parse_body(response.content)
        except ValueError as ex:
            raise ApiError(f"malformed response body (HTTP {response.status_code})") from ex

        page = decode_page(payload)
        logger.debug(
            f"API response: messages={len(page.messages)}, has_more={page.has_more}"
        )
        return page
