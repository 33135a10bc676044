"""
Worker Forwarding Module for the Worker Data Relay
Forwards a request to the existing data Worker and wraps its JSON reply
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

WORKER_BASE_URL = "https://rustwasm-fullstack-app.sumitomo0210.workers.dev/"

SOURCE_NAME = "existing-worker"
SUCCESS_MESSAGE = "データ取得成功"
UPSTREAM_ERROR_PREFIX = "既存Workerからのエラー"
UNKNOWN_ERROR_TEXT = "不明なエラー"
INTERNAL_ERROR_PREFIX = "Pages Function内部エラー"

# Characters encodeURIComponent leaves untouched besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"

_BODY_FRAMING_HEADERS = ("content-length", "transfer-encoding")

HeaderSource = Union[Mapping[str, str], Iterable[Tuple[bytes, bytes]]]


@dataclass(frozen=True)
class UpstreamReply:
    """The Worker answered and its body parsed as JSON (any status)."""

    status_code: int
    reason: str
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    def envelope(self) -> dict:
        if self.ok:
            message = SUCCESS_MESSAGE
        else:
            message = f"{UPSTREAM_ERROR_PREFIX}: {self.reason or UNKNOWN_ERROR_TEXT}"
        return {
            "status": "success" if self.ok else "error",
            "data": self.data,
            "source": SOURCE_NAME,
            "message": message,
        }


@dataclass(frozen=True)
class RelayFailure:
    """Anything that went wrong on our side: URL build, fetch or JSON parse."""

    error: BaseException
    status_code: int = 500

    def envelope(self) -> dict:
        detail = str(self.error) or type(self.error).__name__
        return {
            "status": "error",
            "message": f"{INTERNAL_ERROR_PREFIX}: {detail}",
        }


ForwardResult = Union[UpstreamReply, RelayFailure]


def build_upstream_url(codes: Optional[str], base_url: str = WORKER_BASE_URL) -> str:
    """Append ?codes=... to the Worker URL, encoded like encodeURIComponent."""
    if not codes:
        return base_url
    return f"{base_url}?codes={quote(codes, safe=_URI_COMPONENT_SAFE)}"


def should_forward_body(method: str, headers: Mapping[str, str]) -> bool:
    """GET never carries a body; other methods only when one was sent."""
    if method.upper() == "GET":
        return False
    if "transfer-encoding" in headers:
        return True
    try:
        return int(headers.get("content-length") or 0) > 0
    except ValueError:
        return False


def build_forward_headers(headers: HeaderSource, include_body: bool = True) -> httpx.Headers:
    """Copy the inbound headers for the Worker request, minus Host."""
    forwarded = httpx.Headers(headers)
    if "host" in forwarded:
        del forwarded["host"]
    if not include_body:
        # declared length would not match the empty outbound body
        for name in _BODY_FRAMING_HEADERS:
            if name in forwarded:
                del forwarded[name]
    return forwarded


async def forward_request(
    client: httpx.AsyncClient,
    method: str,
    headers: HeaderSource,
    *,
    codes: Optional[str] = None,
    body: Optional[AsyncIterator[bytes]] = None,
    base_url: str = WORKER_BASE_URL,
) -> ForwardResult:
    """
    Forward one request to the Worker and classify the outcome.

    Args:
        client: HTTP client used for the single outbound call
        method: Inbound method, forwarded verbatim
        headers: Inbound headers (mapping or raw ASGI header pairs)
        codes: Value of the inbound ``codes`` query parameter, if any
        body: Inbound body stream; streamed through for non-GET requests
        base_url: Worker URL the request is sent to

    Returns:
        UpstreamReply when the Worker answered with JSON, otherwise RelayFailure.
        Never raises for transport or parse errors.
    """
    try:
        url = build_upstream_url(codes, base_url)
        inbound = httpx.Headers(headers)
        include_body = body is not None and should_forward_body(method, inbound)
        outbound_headers = build_forward_headers(inbound.multi_items(), include_body)

        logger.debug("Forwarding %s request to %s", method, url)
        response = await client.request(
            method,
            url,
            headers=outbound_headers,
            content=body if include_body else None,
        )

        # The Worker is assumed to always answer with JSON; no content-type check.
        data = response.json()
    except Exception as e:
        logger.error(f"Worker relay failed: {str(e)}", exc_info=True)
        return RelayFailure(error=e)

    reply = UpstreamReply(
        status_code=response.status_code,
        reason=response.reason_phrase,
        data=data,
    )
    if not reply.ok:
        logger.warning(f"Worker responded with status {reply.status_code} {reply.reason}")
    return reply
