"""client.request

Dispatch of one streaming chat-completions call.

Design goals
============
1. **One request, one decoder** - every call owns its `StreamDecoder` and
    chunk list; nothing mutable is shared between concurrent requests.
2. **Fail fast, never retry** - transport and status errors abort the call
    and propagate to the caller, who decides whether to issue it again.
3. **Deadline, not idle timeout** - ``timeout`` bounds the *whole* call:
    connecting, waiting for headers and draining the stream.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import uuid
from typing import TYPE_CHECKING

import httpx
import structlog

from prompt_stream.core.exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    error_for_status,
)
from prompt_stream.logging import get_logger
from prompt_stream.streaming.decoder import StreamDecoder
from prompt_stream.streaming.rate_limit import RateLimitMetadata
from prompt_stream.streaming.response import ChatCompletionsResponse

if TYPE_CHECKING:
    from typing import Any

    from prompt_stream.core.endpoint import ApiEndpoint
    from prompt_stream.core.types import RequestBody
    from prompt_stream.streaming.decoder import DeltaHandler

logger = get_logger(__name__)


class ChatCompletionsRequest:
    """One chat-completions call bound to an endpoint and a request body."""

    def __init__(
        self,
        endpoint: ApiEndpoint,
        body: RequestBody,
        *,
        timeout: float | None = None,
        on_delta: DeltaHandler | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Store the call parameters.

        Parameters
        ----------
        endpoint
            URL and API key of the service.
        body
            Request body. An unset ``stream`` flag is sent as ``true`` since
            only the streaming protocol is understood; an explicit ``false``
            is sent unchanged.
        timeout
            Overall deadline in seconds; ``None`` waits indefinitely.
        on_delta
            Receives the text of every decoded chunk, in arrival order.
        client
            Optional shared ``httpx.AsyncClient``. When omitted a client is
            created and closed for this call only.

        """
        self.endpoint = endpoint
        self.body = body
        self.timeout = timeout
        self.on_delta = on_delta
        self._client = client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(self) -> ChatCompletionsResponse:
        """Send the request and decode the streamed response.

        Raises
        ------
        APITimeoutError
            The deadline elapsed before the stream completed.
        APIConnectionError
            The connection could not be established or was lost.
        APIStatusError
            Non-success status; the concrete subclass follows the status code.

        """
        with structlog.contextvars.bound_contextvars(dispatch_id=uuid.uuid4().hex[:12]):
            try:
                async with asyncio.timeout(self.timeout):
                    return await self._dispatch()
            except (TimeoutError, httpx.TimeoutException) as exc:
                logger.warning('chat_completions_timeout', url=self.endpoint.api_url, timeout=self.timeout)
                raise APITimeoutError(f'No complete response within {self.timeout}s') from exc
            except httpx.TransportError as exc:
                logger.warning('chat_completions_connection_error', url=self.endpoint.api_url, error=str(exc))
                raise APIConnectionError(str(exc) or exc.__class__.__name__) from exc
            except httpx.HTTPError as exc:
                raise APIError(str(exc) or exc.__class__.__name__) from exc

    def execute_blocking(self, runner: asyncio.Runner | None = None) -> ChatCompletionsResponse:
        """Blocking variant of :meth:`execute`.

        Runs on the caller-owned *runner* when given, otherwise on a fresh
        event loop that lives for this call only. Must not be called from a
        thread that is already running an event loop.
        """
        if runner is not None:
            return runner.run(self.execute())
        return asyncio.run(self.execute())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _payload(self) -> dict[str, Any]:
        payload = self.body.to_payload()
        payload.setdefault('stream', True)
        return payload

    async def _dispatch(self) -> ChatCompletionsResponse:
        payload = self._payload()
        logger.debug('chat_completions_dispatch', url=self.endpoint.api_url, model=self.body.model)

        async with contextlib.AsyncExitStack() as stack:
            client = self._client
            if client is None:
                # the overall deadline is enforced by execute()
                client = await stack.enter_async_context(httpx.AsyncClient(timeout=None))

            response = await stack.enter_async_context(
                client.stream('POST', self.endpoint.api_url, headers=self.endpoint.headers, json=payload),
            )
            rate_limit_metadata = RateLimitMetadata.from_headers(response.headers)

            if not response.is_success:
                logger.debug('chat_completions_request_dump', body=json.dumps(payload, indent=2))
                logger.warning(
                    'chat_completions_failed',
                    url=self.endpoint.api_url,
                    status_code=response.status_code,
                )
                error_cls = error_for_status(response.status_code)
                raise error_cls(
                    f'{response.status_code} {response.reason_phrase}'.strip(),
                    status_code=response.status_code,
                    rate_limit_metadata=rate_limit_metadata,
                )

            decoder = StreamDecoder(self.on_delta)
            async for segment in response.aiter_bytes():
                decoder.feed(segment)
            decoder.close()

        logger.debug('chat_completions_done', chunks=len(decoder.chunks), skipped=decoder.skipped)
        return ChatCompletionsResponse(rate_limit_metadata=rate_limit_metadata, output=decoder.chunks)
