"""prompts.prompt

A compiled prompt: optional name, generation configuration and a fixed,
ordered message list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from prompt_stream.client.request import ChatCompletionsRequest
from prompt_stream.core.configuration import RequestConfiguration
from prompt_stream.core.types import Message  # noqa: TC001 - pydantic field type

if TYPE_CHECKING:
    import asyncio

    import httpx

    from prompt_stream.core.endpoint import ApiEndpoint
    from prompt_stream.core.types import RequestBody
    from prompt_stream.streaming.decoder import DeltaHandler


class Prompt(BaseModel):
    """Reusable request template."""

    name: str | None = None
    configuration: RequestConfiguration = Field(default_factory=RequestConfiguration)
    messages: list[Message] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def build(self) -> RequestBody | None:
        """Request body for this prompt, or ``None`` when no model is set."""
        return self.configuration.build(self.messages)

    def request(
        self,
        endpoint: ApiEndpoint,
        *,
        on_delta: DeltaHandler | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> ChatCompletionsRequest:
        """Bind this prompt to *endpoint*.

        Raises
        ------
        ValueError
            If the prompt has no model configured.

        """
        if (body := self.build()) is None:
            raise ValueError(f'Prompt {self.name!r} has no model configured')
        return ChatCompletionsRequest(endpoint, body, timeout=timeout, on_delta=on_delta, client=client)

    async def execute(
        self,
        endpoint: ApiEndpoint,
        *,
        on_delta: DeltaHandler | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> str:
        """Run the prompt and return the text of the first choice."""
        request = self.request(endpoint, on_delta=on_delta, timeout=timeout, client=client)
        response = await request.execute()
        return response.content(0)

    def execute_blocking(
        self,
        endpoint: ApiEndpoint,
        *,
        on_delta: DeltaHandler | None = None,
        timeout: float | None = None,
        runner: asyncio.Runner | None = None,
    ) -> str:
        request = self.request(endpoint, on_delta=on_delta, timeout=timeout)
        return request.execute_blocking(runner).content(0)
