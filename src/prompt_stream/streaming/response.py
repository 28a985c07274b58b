"""streaming.response

Final result of one chat-completions call: the decoded chunk list plus the
rate-limit metadata found in the response headers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from prompt_stream.core.types import CompletionChunk  # noqa: TC001 - pydantic field type
from prompt_stream.streaming.rate_limit import RateLimitMetadata  # noqa: TC001 - pydantic field type


class ChatCompletionsResponse(BaseModel):
    """Aggregates streamed chunks into per-choice text."""

    rate_limit_metadata: RateLimitMetadata | None = None
    output: list[CompletionChunk] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def content(self, index: int = 0) -> str:
        """Concatenated delta content of choice *index*, in arrival order.

        Returns an empty string when no chunk ever carried that index.
        """
        return ''.join(
            choice.delta.content
            for chunk in self.output
            for choice in chunk.choices
            if choice.index == index and choice.delta.content is not None
        )

    def finish_reason(self, index: int = 0) -> str | None:
        """Last finish reason reported for choice *index*, if any."""
        reason: str | None = None
        for chunk in self.output:
            for choice in chunk.choices:
                if choice.index == index and choice.finish_reason is not None:
                    reason = choice.finish_reason
        return reason

    def indices(self) -> list[int]:
        """Sorted choice indices seen anywhere in the stream."""
        return sorted({choice.index for chunk in self.output for choice in chunk.choices})
