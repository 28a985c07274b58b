"""core.configuration

Provider-agnostic generation parameters.

A :class:`RequestConfiguration` is a fully optional bag of knobs that can be
shared across many prompts; :meth:`RequestConfiguration.build` merges it onto a
message list to produce the :class:`~prompt_stream.core.types.RequestBody`
actually sent over the wire.

Numeric ranges (``n >= 1``, ``top_logprobs`` in ``0..5``, at most four stop
sequences, ...) are the caller's responsibility and are *not* validated here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from prompt_stream.core.types import RequestBody, ResponseFormat  # noqa: TC001 - pydantic field type

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prompt_stream.core.types import Message


class RequestConfiguration(BaseModel):
    """Generation parameters; every field is optional."""

    model: str | None = None
    stream: bool | None = None
    temperature: float | None = None
    n: int | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    logprobs: bool | None = None
    top_logprobs: int | None = None
    response_format: ResponseFormat | None = None
    stop: list[str] | None = None
    seed: int | None = None

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Pure builders - each returns a new instance with one field set
    # ------------------------------------------------------------------

    def with_model(self, model: str) -> RequestConfiguration:
        return self.model_copy(update={'model': model})

    def with_stream(self, stream: bool) -> RequestConfiguration:  # noqa: FBT001
        return self.model_copy(update={'stream': stream})

    def with_temperature(self, temperature: float) -> RequestConfiguration:
        return self.model_copy(update={'temperature': temperature})

    def with_n(self, n: int) -> RequestConfiguration:
        return self.model_copy(update={'n': n})

    def with_max_tokens(self, max_tokens: int) -> RequestConfiguration:
        return self.model_copy(update={'max_tokens': max_tokens})

    def with_top_p(self, top_p: float) -> RequestConfiguration:
        return self.model_copy(update={'top_p': top_p})

    def with_frequency_penalty(self, frequency_penalty: float) -> RequestConfiguration:
        return self.model_copy(update={'frequency_penalty': frequency_penalty})

    def with_presence_penalty(self, presence_penalty: float) -> RequestConfiguration:
        return self.model_copy(update={'presence_penalty': presence_penalty})

    def with_logprobs(self, logprobs: bool) -> RequestConfiguration:  # noqa: FBT001
        return self.model_copy(update={'logprobs': logprobs})

    def with_top_logprobs(self, top_logprobs: int) -> RequestConfiguration:
        return self.model_copy(update={'top_logprobs': top_logprobs})

    def with_response_format(self, response_format: ResponseFormat) -> RequestConfiguration:
        return self.model_copy(update={'response_format': response_format})

    def with_stop(self, stop: Iterable[str]) -> RequestConfiguration:
        return self.model_copy(update={'stop': list(stop)})

    def with_seed(self, seed: int) -> RequestConfiguration:
        return self.model_copy(update={'seed': seed})

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build(self, messages: Iterable[Message]) -> RequestBody | None:
        """Merge this configuration onto *messages*.

        Returns ``None`` when no model is configured; every other field is
        copied through unchanged.
        """
        if not self.model:
            return None
        return RequestBody(messages=list(messages), **self.model_dump(exclude_none=True))
