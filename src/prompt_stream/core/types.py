"""core.types

Shared DTOs and enums used throughout *prompt_stream*.

These models live in the **core** layer so that the *streaming*, *client* and
*prompts* layers can depend on them without causing circular imports.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable

# ---------------------------------------------------------------------------
# Chat roles (OpenAI-style for broad compatibility)
# ---------------------------------------------------------------------------


class Role(StrEnum):
    system = 'system'
    user = 'user'
    assistant = 'assistant'

    @classmethod
    def parse(cls, raw: str) -> Role | None:
        """Case-insensitive lookup; ``None`` for anything outside the enum."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    # Immutable value-object
    model_config = ConfigDict(frozen=True)

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=Role.system, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=Role.user, content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role=Role.assistant, content=content)


# ---------------------------------------------------------------------------
# Response format
# ---------------------------------------------------------------------------


class ResponseType(StrEnum):
    text = 'text'
    json_object = 'json_object'


class ResponseFormat(BaseModel):
    """Output format the model must produce (``{"type": "json_object"}``)."""

    type: ResponseType

    model_config = ConfigDict(frozen=True)

    @classmethod
    def text(cls) -> ResponseFormat:
        return cls(type=ResponseType.text)

    @classmethod
    def json_object(cls) -> ResponseFormat:
        return cls(type=ResponseType.json_object)


# ---------------------------------------------------------------------------
# Request body
#   • Optional fields left as None are omitted from the wire payload
# ---------------------------------------------------------------------------


class RequestBody(BaseModel):
    """JSON body of one chat-completions call.

    Instances are normally produced by
    :meth:`prompt_stream.core.configuration.RequestConfiguration.build`.
    The ``with_*`` helpers return modified copies and never touch the receiver.
    """

    messages: list[Message]
    model: str = Field(..., min_length=1, description='ID of the model to use')
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

    @classmethod
    def new(cls, model: str, messages: Iterable[Message]) -> RequestBody:
        return cls(model=model, messages=list(messages))

    def to_payload(self) -> dict[str, Any]:
        """Wire representation with absent optional fields omitted."""
        return self.model_dump(mode='json', exclude_none=True)

    # --------------------------- Builders ----------------------------

    def with_model(self, model: str) -> RequestBody:
        return self.model_copy(update={'model': model})

    def with_stream(self, stream: bool) -> RequestBody:  # noqa: FBT001
        return self.model_copy(update={'stream': stream})

    def with_temperature(self, temperature: float) -> RequestBody:
        return self.model_copy(update={'temperature': temperature})

    def with_n(self, n: int) -> RequestBody:
        return self.model_copy(update={'n': n})

    def with_max_tokens(self, max_tokens: int) -> RequestBody:
        return self.model_copy(update={'max_tokens': max_tokens})

    def with_top_p(self, top_p: float) -> RequestBody:
        return self.model_copy(update={'top_p': top_p})

    def with_frequency_penalty(self, frequency_penalty: float) -> RequestBody:
        return self.model_copy(update={'frequency_penalty': frequency_penalty})

    def with_presence_penalty(self, presence_penalty: float) -> RequestBody:
        return self.model_copy(update={'presence_penalty': presence_penalty})

    def with_logprobs(self, logprobs: bool) -> RequestBody:  # noqa: FBT001
        return self.model_copy(update={'logprobs': logprobs})

    def with_top_logprobs(self, top_logprobs: int) -> RequestBody:
        return self.model_copy(update={'top_logprobs': top_logprobs})

    def with_response_format(self, response_format: ResponseFormat) -> RequestBody:
        return self.model_copy(update={'response_format': response_format})

    def with_stop(self, stop: Iterable[str]) -> RequestBody:
        return self.model_copy(update={'stop': list(stop)})

    def with_seed(self, seed: int) -> RequestBody:
        return self.model_copy(update={'seed': seed})


# ---------------------------------------------------------------------------
# Streamed response chunks
#   • Unknown vendor fields are ignored rather than rejected
# ---------------------------------------------------------------------------


class Delta(BaseModel):
    content: str | None = None


class Choice(BaseModel):
    """One of the ``n`` parallel generations inside a chunk."""

    index: int = Field(..., ge=0)
    delta: Delta
    finish_reason: str | None = None


class CompletionChunk(BaseModel):
    """Single ``data:`` event of a streamed chat completion."""

    id: str
    created: int
    model: str
    system_fingerprint: str | None = None
    object: str
    choices: list[Choice]

    def delta_text(self) -> str:
        """Concatenated delta content across *all* choices of this chunk."""
        return ''.join(choice.delta.content for choice in self.choices if choice.delta.content is not None)
