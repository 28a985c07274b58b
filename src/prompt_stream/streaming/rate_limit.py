"""streaming.rate_limit

Best-effort extraction of the rate-limit headers returned with every
chat-completions response.

Extraction is all-or-nothing: when any header is missing or a numeric header
does not parse, :meth:`RateLimitMetadata.from_headers` returns ``None``
instead of a partially populated record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping

# field name -> response header
_HEADER_FIELDS: dict[str, str] = {
    'retry_after': 'retry-after',
    'retry_after_ms': 'retry-after-ms',
    'limit_requests': 'x-ratelimit-limit-requests',
    'limit_tokens': 'x-ratelimit-limit-tokens',
    'remaining_requests': 'x-ratelimit-remaining-requests',
    'remaining_tokens': 'x-ratelimit-remaining-tokens',
    'reset_requests': 'x-ratelimit-reset-requests',
    'reset_tokens': 'x-ratelimit-reset-tokens',
}


class RateLimitMetadata(BaseModel):
    """Rate-limit state reported by the service."""

    retry_after: int = Field(..., ge=0, description='seconds')
    retry_after_ms: int = Field(..., ge=0)
    limit_requests: int = Field(..., ge=0)
    limit_tokens: int = Field(..., ge=0)
    remaining_requests: int = Field(..., ge=0)
    remaining_tokens: int = Field(..., ge=0)
    reset_requests: str = Field(..., description='e.g. "1s"')
    reset_tokens: str = Field(..., description='e.g. "6m0s"')

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitMetadata | None:
        """Build metadata from response *headers*, or ``None`` if incomplete.

        *headers* lookups are expected to be case-insensitive
        (``httpx.Headers`` is).
        """
        raw: dict[str, str] = {}
        for field, header in _HEADER_FIELDS.items():
            value = headers.get(header)
            if value is None:
                return None
            raw[field] = value.strip()

        values: dict[str, int | str] = {}
        for field, value in raw.items():
            if field in ('reset_requests', 'reset_tokens'):
                values[field] = value
            elif value.isdecimal():
                values[field] = int(value)
            else:
                return None

        return cls(**values)
