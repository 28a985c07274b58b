"""core.exceptions

Centralised exception hierarchy for *prompt_stream*.

Each error carries an `http_status` attribute so that upper layers (REST API
controllers, exception handlers, etc.) can translate exceptions to
appropriate HTTP responses *without* scattering status-code logic throughout
business code. Upstream status errors additionally keep the raw
`status_code` the service answered with.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping

    from prompt_stream.streaming.rate_limit import RateLimitMetadata


# ---------------------------------------------------------------------------
# Base class with HTTP status information
# ---------------------------------------------------------------------------


class PromptStreamError(Exception):
    """Base class for all *prompt_stream* domain errors."""

    #: Default HTTP status if not overridden by subclass.
    http_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)

    def to_json(self) -> dict[str, dict[str, str]]:
        """Unified error body."""
        return {'error': {'type': self.__class__.__name__, 'message': str(self)}}


# ---------------------------------------------------------------------------
# Transport / upstream errors
# ---------------------------------------------------------------------------


class APIError(PromptStreamError):
    """Any failure of a chat-completions call."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502


class APIConnectionError(APIError):
    """Connection refused, reset or otherwise lost before completion."""


class APITimeoutError(APIError):
    """The configured deadline elapsed before the stream completed."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.GATEWAY_TIMEOUT  # 504


class APIStatusError(APIError):
    """The service answered with a non-success status code."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int,
        rate_limit_metadata: RateLimitMetadata | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.rate_limit_metadata = rate_limit_metadata

    def to_json(self) -> dict[str, dict[str, str]]:
        body = super().to_json()
        body['error']['status_code'] = str(self.status_code)
        return body


class BadRequestError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST  # 400


class AuthenticationError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.UNAUTHORIZED  # 401


class PermissionDeniedError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.FORBIDDEN  # 403


class NotFoundError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.NOT_FOUND  # 404


class ConflictError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.CONFLICT  # 409


class UnprocessableEntityError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.UNPROCESSABLE_ENTITY  # 422


class RateLimitError(APIStatusError):
    http_status: ClassVar[HTTPStatus] = HTTPStatus.TOO_MANY_REQUESTS  # 429


class InternalServerError(APIStatusError):
    """Any non-success status without a more specific class."""


STATUS_ERROR_MAP: Mapping[int, type[APIStatusError]] = {
    HTTPStatus.BAD_REQUEST: BadRequestError,
    HTTPStatus.UNAUTHORIZED: AuthenticationError,
    HTTPStatus.FORBIDDEN: PermissionDeniedError,
    HTTPStatus.NOT_FOUND: NotFoundError,
    HTTPStatus.CONFLICT: ConflictError,
    HTTPStatus.UNPROCESSABLE_ENTITY: UnprocessableEntityError,
    HTTPStatus.TOO_MANY_REQUESTS: RateLimitError,
}


def error_for_status(status_code: int) -> type[APIStatusError]:
    """Return the error class for a non-success *status_code*.

    The mapping is total: unlisted codes fall back to `InternalServerError`.
    """
    return STATUS_ERROR_MAP.get(status_code, InternalServerError)


# ---------------------------------------------------------------------------
# Local (prompt / configuration) errors
# ---------------------------------------------------------------------------


class PromptNotFoundError(PromptStreamError, KeyError):
    """Raised when a prompt name is absent from a `PromptCollection`."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.NOT_FOUND  # 404

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class InvalidRoleError(PromptStreamError, ValueError):
    """Raised when a message element carries an unknown role."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.UNPROCESSABLE_ENTITY  # 422

    def __init__(self, role: str, prompt_name: str | None = None) -> None:
        super().__init__(f'Invalid message role {role!r} in prompt {prompt_name!r}')
        self.role = role
        self.prompt_name = prompt_name


class ProviderNotFoundError(PromptStreamError):
    """Raised when `EndpointRegistry` cannot find a requested provider key."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.NOT_IMPLEMENTED  # 501
