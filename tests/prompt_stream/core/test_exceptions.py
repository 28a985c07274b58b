from __future__ import annotations

import pytest

from prompt_stream.core.exceptions import (
    STATUS_ERROR_MAP,
    APIStatusError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    InvalidRoleError,
    NotFoundError,
    PermissionDeniedError,
    PromptNotFoundError,
    RateLimitError,
    UnprocessableEntityError,
    error_for_status,
)


@pytest.mark.parametrize(
    ('status', 'error_cls'),
    [
        (400, BadRequestError),
        (401, AuthenticationError),
        (403, PermissionDeniedError),
        (404, NotFoundError),
        (409, ConflictError),
        (422, UnprocessableEntityError),
        (429, RateLimitError),
    ],
)
def test_listed_status_codes(status: int, error_cls: type[APIStatusError]) -> None:
    assert error_for_status(status) is error_cls


@pytest.mark.parametrize('status', [300, 402, 418, 500, 502, 503, 599])
def test_unlisted_status_codes_are_unclassified(status: int) -> None:
    error_cls = error_for_status(status)
    assert error_cls is InternalServerError
    assert error_cls not in STATUS_ERROR_MAP.values()


def test_status_error_keeps_code_and_serialises() -> None:
    err = RateLimitError('429 Too Many Requests', status_code=429)

    assert err.status_code == 429  # noqa: PLR2004
    assert err.rate_limit_metadata is None
    assert err.to_json() == {
        'error': {'type': 'RateLimitError', 'message': '429 Too Many Requests', 'status_code': '429'},
    }


def test_prompt_not_found_is_a_key_error() -> None:
    with pytest.raises(KeyError) as info:
        raise PromptNotFoundError("No prompt named 'x'")
    assert str(info.value) == "No prompt named 'x'"


def test_invalid_role_carries_context() -> None:
    err = InvalidRoleError('robot', 'greet')
    assert isinstance(err, ValueError)
    assert err.role == 'robot'
    assert err.prompt_name == 'greet'
    assert 'robot' in str(err)
