from __future__ import annotations

import pytest

from prompt_stream.core.configuration import RequestConfiguration
from prompt_stream.core.types import Message, RequestBody, ResponseFormat


@pytest.mark.parametrize(
    'config',
    [
        RequestConfiguration(),
        RequestConfiguration(temperature=0.3, n=2, stop=['x']),
        RequestConfiguration(model=''),
    ],
)
def test_build_without_model_returns_none(config: RequestConfiguration) -> None:
    assert config.build([Message.user('hi')]) is None
    assert config.build([]) is None


def test_build_copies_every_field() -> None:
    config = (
        RequestConfiguration()
        .with_model('m')
        .with_stream(True)  # noqa: FBT003
        .with_temperature(0.5)
        .with_n(2)
        .with_max_tokens(64)
        .with_top_p(0.9)
        .with_frequency_penalty(0.1)
        .with_presence_penalty(-0.2)
        .with_logprobs(True)  # noqa: FBT003
        .with_top_logprobs(3)
        .with_response_format(ResponseFormat.json_object())
        .with_stop(['END'])
        .with_seed(7)
    )
    messages = [Message.system('be brief'), Message.user('hello')]

    body = config.build(messages)

    assert isinstance(body, RequestBody)
    assert body.model == 'm'
    assert body.stream is True
    assert body.temperature == 0.5  # noqa: PLR2004
    assert body.n == 2  # noqa: PLR2004
    assert body.max_tokens == 64  # noqa: PLR2004
    assert body.top_p == 0.9  # noqa: PLR2004
    assert body.frequency_penalty == 0.1  # noqa: PLR2004
    assert body.presence_penalty == -0.2  # noqa: PLR2004
    assert body.logprobs is True
    assert body.top_logprobs == 3  # noqa: PLR2004
    assert body.response_format == ResponseFormat.json_object()
    assert body.stop == ['END']
    assert body.seed == 7  # noqa: PLR2004
    assert body.messages == messages


def test_builders_do_not_mutate_base() -> None:
    base = RequestConfiguration().with_model('base')
    hot = base.with_temperature(1.5)
    cold = base.with_temperature(0.0)

    assert base.temperature is None
    assert hot.temperature == 1.5  # noqa: PLR2004
    assert cold.temperature == 0.0
    assert hot.model == cold.model == 'base'


def test_no_cross_field_validation() -> None:
    # top_logprobs without logprobs is passed through untouched
    body = RequestConfiguration(model='m', top_logprobs=5, n=0).build([])
    assert body is not None
    assert body.top_logprobs == 5  # noqa: PLR2004
    assert body.logprobs is None
    assert body.n == 0
