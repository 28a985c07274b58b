from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
import structlog

from prompt_stream.logging import configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo the global structlog and root-logger changes after each test."""
    original_config = structlog.get_config()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.configure(**original_config)
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_format_renders_event(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(json_format=True)

    with structlog.contextvars.bound_contextvars(dispatch_id='abc123'):
        get_logger('prompt_stream.tests').info('chat_completions_done', chunks=3)

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record['event'] == 'chat_completions_done'
    assert record['chunks'] == 3  # noqa: PLR2004
    assert record['level'] == 'info'
    assert record['logger'] == 'prompt_stream.tests'
    assert record['dispatch_id'] == 'abc123'


def test_console_format_renders_event(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(logging.DEBUG, json_format=False)

    get_logger('prompt_stream.tests').debug('stream_line_skipped', line='data: [DONE]')

    assert 'stream_line_skipped' in capsys.readouterr().err
    assert logging.getLogger().level == logging.DEBUG
