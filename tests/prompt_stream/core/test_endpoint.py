from __future__ import annotations

import pytest

from prompt_stream.core.endpoint import ApiEndpoint
from prompt_stream.core.exceptions import ProviderNotFoundError


def test_openai_preset_with_explicit_key() -> None:
    endpoint = ApiEndpoint.openai_chat_completions('sk-test')

    assert endpoint.api_url == 'https://api.openai.com/v1/chat/completions'
    assert endpoint.headers['Authorization'] == 'Bearer sk-test'
    assert 'sk-test' not in repr(endpoint)


def test_key_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('OCTOAI_API_KEY', 'octo-key')

    endpoint = ApiEndpoint.octoai_chat_completions()

    assert endpoint.api_url == 'https://text.octoai.run/v1/chat/completions'
    assert endpoint.api_key == 'octo-key'


def test_missing_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('OPENAI_API_KEY', raising=False)
    with pytest.raises(ValueError, match='OPENAI_API_KEY'):
        ApiEndpoint.for_provider('openai')


def test_unknown_provider() -> None:
    with pytest.raises(ProviderNotFoundError):
        ApiEndpoint.for_provider('no-such', 'key')
