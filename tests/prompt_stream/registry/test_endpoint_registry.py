import pytest

from prompt_stream.core.exceptions import ProviderNotFoundError
from prompt_stream.registry.endpoint_registry import EndpointRegistry, endpoint_registry


def test_singleton_with_presets() -> None:
    assert EndpointRegistry() is endpoint_registry
    assert {'openai', 'octoai'} <= set(endpoint_registry.available_providers())


def test_register_and_fetch() -> None:
    reg = EndpointRegistry()
    reg.register('Local', 'http://localhost:8000/v1/chat/completions')
    assert 'local' in reg.available_providers()
    assert reg.get_url('LOCAL') == 'http://localhost:8000/v1/chat/completions'


def test_register_url_validation() -> None:
    reg = EndpointRegistry()
    with pytest.raises(ValueError):  # noqa: PT011
        reg.register('bad', 'ftp://example.com')


def test_unknown_provider() -> None:
    reg = EndpointRegistry()
    with pytest.raises(ProviderNotFoundError):
        reg.get_url('no-such')


def test_mapping_is_a_copy() -> None:
    snapshot = endpoint_registry.mapping()
    snapshot['tampered'] = 'https://example.com'  # type: ignore[index]
    assert 'tampered' not in endpoint_registry.available_providers()
