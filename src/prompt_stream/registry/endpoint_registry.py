"""registry.endpoint_registry

Global registry that maps provider slugs (e.g. "openai") to the URL of their
chat-completions endpoint.

The registry is intentionally implemented as a pure domain helper (no HTTP
imports) so that it can be imported freely without risk of circular
dependencies.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from prompt_stream.core.exceptions import ProviderNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single registry instance across threads."""

    _instance: EndpointRegistry | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> EndpointRegistry:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class EndpointRegistry(metaclass=_ThreadSafeSingleton):
    """Centralised look-up and registration for provider → URL mappings.

    ```python
    from prompt_stream.registry.endpoint_registry import endpoint_registry

    endpoint_registry.register('local', 'http://localhost:8000/v1/chat/completions')
    ```
    """

    _registry: MutableMapping[str, str]

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._registry = {}

    def register(self, provider_key: str, api_url: str) -> None:
        """Register *api_url* under *provider_key* (normalised to lower-case)."""
        if not api_url.startswith(('http://', 'https://')):
            raise ValueError(f'api_url must be an http(s) URL, got: {api_url!r}')
        self._registry[provider_key.lower()] = api_url

    def get_url(self, provider_key: str) -> str:
        """Return the URL registered for *provider_key*.

        Raises
        ------
        ProviderNotFoundError
            If *provider_key* hasn't been registered.

        """
        key = provider_key.lower()
        try:
            return self._registry[key]
        except KeyError as exc:
            raise ProviderNotFoundError(f'Unsupported provider: {provider_key}') from exc

    def available_providers(self) -> list[str]:
        """Return a sorted list of registered providers (for introspection)."""
        return sorted(self._registry)

    def mapping(self) -> Mapping[str, str]:
        """Return a read-only copy of the registry mapping."""
        return dict(self._registry)


# Module-level instance with the built-in presets
endpoint_registry: EndpointRegistry = EndpointRegistry()
endpoint_registry.register('openai', 'https://api.openai.com/v1/chat/completions')
endpoint_registry.register('octoai', 'https://text.octoai.run/v1/chat/completions')
