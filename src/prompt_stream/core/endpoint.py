"""core.endpoint

Where a chat-completions request goes and how it authenticates.

API keys may be passed explicitly or picked up from the environment
(``<PROVIDER>_API_KEY``, e.g. ``OPENAI_API_KEY``); a ``.env`` file in the
working directory is loaded on import.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from prompt_stream.registry.endpoint_registry import endpoint_registry

load_dotenv()


class ApiEndpoint(BaseModel):
    """URL + bearer token of a chat-completions service."""

    api_url: str = Field(..., pattern=r'^https?://', description='full chat-completions URL')
    api_key: str = Field(..., repr=False, description='sent as "Authorization: Bearer <key>"')

    model_config = ConfigDict(frozen=True)

    @property
    def headers(self) -> dict[str, str]:
        return {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        }

    # --------------------------- Constructors -------------------------

    @classmethod
    def for_provider(cls, provider: str, api_key: str | None = None) -> ApiEndpoint:
        """Endpoint for a registered *provider* slug.

        Raises
        ------
        ProviderNotFoundError
            If *provider* is not registered.
        ValueError
            If no key is given and ``<PROVIDER>_API_KEY`` is unset.

        """
        api_url = endpoint_registry.get_url(provider)
        if api_key is None:
            env_var = f'{provider.upper()}_API_KEY'
            if (api_key := os.getenv(env_var)) is None:
                raise ValueError(f'No API key given and {env_var} is not set')
        return cls(api_url=api_url, api_key=api_key)

    @classmethod
    def openai_chat_completions(cls, api_key: str | None = None) -> ApiEndpoint:
        return cls.for_provider('openai', api_key)

    @classmethod
    def octoai_chat_completions(cls, api_key: str | None = None) -> ApiEndpoint:
        return cls.for_provider('octoai', api_key)
