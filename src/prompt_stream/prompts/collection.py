"""prompts.collection

Ordered set of compiled prompts with by-name lookup.

Lookup is a linear scan in document order and returns the *first* match, so a
later prompt reusing an earlier name is shadowed.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prompt_stream.core.exceptions import PromptNotFoundError
from prompt_stream.prompts.compiler import compile_prompts
from prompt_stream.prompts.template import render

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from prompt_stream.prompts.prompt import Prompt


class PromptCollection:
    """Prompts of one markup document, in document order."""

    def __init__(self, prompts: Iterable[Prompt] = ()) -> None:
        self._prompts: tuple[Prompt, ...] = tuple(prompts)

    # --------------------------- Constructors -------------------------

    @classmethod
    def parse(
        cls,
        source: str,
        context: Mapping[str, Any] | None = None,
        *,
        strict: bool = False,
    ) -> PromptCollection:
        """Compile markup *source*, rendering it with *context* first if given."""
        markup = render(source, context) if context is not None else source
        return cls(compile_prompts(markup, strict=strict))

    @classmethod
    def open(
        cls,
        path: str | Path,
        context: Mapping[str, Any] | None = None,
        *,
        strict: bool = False,
        encoding: str = 'utf-8',
    ) -> PromptCollection:
        """Read and compile the markup file at *path*."""
        return cls.parse(Path(path).read_text(encoding=encoding), context, strict=strict)

    # --------------------------- Lookup -------------------------------

    def get(self, name: str) -> Prompt | None:
        """First prompt called *name*, or ``None``."""
        for prompt in self._prompts:
            if prompt.name == name:
                return prompt
        return None

    def __getitem__(self, name: str) -> Prompt:
        if (prompt := self.get(name)) is None:
            raise PromptNotFoundError(f'No prompt named {name!r}')
        return prompt

    def __contains__(self, name: object) -> bool:
        return any(prompt.name == name for prompt in self._prompts)

    def names(self) -> list[str]:
        """Names in document order; duplicates are kept, unnamed prompts skipped."""
        return [prompt.name for prompt in self._prompts if prompt.name is not None]

    def __iter__(self) -> Iterator[Prompt]:
        return iter(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} names={self.names()!r}>'
