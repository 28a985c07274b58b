"""prompts.compiler

Compiles prompt markup into :class:`~prompt_stream.prompts.prompt.Prompt`
records.

Markup format
=============
```html
<prompt name="summarise" model="gpt-4o" temperature="0.2" max-tokens="512">
    <message role="system">
        You are a terse assistant.
    </message>
    <message>
        Summarise: {{ text }}
    </message>
</prompt>
```

Validation policy
=================
* **Attributes are permissive** - each attribute in `ATTRIBUTE_POLICY` has
  its own parser; a value that does not parse leaves the field unset and the
  prompt still compiles.
* **Roles are fatal** - an unknown ``role`` raises `InvalidRoleError` for the
  enclosing prompt. `compile_prompts` drops that prompt (or re-raises when
  ``strict``) and carries on with the rest of the document.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any

from lxml.html import HtmlElement, fragment_fromstring, tostring

from prompt_stream.core.configuration import RequestConfiguration
from prompt_stream.core.exceptions import InvalidRoleError
from prompt_stream.core.types import Message, ResponseFormat, Role
from prompt_stream.logging import get_logger
from prompt_stream.prompts.prompt import Prompt

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)

PROMPT_TAG = 'prompt'
MESSAGE_TAG = 'message'
DEFAULT_ROLE = 'user'

# ---------------------------------------------------------------------------
# Attribute parsers - return None when the value does not parse
# ---------------------------------------------------------------------------

_TRUE = frozenset({'true', '1', 'yes'})
_FALSE = frozenset({'false', '0', 'no'})


def _parse_str(value: str) -> str | None:
    return value.strip() or None


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_float(value: str) -> float | None:
    try:
        return float(value.strip())
    except ValueError:
        return None


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return None


def _parse_response_format(value: str) -> ResponseFormat | None:
    match value.strip().lower():
        case 'json-object' | 'json_object':
            return ResponseFormat.json_object()
        case 'text':
            return ResponseFormat.text()
        case _:
            return None


def _parse_stop(value: str) -> list[str] | None:
    """``stop="###|END"`` -> ``['###', 'END']``."""
    sequences = [item for item in value.split('|') if item]
    return sequences or None


#: markup attribute -> (RequestConfiguration field, parser)
ATTRIBUTE_POLICY: dict[str, tuple[str, Callable[[str], Any]]] = {
    'model': ('model', _parse_str),
    'stream': ('stream', _parse_bool),
    'temperature': ('temperature', _parse_float),
    'n': ('n', _parse_int),
    'max-tokens': ('max_tokens', _parse_int),
    'top-p': ('top_p', _parse_float),
    'frequency-penalty': ('frequency_penalty', _parse_float),
    'presence-penalty': ('presence_penalty', _parse_float),
    'logprobs': ('logprobs', _parse_bool),
    'top-logprobs': ('top_logprobs', _parse_int),
    'response-format': ('response_format', _parse_response_format),
    'stop': ('stop', _parse_stop),
    'seed': ('seed', _parse_int),
}


# ---------------------------------------------------------------------------
# Whitespace normalisation
# ---------------------------------------------------------------------------


def dedent(text: str) -> str:
    """Remove the common leading-whitespace width from every line.

    The width is the minimum indentation among non-blank lines; exactly that
    many characters are removed from each line, so relative indentation is
    preserved. Each whitespace character (space or tab) counts as one.
    """
    lines = text.split('\n')
    widths = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not widths:
        return text
    indent = min(widths)
    return '\n'.join(line[indent:] for line in lines)


def _inner_markup(element: HtmlElement) -> str:
    """Text of *element* with nested elements serialised as HTML.

    Character references are decoded throughout: lxml already decodes
    ``text`` and ``tail``, and the serialised children are unescaped to match.
    """
    parts = [element.text or '']
    for child in element:
        parts.append(html.unescape(tostring(child, encoding='unicode', method='html', with_tail=False)))
        parts.append(child.tail or '')
    return ''.join(parts)


def message_content(element: HtmlElement) -> str:
    # indentation is measured before trimming, otherwise the trimmed first
    # line would always pin the common width to zero
    raw = _inner_markup(element).replace('\r\n', '\n')
    return dedent(raw).strip()


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_configuration(element: HtmlElement) -> RequestConfiguration:
    """Read every known attribute of a prompt *element* (permissive)."""
    fields: dict[str, Any] = {}
    for attribute, (field, parser) in ATTRIBUTE_POLICY.items():
        if (raw := element.get(attribute)) is None:
            continue
        if (value := parser(raw)) is None:
            logger.debug('prompt_attribute_ignored', attribute=attribute, value=raw)
            continue
        fields[field] = value
    return RequestConfiguration(**fields)


def compile_prompt(element: HtmlElement) -> Prompt:
    """Compile one prompt *element*.

    Raises
    ------
    InvalidRoleError
        If any nested message carries an unknown role.

    """
    name = element.get('name')
    messages: list[Message] = []
    for message_element in element.iter(MESSAGE_TAG):
        raw_role = message_element.get('role', DEFAULT_ROLE)
        if (role := Role.parse(raw_role)) is None:
            raise InvalidRoleError(raw_role, name)
        messages.append(Message(role=role, content=message_content(message_element)))
    return Prompt(name=name, configuration=compile_configuration(element), messages=messages)


def _is_top_level(element: HtmlElement) -> bool:
    return not any(ancestor.tag == PROMPT_TAG for ancestor in element.iterancestors())


def compile_prompts(markup: str, *, strict: bool = False) -> list[Prompt]:
    """Compile every top-level prompt element of *markup*, in document order.

    Prompts with an invalid message role are dropped with a warning, unless
    *strict* is set, in which case the `InvalidRoleError` propagates.
    """
    prompts: list[Prompt] = []
    if not markup.strip():
        return prompts

    root = fragment_fromstring(markup, create_parent='div')
    for element in root.iter(PROMPT_TAG):
        if not _is_top_level(element):
            continue
        try:
            prompts.append(compile_prompt(element))
        except InvalidRoleError as exc:
            if strict:
                raise
            logger.warning('prompt_dropped', name=exc.prompt_name, role=exc.role)
    return prompts
