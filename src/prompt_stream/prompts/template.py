"""prompts.template

Variable substitution applied to prompt markup *before* compilation.

Rendering uses Jinja2 (``{{ name }}``, ``{% for %}``, filters, ...). The
markup is rendered exactly once; the compiler never sees placeholders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined

if TYPE_CHECKING:
    from collections.abc import Mapping

# The output is markup source: values such as "<b>" inside a message must
# reach the compiler unescaped.
_environment = Environment(  # noqa: S701
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def render(template: str, context: Mapping[str, Any]) -> str:
    """Return *template* with every placeholder substituted from *context*.

    Raises
    ------
    jinja2.UndefinedError
        If the template references a name missing from *context*.
    jinja2.TemplateSyntaxError
        If *template* is not valid Jinja2.

    """
    return _environment.from_string(template).render(dict(context))
