"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which renders template *text* (file
contents as well as relative file and directory names) against a typed
rendering context.  Unlike a loader-based environment, every template is
handed over as a string: the same text may be a path on one call and a file
body on the next.

Templates see exactly the fields of their context plus three small helpers:

* ``indent(n, text)`` -- pad every non-empty line with ``n`` spaces.
* ``one_line(text)`` -- fold newlines into spaces and strip the result.
* ``replace(old, new, text)`` -- literal replacement of every occurrence.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError
from pydantic import BaseModel

from ..errors import TemplateExecutionError, TemplateParseError, TemplateRenderError

if TYPE_CHECKING:
    from .root import OutputRoot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 template text for project scaffolding.

    Undefined names are errors, not empty strings: a template that references
    a field its context does not carry fails loudly with
    :class:`TemplateExecutionError`, while malformed syntax fails with
    :class:`TemplateParseError`.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            # Shell length expansions such as ${#args[@]} must stay literal.
            comment_start_string="{##",
            comment_end_string="##}",
        )
        # Register helpers
        self.env.globals["indent"] = indent
        self.env.globals["one_line"] = one_line
        self.env.globals["replace"] = replace
        # Shares the globals above; keeps CRLF text CRLF.
        self.crlf_env = self.env.overlay(newline_sequence="\r\n")

    # -- String rendering --------------------------------------------------

    def render(self, name: str, text: str, context: BaseModel | Mapping[str, Any]) -> str:
        """Render *text* as a template against *context*.

        Args:
            name: Identifier used in error messages (usually the path).
            text: The raw template source.
            context: A pydantic model (exposed field by field) or a mapping.

        Returns:
            The rendered string.

        Raises:
            TemplateParseError: If *text* is not valid template syntax.
            TemplateExecutionError: If rendering fails, e.g. on an undefined
                context field.
        """
        try:
            env = self.crlf_env if "\r\n" in text else self.env
            template = env.from_string(text)
        except TemplateSyntaxError as exc:
            raise TemplateParseError(
                name, f"failed template parse of {name!r}: {exc.message} (line {exc.lineno})"
            ) from exc

        try:
            # Models iterate as (field, value) pairs, so both shapes become names.
            return template.render(**dict(context))
        except Exception as exc:
            raise TemplateExecutionError(
                name, f"failed template execution of {name!r}: {exc}"
            ) from exc

    # -- In-place file rendering -------------------------------------------

    def render_file_in_place(
        self,
        name: str,
        root: OutputRoot,
        rel_path: str,
        context: BaseModel | Mapping[str, Any],
    ) -> None:
        """Render a file inside *root* and overwrite it with the result.

        The file must already exist (it is usually the raw copy written by a
        structural pass).  Files that are not UTF-8 text (images, archives)
        are left untouched.
        """
        raw = root.read_bytes(rel_path)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping non-text file %s", rel_path)
            return

        try:
            rendered = self.render(name, text, context)
        except TemplateRenderError as exc:
            raise type(exc)(rel_path, f"failed template render of {rel_path!r}: {exc}") from exc

        root.write_bytes(rel_path, rendered.encode("utf-8"))
        logger.debug("Rendered %s", rel_path)


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------


def indent(spaces: int, text: str) -> str:
    """Prefix every non-empty line of *text* with *spaces* spaces.

    Windows line endings are normalized first; blank lines stay blank so
    paragraph breaks survive.
    """
    pad = " " * max(spaces, 0)
    lines = text.replace("\r\n", "\n").split("\n")
    return "\n".join(pad + line if line else line for line in lines)


def one_line(text: str) -> str:
    """Turn every newline into a single space and strip the result.

    Consecutive newlines become consecutive spaces.
    """
    return text.replace("\r\n", "\n").replace("\n", " ").strip()


def replace(old: str, new: str, text: str) -> str:
    """Replace every literal occurrence of *old* in *text* with *new*."""
    return text.replace(old, new)

