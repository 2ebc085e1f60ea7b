"""Two-pass materialization of a template tree into an output root.

Pass 1 renders every relative *path* of the source tree and writes the
structure (directories plus the raw, unrendered file bytes).  Pass 2 walks
the output root and renders every file's *content* in place.  Both passes
share one context, so names and contents draw on the same vocabulary.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ..constants import TEMPLATE_SUFFIX
from ..errors import FilesystemError, TemplateRenderError
from .root import OutputRoot, walk_source
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

SkipFn = Callable[[str], bool]


class TreeWalker:
    """Materializes a source template tree into an :class:`OutputRoot`."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def materialize(
        self,
        source_dir: str | Path,
        root: OutputRoot,
        context: BaseModel | Mapping[str, Any],
        *,
        skip: SkipFn | None = None,
    ) -> list[str]:
        """Run both passes and return the rendered paths written in pass 1.

        Args:
            source_dir: Directory holding the template tree.
            root: Destination root.
            context: Rendering context for paths and contents.
            skip: Optional predicate on the rendered path; a ``True`` result
                keeps the entry (and, for directories, its subtree) out of
                the output.

        Raises:
            TemplateRenderError: On the first path or content that fails to
                render.  Output written before the failure is left in place.
            FilesystemError: On any read or write failure.
        """
        written = self.copy_structure(source_dir, root, context, skip=skip)
        self.render_contents(root, context)
        return written

    # -- Pass 1 ------------------------------------------------------------

    def copy_structure(
        self,
        source_dir: str | Path,
        root: OutputRoot,
        context: BaseModel | Mapping[str, Any],
        *,
        skip: SkipFn | None = None,
    ) -> list[str]:
        source = Path(source_dir)
        written: list[str] = []
        skipped_dirs: list[str] = []

        for rel_path, is_dir in walk_source(source):
            if any(rel_path.startswith(prefix + "/") for prefix in skipped_dirs):
                continue

            try:
                rendered = self.renderer.render(rel_path, rel_path, context)
            except TemplateRenderError as exc:
                raise type(exc)(rel_path, f"failed to render path {rel_path!r}: {exc}") from exc

            if rendered.endswith(TEMPLATE_SUFFIX):
                rendered = rendered[: -len(TEMPLATE_SUFFIX)]

            if skip is not None and skip(rendered):
                logger.debug("Skipping %s", rendered)
                if is_dir:
                    skipped_dirs.append(rel_path)
                continue

            if is_dir:
                root.ensure_dir(rendered)
            else:
                data = _read_source(source, rel_path)
                root.ensure_dir(posixpath.dirname(rendered))
                root.write_bytes(rendered, data)
            written.append(rendered)

        logger.debug("Copied %d entries from %s", len(written), source)
        return written

    # -- Pass 2 ------------------------------------------------------------

    def render_contents(self, root: OutputRoot, context: BaseModel | Mapping[str, Any]) -> None:
        # The whole destination root is walked, including files other
        # services wrote earlier in the same run.
        files = [rel_path for rel_path, is_dir in root.walk() if not is_dir]
        for rel_path in files:
            self.renderer.render_file_in_place("project_file", root, rel_path, context)


def _read_source(source: Path, rel_path: str) -> bytes:
    path = source.joinpath(*rel_path.split("/"))
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"failed to read template {str(path)!r}: {exc}") from exc
