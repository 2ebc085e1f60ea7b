"""``base_local`` -- local developer scripts.

Owns the script registrar.  During the main phase other services register
their commands with it; in the subsequent phase this service renders, for
every channel in its ``file_list``:

* ``make``   -> ``Makefile``
* ``task``   -> ``Taskfile.yml``
* ``commit`` -> ``.pre-commit-config.yaml``
* ``script`` -> one executable ``scripts/<name>`` per registered file

Each output is read from ``<name>.tmpl`` in the source directory and rendered
against the registrations.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel

from ..config import BaseLocalConfig
from ..constants import (
    SCRIPT_CHANNEL_FILES,
    SCRIPT_CHANNEL_SCRIPT,
    SCRIPT_DIR,
    SCRIPT_PERM,
    SERVICE_BASE_LOCAL,
    TEMPLATE_SUFFIX,
)
from ..errors import FilesystemError, MissingTemplateError
from .registry import ScriptContext, ScriptRegistry
from .root import OutputRoot
from .service import Registrar, TemplateService
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


class BaseLocal(TemplateService[BaseLocalConfig], Registrar):
    """Renders the local script files from the collected registrations."""

    service_id = SERVICE_BASE_LOCAL
    config_type = BaseLocalConfig

    def __init__(self, target_dir: str | Path, renderer: TemplateRenderer | None = None) -> None:
        super().__init__(target_dir)
        self.renderer = renderer or TemplateRenderer()
        # Unconfigured: no channel is active, so every registration is dropped.
        self.registry = ScriptRegistry()

    def set_config(self, cfg: BaseModel) -> None:
        super().set_config(cfg)
        self.registry = ScriptRegistry(self.config.file_list)

    # -- Registrar ---------------------------------------------------------

    def register_lines(self, service_id: str, commands: list[str]) -> None:
        self.registry.register_lines(service_id, commands)

    def register_file(self, file_name: str, commands: list[str]) -> None:
        self.registry.register_file(file_name, commands)

    # -- Generation --------------------------------------------------------

    def generate(self, root: OutputRoot) -> None:
        context = self.registry.context(self.config.project_name)

        for channel in self.config.file_list:
            if channel == SCRIPT_CHANNEL_SCRIPT:
                self.write_scripts(root, context)
            else:
                self.write_file(root, self.source_path, SCRIPT_CHANNEL_FILES[channel], context)

    def write_scripts(self, root: OutputRoot, context: ScriptContext) -> None:
        if not context.script_files:
            logger.debug("No script files registered; skipping %s/", SCRIPT_DIR)
            return

        root.ensure_dir(SCRIPT_DIR)
        source_dir = self.source_path / SCRIPT_DIR
        for file_name in sorted(context.script_files):
            rel_path = self.write_file(root, source_dir, file_name, context, SCRIPT_DIR)
            root.chmod(rel_path, SCRIPT_PERM)

    def write_file(
        self,
        root: OutputRoot,
        source_dir: Path,
        file_name: str,
        context: ScriptContext,
        target_dir: str = "",
    ) -> str:
        """Copy ``<file_name>.tmpl`` into *root* and render it.

        Returns:
            The relative path written.
        """
        src = source_dir / f"{file_name}{TEMPLATE_SUFFIX}"
        if not src.is_file():
            raise MissingTemplateError(file_name, str(src))
        try:
            data = src.read_bytes()
        except OSError as exc:
            raise FilesystemError(f"failed to read template file {str(src)!r}: {exc}") from exc

        rel_path = f"{target_dir}/{file_name}" if target_dir else file_name
        root.write_bytes(rel_path, data)
        self.renderer.render_file_in_place("script_file", root, rel_path, context)
        logger.debug("Wrote %s", rel_path)
        return rel_path
